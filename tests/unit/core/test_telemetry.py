# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Tests for telemetry infrastructure."""

import pytest
from unittest.mock import MagicMock, patch

from mailchimp_newsletter.core.telemetry import (
    TelemetryConfig,
    TelemetryManager,
    NoOpTelemetryManager,
    RequestContext,
    ResponseContext,
    create_telemetry_manager,
    resource_template,
)

URL = "https://us10.api.mailchimp.com/3.0/lists"


class TestTelemetryConfig:
    """Tests for TelemetryConfig dataclass."""

    def test_default_values(self):
        config = TelemetryConfig()
        assert config.enable_tracing is False
        assert config.enable_metrics is False
        assert config.enable_logging is False
        assert config.log_level == "WARNING"
        assert config.logger_name == "mailchimp_newsletter.requests"
        assert config.hooks == []

    def test_immutability(self):
        config = TelemetryConfig(enable_tracing=True)
        with pytest.raises(AttributeError):
            config.enable_tracing = False


class TestTelemetryManagerFactory:
    """Tests for create_telemetry_manager factory."""

    def test_returns_noop_when_config_none(self):
        assert isinstance(create_telemetry_manager(None), NoOpTelemetryManager)

    def test_returns_noop_when_all_disabled(self):
        assert isinstance(create_telemetry_manager(TelemetryConfig()), NoOpTelemetryManager)

    @pytest.mark.parametrize(
        "config",
        [
            TelemetryConfig(enable_tracing=True),
            TelemetryConfig(enable_metrics=True),
            TelemetryConfig(enable_logging=True),
        ],
    )
    def test_returns_manager_when_a_signal_is_enabled(self, config):
        assert isinstance(create_telemetry_manager(config), TelemetryManager)

    def test_returns_manager_when_hooks_provided(self):
        config = TelemetryConfig(hooks=[MagicMock()])
        assert isinstance(create_telemetry_manager(config), TelemetryManager)


class TestTelemetryManager:
    """Tests for TelemetryManager."""

    def test_trace_request_creates_context(self):
        manager = TelemetryManager(TelemetryConfig(enable_logging=True))

        with manager.trace_request("POST", URL, "lists", "req-123") as ctx:
            assert ctx.method == "POST"
            assert ctx.url == URL
            assert ctx.path == "lists"
            assert ctx.client_request_id == "req-123"

    def test_hooks_dispatched_on_request_start(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))

        with manager.trace_request("GET", URL, "lists", "123"):
            pass

        hook.on_request_start.assert_called_once()

    def test_hooks_dispatched_on_request_error(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))

        with pytest.raises(RuntimeError):
            with manager.trace_request("GET", URL, "lists", "123"):
                raise RuntimeError("connection reset")

        hook.on_request_error.assert_called_once()
        assert isinstance(hook.on_request_error.call_args[0][1], RuntimeError)

    def test_hook_errors_do_not_break_request(self):
        hook = MagicMock()
        hook.on_request_start.side_effect = Exception("hook failed")
        hook.on_request_end.side_effect = Exception("hook failed")
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))

        with manager.trace_request("GET", URL, "lists", "123") as ctx:
            manager.record_response(ctx, 200)

        hook.on_request_end.assert_called_once()

    def test_get_additional_headers_collects_from_hooks(self):
        hook1 = MagicMock()
        hook1.get_additional_headers.return_value = {"X-Trace": "abc"}
        hook2 = MagicMock()
        hook2.get_additional_headers.return_value = {"X-Tenant": "t1"}
        manager = TelemetryManager(TelemetryConfig(hooks=[hook1, hook2]))

        assert manager.get_additional_headers() == {"X-Trace": "abc", "X-Tenant": "t1"}

    def test_get_additional_headers_handles_hook_errors(self):
        hook = MagicMock()
        hook.get_additional_headers.side_effect = Exception("boom")
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))

        assert manager.get_additional_headers() == {}

    def test_record_response_dispatches_to_hooks(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))

        with manager.trace_request("GET", URL, "lists", "123") as ctx:
            manager.record_response(ctx, 404, response_size=57)

        request, response = hook.on_request_end.call_args[0]
        assert request is ctx
        assert response.status_code == 404
        assert response.response_size == 57
        assert response.duration_ms >= 0

    def test_record_response_logs_failures_as_warnings(self, caplog):
        manager = TelemetryManager(TelemetryConfig(enable_logging=True))

        with caplog.at_level("DEBUG", logger="mailchimp_newsletter.requests"):
            with manager.trace_request("GET", URL, "lists/abc", "123") as ctx:
                manager.record_response(ctx, 404)

        assert caplog.records[-1].levelname == "WARNING"
        assert "GET lists/abc 404" in caplog.records[-1].getMessage()


class TestNoOpTelemetryManager:
    """Tests for NoOpTelemetryManager."""

    def test_trace_request_returns_context(self):
        manager = NoOpTelemetryManager()

        with manager.trace_request("GET", URL, "lists", "123") as ctx:
            assert isinstance(ctx, RequestContext)
            assert ctx.path == "lists"

    def test_record_response_is_noop(self):
        NoOpTelemetryManager().record_response(MagicMock(), 200)

    def test_get_additional_headers_returns_empty(self):
        assert NoOpTelemetryManager().get_additional_headers() == {}


class TestContexts:
    """Tests for RequestContext and ResponseContext."""

    def test_default_start_time(self):
        ctx = RequestContext(client_request_id="1", method="GET", url=URL, path="lists")
        assert ctx.start_time > 0
        assert ctx.custom_data == {}

    def test_custom_data_bag(self):
        ctx = RequestContext(client_request_id="1", method="GET", url=URL, path="lists")
        ctx.custom_data["attempt"] = 1
        assert ctx.custom_data == {"attempt": 1}

    def test_error_response(self):
        error = ConnectionError("refused")
        response = ResponseContext(status_code=0, duration_ms=3.5, error=error)
        assert response.error is error
        assert response.response_size is None


class TestOpenTelemetryIntegration:
    """Tests for OpenTelemetry integration."""

    @pytest.fixture
    def mock_otel(self):
        with patch("mailchimp_newsletter.core.telemetry.trace") as mock_trace, patch(
            "mailchimp_newsletter.core.telemetry.metrics"
        ) as mock_metrics, patch("mailchimp_newsletter.core.telemetry.Status") as mock_status, patch(
            "mailchimp_newsletter.core.telemetry.StatusCode"
        ) as mock_status_code:
            mock_tracer = MagicMock()
            mock_trace.get_tracer.return_value = mock_tracer
            mock_trace.SpanKind.CLIENT = "CLIENT"
            mock_span = MagicMock()
            mock_tracer.start_span.return_value = mock_span
            mock_meter = MagicMock()
            mock_metrics.get_meter.return_value = mock_meter
            mock_status_code.ERROR = "ERROR"
            yield {
                "trace": mock_trace,
                "metrics": mock_metrics,
                "tracer": mock_tracer,
                "meter": mock_meter,
                "span": mock_span,
                "status": mock_status,
            }

    def test_tracer_initialized_when_tracing_enabled(self, mock_otel):
        manager = TelemetryManager(TelemetryConfig(enable_tracing=True))
        mock_otel["trace"].get_tracer.assert_called_once()
        assert manager.is_tracing_enabled
        assert not manager.is_metrics_enabled

    def test_span_created_on_trace_request(self, mock_otel):
        manager = TelemetryManager(TelemetryConfig(enable_tracing=True))

        with manager.trace_request("POST", URL, "lists/abc/members", "req-123"):
            pass

        call_args = mock_otel["tracer"].start_span.call_args
        assert call_args[0][0] == "MailChimp POST lists/{id}/members"
        assert call_args[1]["attributes"]["mailchimp.path"] == "lists/abc/members"
        mock_otel["span"].end.assert_called_once()

    def test_span_records_exception_on_error(self, mock_otel):
        manager = TelemetryManager(TelemetryConfig(enable_tracing=True))

        with pytest.raises(ValueError):
            with manager.trace_request("GET", URL, "lists", "123"):
                raise ValueError("Test error")

        mock_otel["span"].record_exception.assert_called_once()
        mock_otel["span"].set_status.assert_called_once()

    def test_metrics_recorded_when_enabled(self, mock_otel):
        manager = TelemetryManager(TelemetryConfig(enable_metrics=True))
        meter = mock_otel["meter"]
        histogram = meter.create_histogram.return_value
        counter = meter.create_counter.return_value

        with manager.trace_request("GET", URL, "lists", "123") as ctx:
            manager.record_response(ctx, 500)

        histogram.record.assert_called_once()
        # request count and error count share the counter mock
        assert counter.add.call_count == 2


class TestResourceTemplate:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("lists", "lists"),
            ("lists/abc", "lists/{id}"),
            ("/lists/abc/members/62eeb292278cc15f5817cb78f7790b08/activity", "lists/{id}/members/{id}/activity"),
            ("campaigns/c1/actions/send", "campaigns/{id}/actions/send"),
            ("search-members", "search-members"),
        ],
    )
    def test_ids_are_replaced(self, path, expected):
        assert resource_template(path) == expected


class TestNetworkFailures:
    def test_record_response_with_error_notifies_hooks(self):
        hook = MagicMock()
        manager = TelemetryManager(TelemetryConfig(hooks=[hook]))
        error = ConnectionError("refused")

        with manager.trace_request("GET", URL, "lists", "123") as ctx:
            manager.record_response(ctx, 0, error=error)

        hook.on_request_error.assert_called_once_with(ctx, error)
        response = hook.on_request_end.call_args[0][1]
        assert response.failed
        assert response.status_code == 0

    def test_successful_response_is_not_failed(self):
        assert not ResponseContext(status_code=204, duration_ms=1.0).failed
        assert ResponseContext(status_code=429, duration_ms=1.0).failed
