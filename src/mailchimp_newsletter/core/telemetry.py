# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Opt-in request telemetry for the MailChimp transport.

Every API call runs inside :meth:`TelemetryManager.trace_request`. Depending on
:class:`TelemetryConfig` this opens an OpenTelemetry client span, records
duration and count metrics, writes a log line and notifies custom hooks.

Spans and metrics are keyed by the resource template of the path
(``lists/{id}/members``) rather than the concrete path, so ids and subscriber
hashes never end up as metric attributes.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Union, runtime_checkable

from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from ..common.constants import (
    OTEL_ATTR_HTTP_METHOD,
    OTEL_ATTR_HTTP_STATUS_CODE,
    OTEL_ATTR_HTTP_URL,
    OTEL_ATTR_MAILCHIMP_PATH,
    OTEL_ATTR_MAILCHIMP_REQUEST_ID,
)

_INSTRUMENTATION_NAME = "mailchimp_newsletter"

_logger = logging.getLogger(__name__)


def resource_template(path: str) -> str:
    """
    Replace the ids in an API path with ``{id}``.

    Collection names sit at even positions, ids at odd ones, except that the
    segment after ``actions`` names the action::

        >>> resource_template("lists/abc/members/9f1e/activity")
        'lists/{id}/members/{id}/activity'
        >>> resource_template("campaigns/c1/actions/send")
        'campaigns/{id}/actions/send'
    """
    segments = [segment for segment in path.split("?", 1)[0].strip("/").split("/") if segment]
    template = []
    for index, segment in enumerate(segments):
        if index % 2 and segments[index - 1] != "actions":
            template.append("{id}")
        else:
            template.append(segment)
    return "/".join(template)


@dataclass(frozen=True)
class TelemetryConfig:
    """
    Which telemetry signals to produce.

    Everything is off by default. Spans and metrics go to whatever
    OpenTelemetry SDK the application has installed; without one the API's
    no-op providers are used.

    :param enable_tracing: Open a client span per request.
    :param enable_metrics: Record ``mailchimp.client.request.duration`` and
        request/error counters.
    :param enable_logging: Log one line per request (WARNING for failures,
        DEBUG otherwise) on ``logger_name``.
    :param log_level: Level the request logger is set to.
    :param logger_name: Name of the request logger.
    :param hooks: Objects implementing any part of :class:`TelemetryHook`.

    Example::

        config = MailChimpConfig(
            api_key="key-us10",
            telemetry=TelemetryConfig(enable_tracing=True, hooks=[StatsdHook(statsd)]),
        )
    """

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False

    log_level: str = "WARNING"
    logger_name: str = "mailchimp_newsletter.requests"

    hooks: List["TelemetryHook"] = field(default_factory=list)

    @property
    def is_enabled(self) -> bool:
        return bool(self.enable_tracing or self.enable_metrics or self.enable_logging or self.hooks)


@dataclass
class RequestContext:
    """One outgoing MailChimp request, as seen by hooks."""

    client_request_id: str
    method: str
    url: str
    path: str

    start_time: float = field(default_factory=time.perf_counter)

    # shared scratch space for hooks
    custom_data: Dict[str, Any] = field(default_factory=dict)

    _span: Any = field(default=None, repr=False)

    @property
    def resource(self) -> str:
        return resource_template(self.path)


@dataclass
class ResponseContext:
    """
    Outcome of a request.

    ``status_code`` is ``0`` when no response was received; ``error`` then
    holds the network exception.
    """

    status_code: int
    duration_ms: float
    response_size: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None or self.status_code >= 400


@runtime_checkable
class TelemetryHook(Protocol):
    """
    Callbacks around each request. Implement only the ones you need.

    Example::

        class StatsdHook:
            def __init__(self, statsd):
                self.statsd = statsd

            def on_request_end(self, request, response):
                self.statsd.timing(f"mailchimp.{request.resource}", response.duration_ms)
    """

    def on_request_start(self, context: RequestContext) -> None:
        ...

    def on_request_end(self, request: RequestContext, response: ResponseContext) -> None:
        ...

    def on_request_error(self, request: RequestContext, error: Exception) -> None:
        ...

    def get_additional_headers(self) -> Dict[str, str]:
        ...


class TelemetryManager:
    """
    Produces the signals selected by a :class:`TelemetryConfig`.

    Internal; the transport creates one through :func:`create_telemetry_manager`.
    A failing hook is logged at DEBUG and never fails the request.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._hooks = list(self._config.hooks)
        self._tracer: Optional[Any] = None
        self._meter: Optional[Any] = None
        self._request_logger: Optional[logging.Logger] = None
        self._duration: Optional[Any] = None
        self._requests: Optional[Any] = None
        self._errors: Optional[Any] = None

        if self._config.enable_tracing:
            self._tracer = trace.get_tracer(_INSTRUMENTATION_NAME)
        if self._config.enable_metrics:
            self._meter = metrics.get_meter(_INSTRUMENTATION_NAME)
            self._duration = self._meter.create_histogram(
                name="mailchimp.client.request.duration",
                description="Duration of MailChimp API requests",
                unit="ms",
            )
            self._requests = self._meter.create_counter(
                name="mailchimp.client.request.count",
                description="Number of MailChimp API requests",
                unit="1",
            )
            self._errors = self._meter.create_counter(
                name="mailchimp.client.error.count",
                description="Number of failed MailChimp API requests",
                unit="1",
            )
        if self._config.enable_logging:
            self._request_logger = logging.getLogger(self._config.logger_name)
            self._request_logger.setLevel(getattr(logging, self._config.log_level.upper()))

    @property
    def is_tracing_enabled(self) -> bool:
        return self._tracer is not None

    @property
    def is_metrics_enabled(self) -> bool:
        return self._meter is not None

    def _dispatch(self, callback: str, *args: Any) -> None:
        for hook in self._hooks:
            handler = getattr(hook, callback, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                _logger.debug("Telemetry hook %r failed in %s", hook, callback, exc_info=True)

    @contextmanager
    def trace_request(self, method: str, url: str, path: str, client_request_id: str) -> Iterator[RequestContext]:
        """
        Wrap one request.

        An exception escaping the block marks the span as failed, is passed to
        the hooks' ``on_request_error`` and re-raised.

        Example::

            with telemetry.trace_request("GET", url, "lists/abc", request_id) as ctx:
                response = http._request("get", url)
                telemetry.record_response(ctx, response.status_code)
        """
        ctx = RequestContext(client_request_id=client_request_id, method=method, url=url, path=path)
        self._dispatch("on_request_start", ctx)

        if self._tracer is not None:
            ctx._span = self._tracer.start_span(
                f"MailChimp {method} {ctx.resource}",
                kind=trace.SpanKind.CLIENT,
                attributes={
                    OTEL_ATTR_HTTP_METHOD: method,
                    OTEL_ATTR_HTTP_URL: url,
                    OTEL_ATTR_MAILCHIMP_PATH: path,
                    OTEL_ATTR_MAILCHIMP_REQUEST_ID: client_request_id,
                },
            )
        try:
            yield ctx
        except Exception as exc:
            self._fail_span(ctx, exc)
            self._dispatch("on_request_error", ctx, exc)
            raise
        finally:
            if ctx._span is not None:
                ctx._span.end()

    @staticmethod
    def _fail_span(ctx: RequestContext, exc: Exception) -> None:
        if ctx._span is not None:
            ctx._span.set_status(Status(StatusCode.ERROR, str(exc)))
            ctx._span.record_exception(exc)

    def record_response(
        self,
        ctx: RequestContext,
        status_code: int,
        response_size: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """
        Record the outcome of the request wrapped by ``ctx``.

        Pass ``status_code=0`` and the exception as ``error`` when the request
        failed before a response arrived; hooks then also get
        ``on_request_error``.
        """
        response = ResponseContext(
            status_code=status_code,
            duration_ms=(time.perf_counter() - ctx.start_time) * 1000,
            response_size=response_size,
            error=error,
        )

        if ctx._span is not None:
            ctx._span.set_attribute(OTEL_ATTR_HTTP_STATUS_CODE, status_code)
            if error is not None:
                self._fail_span(ctx, error)

        if self._duration is not None:
            attributes = {"method": ctx.method, "resource": ctx.resource, "status_code": status_code}
            self._duration.record(response.duration_ms, attributes)
            self._requests.add(1, attributes)
            if response.failed:
                self._errors.add(1, attributes)

        if self._request_logger is not None:
            self._request_logger.log(
                logging.WARNING if response.failed else logging.DEBUG,
                "%s %s %s %.1fms",
                ctx.method,
                ctx.path,
                status_code,
                response.duration_ms,
                extra={"client_request_id": ctx.client_request_id},
            )

        if error is not None:
            self._dispatch("on_request_error", ctx, error)
        self._dispatch("on_request_end", ctx, response)

    def get_additional_headers(self) -> Dict[str, str]:
        """Headers contributed by the hooks, later hooks winning."""
        headers: Dict[str, str] = {}
        for hook in self._hooks:
            provider = getattr(hook, "get_additional_headers", None)
            if provider is None:
                continue
            try:
                headers.update(provider() or {})
            except Exception:
                _logger.debug("Telemetry hook %r failed to provide headers", hook, exc_info=True)
        return headers


class NoOpTelemetryManager:
    """Stand-in used when telemetry is off; builds contexts and nothing else."""

    @contextmanager
    def trace_request(self, method: str, url: str, path: str, client_request_id: str) -> Iterator[RequestContext]:
        yield RequestContext(client_request_id=client_request_id, method=method, url=url, path=path)

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass

    def get_additional_headers(self) -> Dict[str, str]:
        return {}


def create_telemetry_manager(config: Optional[TelemetryConfig]) -> Union[TelemetryManager, NoOpTelemetryManager]:
    if config is None or not config.is_enabled:
        return NoOpTelemetryManager()
    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestContext",
    "ResponseContext",
    "create_telemetry_manager",
    "resource_template",
]
