# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Unit tests for the error hierarchy."""

from mailchimp_newsletter.core.errors import (
    ApiError,
    CampaignNotReadyError,
    InvalidOperationError,
    ListNotConfiguredError,
    MailChimpError,
    MassAssignmentError,
)
from mailchimp_newsletter.models.campaigns import NewsletterCampaignChecklist


class TestErrors:
    def test_all_errors_share_base(self):
        for error in (
            MassAssignmentError("id"),
            ApiError("boom"),
            InvalidOperationError("nope"),
            ListNotConfiguredError.no_list_with_name("x"),
            CampaignNotReadyError(None),
        ):
            assert isinstance(error, MailChimpError)

    def test_to_dict(self):
        data = InvalidOperationError("nope", subcode="operation_missing_route_key").to_dict()
        assert data["message"] == "nope"
        assert data["code"] == "invalid_operation"
        assert data["subcode"] == "operation_missing_route_key"
        assert data["source"] == "client"
        assert data["timestamp"]

    def test_mass_assignment_error(self):
        error = MassAssignmentError("id", model="NewsletterList")
        assert error.key == "id"
        assert error.details == {"key": "id", "model": "NewsletterList"}
        assert str(error) == "Add [id] to fillable property to allow mass assignment on [NewsletterList]."

    def test_api_error_message_includes_bodies(self):
        error = ApiError("400: Invalid Resource", request_body='{"a": 1}', response_body="{...}", status_code=400)
        assert str(error) == '400: Invalid Resource\n Last Response: {...}\n Last Request: {"a": 1}'
        assert error.error == "400: Invalid Resource"
        assert error.subcode == "http_400"
        assert error.source == "server"
        assert error.details["status_code"] == 400

    def test_api_error_subcode_for_any_status(self):
        assert ApiError("422: Invalid Resource", status_code=422).subcode == "http_422"
        assert ApiError("418: Teapot", status_code=418).subcode == "http_418"

    def test_api_error_without_status_is_network_failure(self):
        error = ApiError(None)
        assert error.error == "MailChimp API request failed."
        assert error.subcode == "transport_network_failure"

    def test_default_list_error(self):
        error = ListNotConfiguredError.default_list_does_not_exist("subscribers")
        assert error.code == "configuration_error"
        assert error.details == {"name": "subscribers"}

    def test_campaign_not_ready_lists_errors(self):
        checklist = NewsletterCampaignChecklist().new_instance(
            {"is_ready": False, "items": [{"type": "error", "heading": "From", "details": "missing"}]}
        )
        error = CampaignNotReadyError(checklist)
        assert error.code == "campaign_not_ready"
        assert error.details["errors"] == [{"type": "error", "heading": "From", "details": "missing"}]
