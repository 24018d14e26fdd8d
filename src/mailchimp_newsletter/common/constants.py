# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Constants for the MailChimp Marketing API and for telemetry attributes.
"""

API_VERSION = "3.0"
"""Version segment of the MailChimp Marketing API base URL."""

API_HOST_TEMPLATE = "https://{dc}.api.mailchimp.com"
DASHBOARD_HOST_TEMPLATE = "https://{dc}.admin.mailchimp.com/"

DEFAULT_PAGE_SIZE = 10
"""MailChimp returns ten items per page when no ``count`` is given."""

DEFAULT_LIST_NAME = "subscribers"

SEARCH_PATH_PREFIX = "search-"

# List member status values
MEMBER_STATUS_SUBSCRIBED = "subscribed"

# Campaign status values
CAMPAIGN_STATUS_SENT = "sent"
CAMPAIGN_STATUS_SCHEDULED = "schedule"

# OpenTelemetry attribute names
OTEL_ATTR_HTTP_METHOD = "http.request.method"
OTEL_ATTR_HTTP_URL = "url.full"
OTEL_ATTR_HTTP_STATUS_CODE = "http.response.status_code"
OTEL_ATTR_MAILCHIMP_PATH = "mailchimp.path"
OTEL_ATTR_MAILCHIMP_REQUEST_ID = "mailchimp.client_request_id"
