# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

# Transport subcodes
TRANSPORT_NETWORK_FAILURE = "transport_network_failure"

# Invalid operation subcodes
OPERATION_MISSING_ROUTE_KEY = "operation_missing_route_key"
OPERATION_NO_CLIENT = "operation_no_client"
OPERATION_CYCLIC_PARENT = "operation_cyclic_parent"
OPERATION_NOT_SEARCHABLE = "operation_not_searchable"

# Configuration subcodes
CONFIG_LIST_NOT_FOUND = "config_list_not_found"
CONFIG_DEFAULT_LIST_NOT_FOUND = "config_default_list_not_found"
CONFIG_INTEREST_CATEGORY_MISSING = "config_interest_category_missing"


def http_error_subcode(status: int) -> str:
    """Return the subcode string for an HTTP status code."""
    return f"http_{status}"
