# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for MailChimp newsletter tests.

This module provides an in-memory transport that records every call and
replays scripted responses, plus configuration and client fixtures built on it.
"""

import json

import pytest

from mailchimp_newsletter.client import MailChimpClient
from mailchimp_newsletter.core.config import ListConfig, MailChimpConfig


class FakeTransport:
    """
    Transport double.

    Responses are consumed in order from ``responses``; each entry is either a
    body (success) or a :class:`Failure`. When the queue is empty every call
    succeeds with ``None``. Calls are recorded as ``(method, path, payload)``.
    """

    class Failure:
        def __init__(self, message="404: Resource Not Found", status_code=404, body=None):
            self.message = message
            self.status_code = status_code
            self.body = body if body is not None else {"status": status_code, "detail": "Resource Not Found"}

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.closed = False
        self._success = False
        self._error = None
        self._status = None
        self._request_body = None
        self._response_body = None

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def _call(self, method, path, payload):
        self.calls.append((method, path, payload))
        self._request_body = json.dumps(payload) if payload is not None else ""
        response = self.responses.pop(0) if self.responses else None
        if isinstance(response, FakeTransport.Failure):
            self._success = False
            self._error = response.message
            self._status = response.status_code
            self._response_body = {"status": response.status_code, "body": json.dumps(response.body)}
            return None
        self._success = True
        self._error = None
        self._status = 200 if response is not None else 204
        self._response_body = {"status": self._status, "body": json.dumps(response) if response is not None else ""}
        return response

    def get(self, path, params=None):
        return self._call("GET", path, params)

    def post(self, path, body=None):
        return self._call("POST", path, body)

    def patch(self, path, body=None):
        return self._call("PATCH", path, body)

    def put(self, path, body=None):
        return self._call("PUT", path, body)

    def delete(self, path, body=None):
        return self._call("DELETE", path, body)

    def last_success(self):
        return self._success

    def last_error(self):
        return self._error

    def last_request_body(self):
        return self._request_body

    def last_response_body(self):
        return self._response_body

    def last_status_code(self):
        return self._status

    def dashboard_url(self):
        return "https://us10.admin.mailchimp.com/"

    def close(self):
        self.closed = True

    @property
    def paths(self):
        return [path for _, path, _ in self.calls]


@pytest.fixture
def test_config():
    """Test configuration with one default list."""
    return MailChimpConfig(
        api_key="0123456789abcdef0123456789abcdef-us10",
        default_list_name="subscribers",
        lists={
            "subscribers": ListConfig(
                name="subscribers",
                id="list123",
                default_interest_category_id="cat1",
                default_interest_id="int1",
            ),
            "partners": ListConfig(name="partners", id="list456"),
        },
        default_page_size=10,
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(test_config, transport):
    """Client wired to the fake transport."""
    return MailChimpClient(config=test_config, transport=transport)


@pytest.fixture
def failure():
    """Factory for scripted transport failures."""
    return FakeTransport.Failure
