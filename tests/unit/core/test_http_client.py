# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Unit tests for the internal HTTP client."""

import unittest
from unittest.mock import MagicMock, patch

import requests

from mailchimp_newsletter.core._http import _HttpClient


@patch("mailchimp_newsletter.core._http.requests.request")
class TestHttpClientTimeouts(unittest.TestCase):
    def test_get_defaults_to_short_timeout(self, mock_request):
        _HttpClient()._request("get", "https://x")
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 10)

    def test_post_and_delete_default_to_long_timeout(self, mock_request):
        client = _HttpClient()
        client._request("post", "https://x")
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 120)
        client._request("delete", "https://x")
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 120)

    def test_configured_timeout_wins(self, mock_request):
        _HttpClient(timeout=5)._request("post", "https://x")
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 5)

    def test_explicit_timeout_wins(self, mock_request):
        _HttpClient(timeout=5)._request("get", "https://x", timeout=1)
        self.assertEqual(mock_request.call_args.kwargs["timeout"], 1)

    def test_verify_flag(self, mock_request):
        _HttpClient(verify=False)._request("get", "https://x")
        self.assertFalse(mock_request.call_args.kwargs["verify"])


class TestHttpClientSession(unittest.TestCase):
    def test_session_request_and_close(self):
        session = MagicMock(spec=requests.Session)
        client = _HttpClient(session=session)
        client._request("patch", "https://x", data="{}")
        session.request.assert_called_once()
        client.close()
        client.close()
        session.close.assert_called_once()
