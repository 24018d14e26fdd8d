# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Default MailChimp Marketing API transport.

:class:`_MailChimpApi` performs the HTTP calls for resource handlers and keeps
the state of the most recent call (success flag, error message, request and
response bodies) so that handlers can decide how to react without inspecting
status codes themselves.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from typing import Any, Dict, Optional

import requests

from ..common.constants import API_HOST_TEMPLATE, API_VERSION, DASHBOARD_HOST_TEMPLATE
from ..core._http import _HttpClient
from ..core.config import MailChimpConfig
from ..core.telemetry import create_telemetry_manager

_UNKNOWN_ERROR = "Unknown error, call last_response_body() to find out what happened."


def subscriber_hash(email: Optional[str]) -> Optional[str]:
    """
    Turn an email address into the MailChimp list member hash.

    The hash is the hex MD5 digest of the lower-cased address. Empty input is
    returned unchanged.
    """
    if not email:
        return email
    return hashlib.md5(email.lower().encode("utf-8")).hexdigest()


class _MailChimpApi:
    """
    ``requests``-based implementation of the
    :class:`~mailchimp_newsletter.core.transport.Transport` contract.

    :param config: Client configuration carrying the API key, TLS and timeout settings.
    :type config: ~mailchimp_newsletter.core.config.MailChimpConfig
    :param session: Optional shared session for connection pooling.
    :type session: :class:`requests.Session` | None
    :raises ValueError: If the API key is missing or has no data center suffix.
    """

    def __init__(self, config: MailChimpConfig, session: Optional[requests.Session] = None) -> None:
        api_key = (config.api_key or "").strip()
        if not api_key:
            raise ValueError("api_key is required.")
        if "-" not in api_key:
            raise ValueError("Invalid MailChimp API key supplied; expected '<key>-<data center>'.")
        self.config = config
        self._api_key = api_key
        self.data_center = api_key.rsplit("-", 1)[1]
        self.api = f"{API_HOST_TEMPLATE.format(dc=self.data_center)}/{API_VERSION}"
        self._http = _HttpClient(
            timeout=config.http_timeout,
            verify=config.verify_ssl,
            session=session,
        )
        self._telemetry = create_telemetry_manager(config.telemetry)
        self._reset_state()

    def _reset_state(self) -> None:
        self._success = False
        self._last_error: Optional[str] = None
        self._last_status: Optional[int] = None
        self._last_request: Dict[str, Any] = {}
        self._last_response: Dict[str, Any] = {}

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        headers.update(self._telemetry.get_additional_headers())
        return headers

    # ----------------------------- Verbs --------------------------------
    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", path, body=body)

    def patch(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("PATCH", path, body=body)

    def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("PUT", path, body=body)

    def delete(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("DELETE", path, body=body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Issue one request and record its outcome.

        Network failures are recorded as an unsuccessful call rather than raised,
        so the caller sees them through :meth:`last_success` like any API error.
        """
        self._reset_state()
        path = path.lstrip("/")
        url = f"{self.api}/{path}"
        request_body = json.dumps(body) if body is not None else ""
        self._last_request = {
            "method": method,
            "path": path,
            "url": url,
            "params": dict(params or {}),
            "body": request_body,
        }

        kwargs: Dict[str, Any] = {
            "headers": self._headers(),
            "auth": ("apikey", self._api_key),
        }
        if params:
            kwargs["params"] = params
        if body is not None:
            kwargs["data"] = request_body

        client_request_id = str(uuid.uuid4())
        with self._telemetry.trace_request(method, url, path, client_request_id) as ctx:
            try:
                r = self._http._request(method.lower(), url, **kwargs)
            except requests.exceptions.RequestException as exc:
                self._last_error = str(exc) or exc.__class__.__name__
                self._telemetry.record_response(ctx, 0, error=exc)
                return None
            self._telemetry.record_response(ctx, r.status_code, response_size=len(r.content or b""))

        self._last_status = r.status_code
        text = r.text or ""
        self._last_response = {"status": r.status_code, "headers": dict(r.headers or {}), "body": text}
        decoded = self._decode(text)
        self._success = 200 <= r.status_code < 300
        if not self._success:
            self._last_error = self._error_message(decoded)
            return None
        return decoded

    @staticmethod
    def _decode(text: str) -> Any:
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return None

    @staticmethod
    def _error_message(decoded: Any) -> str:
        if isinstance(decoded, dict) and "detail" in decoded and "status" in decoded:
            return f"{decoded['status']}: {decoded['detail']}"
        return _UNKNOWN_ERROR

    # ----------------------------- State --------------------------------
    def last_success(self) -> bool:
        return self._success

    def last_error(self) -> Optional[str]:
        return self._last_error

    def last_request_body(self) -> Any:
        return self._last_request.get("body") if self._last_request else None

    def last_response_body(self) -> Any:
        return self._last_response.get("body") if self._last_response else None

    def last_status_code(self) -> Optional[int]:
        return self._last_status

    def last_request(self) -> Dict[str, Any]:
        """Full record of the most recent request (method, path, url, params, body)."""
        return dict(self._last_request)

    def dashboard_url(self) -> str:
        return DASHBOARD_HOST_TEMPLATE.format(dc=self.data_center)

    def subscriber_hash(self, email: Optional[str]) -> Optional[str]:
        return subscriber_hash(email)

    def close(self) -> None:
        """Release the underlying HTTP session, if any. Safe to call multiple times."""
        self._http.close()


__all__ = ["subscriber_hash"]
