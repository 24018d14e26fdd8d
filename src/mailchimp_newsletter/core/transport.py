# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Transport contract used by resource handlers.

Resource handlers never look at HTTP status codes. They issue a call, then
ask the transport whether the last call succeeded and, if not, what the
last error and request/response bodies were. :class:`Transport` describes
that contract; :class:`~mailchimp_newsletter.data._api._MailChimpApi` is the
default ``requests``-based implementation, and tests substitute an
in-memory one.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Minimal MailChimp API transport.

    Every verb returns the decoded response body, or ``None`` when the body
    was empty or the call failed. Callers must consult :meth:`last_success`
    after each call.
    """

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def patch(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def delete(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def last_success(self) -> bool:
        """Whether the most recent call completed with a 2xx response."""
        ...

    def last_error(self) -> Optional[str]:
        """Error message of the most recent call, or None if it succeeded."""
        ...

    def last_request_body(self) -> Any:
        ...

    def last_response_body(self) -> Any:
        ...

    def last_status_code(self) -> Optional[int]:
        """HTTP status of the most recent response; None when no response was received."""
        ...

    def dashboard_url(self) -> str:
        """Base URL of the MailChimp web dashboard for the account's data center."""
        ...


__all__ = ["Transport"]
