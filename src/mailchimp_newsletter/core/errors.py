# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Structured exceptions raised by the MailChimp newsletter package.

All exceptions derive from :class:`MailChimpError`, which carries a stable
``code`` and optional ``subcode`` so callers can branch on the failure kind
without parsing messages.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import (
    CONFIG_DEFAULT_LIST_NOT_FOUND,
    CONFIG_LIST_NOT_FOUND,
    TRANSPORT_NETWORK_FAILURE,
    http_error_subcode,
)


class MailChimpError(Exception):
    """Base structured error for the MailChimp newsletter package."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.details = details or {}
        self.source = source or "client"
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "details": self.details,
            "source": self.source,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class MassAssignmentError(MailChimpError):
    """Raised when mass assignment touches an attribute that is not fillable."""

    def __init__(self, key: str, *, model: Optional[str] = None) -> None:
        where = f" on [{model}]" if model else ""
        super().__init__(
            f"Add [{key}] to fillable property to allow mass assignment{where}.",
            code="mass_assignment_error",
            details={"key": key, "model": model},
        )
        self.key = key


class ApiError(MailChimpError):
    """
    Raised when the transport reports that the last API call did not succeed.

    :param message: The transport's last error message.
    :param request_body: Body of the last request sent, if any.
    :param response_body: Body of the last response received, if any.
    :param status_code: HTTP status of the last response, when one was received.
    """

    def __init__(
        self,
        message: Optional[str],
        *,
        request_body: Any = None,
        response_body: Any = None,
        status_code: Optional[int] = None,
        subcode: Optional[str] = None,
    ) -> None:
        message = message or "MailChimp API request failed."
        if subcode is None:
            subcode = http_error_subcode(status_code) if status_code else TRANSPORT_NETWORK_FAILURE
        super().__init__(
            f"{message}\n Last Response: {response_body}\n Last Request: {request_body}",
            code="api_error",
            subcode=subcode,
            details={
                "status_code": status_code,
                "request_body": request_body,
                "response_body": response_body,
            },
            source="server",
        )
        self.error = message
        self.request_body = request_body
        self.response_body = response_body
        self.status_code = status_code


class InvalidOperationError(MailChimpError):
    """Raised when an operation cannot be performed on a record in its current state."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_operation", subcode=subcode, details=details)


class ListNotConfiguredError(MailChimpError):
    """Raised when a named newsletter list is not present in the configuration."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="configuration_error", subcode=subcode, details=details)

    @classmethod
    def no_list_with_name(cls, name: str) -> "ListNotConfiguredError":
        return cls(
            f"There is no list named `{name}`.",
            subcode=CONFIG_LIST_NOT_FOUND,
            details={"name": name},
        )

    @classmethod
    def default_list_does_not_exist(cls, name: str) -> "ListNotConfiguredError":
        return cls(
            f"Could not find a default list named `{name}`.",
            subcode=CONFIG_DEFAULT_LIST_NOT_FOUND,
            details={"name": name},
        )


class CampaignNotReadyError(MailChimpError):
    """
    Raised when a send action is requested for a campaign whose send checklist
    is not ready.

    :param checklist: The campaign's send checklist record.
    """

    def __init__(self, checklist: Any) -> None:
        errors = []
        if checklist is not None:
            errors = [item.to_dict() for item in checklist.error_items()]
        super().__init__(
            f"Campaign is not ready to send: {errors}",
            code="campaign_not_ready",
            details={"errors": errors},
        )
        self.checklist = checklist


__all__ = [
    "MailChimpError",
    "MassAssignmentError",
    "ApiError",
    "InvalidOperationError",
    "ListNotConfiguredError",
    "CampaignNotReadyError",
]
