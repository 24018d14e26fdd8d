# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Thin ``requests`` wrapper used by the MailChimp transport."""

from __future__ import annotations

from typing import Any, Optional

import requests

# Writes and deletes can take MailChimp a while (batch member updates, campaign sends).
_SLOW_METHODS = frozenset({"post", "delete"})
_SLOW_TIMEOUT = 120
_FAST_TIMEOUT = 10


class _HttpClient:
    """
    Sends requests with a timeout and TLS setting applied.

    :param timeout: Seconds to wait for every request. ``None`` picks
        120s for POST and DELETE, 10s for everything else.
    :type timeout: :class:`float` | None
    :param verify: Whether TLS certificates are verified.
    :type verify: :class:`bool`
    :param session: Session to send through, for connection pooling. Without
        one every request opens its own connection.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self.verify = verify
        self._session = session

    def _timeout_for(self, method: str) -> float:
        if self.default_timeout is not None:
            return self.default_timeout
        return _SLOW_TIMEOUT if (method or "").lower() in _SLOW_METHODS else _FAST_TIMEOUT

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send one request.

        An explicit ``timeout`` or ``verify`` in ``kwargs`` wins over the
        client's settings.

        :param method: HTTP verb, any case.
        :param url: Absolute URL.
        :param kwargs: Passed on to :func:`requests.request`.
        :rtype: :class:`requests.Response`
        :raises requests.exceptions.RequestException: On network failure.
        """
        kwargs.setdefault("timeout", self._timeout_for(method))
        kwargs.setdefault("verify", self.verify)
        send = self._session.request if self._session is not None else requests.request
        return send(method, url, **kwargs)

    def close(self) -> None:
        """Close the session, if any. Safe to call more than once."""
        if self._session is not None:
            self._session.close()
            self._session = None
