# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Lifecycle events for MailChimp records.

Each :class:`~mailchimp_newsletter.client.MailChimpClient` owns one
:class:`EventDispatcher`. Records fire their lifecycle events through the
dispatcher of the client they are bound to. A listener of a halting event
(``saving``, ``creating``, ``updating``, ``deleting``) can cancel the
transition by returning ``False``; the operation then reports failure without
contacting the API.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional, Tuple, Type

_logger = logging.getLogger(__name__)

EVENTS = (
    "creating",
    "created",
    "updating",
    "updated",
    "saving",
    "saved",
    "deleting",
    "deleted",
)
HALTING_EVENTS = frozenset({"creating", "updating", "saving", "deleting"})

Listener = Callable[[Any], Any]


class EventDispatcher:
    """
    Registry of lifecycle listeners.

    Example:
        Veto saving a member without an email address::

            def require_email(member):
                if not member.get("email_address"):
                    return False

            client.events.listen("saving", require_email, model=NewsletterListMember)
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Tuple[Optional[Type[Any]], Listener]]] = defaultdict(list)

    def listen(self, event: str, callback: Listener, model: Optional[Type[Any]] = None) -> None:
        """
        Register ``callback`` for ``event``.

        :param event: One of :data:`EVENTS`.
        :param callback: Called with the record; returning ``False`` vetoes a halting event.
        :param model: Restrict the listener to records of this class (and subclasses).
        :raises ValueError: If ``event`` is not a known lifecycle event.
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown record event '{event}'. Expected one of: {', '.join(EVENTS)}")
        self._listeners[event].append((model, callback))

    def forget(self, event: Optional[str] = None, model: Optional[Type[Any]] = None) -> None:
        """Remove listeners, optionally only those of one event and/or one model class."""
        events = [event] if event else list(self._listeners)
        for name in events:
            if model is None:
                self._listeners.pop(name, None)
            else:
                self._listeners[name] = [(m, cb) for m, cb in self._listeners[name] if m is not model]

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def fire(self, event: str, record: Any, halt: bool = True) -> bool:
        """
        Dispatch ``event`` for ``record``.

        :return: ``False`` if a listener vetoed a halting event, else ``True``.
        """
        for model, callback in list(self._listeners.get(event, ())):
            if model is not None and not isinstance(record, model):
                continue
            result = callback(record)
            if halt and event in HALTING_EVENTS and result is False:
                _logger.debug("%s cancelled for %s by %r", event, type(record).__name__, callback)
                return False
        return True


__all__ = ["EventDispatcher", "EVENTS", "HALTING_EVENTS"]
