# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Record base class for MailChimp resources.

A :class:`Record` composes an :class:`~mailchimp_newsletter.models.attributes.AttributeStore`,
the path resolver in :mod:`~mailchimp_newsletter.models.paths` and a
:class:`~mailchimp_newsletter.operations.handler.ResourceHandler`, and runs the
``NEW -> PERSISTED -> DELETED`` persistence lifecycle with its events.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Optional, Sequence

from ..core._error_codes import OPERATION_MISSING_ROUTE_KEY, OPERATION_NO_CLIENT
from ..core.errors import InvalidOperationError
from ..operations.handler import ResourceHandler
from .attributes import AttributeStore, Mutator, is_empty
from .capabilities import Searchable
from .relations import HasRelations

if TYPE_CHECKING:
    from ..client import MailChimpClient


class Record(HasRelations):
    """
    A remote MailChimp resource with dict-style attribute access.

    Subclasses declare the resource through class attributes:

    - ``resource_name``: collection segment of the API path, e.g. ``"lists"``.
    - ``response_name``: key nesting the items of a listing response; defaults
      to ``resource_name``.
    - ``route_key_name``: attribute identifying the record in URLs.
    - ``fillable`` / ``guarded``: mass assignment allow-list / deny-list.
    - ``dates``: attributes holding dates.
    - ``mutators``: custom accessors, merged along the class hierarchy.
    - ``searchable``: a :class:`~mailchimp_newsletter.models.capabilities.Searchable`
      when the resource has a ``search-<resource>`` endpoint.

    :param attributes_or_key: Attributes to mass-assign, or a bare key value.
    :type attributes_or_key: dict or str or None
    :param client: Client the record talks through. Records without one use
        their parent's client.
    :type client: ~mailchimp_newsletter.client.MailChimpClient or None
    :param parent: Record owning this one in the API hierarchy.
    :type parent: Record or None

    :raises ~mailchimp_newsletter.core.errors.MassAssignmentError: If a
        non-fillable attribute is passed.

    Example:
        Create a member of a list::

            member = NewsletterListMember(
                {"email_address": "ada@example.com", "status": "subscribed"},
                client=client,
                parent=client.list_reference(),
            )
            member["first_name"] = "Ada"
            if not member.save():
                print("a listener cancelled the save")

        Dict-style access::

            print(member["email_address"])
            print(member.get("first_name"))
            if "last_name" in member:
                del member["last_name"]
    """

    resource_name: ClassVar[str] = ""
    response_name: ClassVar[Optional[str]] = None
    route_key_name: ClassVar[str] = "id"
    fillable: ClassVar[Sequence[str]] = ()
    guarded: ClassVar[Sequence[str]] = ("*",)
    dates: ClassVar[Sequence[str]] = ()
    mutators: ClassVar[Mapping[str, Mutator]] = {}
    searchable: ClassVar[Optional[Searchable]] = None

    _resolved_mutators: ClassVar[Dict[str, Mutator]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        resolved: Dict[str, Mutator] = {}
        for klass in reversed(cls.__mro__):
            resolved.update(klass.__dict__.get("mutators") or {})
        cls._resolved_mutators = resolved

    def __init__(
        self,
        attributes_or_key: Any = None,
        *,
        client: Optional["MailChimpClient"] = None,
        parent: Optional["Record"] = None,
    ) -> None:
        self._client = client
        self._parent = parent
        self._handler: Optional[ResourceHandler] = None
        self._relations = {}
        self.exists = False
        self.was_recently_created = False
        self._attributes = AttributeStore(
            fillable=self.fillable,
            guarded=self.guarded,
            dates=self.dates,
            mutators=self._resolved_mutators,
            model_name=type(self).__name__,
        )
        self._attributes.sync_original()
        if isinstance(attributes_or_key, Mapping):
            self.fill(attributes_or_key)
        elif attributes_or_key is not None:
            self.set_route_key(attributes_or_key)

    # ------------------------------------------------------------ declaration
    @classmethod
    def get_resource_name(cls) -> str:
        return cls.resource_name

    @classmethod
    def get_response_name(cls) -> str:
        return cls.response_name or cls.resource_name

    # ------------------------------------------------------------- attributes
    def get(self, key: str, default: Any = None) -> Any:
        """
        Logical value of ``key``, or ``default`` when it is empty.

        :param key: Attribute name.
        :type key: str
        :param default: Value returned for missing or empty attributes.
        """
        value = self._attributes.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> "Record":
        """Assign one attribute without the mass assignment check."""
        self._attributes.set(key, value)
        return self

    def __getitem__(self, key: str) -> Any:
        """
        Dictionary-like attribute access.

        :raises KeyError: If the attribute was never set and has no accessor.
        """
        if key not in self._attributes.keys() and key not in self._resolved_mutators:
            raise KeyError(key)
        return self._attributes.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._attributes.set(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self._attributes.keys():
            raise KeyError(key)
        self._attributes.unset(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._attributes.has(key)

    def fill(self, attributes: Mapping[str, Any]) -> "Record":
        """
        Mass-assign attributes, honoring ``fillable`` and ``guarded``.

        :raises ~mailchimp_newsletter.core.errors.MassAssignmentError: If any key
            is not fillable. No attribute is changed in that case.
        """
        self._attributes.fill(attributes)
        return self

    def force_fill(self, attributes: Mapping[str, Any]) -> "Record":
        self._attributes.force_fill(attributes)
        return self

    def is_fillable(self, key: str) -> bool:
        return self._attributes.is_fillable(key)

    def get_dirty(self) -> Dict[str, Any]:
        return self._attributes.get_dirty()

    def is_dirty(self, *keys: str) -> bool:
        return self._attributes.is_dirty(*keys)

    def is_clean(self, *keys: str) -> bool:
        return self._attributes.is_clean(*keys)

    def get_original(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._attributes.get_original(key, default)

    def get_changes(self) -> Dict[str, Any]:
        return self._attributes.get_changes()

    def sync_original(self) -> "Record":
        self._attributes.sync_original()
        return self

    def sync_changes(self) -> "Record":
        self._attributes.sync_changes()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Attributes in the form sent to the API."""
        return self._attributes.to_serializable()

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    def __repr__(self) -> str:
        state = "exists" if self.exists else "new"
        return f"<{type(self).__name__} {self.get_route_key()!r} ({state})>"

    # ------------------------------------------------------------ identity
    def get_key(self) -> Any:
        return self.get(self.route_key_name)

    def set_key(self, key: Any) -> "Record":
        self._attributes.set(self.route_key_name, key)
        return self

    def get_route_key(self) -> Any:
        """Value identifying the record in API paths."""
        return self.get_key()

    def set_route_key(self, key: Any) -> "Record":
        return self.set_key(key)

    def get_parent(self) -> Optional["Record"]:
        return self._parent

    def set_parent(self, parent: Optional["Record"]) -> "Record":
        self._parent = parent
        return self

    def get_client(self) -> "MailChimpClient":
        """
        Client this record talks through, inherited from the parent chain.

        :raises ~mailchimp_newsletter.core.errors.InvalidOperationError: If no
            record in the chain is bound to a client.
        """
        record: Optional[Record] = self
        seen = set()
        while record is not None and id(record) not in seen:
            if record._client is not None:
                return record._client
            seen.add(id(record))
            record = record._parent
        raise InvalidOperationError(
            f"{type(self).__name__} is not bound to a MailChimpClient.",
            subcode=OPERATION_NO_CLIENT,
        )

    def set_client(self, client: Optional["MailChimpClient"]) -> "Record":
        self._client = client
        self._handler = None
        return self

    def new_instance(self, attributes: Optional[Mapping[str, Any]] = None, exists: bool = False) -> "Record":
        """
        Build a sibling record sharing this record's client and parent.

        The attributes are trusted API data: they bypass mass assignment and
        become the original snapshot.
        """
        record = type(self)(client=self._client, parent=self._parent)
        if attributes:
            record.force_fill(attributes)
        record.exists = exists
        record.sync_original()
        return record

    # ------------------------------------------------------------ handler
    def handler(self) -> ResourceHandler:
        """The handler running API operations for this record."""
        if self._handler is None:
            self._handler = ResourceHandler(self)
        return self._handler

    @classmethod
    def query(cls, client: "MailChimpClient", parent: Optional["Record"] = None) -> ResourceHandler:
        """
        Handler for the collection of ``cls`` records under ``parent``.

        Example::

            lists = NewsletterList.query(client).list(count=20)
        """
        return cls(client=client, parent=parent).handler()

    @classmethod
    def for_parent(cls, parent: "Record") -> ResourceHandler:
        return cls.query(parent.get_client(), parent=parent)

    # ------------------------------------------------------------ lifecycle
    def _fire_event(self, event: str, halt: bool = True) -> bool:
        client = self._client
        if client is None:
            try:
                client = self.get_client()
            except InvalidOperationError:
                return True
        return client.events.fire(event, self, halt=halt)

    def save(self) -> bool:
        """
        Insert or update the record depending on :attr:`exists`.

        :return: ``False`` if a listener cancelled the save, ``True`` otherwise.
        :rtype: bool
        :raises ~mailchimp_newsletter.core.errors.ApiError: If the API call fails.
        """
        if not self._fire_event("saving"):
            return False
        if self.exists:
            saved = self._perform_update() if self.is_dirty() else True
        else:
            saved = self._perform_insert()
        if saved:
            self._finish_save()
        return saved

    def _perform_update(self) -> bool:
        if not self._fire_event("updating"):
            return False
        result = self.handler().update()
        self._fire_event("updated", halt=False)
        return bool(result)

    def _perform_insert(self) -> bool:
        if not self._fire_event("creating"):
            return False
        result = self.handler().insert()
        self._fire_event("created", halt=False)
        return bool(result)

    def _finish_save(self) -> None:
        self._fire_event("saved", halt=False)
        self.sync_original()

    def update(self, attributes: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Fill ``attributes`` and save. Records that do not exist are not saved.

        :return: ``False`` if the record does not exist or the save was cancelled.
        """
        if not self.exists:
            return False
        if attributes:
            self.fill(attributes)
        return self.save()

    def delete(self) -> bool:
        """
        Delete the record remotely.

        Records that do not exist succeed without contacting the API.

        :return: ``False`` if a listener cancelled the deletion.
        :raises ~mailchimp_newsletter.core.errors.InvalidOperationError: If the
            record has no route key.
        """
        if is_empty(self.get_route_key()):
            raise InvalidOperationError(
                f"No route key defined on {type(self).__name__}.",
                subcode=OPERATION_MISSING_ROUTE_KEY,
            )
        if not self.exists:
            return True
        if not self._fire_event("deleting"):
            return False
        self.handler().delete()
        self._fire_event("deleted", halt=False)
        return True

    def fresh(self, fields: Optional[Sequence[str]] = None) -> Optional["Record"]:
        """Reload the record from the API as a new instance, or ``None`` if it is gone."""
        if not self.exists:
            return None
        return self.handler().find(self.get_key(), fields=fields)

    # ------------------------------------------------------------ dashboard
    def remote_index_path(self) -> str:
        """Dashboard URL of this resource's index page."""
        return f"{self.get_client().transport.dashboard_url()}{self.get_resource_name()}"

    def remote_path(self) -> str:
        """Dashboard URL of this record."""
        web_id = self.get("web_id", self.get_route_key())
        return f"{self.remote_index_path()}?id={web_id}"


__all__ = ["Record"]
