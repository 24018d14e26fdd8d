# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Attribute state for a single MailChimp record.

:class:`AttributeStore` keeps the current and the last synchronized attribute
values of one record, applies per-field mutators and date (de)serialization,
and guards mass assignment with a fillable/guarded allow-list.
"""

from __future__ import annotations

import copy
import datetime as _dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from ..core.errors import MassAssignmentError

Attributes = Dict[str, Any]


@dataclass(frozen=True)
class Mutator:
    """
    Custom accessor pair for one logical attribute.

    ``get`` receives the raw attribute mapping and returns the logical value.
    ``set`` receives the raw attribute mapping and the new value and writes the
    storage form into the mapping. Either side may be omitted, in which case
    the raw stored value is used for that direction.
    """

    get: Optional[Callable[[Mapping[str, Any]], Any]] = None
    set: Optional[Callable[[Attributes, Any], None]] = None


def nested(container: str, key: str, cast: Optional[Callable[[Any], Any]] = None) -> Mutator:
    """
    Build a mutator that flattens ``attributes[container][key]`` into one field.

    Writes replace the container with an updated copy so the original snapshot
    never shares the mutated mapping.

    Example::

        mutators = {"title": nested("settings", "title")}
    """

    def getter(attributes: Mapping[str, Any]) -> Any:
        inner = attributes.get(container)
        if isinstance(inner, Mapping):
            return inner.get(key)
        return None

    def setter(attributes: Attributes, value: Any) -> None:
        inner = attributes.get(container)
        updated = dict(inner) if isinstance(inner, Mapping) else {}
        updated[key] = cast(value) if cast is not None else value
        attributes[container] = updated

    return Mutator(get=getter, set=setter)


def is_empty(value: Any) -> bool:
    """Whether ``value`` counts as an absent attribute (None, empty string or empty container)."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def as_datetime(value: Any) -> Optional[_dt.datetime]:
    """
    Convert a stored date value to an offset-aware :class:`datetime.datetime`.

    Accepts datetimes, dates, POSIX timestamps and ISO-8601 strings (a trailing
    ``Z`` is read as UTC). Naive values are taken to be UTC.

    :raises ValueError: If a string is not a valid ISO-8601 date or date-time.
    :raises TypeError: If the value has an unsupported type.
    """
    if is_empty(value):
        return None
    if isinstance(value, _dt.datetime):
        result = value
    elif isinstance(value, _dt.date):
        result = _dt.datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        result = _dt.datetime.fromtimestamp(value, tz=_dt.timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        result = _dt.datetime.fromisoformat(text)
    else:
        raise TypeError(f"Cannot convert {type(value).__name__} to datetime")
    if result.tzinfo is None:
        result = result.replace(tzinfo=_dt.timezone.utc)
    return result


def serialize_date(value: Any) -> str:
    """Render a date value in MailChimp's profile, e.g. ``2017-03-01T10:15:00+00:00``."""
    return as_datetime(value).isoformat(timespec="seconds")


class AttributeStore:
    """
    Current and original attribute values for one record.

    :param fillable: Attributes that mass assignment may set.
    :type fillable: Sequence[str]
    :param guarded: Attributes mass assignment may not set; ``["*"]`` guards everything not fillable.
    :type guarded: Sequence[str]
    :param dates: Attributes holding dates in MailChimp's date-time profile.
    :type dates: Sequence[str]
    :param mutators: Custom accessors keyed by attribute name.
    :type mutators: Mapping[str, Mutator] or None
    :param model_name: Name reported in mass assignment errors.
    :type model_name: str or None
    """

    def __init__(
        self,
        *,
        fillable: Sequence[str] = (),
        guarded: Sequence[str] = ("*",),
        dates: Sequence[str] = (),
        mutators: Optional[Mapping[str, Mutator]] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self.fillable = list(fillable)
        self.guarded = list(guarded)
        self.dates = tuple(dates)
        self._mutators: Dict[str, Mutator] = dict(mutators or {})
        self._model_name = model_name
        self._attributes: Attributes = {}
        self._original: Attributes = {}
        self._changes: Attributes = {}

    # --------------------------------------------------------------- access
    def get(self, key: str) -> Any:
        """
        Return the logical value of ``key``.

        A registered get mutator wins over the stored value. Date fields are
        returned as aware datetimes. Empty values come back as ``None``.
        """
        if not key:
            return None
        mutator = self._mutators.get(key)
        if mutator is not None and mutator.get is not None:
            value = mutator.get(self._attributes)
        elif key in self._attributes:
            value = self._attributes[key]
            if key in self.dates and not is_empty(value):
                value = as_datetime(value)
        else:
            value = None
        return None if is_empty(value) else value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, through its set mutator when one is registered."""
        mutator = self._mutators.get(key)
        if mutator is not None and mutator.set is not None:
            mutator.set(self._attributes, value)
            return
        if key in self.dates:
            value = None if is_empty(value) else serialize_date(value)
        self._attributes[key] = value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def unset(self, key: str) -> None:
        self._attributes.pop(key, None)

    def raw(self) -> Attributes:
        """Copy of the stored attribute values, without mutators or date conversion."""
        return copy.deepcopy(self._attributes)

    def keys(self) -> Iterable[str]:
        return self._attributes.keys()

    # -------------------------------------------------------- mass assignment
    def is_guarded(self, key: str) -> bool:
        return key in self.guarded or self.guarded == ["*"]

    def totally_guarded(self) -> bool:
        return not self.fillable and self.guarded == ["*"]

    def is_fillable(self, key: str) -> bool:
        if key in self.fillable:
            return True
        if self.is_guarded(key):
            return False
        return not self.fillable and not key.startswith("_")

    def fill(self, attributes: Mapping[str, Any], force: bool = False) -> "AttributeStore":
        """
        Mass-assign ``attributes``.

        Unless ``force`` is set, every key is checked before anything is written,
        so a rejected key leaves the store unchanged.

        :raises MassAssignmentError: If a key is not fillable and ``force`` is False.
        """
        if not force:
            for key in attributes:
                if not self.is_fillable(key):
                    raise MassAssignmentError(key, model=self._model_name)
        for key, value in attributes.items():
            # MailChimp stores unset dates as empty strings
            if key in self.dates and value == "":
                value = None
            self.set(key, value)
        return self

    def force_fill(self, attributes: Mapping[str, Any]) -> "AttributeStore":
        return self.fill(attributes, force=True)

    # ------------------------------------------------------------ dirtiness
    def get_original(self, key: Optional[str] = None, default: Any = None) -> Any:
        if key is None:
            return copy.deepcopy(self._original)
        return self._original.get(key, default)

    def get_dirty(self) -> Attributes:
        """Attributes whose stored value differs from the original snapshot."""
        return {
            key: value
            for key, value in self._attributes.items()
            if key not in self._original or value != self._original[key]
        }

    def is_dirty(self, *keys: str) -> bool:
        dirty = self.get_dirty()
        if not keys:
            return bool(dirty)
        return any(key in dirty for key in keys)

    def is_clean(self, *keys: str) -> bool:
        return not self.is_dirty(*keys)

    def sync_original(self) -> "AttributeStore":
        self._original = copy.deepcopy(self._attributes)
        return self

    def sync_changes(self) -> "AttributeStore":
        """Remember the current dirty set as the changes of the last update."""
        self._changes = self.get_dirty()
        return self

    def get_changes(self) -> Attributes:
        return dict(self._changes)

    # --------------------------------------------------------- serialization
    def to_serializable(self) -> Attributes:
        """
        Attribute mapping in the form MailChimp expects.

        Every date field is present: unset dates are empty strings and set dates
        use the ``YYYY-MM-DDTHH:MM:SS+HH:MM`` profile.
        """
        attributes = copy.deepcopy(self._attributes)
        for key in self.dates:
            value = attributes.get(key)
            attributes[key] = "" if is_empty(value) else serialize_date(value)
        return attributes


__all__ = ["AttributeStore", "Mutator", "nested", "as_datetime", "serialize_date", "is_empty"]
