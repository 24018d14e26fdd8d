# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
API path derivation for records.

Paths are derived from the record and its parent chain every time they are
requested; nothing is cached because a parent's key can change between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..core._error_codes import OPERATION_CYCLIC_PARENT, OPERATION_MISSING_ROUTE_KEY
from ..core.errors import InvalidOperationError
from .attributes import is_empty

if TYPE_CHECKING:
    from .record import Record


def parent_chain(record: "Record") -> List["Record"]:
    """
    Return the ancestors of ``record``, outermost first.

    :raises InvalidOperationError: If the chain loops back onto itself.
    """
    chain: List["Record"] = []
    seen = {id(record)}
    parent = record.get_parent()
    while parent is not None:
        if id(parent) in seen:
            raise InvalidOperationError(
                f"Cyclic parent chain detected for {type(record).__name__}.",
                subcode=OPERATION_CYCLIC_PARENT,
            )
        seen.add(id(parent))
        chain.append(parent)
        parent = parent.get_parent()
    chain.reverse()
    return chain


def collection_path(record: "Record") -> str:
    """
    Path of the collection ``record`` belongs to, e.g. ``lists/abc/members``.

    :raises InvalidOperationError: If an ancestor has no route key.
    """
    path = ""
    for ancestor in parent_chain(record):
        key = ancestor.get_route_key()
        if is_empty(key):
            raise InvalidOperationError(
                f"Parent {type(ancestor).__name__} of {type(record).__name__} has no route key.",
                subcode=OPERATION_MISSING_ROUTE_KEY,
            )
        path += f"{ancestor.get_resource_name()}/{key}/"
    return path + record.get_resource_name()


def item_path(record: "Record") -> str:
    """
    Path of ``record`` itself, e.g. ``lists/abc/members/<hash>``.

    Falls back to the collection path when the record has no route key.
    """
    path = collection_path(record)
    key = record.get_route_key()
    if not is_empty(key):
        path += f"/{key}"
    return path


__all__ = ["parent_chain", "collection_path", "item_path"]
