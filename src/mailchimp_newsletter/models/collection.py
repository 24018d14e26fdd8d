# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Ordered collections of records returned by list and search operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from ..utils._pandas import records_to_dataframe

if TYPE_CHECKING:
    from .record import Record


class RecordCollection(list):
    """
    A ``list`` of records with lookup helpers.

    Example::

        members = client.records(NewsletterListMember).list(count=50)
        subscribed = members.filter(lambda m: m.is_subscribed())
        emails = subscribed.pluck("email_address")
        df = members.to_dataframe(columns=["email_address", "status"])
    """

    def find(self, key: Any, default: Optional["Record"] = None) -> Optional["Record"]:
        """
        Return the first record whose key or route key equals ``key``.

        :param key: A key value or a record whose key is used.
        """
        if callable(getattr(key, "get_key", None)):
            key = key.get_key()
        for record in self:
            if record.get_key() == key or record.get_route_key() == key:
                return record
        return default

    def filter(self, predicate: Callable[["Record"], bool]) -> "RecordCollection":
        return RecordCollection(record for record in self if predicate(record))

    def pluck(self, attribute: str) -> List[Any]:
        return [record.get(attribute) for record in self]

    def keys(self) -> List[Any]:
        return [record.get_key() for record in self]

    def first(self, default: Optional["Record"] = None) -> Optional["Record"]:
        return self[0] if self else default

    def to_list(self) -> List[Dict[str, Any]]:
        """Serializable attribute dicts, one per record."""
        return [record.to_dict() for record in self]

    def to_dataframe(self, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """
        Return the records as a pandas DataFrame, one row per record.

        Date attributes of the record type become UTC timestamps.

        :param columns: Optional subset and order of columns.
        :type columns: Sequence[str] or None
        :rtype: pandas.DataFrame
        """
        dates: List[str] = []
        for record in self:
            for name in record.dates:
                if name not in dates:
                    dates.append(name)
        return records_to_dataframe(self.to_list(), columns=columns, date_columns=dates)


__all__ = ["RecordCollection"]
