# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Optional capabilities a record type can declare.

A record type opts into free-text search by setting its ``searchable`` class
attribute to a :class:`Searchable` instance that knows how to unwrap that
resource's ``search-<resource>`` response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class Searchable:
    """
    Unwrapping rules for a ``search-<resource>`` response.

    :param results_key: Key of the results array in the response body.
    :param item_key: Key of the record attributes inside each result, or None
        when each result is the record itself.
    """

    results_key: Optional[str] = "results"
    item_key: Optional[str] = None

    def results_from_response(self, response: Any) -> List[Any]:
        if not isinstance(response, Mapping):
            return []
        results = response.get(self.results_key) if self.results_key else response
        return list(results or [])

    def attributes_from_result(self, result: Any) -> Dict[str, Any]:
        if not isinstance(result, Mapping):
            return {}
        if self.item_key:
            return dict(result.get(self.item_key) or {})
        return dict(result)


@dataclass(frozen=True)
class MemberSearch(Searchable):
    """
    Unwrapping rules for ``search-members``.

    The response splits hits into ``exact_matches`` and ``full_search``; both
    are returned, exact matches first, without duplicates.
    """

    results_key: Optional[str] = None
    sections: tuple = ("exact_matches", "full_search")

    def results_from_response(self, response: Any) -> List[Any]:
        if not isinstance(response, Mapping):
            return []
        seen = set()
        results: List[Any] = []
        for section in self.sections:
            block = response.get(section) or {}
            for member in block.get("members") or []:
                marker = member.get("id") or member.get("email_address")
                if marker in seen:
                    continue
                seen.add(marker)
                results.append(member)
        return results


__all__ = ["Searchable", "MemberSearch"]
