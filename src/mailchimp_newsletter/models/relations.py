# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Lazily loaded, cached relations between records.

A relation is a derived value (usually a collection of child records) that is
computed on first access and then cached on the record under the relation's
name. It is not an attribute and is never sent to the API. Call
:meth:`HasRelations.unset_relation` to force the next access to reload it.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Dict, Optional


class relation:
    """
    Descriptor turning a loader method into a cached relation accessor.

    Example::

        class NewsletterList(Record):
            @relation
            def members(self):
                return NewsletterListMember.for_parent(self).list()

        lst.members          # loads once
        lst.members          # cached
        lst.unset_relation("members")
    """

    def __init__(self, loader: Callable[[Any], Any]) -> None:
        self.loader = loader
        self.name = loader.__name__
        functools.update_wrapper(self, loader)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        if instance.relation_loaded(self.name):
            return instance.get_relation(self.name)
        value = self.loader(instance)
        instance.set_relation(self.name, value)
        return value


class HasRelations:
    """Relation cache for a record instance."""

    _relations: Dict[str, Any]

    def get_relations(self) -> Dict[str, Any]:
        return dict(self._relations)

    def get_relation(self, name: str) -> Any:
        return self._relations[name]

    def relation_loaded(self, name: str) -> bool:
        return name in self._relations

    def set_relation(self, name: str, value: Any) -> "HasRelations":
        self._relations[name] = value
        return self

    def set_relations(self, relations: Dict[str, Any]) -> "HasRelations":
        self._relations = dict(relations)
        return self

    def unset_relation(self, name: str) -> "HasRelations":
        self._relations.pop(name, None)
        return self


__all__ = ["relation", "HasRelations"]
