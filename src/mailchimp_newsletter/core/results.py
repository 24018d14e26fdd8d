# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Result types for MailChimp listing operations.

- :class:`Page`: one page of records returned by ``paginate`` or ``search_paginate``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List


@dataclass(frozen=True)
class Page:
    """
    One page of records from a paginated listing or search.

    MailChimp list endpoints do not report a total that matches the applied
    filters, so :attr:`total` is ``len(items) + offset``. It undercounts when
    the page is full and more items remain remotely.

    :param items: Records on this page, in API order.
    :type items: :class:`~mailchimp_newsletter.models.collection.RecordCollection`
    :param total: Estimated number of items up to and including this page.
    :type total: :class:`int`
    :param per_page: Requested page size.
    :type per_page: :class:`int`
    :param current_page: 1-based page number.
    :type current_page: :class:`int`
    :param page_name: Query parameter name the caller uses for the page number.
    :type page_name: :class:`str`

    Example:
        Walk pages of list members::

            page = client.records(NewsletterListMember, parent=lst).paginate(per_page=50, page=2)
            print(page.current_page, page.total)
            for member in page:
                print(member["email_address"])
    """

    items: List[Any] = field(default_factory=list)
    total: int = 0
    per_page: int = 0
    current_page: int = 1
    page_name: str = "page"

    @property
    def offset(self) -> int:
        """Offset of the first item on this page."""
        return (self.current_page - 1) * self.per_page

    @property
    def is_full(self) -> bool:
        """Whether the page holds ``per_page`` items, i.e. more may remain remotely."""
        return self.per_page > 0 and len(self.items) >= self.per_page

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


__all__ = ["Page"]
