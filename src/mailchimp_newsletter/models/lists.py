# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Audience (list) resources: lists, members, activity and interests.

Records below a list resolve their parent list from an explicit parent, then
from their ``list_id`` attribute, then from the client's configured default
list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ..common.constants import MEMBER_STATUS_SUBSCRIBED
from ..data._api import subscriber_hash
from .attributes import nested
from .capabilities import MemberSearch
from .collection import RecordCollection
from .record import Record
from .relations import relation

if TYPE_CHECKING:
    from ..client import MailChimpClient


class NewsletterList(Record):
    """
    A MailChimp list (audience).

    Example::

        lst = client.default_list()
        for member in lst.subscribers:
            print(member["email_address"])
    """

    resource_name = "lists"
    fillable = (
        "name",
        "contact",
        "permission_reminder",
        "use_archive_bar",
        "campaign_defaults",
        "notify_on_subscribe",
        "notify_on_unsubscribe",
        "email_type_option",
        "visibility",
        "double_optin",
        "marketing_permissions",
    )
    dates = ("date_created",)

    @relation
    def members(self) -> RecordCollection:
        return NewsletterListMember.for_parent(self).list()

    @relation
    def subscribers(self) -> RecordCollection:
        return self.members.filter(lambda member: member.is_subscribed())

    @relation
    def activity(self) -> RecordCollection:
        return NewsletterListActivity.for_parent(self).list()

    @relation
    def interest_categories(self) -> RecordCollection:
        return InterestCategory.for_parent(self).list()

    def remote_path(self) -> str:
        return f"{self.get_client().transport.dashboard_url()}lists/members/?id={self.get('web_id')}"


class NewsletterListChildRecord(Record):
    """Base for records nested directly below a list."""

    def get_parent(self) -> Optional[Record]:
        # the fallback is rebuilt on every call so it follows list_id changes
        if self._parent is not None:
            return self._parent
        list_id = self.get("list_id")
        if list_id:
            return NewsletterList(list_id, client=self._client)
        if self._client is not None:
            return self._client.list_reference()
        return None


class NewsletterListMember(NewsletterListChildRecord):
    """
    A member (subscriber) of a list.

    Members are addressed by the MD5 hash of their lower-cased email address.
    ``first_name`` and ``last_name`` read and write the ``FNAME`` and ``LNAME``
    merge fields.

    Example::

        member = NewsletterListMember.find_subscribed(client, "ada@example.com")
        if member is not None:
            member.update({"first_name": "Ada", "last_name": "Lovelace"})
    """

    resource_name = "members"
    route_key_name = "email_address"
    fillable = (
        "email_address",
        "email_type",
        "status",
        "interests",
        "merge_fields",
        "first_name",
        "last_name",
        "language",
        "vip",
        "location",
    )
    dates = ("timestamp_signup", "timestamp_opt", "last_changed")
    mutators = {
        "first_name": nested("merge_fields", "FNAME"),
        "last_name": nested("merge_fields", "LNAME"),
    }
    searchable = MemberSearch()

    def get_route_key(self) -> Any:
        email = self.get("email_address")
        if email:
            return subscriber_hash(email)
        return self.get("id")

    def set_route_key(self, key: Any) -> "NewsletterListMember":
        # anything that is not an email address is taken to be the subscriber hash
        if key is not None and "@" not in str(key):
            self._attributes.unset("email_address")
            self._attributes.set("id", key)
            return self
        return self.set_key(key)

    def is_subscribed(self) -> bool:
        return self.get("status") == MEMBER_STATUS_SUBSCRIBED

    @relation
    def interests(self) -> RecordCollection:
        """Interests the member opted into, resolved against the list's interest categories."""
        info = self.get("interests")
        result = RecordCollection()
        if not isinstance(info, dict):
            return result
        categories = InterestCategory.query(self.get_client(), parent=self.get_parent()).list()
        for interest_id, active in info.items():
            if not active:
                continue
            for category in categories:
                interest = category.interests.find(interest_id)
                if interest is not None:
                    result.append(interest)
                    break
        return result

    def has_interest(self, interest_id: str) -> bool:
        return self.interests.find(interest_id) is not None

    @relation
    def activity(self) -> RecordCollection:
        return NewsletterListMemberActivity.for_parent(self).list()

    @classmethod
    def find_subscribed(
        cls,
        client: "MailChimpClient",
        email: str,
        parent: Optional[NewsletterList] = None,
    ) -> Optional["NewsletterListMember"]:
        """
        Find a member by email address, only if they are subscribed.

        :param client: Client to query through.
        :param email: The member's email address.
        :param parent: List to look in. Defaults to the configured default list.
        :return: The subscribed member, or ``None``.
        """
        member = cls.query(client, parent=parent).find(email)
        if member is not None and member.is_subscribed():
            return member
        return None


class NewsletterListActivity(NewsletterListChildRecord):
    """Daily activity summary of a list."""

    resource_name = "activity"
    dates = ("day",)


class NewsletterListMemberActivity(Record):
    """One activity entry (open, click, send, unsubscribe) of a list member."""

    resource_name = "activity"
    dates = ("timestamp",)

    def get_parent(self) -> Optional[Record]:
        if self._parent is not None or not self.get("email_id"):
            return self._parent
        member = NewsletterListMember(client=self._client)
        member.set_route_key(self.get("email_id"))
        member.force_fill({"list_id": self.get("list_id")})
        return member

    def is_open(self) -> bool:
        return self.get("action") == "open"

    def is_click(self) -> bool:
        return self.get("action") == "click"

    def is_sent(self) -> bool:
        return self.get("action") == "sent"

    def is_unsub(self) -> bool:
        return self.get("action") == "unsub"


class InterestCategory(NewsletterListChildRecord):
    """A group of interests of a list."""

    resource_name = "interest-categories"
    response_name = "categories"
    fillable = ("title", "display_order", "type")

    @relation
    def interests(self) -> RecordCollection:
        return Interest.for_parent(self).list()


class Interest(Record):
    """
    One interest of an interest category.

    Its parent category comes from an explicit parent, then from the
    ``category_id`` attribute, then from the configured default interest
    category of the default list.
    """

    resource_name = "interests"
    fillable = ("name", "display_order")

    def get_parent(self) -> Optional[Record]:
        if self._parent is not None:
            return self._parent
        category_id = self.get("category_id")
        if category_id:
            category = InterestCategory(category_id, client=self._client)
            if self.get("list_id"):
                category.set_parent(NewsletterList(self.get("list_id"), client=self._client))
            return category
        if self._client is not None:
            return self._client.interest_category_reference()
        return None


__all__ = [
    "NewsletterList",
    "NewsletterListChildRecord",
    "NewsletterListMember",
    "NewsletterListActivity",
    "NewsletterListMemberActivity",
    "InterestCategory",
    "Interest",
]
