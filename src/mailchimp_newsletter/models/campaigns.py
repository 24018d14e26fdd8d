# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Campaign resources: campaigns, their send checklist and their content.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ..common.constants import CAMPAIGN_STATUS_SCHEDULED, CAMPAIGN_STATUS_SENT
from ..core.errors import CampaignNotReadyError
from .attributes import Attributes, Mutator, as_datetime, nested, serialize_date
from .capabilities import Searchable
from .collection import RecordCollection
from .lists import NewsletterList
from .record import Record
from .relations import relation


def _set_recipients(attributes: Attributes, value: Any) -> None:
    # a bare list id only replaces the list of the current recipients
    if isinstance(value, Mapping):
        attributes["recipients"] = dict(value)
        return
    current = attributes.get("recipients")
    recipients = dict(current) if isinstance(current, Mapping) else {}
    recipients["list_id"] = value
    attributes["recipients"] = recipients


def _report(key: str) -> Mutator:
    return Mutator(get=nested("report_summary", key).get)


class NewsletterCampaign(Record):
    """
    An email campaign.

    Settings, tracking and social card fields are exposed flat, e.g.
    ``campaign["subject_line"]`` reads ``settings.subject_line``. Report
    figures (``opens``, ``click_rate`` ...) are read-only views of
    ``report_summary``.

    Example:
        Create, test and schedule a campaign::

            campaign = NewsletterCampaign(
                {"type": "regular", "recipients": lst.get_key(), "subject_line": "News"},
                client=client,
            )
            campaign.save()
            campaign.send_test(["qa@example.com"])
            campaign.schedule(datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc))
    """

    resource_name = "campaigns"
    fillable = (
        "settings",
        "type",
        "recipients",
        "title",
        "subject_line",
        "preview_text",
        "from_name",
        "reply_to",
        "template_id",
        "tracking_active",
        "social_card",
        "social_card_title",
        "social_card_description",
        "social_card_image_url",
    )
    dates = ("create_time", "send_time")
    mutators = {
        "title": nested("settings", "title"),
        "subject_line": nested("settings", "subject_line"),
        "preview_text": nested("settings", "preview_text"),
        "from_name": nested("settings", "from_name"),
        "reply_to": nested("settings", "reply_to"),
        "template_id": nested("settings", "template_id"),
        "tracking_active": nested("tracking", "opens", cast=bool),
        "recipients": Mutator(set=_set_recipients),
        "social_card_image_url": nested("social_card", "image_url"),
        "social_card_title": nested("social_card", "title"),
        "social_card_description": nested("social_card", "description"),
        "opens": _report("opens"),
        "unique_opens": _report("unique_opens"),
        "open_rate": _report("open_rate"),
        "clicks": _report("clicks"),
        "subscriber_clicks": _report("subscriber_clicks"),
        "click_rate": _report("click_rate"),
    }
    searchable = Searchable(results_key="results", item_key="campaign")

    @relation
    def checklist(self) -> "NewsletterCampaignChecklist":
        return NewsletterCampaignChecklist.for_parent(self).fetch_singleton()

    @relation
    def content(self) -> "NewsletterCampaignContent":
        return NewsletterCampaignContent.for_parent(self).fetch_singleton()

    def recipients(self) -> Optional[NewsletterList]:
        """The list the campaign is sent to, built from ``recipients`` without a request."""
        info = self.get("recipients")
        if not isinstance(info, Mapping):
            return None
        recipients = NewsletterList(client=self._client)
        recipients.force_fill(info)
        if info.get("list_id"):
            recipients.set_key(info["list_id"])
        recipients.sync_original()
        return recipients

    def can_be_sent(self) -> bool:
        return bool(self.checklist.get("is_ready"))

    def is_sent(self) -> bool:
        return self.get("status") == CAMPAIGN_STATUS_SENT

    def is_scheduled(self) -> bool:
        return self.get("status") == CAMPAIGN_STATUS_SCHEDULED

    def _ensure_ready(self) -> None:
        if not self.can_be_sent():
            raise CampaignNotReadyError(self.checklist)

    def send_test(self, emails: Union[str, Iterable[str]], send_type: str = "html") -> "NewsletterCampaign":
        """
        Send a test email of the campaign.

        :param emails: One address or several.
        :param send_type: ``"html"`` or ``"plaintext"``.
        :raises ~mailchimp_newsletter.core.errors.CampaignNotReadyError: If the
            send checklist is not ready.
        """
        self._ensure_ready()
        if isinstance(emails, str):
            emails = [emails]
        self.handler().action("test", {"test_emails": list(emails), "send_type": send_type})
        return self

    def schedule(self, when: Union[_dt.datetime, str]) -> "NewsletterCampaign":
        """
        Schedule the campaign, or send it right away when ``when`` is not in the future.

        Naive datetimes are taken as UTC.

        :raises ~mailchimp_newsletter.core.errors.CampaignNotReadyError: If the
            send checklist is not ready.
        """
        self._ensure_ready()
        when = as_datetime(when)
        if when <= _dt.datetime.now(_dt.timezone.utc):
            return self.send()
        self.handler().action("schedule", {"schedule_time": serialize_date(when)})
        return self

    def send(self) -> "NewsletterCampaign":
        """
        Send the campaign now.

        :raises ~mailchimp_newsletter.core.errors.CampaignNotReadyError: If the
            send checklist is not ready.
        """
        self._ensure_ready()
        self.handler().action("send")
        return self

    def unschedule(self) -> "NewsletterCampaign":
        self.handler().action("unschedule")
        return self

    def remote_path(self) -> str:
        sub_path = "/reports/summary" if self.is_sent() else "/wizard/neapolitan"
        return f"{self.remote_index_path()}{sub_path}?id={self.get('web_id')}"


class NewsletterCampaignChecklist(Record):
    """Send checklist of a campaign."""

    resource_name = "send-checklist"

    def is_ready(self) -> bool:
        return bool(self.get("is_ready"))

    def items(self) -> RecordCollection:
        entries = self.get("items") or []
        collection = RecordCollection()
        for entry in entries:
            item = NewsletterCampaignChecklistItem(client=self._client, parent=self)
            item.force_fill(entry)
            item.exists = True
            item.sync_original()
            collection.append(item)
        return collection

    def error_items(self) -> RecordCollection:
        return self.items().filter(lambda item: item.has_error())


class NewsletterCampaignChecklistItem(Record):
    """One entry of a campaign's send checklist."""

    fillable = ("type", "heading", "details")

    def has_error(self) -> bool:
        return self.get("type") == "error"

    def has_success(self) -> bool:
        return self.get("type") == "success"

    def has_warning(self) -> bool:
        return self.get("type") == "warning"

    def to_dict(self) -> Dict[str, Any]:
        return {key: self.get(key) for key in self.fillable}


class NewsletterCampaignContent(Record):
    """HTML and plain-text content of a campaign."""

    resource_name = "content"


__all__ = [
    "NewsletterCampaign",
    "NewsletterCampaignChecklist",
    "NewsletterCampaignChecklistItem",
    "NewsletterCampaignContent",
]
