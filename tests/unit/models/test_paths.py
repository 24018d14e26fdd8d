# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Unit tests for API path derivation."""

import pytest

from mailchimp_newsletter.core.errors import InvalidOperationError
from mailchimp_newsletter.data._api import subscriber_hash
from mailchimp_newsletter.models.campaigns import NewsletterCampaign, NewsletterCampaignContent
from mailchimp_newsletter.models.lists import (
    Interest,
    InterestCategory,
    NewsletterList,
    NewsletterListMember,
)
from mailchimp_newsletter.models.paths import collection_path, item_path, parent_chain


class TestPaths:
    def test_item_path_without_parent(self):
        assert item_path(NewsletterList("abc")) == "lists/abc"

    def test_item_path_with_parent(self):
        category = InterestCategory("abc", parent=NewsletterList("P1"))
        assert item_path(category) == "lists/P1/interest-categories/abc"

    def test_collection_path_without_parent(self):
        assert collection_path(NewsletterCampaign()) == "campaigns"

    def test_record_without_key_uses_collection_path(self):
        assert item_path(NewsletterCampaign()) == "campaigns"

    def test_three_level_chain_is_outermost_first(self):
        category = InterestCategory("cat1", parent=NewsletterList("L1"))
        interest = Interest("int1", parent=category)
        assert item_path(interest) == "lists/L1/interest-categories/cat1/interests/int1"
        assert parent_chain(interest) == [category.get_parent(), category]

    def test_member_path_uses_subscriber_hash(self):
        member = NewsletterListMember({"email_address": "A@B.com"}, parent=NewsletterList("L1"))
        assert item_path(member) == f"lists/L1/members/{subscriber_hash('a@b.com')}"

    def test_path_follows_parent_key_changes(self):
        lst = NewsletterList("old")
        content = NewsletterCampaignContent(parent=NewsletterCampaign("c1"))
        category = InterestCategory("cat", parent=lst)
        assert item_path(category) == "lists/old/interest-categories/cat"
        lst.set_key("new")
        assert item_path(category) == "lists/new/interest-categories/cat"
        assert collection_path(content) == "campaigns/c1/content"

    def test_cyclic_parent_chain_raises(self):
        first = NewsletterCampaign("c1")
        second = NewsletterCampaignContent(parent=first)
        first.set_parent(second)
        with pytest.raises(InvalidOperationError) as exc:
            collection_path(second)
        assert exc.value.subcode == "operation_cyclic_parent"

    def test_parent_without_key_raises(self):
        member = NewsletterListMember({"email_address": "a@b.com"}, parent=NewsletterList())
        with pytest.raises(InvalidOperationError) as exc:
            item_path(member)
        assert exc.value.subcode == "operation_missing_route_key"
