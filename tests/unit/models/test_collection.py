# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Unit tests for RecordCollection."""

import unittest

import pandas as pd

from mailchimp_newsletter.data._api import subscriber_hash
from mailchimp_newsletter.models.collection import RecordCollection
from mailchimp_newsletter.models.lists import NewsletterListMember
from mailchimp_newsletter.models.templates import Template


def loaded(cls, attributes):
    return cls().new_instance(attributes, exists=True)


class TestRecordCollection(unittest.TestCase):
    """Test cases for RecordCollection."""

    def setUp(self):
        self.members = RecordCollection(
            [
                loaded(NewsletterListMember, {"id": "h1", "email_address": "a@b.com", "status": "subscribed",
                                              "last_changed": "2021-06-01T12:00:00+00:00"}),
                loaded(NewsletterListMember, {"id": "h2", "email_address": "c@d.com", "status": "unsubscribed",
                                              "last_changed": ""}),
            ]
        )

    def test_is_a_list(self):
        self.assertIsInstance(self.members, list)
        self.assertEqual(len(self.members), 2)

    def test_find_by_key(self):
        self.assertIs(self.members.find("c@d.com"), self.members[1])

    def test_find_by_route_key(self):
        self.assertIs(self.members.find(subscriber_hash("a@b.com")), self.members[0])

    def test_find_by_record(self):
        self.assertIs(self.members.find(self.members[1]), self.members[1])

    def test_find_missing_returns_default(self):
        self.assertIsNone(self.members.find("x@y.com"))
        self.assertEqual(self.members.find("x@y.com", default="none"), "none")

    def test_filter_returns_collection(self):
        subscribed = self.members.filter(lambda m: m.is_subscribed())
        self.assertIsInstance(subscribed, RecordCollection)
        self.assertEqual(subscribed.keys(), ["a@b.com"])

    def test_pluck(self):
        self.assertEqual(self.members.pluck("status"), ["subscribed", "unsubscribed"])

    def test_first(self):
        self.assertIs(self.members.first(), self.members[0])
        self.assertIsNone(RecordCollection().first())

    def test_to_list(self):
        rows = self.members.to_list()
        self.assertEqual(rows[0]["email_address"], "a@b.com")
        self.assertEqual(rows[1]["last_changed"], "")

    def test_to_dataframe(self):
        df = self.members.to_dataframe(columns=["email_address", "status", "last_changed"])
        self.assertIsInstance(df, pd.DataFrame)
        self.assertEqual(list(df.columns), ["email_address", "status", "last_changed"])
        self.assertEqual(df.loc[0, "last_changed"], pd.Timestamp("2021-06-01T12:00:00", tz="UTC"))
        self.assertTrue(pd.isna(df.loc[1, "last_changed"]))

    def test_to_dataframe_without_dates(self):
        templates = RecordCollection([loaded(Template, {"id": 1, "name": "Monthly"})])
        df = templates.to_dataframe()
        self.assertEqual(df.loc[0, "name"], "Monthly")

    def test_empty_to_dataframe(self):
        df = RecordCollection().to_dataframe(columns=["id"])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), ["id"])
