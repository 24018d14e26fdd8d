# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Unit tests for Page."""

import pytest

from mailchimp_newsletter.core.results import Page


class TestPage:
    def test_defaults(self):
        page = Page()
        assert page.items == []
        assert page.total == 0
        assert page.current_page == 1
        assert page.page_name == "page"
        assert not page.is_full

    def test_iteration_and_length(self):
        page = Page(items=["a", "b"], total=12, per_page=2, current_page=6)
        assert list(page) == ["a", "b"]
        assert len(page) == 2
        assert page.offset == 10
        assert page.is_full

    def test_immutability(self):
        page = Page()
        with pytest.raises(AttributeError):
            page.total = 5
