# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Record-style access to the MailChimp Marketing API.

Start with :class:`~mailchimp_newsletter.client.MailChimpClient` and the record
types in :mod:`mailchimp_newsletter.models.lists`,
:mod:`mailchimp_newsletter.models.campaigns` and
:mod:`mailchimp_newsletter.models.templates`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
