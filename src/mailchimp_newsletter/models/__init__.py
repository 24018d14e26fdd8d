# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Record types and record infrastructure for MailChimp resources.

- :class:`~mailchimp_newsletter.models.record.Record`: base class with dict-like access and the persistence lifecycle.
- :class:`~mailchimp_newsletter.models.attributes.AttributeStore`: attribute state, mass assignment and dirtiness.
- :mod:`~mailchimp_newsletter.models.paths`: API path derivation from the parent chain.
- :mod:`~mailchimp_newsletter.models.lists`, :mod:`~mailchimp_newsletter.models.campaigns`,
  :mod:`~mailchimp_newsletter.models.templates`: concrete MailChimp resources.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
