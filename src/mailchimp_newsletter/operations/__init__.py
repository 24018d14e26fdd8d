# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Operation classes for MailChimp resources.

- ResourceHandler: list, paginate, find, search, insert, update and delete
  for one record type.
"""

__all__ = []
