# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Data access layer for the MailChimp newsletter package.

This module contains the default transport that speaks to the MailChimp
Marketing API over HTTP.
"""

__all__ = []
