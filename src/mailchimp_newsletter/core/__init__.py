# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Core infrastructure components for the MailChimp newsletter package.

This module contains the foundational components including configuration,
the HTTP client, the transport contract, telemetry, and error handling.
"""

from .results import Page

__all__ = ["Page"]
