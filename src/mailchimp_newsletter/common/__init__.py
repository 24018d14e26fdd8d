# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Common constants shared across the MailChimp newsletter package."""
