# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Internal helpers."""

__all__ = []
