# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Email templates."""

from __future__ import annotations

from .record import Record


class Template(Record):
    """
    A user template.

    Example::

        template = Template({"name": "Monthly", "html": "<p>*|MC:SUBJECT|*</p>"}, client=client)
        template.save()
    """

    resource_name = "templates"
    fillable = ("name", "html")
    dates = ("date_created",)


__all__ = ["Template"]
