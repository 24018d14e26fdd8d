# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..common.constants import DEFAULT_LIST_NAME, DEFAULT_PAGE_SIZE
from .errors import ListNotConfiguredError
from .telemetry import TelemetryConfig


@dataclass(frozen=True)
class ListConfig:
    """
    A named MailChimp audience list and its default interest scoping.

    :param name: Local name used to refer to the list in calls and configuration.
    :type name: str
    :param id: Remote MailChimp list id.
    :type id: str or None
    :param default_interest_category_id: Interest category used when an interest has no explicit category.
    :type default_interest_category_id: str or None
    :param default_interest_id: Interest used by default for new members of this list.
    :type default_interest_id: str or None
    """

    name: str
    id: Optional[str] = None
    default_interest_category_id: Optional[str] = None
    default_interest_id: Optional[str] = None


@dataclass(frozen=True)
class MailChimpConfig:
    """
    Configuration settings for MailChimp client operations.

    :param api_key: MailChimp API key, including the data center suffix (``<key>-us10``).
    :type api_key: str or None
    :param verify_ssl: Whether TLS certificates are verified (default: True).
    :type verify_ssl: bool
    :param default_list_name: Name of the list used when a call does not name one.
    :type default_list_name: str
    :param lists: Configured lists keyed by their local name.
    :type lists: dict[str, ListConfig]
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param default_page_size: Number of items requested per listing call when none is given.
    :type default_page_size: int
    :param telemetry: Optional telemetry settings; telemetry is disabled when None.
    :type telemetry: TelemetryConfig or None
    """
    api_key: Optional[str] = None
    verify_ssl: bool = True
    default_list_name: str = DEFAULT_LIST_NAME
    lists: Mapping[str, ListConfig] = field(default_factory=dict)

    http_timeout: Optional[float] = None
    default_page_size: int = DEFAULT_PAGE_SIZE

    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MailChimpConfig":
        """
        Create a configuration instance from ``MAILCHIMP_*`` environment variables.

        A single list is configured under ``MAILCHIMP_DEFAULT_LIST_NAME``
        (default ``"subscribers"``) with the default list and interest ids.

        :param environ: Mapping to read instead of :data:`os.environ`.
        :return: Configuration instance.
        :rtype: ~mailchimp_newsletter.core.config.MailChimpConfig
        """
        env = os.environ if environ is None else environ
        list_name = env.get("MAILCHIMP_DEFAULT_LIST_NAME") or DEFAULT_LIST_NAME
        default_list = ListConfig(
            name=list_name,
            id=env.get("MAILCHIMP_DEFAULT_LIST_ID"),
            default_interest_category_id=env.get("MAILCHIMP_DEFAULT_INTEREST_CATEGORY_ID"),
            default_interest_id=env.get("MAILCHIMP_DEFAULT_INTEREST_ID"),
        )
        verify = (env.get("MAILCHIMP_VERIFY_SSL") or "true").strip().lower() not in ("0", "false", "no", "off")
        return cls(
            api_key=env.get("MAILCHIMP_API_KEY"),
            verify_ssl=verify,
            default_list_name=list_name,
            lists={list_name: default_list},
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
        )

    def list_config(self, name: Optional[str] = None) -> ListConfig:
        """
        Resolve a configured list by its local name.

        An empty or missing name resolves to the default list.

        :param name: Local list name.
        :type name: str or None
        :return: The matching list configuration.
        :rtype: ListConfig
        :raises ListNotConfiguredError: If no list with that name (or no default list) is configured.
        """
        if not name:
            found = self.lists.get(self.default_list_name)
            if found is None:
                raise ListNotConfiguredError.default_list_does_not_exist(self.default_list_name)
            return found
        found = self.lists.get(name)
        if found is None:
            raise ListNotConfiguredError.no_list_with_name(name)
        return found

    @staticmethod
    def lists_from_mapping(lists: Mapping[str, Mapping[str, Optional[str]]]) -> Dict[str, ListConfig]:
        """
        Build :class:`ListConfig` entries from a plain nested mapping.

        Example::

            MailChimpConfig(
                api_key="key-us10",
                lists=MailChimpConfig.lists_from_mapping({
                    "subscribers": {"id": "abc123", "default_interest_category_id": "cat1"},
                }),
            )
        """
        return {
            name: ListConfig(
                name=name,
                id=props.get("id"),
                default_interest_category_id=props.get("default_interest_category_id"),
                default_interest_id=props.get("default_interest_id"),
            )
            for name, props in lists.items()
        }
