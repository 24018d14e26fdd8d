# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

from __future__ import annotations

import dataclasses
from typing import Optional, Type

import requests

from .core._error_codes import CONFIG_INTEREST_CATEGORY_MISSING
from .core.config import MailChimpConfig
from .core.errors import ListNotConfiguredError
from .core.transport import Transport
from .data._api import _MailChimpApi, subscriber_hash
from .models.events import EventDispatcher
from .models.lists import InterestCategory, NewsletterList
from .models.record import Record
from .operations.handler import ResourceHandler


class MailChimpClient:
    """
    High-level client for the MailChimp Marketing API.

    The client binds records to a transport, a configuration and an event
    dispatcher. It lazily builds the default HTTP transport on first use.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager pools connections in one
        :class:`requests.Session`::

            with MailChimpClient("0123456789abcdef-us10") as client:
                lst = client.default_list()
                for member in lst.subscribers:
                    print(member["email_address"])

    **Without Context Manager**:
        Call ``close()`` when done::

            client = MailChimpClient(config=MailChimpConfig.from_env())
            try:
                campaigns = client.records(NewsletterCampaign).list(count=5)
            finally:
                client.close()

    :param api_key: MailChimp API key (``<key>-<data center>``). Overrides the
        key of ``config``.
    :type api_key: :class:`str` or None
    :param config: Configuration. Defaults to
        :meth:`~mailchimp_newsletter.core.config.MailChimpConfig.from_env`.
    :type config: ~mailchimp_newsletter.core.config.MailChimpConfig or None
    :param transport: Transport to use instead of the default HTTP transport.
    :type transport: ~mailchimp_newsletter.core.transport.Transport or None

    .. note::
        The API key is validated when the default transport is first built, so
        constructing a client makes no network call and raises nothing.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[MailChimpConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        config = config or MailChimpConfig.from_env()
        if api_key:
            config = dataclasses.replace(config, api_key=api_key)
        self._config = config
        self._transport = transport
        self._owns_transport = transport is None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False
        self.events = EventDispatcher()

    def __enter__(self) -> "MailChimpClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. A default transport
        built before entering is replaced by one sending through the session.

        :return: The client instance.
        :rtype: MailChimpClient
        """
        if self._session is None and self._owns_transport:
            self._session = requests.Session()
            self._owns_session = True
            if self._transport is not None:
                self._transport.close()
                self._transport = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the client and release resources.

        Closes the default transport and the HTTP session (if any). A transport
        passed in by the caller is left open. Safe to call multiple times.
        """
        if self._transport is not None and self._owns_transport:
            self._transport.close()
            self._transport = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    @property
    def config(self) -> MailChimpConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._get_transport()

    def _get_transport(self) -> Transport:
        """
        Get or create the transport.

        :raises ValueError: If the configured API key is missing or malformed.
        """
        if self._transport is None:
            self._transport = _MailChimpApi(self._config, session=self._session)
        return self._transport

    # ---------------------------------------------------------- records
    def records(self, model_cls: Type[Record], parent: Optional[Record] = None) -> ResourceHandler:
        """
        Handler for a collection of records.

        :param model_cls: Record type, e.g. ``NewsletterListMember``.
        :param parent: Owning record, e.g. the list of members.
        :rtype: ~mailchimp_newsletter.operations.handler.ResourceHandler

        Example::

            members = client.records(NewsletterListMember, parent=client.list_reference())
            page = members.paginate(per_page=50)
        """
        return model_cls.query(self, parent=parent)

    def list_reference(self, name: Optional[str] = None) -> NewsletterList:
        """
        A configured list addressed by its id, without fetching it.

        :param name: Local list name. Defaults to the configured default list.
        :raises ~mailchimp_newsletter.core.errors.ListNotConfiguredError: If the
            list is not configured.
        """
        return NewsletterList(self._config.list_config(name).id, client=self)

    def default_list(self, name: Optional[str] = None) -> Optional[NewsletterList]:
        """
        Fetch a configured list.

        :param name: Local list name. Defaults to the configured default list.
        :return: The list, or ``None`` if MailChimp does not return it.
        :raises ~mailchimp_newsletter.core.errors.ListNotConfiguredError: If the
            list is not configured.
        """
        list_id = self._config.list_config(name).id
        return self.records(NewsletterList).find(list_id)

    def interest_category_reference(
        self,
        list_name: Optional[str] = None,
        interest_category_id: Optional[str] = None,
    ) -> InterestCategory:
        """
        An interest category addressed by its id, without fetching it.

        :param list_name: Local list name. Defaults to the configured default list.
        :param interest_category_id: Category id. Defaults to the list's
            configured default interest category.
        :raises ~mailchimp_newsletter.core.errors.ListNotConfiguredError: If the
            list is not configured or has no default interest category.
        """
        list_config = self._config.list_config(list_name)
        category_id = interest_category_id or list_config.default_interest_category_id
        if not category_id:
            raise ListNotConfiguredError(
                f"List `{list_config.name}` has no default interest category.",
                subcode=CONFIG_INTEREST_CATEGORY_MISSING,
                details={"name": list_config.name},
            )
        return InterestCategory(category_id, client=self, parent=NewsletterList(list_config.id, client=self))

    def default_interest_category(
        self,
        list_name: Optional[str] = None,
        interest_category_id: Optional[str] = None,
    ) -> Optional[InterestCategory]:
        """Fetch the configured default interest category of a list."""
        reference = self.interest_category_reference(list_name, interest_category_id)
        return reference.handler().find(reference.get_key())

    @staticmethod
    def subscriber_hash(email: Optional[str]) -> Optional[str]:
        """MD5 hash of the lower-cased email address, as used in member paths."""
        return subscriber_hash(email)


__all__ = ["MailChimpClient"]
