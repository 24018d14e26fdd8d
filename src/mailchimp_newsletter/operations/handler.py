# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""Resource operations for one record type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Union

from ..common.constants import SEARCH_PATH_PREFIX
from ..core._error_codes import OPERATION_MISSING_ROUTE_KEY, OPERATION_NOT_SEARCHABLE
from ..core.errors import ApiError, InvalidOperationError
from ..core.results import Page
from ..models.attributes import is_empty
from ..models.collection import RecordCollection
from ..models.paths import collection_path, item_path

if TYPE_CHECKING:
    from ..core.transport import Transport
    from ..models.record import Record

_logger = logging.getLogger(__name__)


class ResourceHandler:
    """
    API operations for the record type of ``model``.

    A handler manages one record: :meth:`insert`, :meth:`update` and
    :meth:`delete` act on it, while :meth:`list`, :meth:`find` and
    :meth:`search` use it as the template (type, client and parent) for the
    records they build. Obtain handlers through
    :meth:`~mailchimp_newsletter.client.MailChimpClient.records`,
    :meth:`Record.query <mailchimp_newsletter.models.record.Record.query>` or
    :meth:`Record.handler <mailchimp_newsletter.models.record.Record.handler>`.

    Every operation issues blocking requests through the client's transport;
    a failed call raises :class:`~mailchimp_newsletter.core.errors.ApiError`,
    except in :meth:`find`, which reports ``None``.

    Example:
        List, page and look up list members::

            members = client.records(NewsletterListMember, parent=lst)
            first_page = members.list(count=25, fields=["members.email_address"])
            page_two = members.paginate(per_page=25, page=2)
            ada = members.find("ada@example.com")
    """

    def __init__(self, model: "Record") -> None:
        """
        Initialize the handler.

        :param model: The record this handler manages.
        :type model: ~mailchimp_newsletter.models.record.Record
        """
        self.model = model

    @property
    def transport(self) -> "Transport":
        return self.model.get_client().transport

    @property
    def _page_size(self) -> int:
        return self.model.get_client().config.default_page_size

    def for_parent(self, parent: Optional["Record"]) -> "ResourceHandler":
        """Bind the managed record to ``parent`` and return this handler."""
        self.model.set_parent(parent)
        return self

    def _new_record(self, attributes: Any) -> "Record":
        return self.model.new_instance(attributes if isinstance(attributes, Mapping) else None, exists=True)

    def _search_candidate(self, attributes: Any) -> "Record":
        # search spans lists, so a hit resolves its parent from its own attributes (e.g. list_id)
        candidate = type(self.model)(client=self.model.get_client())
        if isinstance(attributes, Mapping) and attributes:
            candidate.force_fill(attributes)
        candidate.exists = True
        candidate.sync_original()
        return candidate

    @staticmethod
    def _query_params(
        fields: Optional[Sequence[str]] = None,
        offset: int = 0,
        count: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if count is not None:
            params["count"] = count
        if fields:
            params["fields"] = ",".join(fields)
        if offset:
            params["offset"] = offset
        return params

    # ----------------------------------------------------------- listing
    def list(
        self,
        count: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        offset: int = 0,
    ) -> RecordCollection:
        """
        Fetch records from the collection.

        :param count: Number of records to fetch. Defaults to the configured page size.
        :type count: int or None
        :param fields: Response fields to include, e.g. ``["members.email_address"]``.
        :type fields: Sequence[str] or None
        :param offset: Number of records to skip.
        :type offset: int
        :return: The records, each marked as existing.
        :rtype: ~mailchimp_newsletter.models.collection.RecordCollection
        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        """
        params = self._query_params(fields, offset, count or self._page_size)
        response = self.get_path(collection_path(self.model), params)
        items = []
        if isinstance(response, Mapping):
            items = response.get(self.model.get_response_name()) or []
        return RecordCollection(self._new_record(attributes) for attributes in items)

    all = list

    def paginate(
        self,
        per_page: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        page_name: str = "page",
        page: int = 1,
    ) -> Page:
        """
        Fetch one page of records.

        :param per_page: Page size. Defaults to the configured page size.
        :param page: 1-based page number.
        :return: The page; its ``total`` is ``len(items) + offset``.
        :rtype: ~mailchimp_newsletter.core.results.Page
        """
        per_page = per_page or self._page_size
        page = max(int(page or 1), 1)
        offset = (page - 1) * per_page
        items = self.list(per_page, fields, offset)
        return Page(items=items, total=len(items) + offset, per_page=per_page, current_page=page, page_name=page_name)

    # ----------------------------------------------------------- lookup
    def find(self, key: Any, fields: Optional[Sequence[str]] = None) -> Optional["Record"]:
        """
        Fetch one record by key.

        Any API or network failure is reported as ``None``; use
        :meth:`find_or_fail` to tell a missing record from a failed call.

        :param key: Route key value, e.g. a list id or a member's email address.
        :return: The record, or ``None``.
        """
        try:
            return self.find_or_fail(key, fields)
        except ApiError as exc:
            _logger.debug("%s %r could not be retrieved: %s", type(self.model).__name__, key, exc.error)
            return None

    def find_or_fail(self, key: Any, fields: Optional[Sequence[str]] = None) -> "Record":
        """
        Fetch one record by key.

        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        :raises ~mailchimp_newsletter.core.errors.InvalidOperationError: If
            ``key`` does not resolve to a route key.
        """
        self.model.set_route_key(key)
        self._require_route_key()
        response = self.get_path(item_path(self.model), self._query_params(fields))
        return self._new_record(response)

    def exists(self, key: Any) -> bool:
        return self.find(key, fields=[self.model.route_key_name]) is not None

    def fetch_singleton(self, fields: Optional[Sequence[str]] = None) -> "Record":
        """
        Fetch the single record living at the collection path, e.g. a campaign's content.

        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        """
        response = self.get_path(collection_path(self.model), self._query_params(fields))
        return self._new_record(response)

    # ----------------------------------------------------------- search
    def search(
        self,
        query: str,
        list_scope: Union[str, "Record", None] = None,
        fields: Optional[Sequence[str]] = None,
        offset: int = 0,
        count: Optional[int] = None,
    ) -> RecordCollection:
        """
        Free-text search over the record type.

        Search results can include records deleted recently; each candidate is
        confirmed with :meth:`find` on its own key and dropped if that fails.
        Confirmation runs serially, one request per candidate, and keeps the
        order of the search results.
        Candidates do not inherit this handler's parent; a member hit is
        confirmed in the list named by its own ``list_id``.

        :param query: Search terms.
        :param list_scope: List id or list record restricting the search.
        :raises ~mailchimp_newsletter.core.errors.InvalidOperationError: If the
            record type is not searchable.
        :raises ~mailchimp_newsletter.core.errors.ApiError: If the search request fails.
        """
        capability = self.model.searchable
        if capability is None:
            raise InvalidOperationError(
                f"{type(self.model).__name__} does not support search.",
                subcode=OPERATION_NOT_SEARCHABLE,
            )
        params = self._query_params(fields, offset, count)
        params["query"] = query
        list_id = list_scope if isinstance(list_scope, str) or list_scope is None else list_scope.get_route_key()
        if list_id:
            params["list_id"] = list_id

        response = self.get_path(f"{SEARCH_PATH_PREFIX}{self.model.get_resource_name()}", params)
        results = RecordCollection()
        for result in capability.results_from_response(response):
            candidate = self._search_candidate(capability.attributes_from_result(result))
            key = candidate.get_key()
            if is_empty(key) or candidate.handler().find(key) is None:
                _logger.debug("Dropping %s search result %r that cannot be retrieved", type(candidate).__name__, key)
                continue
            results.append(candidate)
        return results

    def search_paginate(
        self,
        query: str,
        per_page: Optional[int] = None,
        page: int = 1,
        list_scope: Union[str, "Record", None] = None,
        fields: Optional[Sequence[str]] = None,
        page_name: str = "page",
    ) -> Page:
        """One page of :meth:`search` results."""
        per_page = per_page or self._page_size
        page = max(int(page or 1), 1)
        offset = (page - 1) * per_page
        items = self.search(query, list_scope, fields, offset, count=per_page)
        return Page(items=items, total=len(items) + offset, per_page=per_page, current_page=page, page_name=page_name)

    # ----------------------------------------------------------- writes
    def insert(self) -> Any:
        """
        Create the managed record with a POST to its collection path.

        The response is filled back into the record, which is then marked as
        existing and recently created.

        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        """
        response = self.post_path(collection_path(self.model), self.model.to_dict())
        if isinstance(response, Mapping):
            self.model.force_fill(response)
        self.model.exists = True
        self.model.was_recently_created = True
        return response

    def update(self) -> Any:
        """
        Send the managed record's attributes with a PATCH to its item path.

        A record without changes is not sent and counts as a success.

        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        """
        if not self.model.is_dirty():
            return True
        self._require_route_key()
        self.model.sync_changes()
        response = self.patch_path(item_path(self.model), self.model.to_dict())
        if isinstance(response, Mapping):
            self.model.force_fill(response)
        self.model.exists = True
        self.model.sync_original()
        return response

    def delete(self) -> Any:
        """
        Delete the managed record with a DELETE on its item path.

        :raises ~mailchimp_newsletter.core.errors.ApiError: If the request fails.
        """
        self._require_route_key()
        response = self.delete_path(item_path(self.model))
        self.model.exists = False
        return response

    def action(self, name: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """POST to one of the managed record's ``actions/<name>`` endpoints."""
        self._require_route_key()
        return self.post_path(f"{item_path(self.model)}/actions/{name}", body)

    def _require_route_key(self) -> None:
        if is_empty(self.model.get_route_key()):
            raise InvalidOperationError(
                f"No route key defined on {type(self.model).__name__}.",
                subcode=OPERATION_MISSING_ROUTE_KEY,
            )

    # ----------------------------------------------------------- raw verbs
    def get_path(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.handle_response(self.transport.get(path, params or None))

    def post_path(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.handle_response(self.transport.post(path, body))

    def patch_path(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.handle_response(self.transport.patch(path, body))

    def put_path(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.handle_response(self.transport.put(path, body))

    def delete_path(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.handle_response(self.transport.delete(path, body))

    def handle_response(self, response: Any) -> Any:
        """
        Check the outcome of the transport's last call.

        :return: The decoded body, or ``True`` for a successful call with an empty body.
        :raises ~mailchimp_newsletter.core.errors.ApiError: If the call failed.
        """
        transport = self.transport
        if not transport.last_success():
            raise ApiError(
                transport.last_error(),
                request_body=transport.last_request_body(),
                response_body=transport.last_response_body(),
                status_code=transport.last_status_code(),
            )
        if is_empty(response):
            return True
        return response


__all__ = ["ResourceHandler"]
