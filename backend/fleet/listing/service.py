"""Endpoint listing pipeline: groups -> retrieval -> visibility -> redaction."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..errors import ListingFailed, SecurityContextUnavailable, StoreUnavailable
from ..storage.endpoint_store import EndpointStore
from .models import FilterQuery, Listing
from .redaction import hide_fields
from .retrieval import retrieve
from .visibility import SecurityContext, filter_endpoints

logger = logging.getLogger("fleet.listing")

SecurityResolver = Callable[[Any], SecurityContext]


class EndpointListingService:
    """Holds the store and security resolver; one instance serves every request."""

    def __init__(self, store: EndpointStore, resolve_security: SecurityResolver) -> None:
        self.store = store
        self.resolve_security = resolve_security

    def list_endpoints(self, query: FilterQuery, request: Any) -> Listing:
        """Return the visible, redacted endpoints for *query*.

        total_count comes from the retrieval step and is not reduced by the
        visibility filter.
        """
        try:
            groups = self.store.endpoint_groups()
        except StoreUnavailable as exc:
            raise ListingFailed("Unable to retrieve endpoint groups from the database") from exc

        try:
            listing = retrieve(self.store, query, groups)
        except StoreUnavailable as exc:
            raise ListingFailed("Unable to retrieve endpoint data") from exc

        try:
            context = self.resolve_security(request)
        except SecurityContextUnavailable as exc:
            raise ListingFailed("Unable to retrieve info from request context") from exc

        visible = filter_endpoints(listing.endpoints, groups, context)
        for endpoint in visible:
            hide_fields(endpoint)

        logger.debug(
            "Listed %d/%d endpoint(s) for user %s (total_count=%d)",
            len(visible),
            len(listing.endpoints),
            context.user_id,
            listing.total_count,
        )
        return Listing(endpoints=visible, total_count=listing.total_count)
