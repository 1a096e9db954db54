"""Endpoint retrieval: filtered (paginate in memory) or paginated (page + count)."""

from __future__ import annotations

import logging
from typing import List, Sequence, TypeVar

from ..storage.endpoint_store import EndpointStore
from .group_filter import filter_groups
from .models import EndpointGroup, FilterQuery, Listing, RetrievalMode

logger = logging.getLogger("fleet.listing")

T = TypeVar("T")


def paginate(items: Sequence[T], offset: int, limit: int) -> List[T]:
    """Keep items at index idx with offset <= idx < offset+limit. limit == 0 keeps everything."""
    page: List[T] = []
    for idx, item in enumerate(items):
        if limit == 0 or (idx >= offset and idx < offset + limit):
            page.append(item)
    return page


def retrieve_filtered(store: EndpointStore, query: FilterQuery, groups: List[EndpointGroup]) -> Listing:
    matching_groups = filter_groups(groups, query.filter)
    matched = store.endpoints_filtered(query.filter, matching_groups)
    logger.debug(
        "Filter %r matched %d group(s), %d endpoint(s)",
        query.filter,
        len(matching_groups),
        len(matched),
    )
    return Listing(endpoints=paginate(matched, query.offset, query.limit), total_count=len(matched))


def retrieve_paginated(store: EndpointStore, query: FilterQuery) -> Listing:
    # Page and count are separate reads; a concurrent write between them can skew the pair.
    page = store.endpoints_paginated(query.offset, query.limit)
    total = store.endpoint_count()
    return Listing(endpoints=page, total_count=total)


def retrieve(store: EndpointStore, query: FilterQuery, groups: List[EndpointGroup]) -> Listing:
    mode = query.mode
    logger.debug("Retrieving endpoints (mode=%s offset=%d limit=%d)", mode.value, query.offset, query.limit)
    if mode is RetrievalMode.FILTERED:
        return retrieve_filtered(store, query, groups)
    return retrieve_paginated(store, query)
