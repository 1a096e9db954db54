"""GET /api/endpoints: endpoints visible to the caller, filtered and paginated."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response
from pydantic import BaseModel

from ..errors import ListingFailed
from ..listing.models import Endpoint, FilterQuery
from ..listing.service import EndpointListingService

router = APIRouter(tags=["endpoints"])
logger = logging.getLogger("fleet.api.endpoints")

TOTAL_COUNT_HEADER = "X-Total-Count"
MAX_COUNT_PARAM = 2**63 - 1
_COUNT_PARAM_RE = re.compile(r"[+-]?[0-9]+")


class SnapshotOut(BaseModel):
    time: int
    docker_version: str
    total_cpu: int
    total_memory: int
    running_container_count: int
    stopped_container_count: int
    volume_count: int
    image_count: int


class TLSOut(BaseModel):
    tls: bool
    skip_verify: bool


class EndpointOut(BaseModel):
    """Public representation. Credentials and raw snapshot payloads have no field here."""

    id: int
    name: str
    type: str
    url: str
    public_url: str
    group_id: int
    status: str
    tags: List[str]
    tls: TLSOut
    snapshots: List[SnapshotOut]


def _get_listing(request: Request) -> EndpointListingService:
    return request.app.state.endpoint_listing


def parse_count_param(raw: Optional[str]) -> int:
    """Non-negative int from a query value.

    Only optionally signed ASCII digits are accepted. Absent, malformed, negative or
    beyond 64-bit values become 0.
    """
    if raw is None:
        return 0
    raw = raw.strip()
    if not _COUNT_PARAM_RE.fullmatch(raw):
        return 0
    value = int(raw)
    if value <= 0 or value > MAX_COUNT_PARAM:
        return 0
    return value


def build_query(start: Optional[str], limit: Optional[str], filter: Optional[str]) -> FilterQuery:
    return FilterQuery(
        filter=(filter or "").lower(),
        start=parse_count_param(start),
        limit=parse_count_param(limit),
    )


def endpoint_to_dict(endpoint: Endpoint) -> Dict[str, Any]:
    out = EndpointOut(
        id=endpoint.id,
        name=endpoint.name,
        type=endpoint.type.value,
        url=endpoint.url,
        public_url=endpoint.public_url,
        group_id=endpoint.group_id,
        status=endpoint.status.value,
        tags=list(endpoint.tags),
        tls=TLSOut(tls=endpoint.tls_config.tls, skip_verify=endpoint.tls_config.skip_verify),
        snapshots=[
            SnapshotOut(
                time=s.time,
                docker_version=s.docker_version,
                total_cpu=s.total_cpu,
                total_memory=s.total_memory,
                running_container_count=s.running_container_count,
                stopped_container_count=s.stopped_container_count,
                volume_count=s.volume_count,
                image_count=s.image_count,
            )
            for s in endpoint.snapshots
        ],
    )
    return out.model_dump()


@router.get("/endpoints")
def list_endpoints(
    request: Request,
    response: Response,
    start: Optional[str] = Query(None, description="1-based index of the first endpoint"),
    limit: Optional[str] = Query(None, description="Page size; 0 or absent means unlimited"),
    filter: Optional[str] = Query(None, description="Case-insensitive text matched against endpoints and groups"),
) -> List[Dict[str, Any]]:
    """Return endpoints visible to the caller. Total match count is sent in X-Total-Count."""
    query = build_query(start, limit, filter)
    try:
        listing = _get_listing(request).list_endpoints(query, request)
    except ListingFailed as exc:
        logger.exception("%s: %s", exc.detail, exc.__cause__)
        raise HTTPException(status_code=500, detail=exc.detail) from exc

    response.headers[TOTAL_COUNT_HEADER] = str(listing.total_count)
    return [endpoint_to_dict(e) for e in listing.endpoints]
