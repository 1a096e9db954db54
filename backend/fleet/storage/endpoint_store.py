"""Read-only endpoint/group queries used by the listing pipeline.

Rows are converted to detached domain values; any SQLAlchemy failure is
re-raised as StoreUnavailable with the original error chained, as are rows
that cannot be converted.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Protocol, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..errors import StoreUnavailable
from ..listing.models import (
    AzureCredentials,
    Endpoint,
    EndpointGroup,
    EndpointStatus,
    EndpointType,
    Snapshot,
    TLSConfig,
)
from .models import EndpointGroupRow, EndpointRow

logger = logging.getLogger("fleet.storage.endpoints")

T = TypeVar("T")

STATUS_KEYWORDS = {s.value for s in EndpointStatus}


class EndpointStore(Protocol):
    def endpoint_groups(self) -> List[EndpointGroup]: ...

    def endpoints_filtered(self, filter: str, groups: List[EndpointGroup]) -> List[Endpoint]: ...

    def endpoints_paginated(self, offset: int, limit: int) -> List[Endpoint]: ...

    def endpoint_count(self) -> int: ...


def _id_set(values: Any) -> frozenset:
    if not isinstance(values, list):
        return frozenset()
    return frozenset(int(v) for v in values)


def group_from_row(row: EndpointGroupRow) -> EndpointGroup:
    return EndpointGroup(
        id=row.id,
        name=row.name or "",
        description=row.description or "",
        tags=list(row.tags or []),
        user_access=_id_set(row.user_access),
        team_access=_id_set(row.team_access),
    )


def _snapshot_from_json(data: dict) -> Snapshot:
    return Snapshot(
        time=int(data.get("time") or 0),
        docker_version=data.get("docker_version") or "",
        total_cpu=int(data.get("total_cpu") or 0),
        total_memory=int(data.get("total_memory") or 0),
        running_container_count=int(data.get("running_container_count") or 0),
        stopped_container_count=int(data.get("stopped_container_count") or 0),
        volume_count=int(data.get("volume_count") or 0),
        image_count=int(data.get("image_count") or 0),
        raw=dict(data.get("raw") or {}),
    )


def endpoint_from_row(row: EndpointRow) -> Endpoint:
    tls = row.tls_config or {}
    azure = row.azure_credentials or {}
    return Endpoint(
        id=row.id,
        name=row.name or "",
        group_id=row.group_id,
        type=EndpointType(row.type or EndpointType.DOCKER.value),
        url=row.url or "",
        public_url=row.public_url or "",
        status=EndpointStatus(row.status or EndpointStatus.UP.value),
        tags=list(row.tags or []),
        tls_config=TLSConfig(
            tls=bool(tls.get("tls", False)),
            skip_verify=bool(tls.get("skip_verify", False)),
            ca_cert_path=tls.get("ca_cert_path"),
            cert_path=tls.get("cert_path"),
            key_path=tls.get("key_path"),
        ),
        azure_credentials=AzureCredentials(
            application_id=azure.get("application_id") or "",
            tenant_id=azure.get("tenant_id") or "",
            authentication_key=azure.get("authentication_key") or "",
        ),
        snapshots=[_snapshot_from_json(s) for s in (row.snapshots or []) if isinstance(s, dict)],
        user_access=_id_set(row.user_access),
        team_access=_id_set(row.team_access),
    )


def tags_match(tags: Any, filter: str) -> bool:
    if not isinstance(tags, list):
        return False
    return any(filter in str(tag).lower() for tag in tags)


def _direct_match(filter: str, group_ids: Iterable[int]):
    """SQL condition for group membership, name/URL substring, or an exact status keyword."""
    conditions = [
        EndpointRow.group_id.in_(list(group_ids)),
        func.lower(EndpointRow.name).contains(filter, autoescape=True),
        func.lower(EndpointRow.url).contains(filter, autoescape=True),
    ]
    if filter in STATUS_KEYWORDS:
        conditions.append(EndpointRow.status == filter)
    return or_(*conditions)


class SqlEndpointStore:
    """EndpointStore over a SQLAlchemy sessionmaker. Each call uses its own session."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _read(self, what: str, fn: Callable[[Session], T]) -> T:
        db: Session = self._session_factory()
        try:
            return fn(db)
        except SQLAlchemyError as exc:
            logger.warning("Store read failed (%s): %s", what, exc)
            raise StoreUnavailable(f"Unable to read {what}") from exc
        except (ValueError, TypeError, OverflowError) as exc:
            # Out-of-range parameters or rows that do not convert to domain values
            logger.warning("Store returned unusable data (%s): %s", what, exc)
            raise StoreUnavailable(f"Unable to read {what}") from exc
        finally:
            db.close()

    def endpoint_groups(self) -> List[EndpointGroup]:
        def query(db: Session) -> List[EndpointGroup]:
            rows = db.execute(select(EndpointGroupRow).order_by(EndpointGroupRow.id)).scalars().all()
            return [group_from_row(r) for r in rows]

        return self._read("endpoint groups", query)

    def endpoints_filtered(self, filter: str, groups: List[EndpointGroup]) -> List[Endpoint]:
        """All endpoints matching *filter* or belonging to one of *groups*, in id order; no pagination.

        An endpoint matches on its own name, URL or any tag (substring, case-insensitive),
        or on its status when *filter* is exactly "up" or "down".
        """
        direct = _direct_match(filter, {g.id for g in groups})

        def query(db: Session) -> List[Endpoint]:
            # Tags live in a JSON column; only (id, tags) of the remaining rows are scanned here.
            tag_rows = db.execute(select(EndpointRow.id, EndpointRow.tags).where(~direct)).all()
            tag_ids = [row.id for row in tag_rows if tags_match(row.tags, filter)]
            stmt = select(EndpointRow).where(or_(direct, EndpointRow.id.in_(tag_ids))).order_by(EndpointRow.id)
            return [endpoint_from_row(r) for r in db.execute(stmt).scalars().all()]

        return self._read("filtered endpoints", query)

    def endpoints_paginated(self, offset: int, limit: int) -> List[Endpoint]:
        """One page in id order. limit == 0 returns every endpoint and ignores offset."""

        def query(db: Session) -> List[Endpoint]:
            stmt = select(EndpointRow).order_by(EndpointRow.id)
            if limit > 0:
                stmt = stmt.offset(offset).limit(limit)
            return [endpoint_from_row(r) for r in db.execute(stmt).scalars().all()]

        return self._read("endpoint page", query)

    def endpoint_count(self) -> int:
        def query(db: Session) -> int:
            return int(db.execute(select(func.count()).select_from(EndpointRow)).scalar_one())

        return self._read("endpoint count", query)
