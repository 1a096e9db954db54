"""Detached domain values handed through the listing pipeline.

The store converts ORM rows into these so that redaction can clear fields in
place without the session ever seeing the change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class EndpointType(str, Enum):
    DOCKER = "docker"
    AGENT = "agent"
    AZURE = "azure"


class EndpointStatus(str, Enum):
    UP = "up"
    DOWN = "down"


class RetrievalMode(str, Enum):
    FILTERED = "filtered"
    PAGINATED = "paginated"


@dataclass
class TLSConfig:
    tls: bool = False
    skip_verify: bool = False
    ca_cert_path: Optional[str] = None
    cert_path: Optional[str] = None
    key_path: Optional[str] = None


@dataclass
class AzureCredentials:
    application_id: str = ""
    tenant_id: str = ""
    authentication_key: str = ""

    def is_empty(self) -> bool:
        return not (self.application_id or self.tenant_id or self.authentication_key)


@dataclass
class Snapshot:
    time: int = 0
    docker_version: str = ""
    total_cpu: int = 0
    total_memory: int = 0
    running_container_count: int = 0
    stopped_container_count: int = 0
    volume_count: int = 0
    image_count: int = 0
    raw: Dict[str, Any] = field(default_factory=dict)  # full engine payload (info, containers, ...)


@dataclass
class EndpointGroup:
    id: int
    name: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    user_access: FrozenSet[int] = frozenset()
    team_access: FrozenSet[int] = frozenset()


@dataclass
class Endpoint:
    id: int
    name: str
    group_id: int
    type: EndpointType = EndpointType.DOCKER
    url: str = ""
    public_url: str = ""
    status: EndpointStatus = EndpointStatus.UP
    tags: List[str] = field(default_factory=list)
    tls_config: TLSConfig = field(default_factory=TLSConfig)
    azure_credentials: AzureCredentials = field(default_factory=AzureCredentials)
    snapshots: List[Snapshot] = field(default_factory=list)
    user_access: FrozenSet[int] = frozenset()
    team_access: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class FilterQuery:
    """Per-request listing parameters. `start` is 1-based as supplied by the caller."""

    filter: str = ""
    start: int = 0
    limit: int = 0  # 0 = unlimited

    @property
    def offset(self) -> int:
        # start=0 and start=1 both address the first element
        if self.start != 0:
            return self.start - 1
        return 0

    @property
    def mode(self) -> RetrievalMode:
        return RetrievalMode.FILTERED if self.filter else RetrievalMode.PAGINATED


@dataclass
class Listing:
    endpoints: List[Endpoint]
    total_count: int
