from __future__ import annotations

from typing import Optional

from sqlalchemy import (
    JSON,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

UNASSIGNED_GROUP_ID = 1


class Base(DeclarativeBase):
    pass


class EndpointGroupRow(Base):
    """Named, tagged collection of endpoints. Access lists hold user/team ids."""
    __tablename__ = "endpoint_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    user_access: Mapped[list] = mapped_column(JSON, default=list)
    team_access: Mapped[list] = mapped_column(JSON, default=list)


class EndpointRow(Base):
    __tablename__ = "endpoints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    type: Mapped[str] = mapped_column(String(16), default="docker")  # docker | agent | azure
    url: Mapped[str] = mapped_column(String(512), default="")
    public_url: Mapped[str] = mapped_column(String(512), default="")
    group_id: Mapped[int] = mapped_column(
        ForeignKey("endpoint_groups.id"), index=True, default=UNASSIGNED_GROUP_ID
    )
    status: Mapped[str] = mapped_column(String(8), default="up", index=True)  # up | down
    tags: Mapped[list] = mapped_column(JSON, default=list)

    # {"tls": bool, "skip_verify": bool, "ca_cert_path": str, "cert_path": str, "key_path": str}
    tls_config: Mapped[dict] = mapped_column(JSON, default=dict)
    # {"application_id": str, "tenant_id": str, "authentication_key": str}
    azure_credentials: Mapped[dict] = mapped_column(JSON, default=dict)
    # Newest first; each entry carries summary counters plus "raw" engine payload
    snapshots: Mapped[list] = mapped_column(JSON, default=list)

    user_access: Mapped[list] = mapped_column(JSON, default=list)
    team_access: Mapped[list] = mapped_column(JSON, default=list)
