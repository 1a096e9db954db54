from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SecurityMode(str, Enum):
    STATE = "state"  # context attached to request.state by upstream middleware
    HEADERS = "headers"  # trusted identity headers from an authenticating proxy


@dataclass
class AppConfig:
    web_host: str = "0.0.0.0"
    web_port: int = 9000
    database_url: str = "postgresql+psycopg://localhost/fleet"
    log_level: str = "info"
    security_mode: SecurityMode = SecurityMode.STATE
    create_tables: bool = False


def parse_args(argv: Optional[list[str]] = None) -> AppConfig:
    """Parse CLI arguments into AppConfig.

    Exposed via `python -m fleet.main` and `fleet-endpoints`.
    """
    import argparse

    parser = argparse.ArgumentParser(description="Fleet endpoint listing service")
    parser.add_argument("--web-host", default="0.0.0.0")
    parser.add_argument("--web-port", type=int, default=9000)
    parser.add_argument(
        "--database-url",
        default="postgresql+psycopg://localhost/fleet",
        help="SQLAlchemy database URL (PostgreSQL recommended)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
    )
    parser.add_argument(
        "--security-mode",
        default=SecurityMode.STATE.value,
        choices=[SecurityMode.STATE.value, SecurityMode.HEADERS.value],
        help="Where the caller's security context comes from",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create endpoint/group tables on startup if missing",
    )

    args = parser.parse_args(argv)

    return AppConfig(
        web_host=args.web_host,
        web_port=args.web_port,
        database_url=args.database_url,
        log_level=args.log_level,
        security_mode=SecurityMode(args.security_mode),
        create_tables=bool(args.create_tables),
    )
