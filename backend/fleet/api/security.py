"""Resolve the request's security context.

`state` mode expects an upstream middleware to have placed a context on
request.state.security_context. `headers` mode trusts identity headers set by
an authenticating reverse proxy.
"""

from __future__ import annotations

from typing import FrozenSet, Optional

from fastapi import Request

from ..config import SecurityMode
from ..errors import SecurityContextUnavailable
from ..listing.service import SecurityResolver
from ..listing.visibility import AdministratorContext, RestrictedContext, SecurityContext

USER_ID_HEADER = "X-Fleet-User-Id"
ROLE_HEADER = "X-Fleet-Role"
TEAMS_HEADER = "X-Fleet-Teams"
GROUPS_HEADER = "X-Fleet-Groups"
ENDPOINTS_HEADER = "X-Fleet-Endpoints"

ADMIN_ROLE = "administrator"


def context_from_state(request: Request) -> SecurityContext:
    context = getattr(request.state, "security_context", None)
    if not isinstance(context, (AdministratorContext, RestrictedContext)):
        raise SecurityContextUnavailable("No security context attached to request")
    return context


def _parse_id_list(raw: Optional[str], header: str) -> FrozenSet[int]:
    if not raw or not raw.strip():
        return frozenset()
    try:
        return frozenset(int(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise SecurityContextUnavailable(f"Malformed {header} header") from exc


def context_from_headers(request: Request) -> SecurityContext:
    raw_user = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not raw_user:
        raise SecurityContextUnavailable(f"Missing {USER_ID_HEADER} header")
    try:
        user_id = int(raw_user)
    except ValueError as exc:
        raise SecurityContextUnavailable(f"Malformed {USER_ID_HEADER} header") from exc

    role = (request.headers.get(ROLE_HEADER) or "").strip().lower()
    if role == ADMIN_ROLE:
        return AdministratorContext(user_id=user_id)
    return RestrictedContext(
        user_id=user_id,
        team_ids=_parse_id_list(request.headers.get(TEAMS_HEADER), TEAMS_HEADER),
        group_ids=_parse_id_list(request.headers.get(GROUPS_HEADER), GROUPS_HEADER),
        endpoint_ids=_parse_id_list(request.headers.get(ENDPOINTS_HEADER), ENDPOINTS_HEADER),
    )


def security_resolver(mode: SecurityMode) -> SecurityResolver:
    if mode == SecurityMode.HEADERS:
        return context_from_headers
    return context_from_state
