"""Per-principal visibility of endpoints.

Two context variants: administrators see everything; restricted principals
see an endpoint when it, or its group, is granted to them either explicitly
(group_ids / endpoint_ids carried by the context) or through the user/team
access lists stored on the endpoint and group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from .models import Endpoint, EndpointGroup


@dataclass(frozen=True)
class AdministratorContext:
    user_id: int

    def filter_endpoints(self, endpoints: List[Endpoint], groups: Dict[int, EndpointGroup]) -> List[Endpoint]:
        return endpoints


@dataclass(frozen=True)
class RestrictedContext:
    user_id: int
    team_ids: FrozenSet[int] = frozenset()
    group_ids: FrozenSet[int] = frozenset()
    endpoint_ids: FrozenSet[int] = frozenset()

    def _granted(self, user_access: FrozenSet[int], team_access: FrozenSet[int]) -> bool:
        return self.user_id in user_access or not self.team_ids.isdisjoint(team_access)

    def can_see(self, endpoint: Endpoint, group: Optional[EndpointGroup]) -> bool:
        if endpoint.id in self.endpoint_ids or endpoint.group_id in self.group_ids:
            return True
        if self._granted(endpoint.user_access, endpoint.team_access):
            return True
        return group is not None and self._granted(group.user_access, group.team_access)

    def filter_endpoints(self, endpoints: List[Endpoint], groups: Dict[int, EndpointGroup]) -> List[Endpoint]:
        return [e for e in endpoints if self.can_see(e, groups.get(e.group_id))]


SecurityContext = Union[AdministratorContext, RestrictedContext]


def filter_endpoints(
    endpoints: List[Endpoint],
    groups: Iterable[EndpointGroup],
    context: SecurityContext,
) -> List[Endpoint]:
    """Return the endpoints *context* may see, preserving input order."""
    catalog = {g.id: g for g in groups}
    return context.filter_endpoints(endpoints, catalog)
