"""Visibility filter: administrators see everything, restricted principals only what is granted."""

from __future__ import annotations

import pytest

from fleet.listing.models import Endpoint, EndpointGroup
from fleet.listing.visibility import AdministratorContext, RestrictedContext, filter_endpoints


@pytest.fixture
def groups():
    return [
        EndpointGroup(id=1, name="Unassigned"),
        EndpointGroup(id=2, name="Production", tags=["prod"]),
        EndpointGroup(id=3, name="Staging", tags=["dev"], user_access=frozenset({42}), team_access=frozenset({7})),
    ]


@pytest.fixture
def endpoints():
    return [
        Endpoint(id=1, name="prod-1", group_id=2),
        Endpoint(id=2, name="stage-1", group_id=3),
        Endpoint(id=3, name="prod-2", group_id=2, user_access=frozenset({42})),
        Endpoint(id=4, name="stage-2", group_id=3),
        Endpoint(id=5, name="loose", group_id=1, team_access=frozenset({9})),
    ]


def test_administrator_is_identity(endpoints, groups):
    result = filter_endpoints(endpoints, groups, AdministratorContext(user_id=1))
    assert result == endpoints


def test_restricted_without_grants_sees_nothing(endpoints, groups):
    assert filter_endpoints(endpoints, groups, RestrictedContext(user_id=99)) == []


def test_restricted_user_via_group_and_endpoint_policies(endpoints, groups):
    result = filter_endpoints(endpoints, groups, RestrictedContext(user_id=42))
    assert [e.id for e in result] == [2, 3, 4]


def test_restricted_team_via_group_policy(endpoints, groups):
    ctx = RestrictedContext(user_id=5, team_ids=frozenset({7}))
    assert [e.id for e in filter_endpoints(endpoints, groups, ctx)] == [2, 4]


def test_restricted_team_via_endpoint_policy(endpoints, groups):
    ctx = RestrictedContext(user_id=5, team_ids=frozenset({9}))
    assert [e.id for e in filter_endpoints(endpoints, groups, ctx)] == [5]


def test_explicit_group_and_endpoint_grants(endpoints, groups):
    ctx = RestrictedContext(user_id=5, group_ids=frozenset({2}), endpoint_ids=frozenset({4}))
    assert [e.id for e in filter_endpoints(endpoints, groups, ctx)] == [1, 3, 4]


def test_order_is_preserved(endpoints, groups):
    reversed_input = list(reversed(endpoints))
    result = filter_endpoints(reversed_input, groups, RestrictedContext(user_id=42))
    assert [e.id for e in result] == [4, 3, 2]


def test_missing_group_in_catalog_only_uses_endpoint_policy(groups):
    orphan = Endpoint(id=10, name="orphan", group_id=999, user_access=frozenset({42}))
    other = Endpoint(id=11, name="orphan-2", group_id=999)
    result = filter_endpoints([orphan, other], groups, RestrictedContext(user_id=42))
    assert [e.id for e in result] == [10]
