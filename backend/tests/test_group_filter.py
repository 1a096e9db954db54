"""Group filter matches name or tag substrings, case-insensitively, in input order."""

from __future__ import annotations

from fleet.listing.group_filter import filter_groups
from fleet.listing.models import EndpointGroup


def _groups():
    return [
        EndpointGroup(id=1, name="Unassigned"),
        EndpointGroup(id=2, name="Production", tags=["prod", "east"]),
        EndpointGroup(id=3, name="Staging", tags=["dev"]),
        EndpointGroup(id=4, name="Edge", tags=["Prod-EU", "West"]),
    ]


def test_name_match_is_case_insensitive():
    matched = filter_groups(_groups(), "staging")
    assert [g.id for g in matched] == [3]


def test_tag_match_is_case_insensitive():
    matched = filter_groups(_groups(), "west")
    assert [g.id for g in matched] == [4]


def test_name_and_tag_matches_keep_input_order():
    matched = filter_groups(_groups(), "prod")
    # Production by name, Edge by tag "Prod-EU"
    assert [g.id for g in matched] == [2, 4]


def test_group_matching_both_name_and_tag_appears_once():
    groups = [EndpointGroup(id=7, name="prod-cluster", tags=["prod", "production"])]
    assert [g.id for g in filter_groups(groups, "prod")] == [7]


def test_no_match_returns_empty_list():
    assert filter_groups(_groups(), "zzz") == []


def test_result_is_subset_of_input():
    groups = _groups()
    for needle in ("a", "e", "prod", "dev", "x"):
        matched = filter_groups(groups, needle)
        assert all(g in groups for g in matched)
        expected = [
            g for g in groups
            if needle in g.name.lower() or any(needle in t.lower() for t in g.tags)
        ]
        assert matched == expected


def test_scenario_production_staging():
    groups = [
        EndpointGroup(id=2, name="Production", tags=["prod", "east"]),
        EndpointGroup(id=3, name="Staging", tags=["dev"]),
    ]
    assert [g.name for g in filter_groups(groups, "prod")] == ["Production"]
