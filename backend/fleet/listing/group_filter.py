"""Match a lower-cased filter against endpoint group names and tags."""

from __future__ import annotations

from typing import Iterable, List

from .models import EndpointGroup


def filter_groups(groups: Iterable[EndpointGroup], filter: str) -> List[EndpointGroup]:
    """Return groups whose name or any tag contains *filter*, in input order.

    *filter* must be non-empty and already lower-cased.
    """
    matching: List[EndpointGroup] = []
    for group in groups:
        if filter in group.name.lower():
            matching.append(group)
            continue
        if any(filter in tag.lower() for tag in group.tags):
            matching.append(group)
    return matching
