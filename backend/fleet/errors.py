"""Errors surfaced by the endpoint listing pipeline."""

from __future__ import annotations


class FleetError(Exception):
    pass


class StoreUnavailable(FleetError):
    """Groups, endpoints or the endpoint count could not be read from the store."""


class SecurityContextUnavailable(FleetError):
    """The request carries no resolvable principal."""


class ListingFailed(FleetError):
    """A listing stage failed; `detail` is the message returned to the caller."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail
