from __future__ import annotations

from .models import AzureCredentials, Endpoint


def hide_fields(endpoint: Endpoint) -> None:
    """Clear credentials and raw snapshot payloads in place. Safe to call repeatedly."""
    endpoint.azure_credentials = AzureCredentials()
    for snapshot in endpoint.snapshots:
        snapshot.raw = {}
