"""Field redaction clears credentials and raw snapshot payloads, and nothing else."""

from __future__ import annotations

import copy

from fleet.listing.models import (
    AzureCredentials,
    Endpoint,
    EndpointStatus,
    EndpointType,
    Snapshot,
    TLSConfig,
)
from fleet.listing.redaction import hide_fields


def _azure_endpoint() -> Endpoint:
    return Endpoint(
        id=3,
        name="aci-west",
        group_id=2,
        type=EndpointType.AZURE,
        url="https://management.azure.com",
        status=EndpointStatus.DOWN,
        tags=["cloud"],
        tls_config=TLSConfig(tls=True, skip_verify=False),
        azure_credentials=AzureCredentials(
            application_id="app-123", tenant_id="tenant-9", authentication_key="s3cr3t"
        ),
        snapshots=[
            Snapshot(time=1700000000, docker_version="24.0.7", running_container_count=3,
                     raw={"Info": {"ID": "abc"}, "Containers": [{"Id": "c1"}]}),
            Snapshot(time=1690000000, raw={"Info": {}}),
        ],
    )


def test_credentials_and_raw_snapshots_are_cleared():
    endpoint = _azure_endpoint()
    hide_fields(endpoint)
    assert endpoint.azure_credentials.is_empty()
    assert all(s.raw == {} for s in endpoint.snapshots)


def test_public_fields_survive():
    endpoint = _azure_endpoint()
    hide_fields(endpoint)
    assert endpoint.id == 3
    assert endpoint.name == "aci-west"
    assert endpoint.group_id == 2
    assert endpoint.status is EndpointStatus.DOWN
    assert endpoint.url == "https://management.azure.com"
    assert endpoint.tags == ["cloud"]
    assert endpoint.snapshots[0].docker_version == "24.0.7"
    assert endpoint.snapshots[0].running_container_count == 3


def test_redaction_is_idempotent():
    once = _azure_endpoint()
    hide_fields(once)
    twice = copy.deepcopy(once)
    hide_fields(twice)
    assert twice == once
