import pytest

from cluster_orchestrator.core.errors import RequeueError, is_requeue_error
from cluster_orchestrator.core.types import (
    ClusterSpec,
    MetadataMember,
    MetadataTierStatus,
    StorageTierStatus,
    StorageUnit,
    StoreState,
    WorkloadStatus,
)
from cluster_orchestrator.gates.readiness import (
    metadata_tier_ready,
    require_metadata_tier_ready,
    require_storage_tier_ready,
    storage_tier_ready,
)

SPEC = ClusterSpec(metadata_replicas=3, storage_replicas=3, query_replicas=2)


def _metadata(healthy: list[bool], ready: int | None) -> MetadataTierStatus:
    workload = None if ready is None else WorkloadStatus(replicas=3, ready_replicas=ready)
    return MetadataTierStatus(
        members={f"m{i}": MetadataMember(name=f"m{i}", healthy=h) for i, h in enumerate(healthy)},
        workload=workload,
    )


def _storage(states: list[StoreState], ready: int | None) -> StorageTierStatus:
    workload = None if ready is None else WorkloadStatus(replicas=3, ready_replicas=ready)
    return StorageTierStatus(
        stores={str(i): StorageUnit(store_id=str(i), pod_name=f"s{i}", state=s) for i, s in enumerate(states)},
        workload=workload,
    )


def test_metadata_gate_needs_quorum_and_parity():
    assert not metadata_tier_ready(SPEC, _metadata([True], 3)).ready
    assert not metadata_tier_ready(SPEC, _metadata([True, False], 3)).ready
    assert not metadata_tier_ready(SPEC, _metadata([True, True, True], 1)).ready
    assert metadata_tier_ready(SPEC, _metadata([True, True, True], 3)).ready


def test_metadata_gate_quorum_is_strict_majority():
    assert metadata_tier_ready(SPEC, _metadata([True, True, False], 3)).ready

    four = ClusterSpec(metadata_replicas=4, storage_replicas=3, query_replicas=1)
    status = MetadataTierStatus(
        members={f"m{i}": MetadataMember(name=f"m{i}", healthy=i < 2) for i in range(4)},
        workload=WorkloadStatus(replicas=4, ready_replicas=4),
    )
    outcome = metadata_tier_ready(four, status)
    assert not outcome.ready
    assert outcome.evidence["healthy"] == 2


def test_metadata_gate_without_workload_status_is_not_ready():
    outcome = metadata_tier_ready(SPEC, _metadata([True, True, True], None))

    assert not outcome.ready
    assert outcome.evidence["ready_replicas"] == 0
    assert len(outcome.reasons) == 1


def test_storage_gate_counts_only_up_stores():
    assert not storage_tier_ready(SPEC, _storage([], 0)).ready
    assert not storage_tier_ready(SPEC, _storage([StoreState.down], 0)).ready
    assert not storage_tier_ready(SPEC, _storage([StoreState.up], 0)).ready
    assert not storage_tier_ready(
        SPEC, _storage([StoreState.up, StoreState.offline, StoreState.tombstone], 3)
    ).ready
    assert storage_tier_ready(SPEC, _storage([StoreState.up] * 3, 3)).ready


def test_storage_gate_accepts_more_up_stores_than_desired():
    outcome = storage_tier_ready(SPEC, _storage([StoreState.up] * 4, 3))

    assert outcome.ready
    assert outcome.evidence["up"] == 4


def test_storage_gate_with_zero_stores_reports_both_reasons():
    outcome = storage_tier_ready(SPEC, _storage([], None))

    assert not outcome.ready
    assert outcome.evidence == {"desired": 3, "up": 0, "ready_replicas": 0}
    assert len(outcome.reasons) == 2


def test_require_helpers_raise_requeue_errors():
    with pytest.raises(RequeueError) as excinfo:
        require_metadata_tier_ready(SPEC, _metadata([], None))
    assert is_requeue_error(excinfo.value)
    assert str(excinfo.value).startswith("waiting for metadata tier cluster running")
    assert excinfo.value.stage == "metadata tier readiness gate"

    with pytest.raises(RequeueError) as excinfo:
        require_storage_tier_ready(SPEC, _storage([], None))
    assert str(excinfo.value).startswith("waiting for storage tier cluster running")


def test_gates_are_pure():
    status = _metadata([True, True, True], 3)
    first = metadata_tier_ready(SPEC, status)
    second = metadata_tier_ready(SPEC, status)

    assert first == second
    assert status == _metadata([True, True, True], 3)
