"""
Readiness gates.

Purpose
A dependent tier must not be provisioned on top of a foundation that is not
running. Each gate is evaluated right after its tier has been synced and
right before the next tier is synced.

Metadata tier gate
1) healthy members are a strict majority of the desired replicas
2) the workload reports exactly the desired ready replicas

Quorum alone would let the pass continue while a minority of members is still
unhealthy or a leader is being elected. Replica parity also protects against
racing a scale up.

Storage tier gate
1) at least the desired number of stores are Up
2) the workload reports exactly the desired ready replicas

Stores are independent shards, so this is an absolute count, not a majority.

Gates are pure functions of the cluster spec and the tier status of the current pass.
Nothing is cached between passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cluster_orchestrator.core.errors import RequeueError
from cluster_orchestrator.core.types import (
    ClusterSpec,
    MetadataTierStatus,
    StorageTierStatus,
    StoreState,
    WorkloadStatus,
)

METADATA_GATE = "metadata tier readiness gate"
STORAGE_GATE = "storage tier readiness gate"

METADATA_WAIT_REASON = "waiting for metadata tier cluster running"
STORAGE_WAIT_REASON = "waiting for storage tier cluster running"


@dataclass(frozen=True)
class GateOutcome:
    """
    Gate outcome.

    ready
    True only when every condition holds.

    reasons
    Human readable unmet conditions.

    evidence
    The counts the decision was made from.
    """

    ready: bool
    reasons: list[str] = field(default_factory=list)
    evidence: dict[str, int] = field(default_factory=dict)


def _ready_replicas(workload: WorkloadStatus | None) -> int:
    if workload is None:
        return 0
    return workload.ready_replicas


def metadata_tier_ready(spec: ClusterSpec, status: MetadataTierStatus) -> GateOutcome:
    """Evaluate quorum and replica parity for the metadata tier."""
    desired = spec.metadata_replicas
    healthy = sum(1 for member in status.members.values() if member.healthy)
    ready = _ready_replicas(status.workload)

    reasons: list[str] = []
    if healthy <= desired // 2:
        reasons.append(f"healthy members {healthy} of {desired} desired is not a quorum")
    if ready != desired:
        reasons.append(f"ready replicas {ready} does not match desired {desired}")

    return GateOutcome(
        ready=not reasons,
        reasons=reasons,
        evidence={"desired": desired, "healthy": healthy, "ready_replicas": ready},
    )


def storage_tier_ready(spec: ClusterSpec, status: StorageTierStatus) -> GateOutcome:
    """Evaluate available stores and replica parity for the storage tier."""
    desired = spec.storage_replicas
    up = sum(1 for store in status.stores.values() if store.state == StoreState.up)
    ready = _ready_replicas(status.workload)

    reasons: list[str] = []
    if up < desired:
        reasons.append(f"up stores {up} is below desired {desired}")
    if ready != desired:
        reasons.append(f"ready replicas {ready} does not match desired {desired}")

    return GateOutcome(
        ready=not reasons,
        reasons=reasons,
        evidence={"desired": desired, "up": up, "ready_replicas": ready},
    )


def _requeue(reason: str, stage: str, outcome: GateOutcome) -> RequeueError:
    detail = "; ".join(outcome.reasons)
    return RequeueError(f"{reason}: {detail}" if detail else reason, stage=stage)


def require_metadata_tier_ready(spec: ClusterSpec, status: MetadataTierStatus) -> GateOutcome:
    """Raise RequeueError unless the metadata tier gate passes."""
    outcome = metadata_tier_ready(spec, status)
    if not outcome.ready:
        raise _requeue(METADATA_WAIT_REASON, METADATA_GATE, outcome)
    return outcome


def require_storage_tier_ready(spec: ClusterSpec, status: StorageTierStatus) -> GateOutcome:
    """Raise RequeueError unless the storage tier gate passes."""
    outcome = storage_tier_ready(spec, status)
    if not outcome.ready:
        raise _requeue(STORAGE_WAIT_REASON, STORAGE_GATE, outcome)
    return outcome
