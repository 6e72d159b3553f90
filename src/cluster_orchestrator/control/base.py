"""
Control plane interfaces.

Goal
Define stable interfaces for everything the reconciler consumes but does not
implement: the generic workload diff and apply, pod and volume access, tier
health protocols, and status persistence.

Design notes
These are narrow on purpose so they are easy to fake in tests.
Retries and timeouts against the real control plane belong to the
implementations, not to the reconciler.
"""

from __future__ import annotations

from typing import Protocol

from cluster_orchestrator.core.types import (
    Cluster,
    MemberPhase,
    MetadataMember,
    PodRecord,
    ReclaimPolicy,
    StorageUnit,
    Tier,
    VolumeRecord,
    WorkloadStatus,
)


class WorkloadControl(Protocol):
    """
    Generic per tier workload management.

    sync_workload
    Compare the live workload against the declared replica count, apply the
    difference, and return the workload status as observed afterwards.

    ensure_service
    Make sure the peer discovery service of a tier exists.

    workload_exists
    True if the workload owning a tier's pods is present.

    workload_phase
    Current rollout phase of the tier workload.
    """

    def sync_workload(self, cluster: Cluster, tier: Tier, replicas: int) -> WorkloadStatus:
        """Converge the tier workload and return its status."""

    def ensure_service(self, cluster: Cluster, tier: Tier) -> None:
        """Create the tier peer service if missing."""

    def workload_exists(self, cluster: Cluster, owner: str) -> bool:
        """Return True if the named workload exists."""

    def workload_phase(self, cluster: Cluster, tier: Tier) -> MemberPhase:
        """Return the rollout phase of the tier workload."""


class MetadataHealthClient(Protocol):
    """Health view of the metadata tier, keyed by member name."""

    def members(self, cluster: Cluster) -> dict[str, MetadataMember]:
        """Return every member the metadata tier knows about."""


class StoreDirectory(Protocol):
    """Store registry kept by the metadata tier, keyed by store id."""

    def stores(self, cluster: Cluster) -> dict[str, StorageUnit]:
        """Return every registered store."""


class QueryHealthClient(Protocol):
    """Health view of query tier pods, keyed by pod name."""

    def members(self, cluster: Cluster) -> dict[str, bool]:
        """Return pod name to health flag."""


class PodControl(Protocol):
    """Pod access for the meta manager and the orphan cleaner."""

    def list_pods(self, cluster: Cluster) -> list[PodRecord]:
        """Return all live pods of the cluster."""

    def update_labels(self, cluster: Cluster, pod: str, labels: dict[str, str]) -> None:
        """Merge labels into a pod."""

    def delete_pod(self, cluster: Cluster, pod: str) -> None:
        """Delete a pod."""


class VolumeControl(Protocol):
    """Persistent volume access for the reclaim policy and meta managers."""

    def list_volumes(self, cluster: Cluster) -> list[VolumeRecord]:
        """Return all volumes bound to the cluster's claims."""

    def set_reclaim_policy(self, cluster: Cluster, volume: str, policy: ReclaimPolicy) -> None:
        """Patch the reclaim policy of a volume."""

    def update_claim_labels(self, cluster: Cluster, claim: str, labels: dict[str, str]) -> None:
        """Merge labels into a volume claim."""


class ClusterStatusWriter(Protocol):
    """Persist cluster status back to the API."""

    def update_status(self, cluster: Cluster) -> None:
        """Write cluster.status."""
