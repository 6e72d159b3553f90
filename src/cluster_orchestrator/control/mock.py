"""
In memory control plane.

This backend is used for tests and local simulations.
It implements every control interface at once and behaves like a tiny
cluster API keyed by cluster key.

Features
- Workloads roll out gradually when rollout_step is set, so tiers become
  ready over several passes
- Pods, volume claims and volumes appear as workloads scale up
- Pods are left behind on scale down, the way a failed scale down leaves them
- Members and stores can be forced unhealthy or into any store state
- Any operation can be made to fail by name
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from cluster_orchestrator.core.naming import claim_name, pod_name, pod_ordinal, workload_name
from cluster_orchestrator.core.types import (
    Cluster,
    ClusterStatus,
    MemberPhase,
    MetadataMember,
    PodRecord,
    ReclaimPolicy,
    StorageUnit,
    StoreState,
    Tier,
    VolumeRecord,
    WorkloadStatus,
)

STATEFUL_TIERS = (Tier.metadata, Tier.storage)


@dataclass
class ClusterState:
    """Everything the backend knows about one cluster."""

    workloads: dict[Tier, WorkloadStatus] = field(default_factory=dict)
    services: set[Tier] = field(default_factory=set)
    pods: dict[str, PodRecord] = field(default_factory=dict)
    volumes: dict[str, VolumeRecord] = field(default_factory=dict)
    claim_labels: dict[str, dict[str, str]] = field(default_factory=dict)


@dataclass
class InMemoryControlPlane:
    """
    In memory control plane.

    rollout_step
    Ready replicas gained per workload sync. None means the workload is ready
    as soon as it is synced.

    unhealthy_members
    Metadata member names reported unhealthy regardless of rollout.

    store_states
    Pod name to store state override for storage tier stores.

    failures
    Operation name to exception. Operation names look like
    sync_workload:storage, members:metadata, stores, list_pods, update_status.
    """

    rollout_step: int | None = None
    unhealthy_members: set[str] = field(default_factory=set)
    store_states: dict[str, StoreState] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    clusters: dict[str, ClusterState] = field(default_factory=dict)
    status_writes: list[ClusterStatus] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def fail(self, operation: str, exc: Exception) -> None:
        """Make an operation raise exc until cleared."""
        self.failures[operation] = exc

    def clear_failures(self) -> None:
        self.failures.clear()

    def state(self, cluster: Cluster) -> ClusterState:
        return self.clusters.setdefault(cluster.key, ClusterState())

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    # WorkloadControl

    def sync_workload(self, cluster: Cluster, tier: Tier, replicas: int) -> WorkloadStatus:
        self._enter(f"sync_workload:{tier.value}")
        state = self.state(cluster)
        current = state.workloads.get(tier, WorkloadStatus())

        if self.rollout_step is None or replicas <= current.ready_replicas:
            ready = replicas
        else:
            ready = min(replicas, current.ready_replicas + self.rollout_step)

        workload = WorkloadStatus(replicas=replicas, ready_replicas=ready)
        state.workloads[tier] = workload

        owner = workload_name(cluster.name, tier)
        for ordinal in range(replicas):
            name = pod_name(cluster.name, tier, ordinal)
            if name in state.pods:
                continue
            claim = ""
            if tier in STATEFUL_TIERS:
                claim = claim_name(cluster.name, tier, ordinal)
                volume = f"pv-{claim}"
                state.volumes[volume] = VolumeRecord(
                    name=volume,
                    tier=tier,
                    reclaim_policy=ReclaimPolicy.delete,
                    claim=claim,
                )
            state.pods[name] = PodRecord(name=name, tier=tier, owner=owner, claim=claim)

        return workload

    def ensure_service(self, cluster: Cluster, tier: Tier) -> None:
        self._enter(f"ensure_service:{tier.value}")
        self.state(cluster).services.add(tier)

    def workload_exists(self, cluster: Cluster, owner: str) -> bool:
        state = self.state(cluster)
        return any(workload_name(cluster.name, tier) == owner for tier in state.workloads)

    def workload_phase(self, cluster: Cluster, tier: Tier) -> MemberPhase:
        workload = self.state(cluster).workloads.get(tier)
        if workload is None or workload.ready_replicas == workload.replicas:
            return MemberPhase.normal
        return MemberPhase.scale

    def delete_workload(self, cluster: Cluster, tier: Tier) -> None:
        """Remove a workload but keep its pods, leaving them orphaned."""
        self.state(cluster).workloads.pop(tier, None)

    # Health views

    def _desired_pods(self, cluster: Cluster, tier: Tier) -> list[tuple[int, PodRecord]]:
        state = self.state(cluster)
        workload = state.workloads.get(tier, WorkloadStatus())
        out: list[tuple[int, PodRecord]] = []
        for pod in state.pods.values():
            ordinal = pod_ordinal(pod.name)
            if pod.tier != tier or ordinal is None or ordinal >= workload.replicas:
                continue
            out.append((ordinal, pod))
        return sorted(out, key=lambda item: item[0])

    def metadata_members(self, cluster: Cluster) -> dict[str, MetadataMember]:
        self._enter("members:metadata")
        ready = self.state(cluster).workloads.get(Tier.metadata, WorkloadStatus()).ready_replicas
        members: dict[str, MetadataMember] = {}
        for ordinal, pod in self._desired_pods(cluster, Tier.metadata):
            healthy = ordinal < ready and pod.name not in self.unhealthy_members
            members[pod.name] = MetadataMember(name=pod.name, healthy=healthy)
        return members

    def stores(self, cluster: Cluster) -> dict[str, StorageUnit]:
        self._enter("stores")
        ready = self.state(cluster).workloads.get(Tier.storage, WorkloadStatus()).ready_replicas
        stores: dict[str, StorageUnit] = {}
        for ordinal, pod in self._desired_pods(cluster, Tier.storage):
            if ordinal >= ready:
                continue
            store_id = str(ordinal + 1)
            store_state = self.store_states.get(pod.name, StoreState.up)
            stores[store_id] = StorageUnit(store_id=store_id, pod_name=pod.name, state=store_state)
        return stores

    def query_members(self, cluster: Cluster) -> dict[str, bool]:
        self._enter("members:query")
        ready = self.state(cluster).workloads.get(Tier.query, WorkloadStatus()).ready_replicas
        return {pod.name: ordinal < ready for ordinal, pod in self._desired_pods(cluster, Tier.query)}

    # PodControl

    def list_pods(self, cluster: Cluster) -> list[PodRecord]:
        self._enter("list_pods")
        return sorted(self.state(cluster).pods.values(), key=lambda p: p.name)

    def add_pod(self, cluster: Cluster, pod: PodRecord) -> None:
        self.state(cluster).pods[pod.name] = pod

    def update_labels(self, cluster: Cluster, pod: str, labels: dict[str, str]) -> None:
        self._enter("update_labels")
        state = self.state(cluster)
        record = state.pods[pod]
        merged = dict(record.labels)
        merged.update(labels)
        state.pods[pod] = PodRecord(
            name=record.name,
            tier=record.tier,
            owner=record.owner,
            claim=record.claim,
            labels=merged,
        )

    def delete_pod(self, cluster: Cluster, pod: str) -> None:
        self._enter("delete_pod")
        self.state(cluster).pods.pop(pod, None)

    # VolumeControl

    def list_volumes(self, cluster: Cluster) -> list[VolumeRecord]:
        self._enter("list_volumes")
        return sorted(self.state(cluster).volumes.values(), key=lambda v: v.name)

    def set_reclaim_policy(self, cluster: Cluster, volume: str, policy: ReclaimPolicy) -> None:
        self._enter("set_reclaim_policy")
        state = self.state(cluster)
        record = state.volumes[volume]
        state.volumes[volume] = VolumeRecord(
            name=record.name,
            tier=record.tier,
            reclaim_policy=policy,
            claim=record.claim,
        )

    def update_claim_labels(self, cluster: Cluster, claim: str, labels: dict[str, str]) -> None:
        self._enter("update_claim_labels")
        current = self.state(cluster).claim_labels.setdefault(claim, {})
        current.update(labels)

    # ClusterStatusWriter

    def update_status(self, cluster: Cluster) -> None:
        self._enter("update_status")
        self.status_writes.append(copy.deepcopy(cluster.status))


@dataclass
class MetadataHealthView:
    """Adapter exposing the backend as a MetadataHealthClient."""

    plane: InMemoryControlPlane

    def members(self, cluster: Cluster) -> dict[str, MetadataMember]:
        return self.plane.metadata_members(cluster)


@dataclass
class QueryHealthView:
    """Adapter exposing the backend as a QueryHealthClient."""

    plane: InMemoryControlPlane

    def members(self, cluster: Cluster) -> dict[str, bool]:
        return self.plane.query_members(cluster)
