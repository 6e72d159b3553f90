"""
Core types.

This file defines the cluster snapshot shared across the engine.

Important design choice
Spec and Status are kept apart.

Spec is the declared intent. It is frozen for the length of a reconcile pass.

Status is what the tier managers observed during the pass. It is rewritten
tier by tier, and every tier status is replaced wholesale on each pass so no
reader ever sees a value remembered from an older pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, Optional


class Tier(StrEnum):
    """
    The three cooperating roles of a cluster.

    metadata
      Consensus tier. Holds cluster metadata and hands out placement.

    storage
      Storage tier. Independent shards registered as stores.

    query
      Stateless query tier. Only useful once the two tiers below are running.
    """

    metadata = "metadata"
    storage = "storage"
    query = "query"


class StoreState(StrEnum):
    """
    Storage unit state as reported by the metadata tier.

    Only Up counts as available capacity.
    """

    up = "Up"
    down = "Down"
    offline = "Offline"
    tombstone = "Tombstone"


class RetentionPolicy(StrEnum):
    """Declared data retention when the cluster is deleted."""

    retain = "retain"
    delete = "delete"


class ReclaimPolicy(StrEnum):
    """Persistent volume reclaim policy."""

    retain = "Retain"
    delete = "Delete"


class MemberPhase(StrEnum):
    """Rollout phase of a tier workload."""

    normal = "Normal"
    upgrade = "Upgrade"
    scale = "Scale"


@dataclass(frozen=True)
class BackupConfig:
    """
    Full backup volume options.

    enabled
    When False no backup volume claim is rendered.
    """

    storage_size: str = "100Gi"
    storage_class_name: str = "local-storage"
    enabled: bool = False


@dataclass(frozen=True)
class ClusterSpec:
    """
    Declared state of a cluster.

    Replica counts are per tier. retention decides the reclaim policy of every
    persistent volume the cluster owns.
    """

    metadata_replicas: int
    storage_replicas: int
    query_replicas: int
    retention: RetentionPolicy = RetentionPolicy.retain
    backup: BackupConfig = field(default_factory=BackupConfig)

    def replicas_for(self, tier: Tier) -> int:
        """Return desired replicas for a tier."""
        if tier == Tier.metadata:
            return self.metadata_replicas
        if tier == Tier.storage:
            return self.storage_replicas
        return self.query_replicas


@dataclass(frozen=True)
class WorkloadStatus:
    """
    Status of the managed workload behind a tier.

    Written by the external workload layer only. The core never derives
    ready_replicas from health maps.
    """

    replicas: int = 0
    ready_replicas: int = 0


@dataclass(frozen=True)
class MetadataMember:
    """A metadata tier member. healthy comes from the tier's own health protocol."""

    name: str
    healthy: bool


@dataclass(frozen=True)
class StorageUnit:
    """A storage tier store, keyed by store_id."""

    store_id: str
    pod_name: str
    state: StoreState


@dataclass
class MetadataTierStatus:
    members: Dict[str, MetadataMember] = field(default_factory=dict)
    workload: Optional[WorkloadStatus] = None
    phase: MemberPhase = MemberPhase.normal


@dataclass
class StorageTierStatus:
    stores: Dict[str, StorageUnit] = field(default_factory=dict)
    workload: Optional[WorkloadStatus] = None
    phase: MemberPhase = MemberPhase.normal


@dataclass
class QueryTierStatus:
    """
    Query tier status.

    members maps pod name to a health flag. The query tier is stateless so
    no gate reads it, but operators do.
    """

    members: Dict[str, bool] = field(default_factory=dict)
    workload: Optional[WorkloadStatus] = None
    phase: MemberPhase = MemberPhase.normal


TierStatus = MetadataTierStatus | StorageTierStatus | QueryTierStatus


@dataclass
class ClusterStatus:
    """
    Observed state of all three tiers.

    Two statuses are equal only when every tier status is equal, which is what
    decides whether status must be written back.
    """

    metadata: MetadataTierStatus = field(default_factory=MetadataTierStatus)
    storage: StorageTierStatus = field(default_factory=StorageTierStatus)
    query: QueryTierStatus = field(default_factory=QueryTierStatus)

    def for_tier(self, tier: Tier) -> TierStatus:
        """Return the status of one tier."""
        return getattr(self, tier.value)


@dataclass
class Cluster:
    """
    Aggregate root handed to the reconciler.

    The cluster is fetched fresh for every pass. spec is never changed by the
    core, status is rewritten stage by stage.
    """

    name: str
    spec: ClusterSpec
    namespace: str = "default"
    uid: str = ""
    status: ClusterStatus = field(default_factory=ClusterStatus)

    @property
    def key(self) -> str:
        """Work queue key, namespace slash name."""
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class PodRecord:
    """
    A live pod belonging to a cluster.

    owner is the name of the workload that created it, empty if none.
    claim is the name of the volume claim mounted by the pod, empty if none.
    """

    name: str
    tier: Tier
    owner: str = ""
    claim: str = ""
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class VolumeRecord:
    """A persistent volume bound to one of the cluster's claims."""

    name: str
    tier: Tier
    reclaim_policy: ReclaimPolicy
    claim: str = ""
