"""
Reconciler wiring.

This is the composition layer. It builds every stage from the control
interfaces and hands them to the reconciler, so the reconciler itself never
knows which backend it runs against.
"""

from __future__ import annotations

from cluster_orchestrator.control.base import (
    ClusterStatusWriter,
    MetadataHealthClient,
    PodControl,
    QueryHealthClient,
    StoreDirectory,
    VolumeControl,
    WorkloadControl,
)
from cluster_orchestrator.control.mock import InMemoryControlPlane, MetadataHealthView, QueryHealthView
from cluster_orchestrator.controller.reconciler import ClusterReconciler, ReconcilerConfig
from cluster_orchestrator.events.recorder import EventRecorder
from cluster_orchestrator.manager.meta import MetaManager
from cluster_orchestrator.manager.orphan_pods import OrphanPodCleaner
from cluster_orchestrator.manager.reclaim_policy import ReclaimPolicyManager
from cluster_orchestrator.member.metadata import MetadataMemberManager
from cluster_orchestrator.member.query import QueryMemberManager
from cluster_orchestrator.member.storage import StorageMemberManager


def new_reconciler(
    workload_control: WorkloadControl,
    metadata_health: MetadataHealthClient,
    store_directory: StoreDirectory,
    query_health: QueryHealthClient,
    pod_control: PodControl,
    volume_control: VolumeControl,
    recorder: EventRecorder,
    status_writer: ClusterStatusWriter | None = None,
    config: ReconcilerConfig | None = None,
) -> ClusterReconciler:
    """Build a reconciler from control interfaces."""
    return ClusterReconciler(
        reclaim_policy_manager=ReclaimPolicyManager(volume_control=volume_control),
        metadata_member_manager=MetadataMemberManager(
            workload_control=workload_control,
            health_client=metadata_health,
        ),
        storage_member_manager=StorageMemberManager(
            workload_control=workload_control,
            store_directory=store_directory,
        ),
        query_member_manager=QueryMemberManager(
            workload_control=workload_control,
            health_client=query_health,
        ),
        meta_manager=MetaManager(pod_control=pod_control, volume_control=volume_control),
        orphan_pod_cleaner=OrphanPodCleaner(pod_control=pod_control, workload_control=workload_control),
        recorder=recorder,
        status_writer=status_writer,
        config=config,
    )


def new_in_memory_reconciler(
    plane: InMemoryControlPlane,
    recorder: EventRecorder,
    config: ReconcilerConfig | None = None,
) -> ClusterReconciler:
    """Build a reconciler where every collaborator is the in memory backend."""
    return new_reconciler(
        workload_control=plane,
        metadata_health=MetadataHealthView(plane),
        store_directory=plane,
        query_health=QueryHealthView(plane),
        pod_control=plane,
        volume_control=plane,
        recorder=recorder,
        status_writer=plane,
        config=config,
    )
