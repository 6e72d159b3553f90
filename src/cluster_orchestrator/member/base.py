"""
Tier member manager interface.

Goal
One manager per tier keeps the tier's workload and peer service in line with
the declared replica count, then reports what the tier looks like.

Design notes
sync returns a fresh tier status instead of writing into the cluster.
The reconciler merges it.

sync must be idempotent. Calling it against a converged tier changes nothing.

When sync fails after part of the status could be observed, the manager
raises MemberSyncError carrying that partial status. The next pass depends on
fresh status, so even a failed sync reports what it saw.

Managers report failures as hard errors. Waiting for readiness is the job of
the gates.
"""

from __future__ import annotations

from typing import Protocol

from cluster_orchestrator.core.errors import MemberSyncError
from cluster_orchestrator.core.types import Cluster, Tier, TierStatus, WorkloadStatus
from cluster_orchestrator.control.base import WorkloadControl


class TierMemberManager(Protocol):
    """
    Tier member manager interface.

    tier
    The tier this manager owns.
    """

    tier: Tier

    def sync(self, cluster: Cluster) -> TierStatus:
        """Converge the tier and return its freshly observed status."""


def sync_tier_workload(
    workload_control: WorkloadControl,
    cluster: Cluster,
    tier: Tier,
    empty: TierStatus,
) -> WorkloadStatus:
    """
    Ensure the peer service and converge the tier workload.

    This is the part every tier shares. If it fails nothing about the tier
    could be observed, so the error carries the empty status for the tier.
    """
    try:
        workload_control.ensure_service(cluster, tier)
        return workload_control.sync_workload(cluster, tier, cluster.spec.replicas_for(tier))
    except MemberSyncError:
        raise
    except Exception as exc:
        raise MemberSyncError(f"{tier.value} tier workload sync failed: {exc}", status=empty) from exc
