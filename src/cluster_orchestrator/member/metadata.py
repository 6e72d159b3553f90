"""
Metadata tier member manager.

The metadata tier is the consensus group every other tier registers with.
After converging the workload we read the member list from the tier's own
health protocol. The readiness gate decides what that list means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cluster_orchestrator.control.base import MetadataHealthClient, WorkloadControl
from cluster_orchestrator.core.errors import MemberSyncError
from cluster_orchestrator.core.types import Cluster, MetadataTierStatus, Tier
from cluster_orchestrator.member.base import TierMemberManager, sync_tier_workload

logger = logging.getLogger(__name__)


@dataclass
class MetadataMemberManager(TierMemberManager):
    """
    Metadata tier member manager.

    workload_control
    Generic workload diff and apply.

    health_client
    Member health as seen by the metadata tier itself.
    """

    workload_control: WorkloadControl
    health_client: MetadataHealthClient
    tier: Tier = field(default=Tier.metadata, init=False)

    def sync(self, cluster: Cluster) -> MetadataTierStatus:
        workload = sync_tier_workload(self.workload_control, cluster, self.tier, MetadataTierStatus())
        try:
            phase = self.workload_control.workload_phase(cluster, self.tier)
            members = self.health_client.members(cluster)
        except Exception as exc:
            raise MemberSyncError(
                f"metadata tier member health unavailable: {exc}",
                status=MetadataTierStatus(workload=workload),
            ) from exc

        healthy = sum(1 for m in members.values() if m.healthy)
        logger.debug(
            "cluster %s metadata tier: %d/%d members healthy, %d ready replicas",
            cluster.key,
            healthy,
            len(members),
            workload.ready_replicas,
        )
        return MetadataTierStatus(members=dict(members), workload=workload, phase=phase)
