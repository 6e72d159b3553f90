"""
Storage tier member manager.

Storage units register themselves as stores with the metadata tier.
The store directory is the source of truth for store state; the workload only
tells us how many pods are ready.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cluster_orchestrator.control.base import StoreDirectory, WorkloadControl
from cluster_orchestrator.core.errors import MemberSyncError
from cluster_orchestrator.core.types import Cluster, StorageTierStatus, StoreState, Tier
from cluster_orchestrator.member.base import TierMemberManager, sync_tier_workload

logger = logging.getLogger(__name__)


@dataclass
class StorageMemberManager(TierMemberManager):
    """Storage tier member manager."""

    workload_control: WorkloadControl
    store_directory: StoreDirectory
    tier: Tier = field(default=Tier.storage, init=False)

    def sync(self, cluster: Cluster) -> StorageTierStatus:
        workload = sync_tier_workload(self.workload_control, cluster, self.tier, StorageTierStatus())
        try:
            phase = self.workload_control.workload_phase(cluster, self.tier)
            stores = self.store_directory.stores(cluster)
        except Exception as exc:
            raise MemberSyncError(
                f"storage tier store directory unavailable: {exc}",
                status=StorageTierStatus(workload=workload),
            ) from exc

        up = sum(1 for s in stores.values() if s.state == StoreState.up)
        logger.debug(
            "cluster %s storage tier: %d/%d stores up, %d ready replicas",
            cluster.key,
            up,
            len(stores),
            workload.ready_replicas,
        )
        return StorageTierStatus(stores=dict(stores), workload=workload, phase=phase)
