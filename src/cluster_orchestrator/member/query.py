from __future__ import annotations

from dataclasses import dataclass, field

from cluster_orchestrator.control.base import QueryHealthClient, WorkloadControl
from cluster_orchestrator.core.errors import MemberSyncError
from cluster_orchestrator.core.types import Cluster, QueryTierStatus, Tier
from cluster_orchestrator.member.base import TierMemberManager, sync_tier_workload


@dataclass
class QueryMemberManager(TierMemberManager):
    """
    Query tier member manager.

    The query tier is stateless and nothing waits on it, so its health is
    reported but not gated.
    """

    workload_control: WorkloadControl
    health_client: QueryHealthClient
    tier: Tier = field(default=Tier.query, init=False)

    def sync(self, cluster: Cluster) -> QueryTierStatus:
        workload = sync_tier_workload(self.workload_control, cluster, self.tier, QueryTierStatus())
        try:
            phase = self.workload_control.workload_phase(cluster, self.tier)
            members = self.health_client.members(cluster)
        except Exception as exc:
            raise MemberSyncError(
                f"query tier member health unavailable: {exc}",
                status=QueryTierStatus(workload=workload),
            ) from exc

        return QueryTierStatus(members=dict(members), workload=workload, phase=phase)
