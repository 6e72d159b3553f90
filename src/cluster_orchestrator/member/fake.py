"""
Fake tier member manager.

Used by reconciler tests. It does not touch any backend and reports the tier
status that is already on the cluster, so a test can preset status and watch
how the gates react to it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass

from cluster_orchestrator.core.types import Cluster, Tier, TierStatus
from cluster_orchestrator.member.base import TierMemberManager


@dataclass
class FakeTierMemberManager(TierMemberManager):
    """
    Fake tier member manager.

    sync_error
    When set, sync raises it instead of returning status.
    """

    tier: Tier
    sync_error: Exception | None = None
    calls: int = 0

    def set_sync_error(self, exc: Exception | None) -> None:
        self.sync_error = exc

    def sync(self, cluster: Cluster) -> TierStatus:
        self.calls += 1
        if self.sync_error is not None:
            raise self.sync_error
        return copy.deepcopy(cluster.status.for_tier(self.tier))
