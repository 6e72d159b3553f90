"""
Reclaim policy manager.

Purpose
Every persistent volume of a cluster must carry the reclaim policy implied by
the declared retention. This runs first on every pass, before any readiness
check, so volume policy never lags behind what the user asked for while the
cluster is still converging.

Only volumes whose policy differs are patched, which keeps the stage
idempotent and cheap on a converged cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cluster_orchestrator.control.base import VolumeControl
from cluster_orchestrator.core.types import Cluster, ReclaimPolicy, RetentionPolicy

logger = logging.getLogger(__name__)


def reclaim_policy_for(retention: RetentionPolicy) -> ReclaimPolicy:
    """Map declared retention to a volume reclaim policy."""
    if retention == RetentionPolicy.delete:
        return ReclaimPolicy.delete
    return ReclaimPolicy.retain


@dataclass
class ReclaimPolicyManager:
    volume_control: VolumeControl

    def sync(self, cluster: Cluster) -> list[str]:
        """
        Align every volume's reclaim policy with cluster retention.

        Returns the names of the volumes that were patched.
        """
        desired = reclaim_policy_for(cluster.spec.retention)
        patched: list[str] = []

        for volume in self.volume_control.list_volumes(cluster):
            if volume.reclaim_policy == desired:
                continue
            self.volume_control.set_reclaim_policy(cluster, volume.name, desired)
            patched.append(volume.name)

        if patched:
            logger.info(
                "cluster %s: set reclaim policy %s on %d volumes",
                cluster.key,
                desired.value,
                len(patched),
            )
        return patched
