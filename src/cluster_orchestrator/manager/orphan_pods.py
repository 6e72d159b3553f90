"""
Orphan pod cleaner.

An orphan is a pod that no longer corresponds to a live ordinal:
1) its ordinal is at or above the tier's desired replica count, left over
   from a scale down
2) or the workload that owned it is gone, left over from a failed
   provisioning

Ordinals start at zero, so with three desired replicas ordinals 0, 1 and 2
are live.

Runs last. A failure here is a hard error but earlier stages stand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cluster_orchestrator.control.base import PodControl, WorkloadControl
from cluster_orchestrator.core.naming import pod_ordinal
from cluster_orchestrator.core.types import Cluster, PodRecord

logger = logging.getLogger(__name__)


@dataclass
class OrphanPodCleaner:
    pod_control: PodControl
    workload_control: WorkloadControl

    def _orphan_reason(self, cluster: Cluster, pod: PodRecord, ordinal: int) -> str | None:
        desired = cluster.spec.replicas_for(pod.tier)
        if ordinal >= desired:
            return f"ordinal {ordinal} outside desired replicas {desired}"

        if not pod.owner or not self.workload_control.workload_exists(cluster, pod.owner):
            return f"owning workload {pod.owner or '<none>'} does not exist"

        return None

    def clean(self, cluster: Cluster) -> list[str]:
        """Delete orphan pods and return their names."""
        deleted: list[str] = []

        for pod in self.pod_control.list_pods(cluster):
            ordinal = pod_ordinal(pod.name)
            if ordinal is None:
                logger.debug("cluster %s: pod %s has no ordinal, skipping", cluster.key, pod.name)
                continue

            reason = self._orphan_reason(cluster, pod, ordinal)
            if reason is None:
                continue

            logger.info("cluster %s: deleting orphan pod %s, %s", cluster.key, pod.name, reason)
            self.pod_control.delete_pod(cluster, pod.name)
            deleted.append(pod.name)

        return deleted
