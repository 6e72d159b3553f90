"""
Meta manager.

Member processes read their identity from labels to register themselves with
the metadata tier: which cluster, which tier, which ordinal.

This runs after all three tiers were synced. Before that, pods may not exist
yet and identity would be meaningless.

Labels go on the pod and, for stateful tiers, on the volume claim it mounts,
so a claim can be matched back to its member after the pod is gone.
The claim is labelled before the pod, so a pass that failed in between is
finished by the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cluster_orchestrator.control.base import PodControl, VolumeControl
from cluster_orchestrator.core.naming import identity_labels, pod_ordinal
from cluster_orchestrator.core.types import Cluster

logger = logging.getLogger(__name__)


@dataclass
class MetaManager:
    pod_control: PodControl
    volume_control: VolumeControl

    def sync(self, cluster: Cluster) -> list[str]:
        """
        Stamp identity labels on every pod that lacks them.

        Returns the pods that were updated.
        """
        updated: list[str] = []

        for pod in self.pod_control.list_pods(cluster):
            ordinal = pod_ordinal(pod.name)
            if ordinal is None:
                logger.debug("cluster %s: pod %s has no ordinal, skipping", cluster.key, pod.name)
                continue

            labels = identity_labels(cluster.name, pod.tier, ordinal)
            if all(pod.labels.get(k) == v for k, v in labels.items()):
                continue

            if pod.claim:
                self.volume_control.update_claim_labels(cluster, pod.claim, labels)
            self.pod_control.update_labels(cluster, pod.name, labels)
            updated.append(pod.name)

        if updated:
            logger.info("cluster %s: refreshed identity labels on %d pods", cluster.key, len(updated))
        return updated
