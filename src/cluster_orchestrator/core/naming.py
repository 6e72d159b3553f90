"""
Naming helpers.

Why this file exists
Workloads, pods and volume claims follow one naming scheme:

workload  <cluster>-<tier>
pod       <cluster>-<tier>-<ordinal>
claim     <tier>-<cluster>-<tier>-<ordinal>

The meta manager, the orphan cleaner and the in memory backend all need to go
from one to the other, so the rules live here.
"""

from __future__ import annotations

from cluster_orchestrator.core.types import Tier

LABEL_CLUSTER = "app.kubernetes.io/instance"
LABEL_TIER = "app.kubernetes.io/component"
LABEL_ORDINAL = "cluster.orchestrator/ordinal"
LABEL_MANAGED_BY = "app.kubernetes.io/managed-by"
MANAGED_BY = "cluster-orchestrator"


def workload_name(cluster_name: str, tier: Tier) -> str:
    """Return the workload name for a tier."""
    return f"{cluster_name}-{tier.value}"


def pod_name(cluster_name: str, tier: Tier, ordinal: int) -> str:
    """Return the name of the pod at an ordinal."""
    return f"{workload_name(cluster_name, tier)}-{ordinal}"


def claim_name(cluster_name: str, tier: Tier, ordinal: int) -> str:
    """Return the volume claim name of the pod at an ordinal."""
    return f"{tier.value}-{pod_name(cluster_name, tier, ordinal)}"


def pod_ordinal(name: str) -> int | None:
    """
    Return the ordinal suffix of a pod name.

    None when the name has no numeric suffix.
    """
    _, sep, suffix = name.rpartition("-")
    if not sep or not suffix.isdigit():
        return None
    return int(suffix)


def identity_labels(cluster_name: str, tier: Tier, ordinal: int) -> dict[str, str]:
    """Labels members read to register themselves with the metadata tier."""
    return {
        LABEL_MANAGED_BY: MANAGED_BY,
        LABEL_CLUSTER: cluster_name,
        LABEL_TIER: tier.value,
        LABEL_ORDINAL: str(ordinal),
    }
