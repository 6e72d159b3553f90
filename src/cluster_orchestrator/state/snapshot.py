"""
Snapshot helpers.

Tier managers do not write into the shared cluster object. They return a
fresh tier status fragment, and the reconciler merges it here.

Merging replaces the whole tier status. Maps are never patched, so a store
that disappeared from the directory also disappears from status.
"""

from __future__ import annotations

import copy

from cluster_orchestrator.core.types import (
    Cluster,
    ClusterStatus,
    MetadataTierStatus,
    QueryTierStatus,
    StorageTierStatus,
    TierStatus,
)


def merge_fragment(cluster: Cluster, fragment: TierStatus) -> None:
    """
    Replace the tier status the fragment belongs to.

    The fragment type selects the tier.
    """
    if isinstance(fragment, MetadataTierStatus):
        cluster.status.metadata = fragment
    elif isinstance(fragment, StorageTierStatus):
        cluster.status.storage = fragment
    elif isinstance(fragment, QueryTierStatus):
        cluster.status.query = fragment
    else:
        raise TypeError(f"unknown tier status fragment: {type(fragment).__name__}")


def snapshot_status(cluster: Cluster) -> ClusterStatus:
    """
    Take a deep copy of the current status.

    The reconciler compares the end of pass status against this copy to
    decide whether status has to be written back.
    """
    return copy.deepcopy(cluster.status)


def status_changed(before: ClusterStatus, after: ClusterStatus) -> bool:
    """Return True if any tier status differs."""
    return before != after
