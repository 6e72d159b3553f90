"""
Stage manager interfaces.

The reconciler only needs one call per stage. We keep the interfaces narrow so
each stage is easy to swap for a fake in tests.
"""

from __future__ import annotations

from typing import Protocol

from cluster_orchestrator.core.types import Cluster


class ReclaimPolicySyncer(Protocol):
    def sync(self, cluster: Cluster) -> list[str]:
        """Align volume reclaim policy with retention. Returns patched volumes."""


class MetaSyncer(Protocol):
    def sync(self, cluster: Cluster) -> list[str]:
        """Refresh member identity labels. Returns updated pods."""


class OrphanCleaner(Protocol):
    def clean(self, cluster: Cluster) -> list[str]:
        """Delete orphan pods. Returns deleted pods."""
