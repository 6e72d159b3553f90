"""
Cluster source interfaces.

Goal
Provide pluggable cluster ingestion. In production a watch delivers cluster
resources; in tests and simulations they come from files.

Sources return Cluster objects, which the worker reconciles one by one.
"""

from __future__ import annotations

from typing import Protocol

from cluster_orchestrator.core.types import Cluster


class ClusterSource(Protocol):
    """
    Cluster source interface.

    fetch returns a fresh copy of every cluster. A source may return an empty
    list when there is nothing to reconcile.
    """

    def fetch(self) -> list[Cluster]:
        """Fetch clusters."""
