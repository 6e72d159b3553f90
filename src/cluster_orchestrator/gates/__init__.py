"""
Gates package.

Pure readiness predicates evaluated between tier syncs.
"""

from cluster_orchestrator.gates.readiness import (
    GateOutcome,
    metadata_tier_ready,
    require_metadata_tier_ready,
    require_storage_tier_ready,
    storage_tier_ready,
)

__all__ = [
    "GateOutcome",
    "metadata_tier_ready",
    "require_metadata_tier_ready",
    "require_storage_tier_ready",
    "storage_tier_ready",
]
