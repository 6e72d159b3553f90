"""
Report serialization.

Status is reported as plain JSON: enums collapse to their values and member
maps keep their string keys.
"""

from __future__ import annotations

from dataclasses import asdict
from enum import Enum
from typing import Any

from cluster_orchestrator.core.types import Cluster, StoreState


def _plain(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


def to_json_safe_dict(obj: Any) -> dict[str, Any]:
    """Convert a dataclass into a JSON safe dict for reporting."""
    plain = _plain(asdict(obj))
    if not isinstance(plain, dict):
        raise TypeError(f"expected a dataclass, got {type(obj).__name__}")
    return plain


def cluster_status_to_json(cluster: Cluster) -> dict[str, Any]:
    """
    Report shape for a cluster after a pass.

    Counts are included so operators do not need to walk the member maps.
    """
    status = cluster.status
    report = to_json_safe_dict(status)
    report["summary"] = {
        "metadata_healthy": sum(1 for m in status.metadata.members.values() if m.healthy),
        "storage_up": sum(1 for s in status.storage.stores.values() if s.state == StoreState.up),
        "query_healthy": sum(1 for ok in status.query.members.values() if ok),
    }
    return {"cluster": cluster.key, "status": report}
