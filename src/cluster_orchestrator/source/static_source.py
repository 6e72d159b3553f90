"""
Static cluster source.

Reads a local json file containing either:
1) a single cluster object
2) or a list of cluster objects under "clusters"

Schema example
{
  "clusters": [
    {
      "name": "demo",
      "namespace": "default",
      "spec": {
        "metadata_replicas": 3,
        "storage_replicas": 3,
        "query_replicas": 2,
        "retention": "retain",
        "backup": {"enabled": true, "storage_size": "50Gi", "storage_class_name": "ssd"}
      },
      "status": {
        "metadata": {
          "members": {"demo-metadata-0": {"healthy": true}},
          "workload": {"replicas": 3, "ready_replicas": 1}
        },
        "storage": {"stores": {"1": {"pod_name": "demo-storage-0", "state": "Up"}}}
      }
    }
  ]
}

status is optional. It is useful to replay a cluster as it was observed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cluster_orchestrator.core.errors import ClusterSourceError
from cluster_orchestrator.core.types import (
    BackupConfig,
    Cluster,
    ClusterSpec,
    ClusterStatus,
    MemberPhase,
    MetadataMember,
    MetadataTierStatus,
    QueryTierStatus,
    RetentionPolicy,
    StorageTierStatus,
    StorageUnit,
    StoreState,
    WorkloadStatus,
)
from cluster_orchestrator.source.base import ClusterSource


def _replicas(spec: dict[str, Any], key: str) -> int:
    value = spec.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ClusterSourceError(f"spec.{key} must be a non negative integer")
    return value


def _backup_from_dict(obj: Any) -> BackupConfig:
    if not isinstance(obj, dict):
        raise ClusterSourceError("spec.backup must be an object")
    defaults = BackupConfig()
    return BackupConfig(
        storage_size=str(obj.get("storage_size", defaults.storage_size)),
        storage_class_name=str(obj.get("storage_class_name", defaults.storage_class_name)),
        enabled=bool(obj.get("enabled", defaults.enabled)),
    )


def _spec_from_dict(obj: dict[str, Any]) -> ClusterSpec:
    try:
        retention = RetentionPolicy(str(obj.get("retention", RetentionPolicy.retain.value)))
    except ValueError as exc:
        raise ClusterSourceError(f"spec.retention is invalid: {obj.get('retention')}") from exc

    return ClusterSpec(
        metadata_replicas=_replicas(obj, "metadata_replicas"),
        storage_replicas=_replicas(obj, "storage_replicas"),
        query_replicas=_replicas(obj, "query_replicas"),
        retention=retention,
        backup=_backup_from_dict(obj.get("backup", {}) or {}),
    )


def _workload_from_dict(obj: Any) -> WorkloadStatus | None:
    if not isinstance(obj, dict):
        return None
    return WorkloadStatus(
        replicas=int(obj.get("replicas", 0)),
        ready_replicas=int(obj.get("ready_replicas", 0)),
    )


def _phase(obj: dict[str, Any]) -> MemberPhase:
    return MemberPhase(str(obj.get("phase", MemberPhase.normal.value)))


def _status_from_dict(obj: dict[str, Any]) -> ClusterStatus:
    meta_obj = obj.get("metadata", {}) or {}
    storage_obj = obj.get("storage", {}) or {}
    query_obj = obj.get("query", {}) or {}

    try:
        members = {
            str(name): MetadataMember(name=str(name), healthy=bool(raw.get("healthy", False)))
            for name, raw in (meta_obj.get("members", {}) or {}).items()
        }
        stores = {
            str(store_id): StorageUnit(
                store_id=str(store_id),
                pod_name=str(raw.get("pod_name", "")),
                state=StoreState(str(raw.get("state", StoreState.down.value))),
            )
            for store_id, raw in (storage_obj.get("stores", {}) or {}).items()
        }
        query_members = {str(k): bool(v) for k, v in (query_obj.get("members", {}) or {}).items()}

        return ClusterStatus(
            metadata=MetadataTierStatus(
                members=members,
                workload=_workload_from_dict(meta_obj.get("workload")),
                phase=_phase(meta_obj),
            ),
            storage=StorageTierStatus(
                stores=stores,
                workload=_workload_from_dict(storage_obj.get("workload")),
                phase=_phase(storage_obj),
            ),
            query=QueryTierStatus(
                members=query_members,
                workload=_workload_from_dict(query_obj.get("workload")),
                phase=_phase(query_obj),
            ),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ClusterSourceError(f"invalid status: {exc}") from exc


def cluster_from_dict(obj: dict[str, Any]) -> Cluster:
    """Convert a dict into a Cluster."""
    name = obj.get("name")
    if not isinstance(name, str) or not name:
        raise ClusterSourceError("cluster is missing a name")

    spec_obj = obj.get("spec")
    if not isinstance(spec_obj, dict):
        raise ClusterSourceError(f"cluster {name} is missing a spec object")

    return Cluster(
        name=name,
        namespace=str(obj.get("namespace", "default")),
        uid=str(obj.get("uid", "")),
        spec=_spec_from_dict(spec_obj),
        status=_status_from_dict(obj.get("status", {}) or {}),
    )


@dataclass(frozen=True)
class StaticClusterSource(ClusterSource):
    """Load clusters from a local json file."""

    path: Path

    def fetch(self) -> list[Cluster]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ClusterSourceError(f"cannot read clusters from {self.path}: {exc}") from exc

        if isinstance(data, dict) and "clusters" in data:
            raw = data.get("clusters", [])
            if isinstance(raw, list):
                return [cluster_from_dict(x) for x in raw if isinstance(x, dict)]
            return []

        if isinstance(data, dict):
            return [cluster_from_dict(data)]

        return []
