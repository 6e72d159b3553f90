"""
Full backup volume claim.

Pure templating. A cluster with backups enabled gets one claim named
<cluster>-fullbackup that the backup job writes into. There is no
reconciliation logic here; when backups are disabled nothing is rendered.

Values file shape
fullbackup:
  create: true
  storage: 100Gi
  storageClassName: local-storage
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from cluster_orchestrator.core.naming import LABEL_CLUSTER, LABEL_MANAGED_BY, LABEL_TIER, MANAGED_BY
from cluster_orchestrator.core.types import BackupConfig

BACKUP_COMPONENT = "fullbackup"


def render_backup_pvc(
    cluster_name: str,
    config: BackupConfig,
    release: str | None = None,
) -> dict[str, Any] | None:
    """
    Build the backup claim manifest.

    release defaults to the cluster name.
    Returns None when backups are disabled.
    """
    if not config.enabled:
        return None

    return {
        "kind": "PersistentVolumeClaim",
        "apiVersion": "v1",
        "metadata": {
            "name": f"{cluster_name}-{BACKUP_COMPONENT}",
            "labels": {
                "app.kubernetes.io/name": "cluster",
                LABEL_MANAGED_BY: MANAGED_BY,
                LABEL_CLUSTER: release or cluster_name,
                LABEL_TIER: BACKUP_COMPONENT,
            },
        },
        "spec": {
            "accessModes": ["ReadWriteOnce"],
            "volumeMode": "Filesystem",
            "resources": {"requests": {"storage": config.storage_size}},
            "storageClassName": config.storage_class_name,
        },
    }


def dump_backup_pvc(manifest: dict[str, Any] | None) -> str:
    """Serialize a rendered manifest to YAML. Empty string when nothing was rendered."""
    if manifest is None:
        return ""
    return yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False)


def backup_config_from_values(values: dict[str, Any]) -> BackupConfig:
    """Read the fullbackup section of a values mapping."""
    section = values.get(BACKUP_COMPONENT) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{BACKUP_COMPONENT} must be a mapping")

    defaults = BackupConfig()
    return BackupConfig(
        storage_size=str(section.get("storage", defaults.storage_size)),
        storage_class_name=str(section.get("storageClassName", defaults.storage_class_name)),
        enabled=bool(section.get("create", defaults.enabled)),
    )


def load_backup_config(path: Path) -> BackupConfig:
    """Load backup options from a values YAML file."""
    values = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(values, dict):
        raise ValueError(f"values file {path} must contain a mapping")
    return backup_config_from_values(values)
