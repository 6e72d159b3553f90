import json
from pathlib import Path

import pytest

from cluster_orchestrator.core.errors import ClusterSourceError
from cluster_orchestrator.core.types import MemberPhase, RetentionPolicy, StoreState, WorkloadStatus
from cluster_orchestrator.source.static_source import StaticClusterSource, cluster_from_dict


def _write(tmp_path: Path, obj: object) -> Path:
    path = tmp_path / "clusters.json"
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


SPEC = {"metadata_replicas": 3, "storage_replicas": 3, "query_replicas": 2}


def test_loads_cluster_list(tmp_path: Path):
    path = _write(
        tmp_path,
        {
            "clusters": [
                {"name": "a", "spec": SPEC},
                {"name": "b", "namespace": "team", "spec": dict(SPEC, retention="delete")},
            ]
        },
    )

    clusters = StaticClusterSource(path=path).fetch()

    assert [c.key for c in clusters] == ["default/a", "team/b"]
    assert clusters[0].spec.retention == RetentionPolicy.retain
    assert clusters[1].spec.retention == RetentionPolicy.delete
    assert clusters[0].spec.backup.enabled is False


def test_loads_single_cluster_with_status(tmp_path: Path):
    path = _write(
        tmp_path,
        {
            "name": "demo",
            "spec": dict(SPEC, backup={"enabled": True, "storage_size": "50Gi"}),
            "status": {
                "metadata": {
                    "members": {"demo-metadata-0": {"healthy": True}},
                    "workload": {"replicas": 3, "ready_replicas": 1},
                    "phase": "Scale",
                },
                "storage": {"stores": {"1": {"pod_name": "demo-storage-0", "state": "Offline"}}},
            },
        },
    )

    [cluster] = StaticClusterSource(path=path).fetch()

    assert cluster.spec.backup.enabled is True
    assert cluster.spec.backup.storage_size == "50Gi"
    assert cluster.spec.backup.storage_class_name == "local-storage"
    assert cluster.status.metadata.members["demo-metadata-0"].healthy is True
    assert cluster.status.metadata.workload == WorkloadStatus(replicas=3, ready_replicas=1)
    assert cluster.status.metadata.phase == MemberPhase.scale
    assert cluster.status.storage.stores["1"].state == StoreState.offline
    assert cluster.status.storage.workload is None
    assert cluster.status.query.members == {}


def test_non_object_document_yields_nothing(tmp_path: Path):
    assert StaticClusterSource(path=_write(tmp_path, [1, 2])).fetch() == []
    assert StaticClusterSource(path=_write(tmp_path, {"clusters": "nope"})).fetch() == []


@pytest.mark.parametrize(
    "obj, message",
    [
        ({"spec": SPEC}, "missing a name"),
        ({"name": "demo"}, "missing a spec"),
        ({"name": "demo", "spec": dict(SPEC, storage_replicas=-1)}, "spec.storage_replicas"),
        ({"name": "demo", "spec": dict(SPEC, query_replicas="2")}, "spec.query_replicas"),
        ({"name": "demo", "spec": dict(SPEC, metadata_replicas=True)}, "spec.metadata_replicas"),
        ({"name": "demo", "spec": dict(SPEC, retention="archive")}, "spec.retention"),
        ({"name": "demo", "spec": dict(SPEC, backup=[1])}, "spec.backup"),
        (
            {"name": "demo", "spec": SPEC, "status": {"storage": {"stores": {"1": {"state": "Gone"}}}}},
            "invalid status",
        ),
    ],
)
def test_invalid_documents_are_rejected(obj, message):
    with pytest.raises(ClusterSourceError, match=message):
        cluster_from_dict(obj)


def test_unreadable_documents_raise_source_errors(tmp_path: Path):
    path = tmp_path / "clusters.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ClusterSourceError, match="cannot read clusters"):
        StaticClusterSource(path=path).fetch()

    with pytest.raises(ClusterSourceError, match="cannot read clusters"):
        StaticClusterSource(path=tmp_path / "missing.json").fetch()
