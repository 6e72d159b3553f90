import pytest

from cluster_orchestrator.control.mock import InMemoryControlPlane
from cluster_orchestrator.core.naming import LABEL_CLUSTER, LABEL_ORDINAL, LABEL_TIER, identity_labels
from cluster_orchestrator.core.types import (
    Cluster,
    ClusterSpec,
    PodRecord,
    ReclaimPolicy,
    RetentionPolicy,
    Tier,
)
from cluster_orchestrator.manager.meta import MetaManager
from cluster_orchestrator.manager.orphan_pods import OrphanPodCleaner
from cluster_orchestrator.manager.reclaim_policy import ReclaimPolicyManager, reclaim_policy_for


def make_cluster(retention: RetentionPolicy = RetentionPolicy.retain, storage: int = 3) -> Cluster:
    return Cluster(
        name="demo",
        spec=ClusterSpec(
            metadata_replicas=3,
            storage_replicas=storage,
            query_replicas=1,
            retention=retention,
        ),
    )


def provisioned(cluster: Cluster) -> InMemoryControlPlane:
    plane = InMemoryControlPlane()
    for tier in Tier:
        plane.sync_workload(cluster, tier, cluster.spec.replicas_for(tier))
    plane.calls.clear()
    return plane


def test_reclaim_policy_mapping():
    assert reclaim_policy_for(RetentionPolicy.retain) == ReclaimPolicy.retain
    assert reclaim_policy_for(RetentionPolicy.delete) == ReclaimPolicy.delete


def test_reclaim_policy_patches_only_differing_volumes():
    cluster = make_cluster()
    plane = provisioned(cluster)
    manager = ReclaimPolicyManager(volume_control=plane)

    patched = manager.sync(cluster)

    assert len(patched) == 6
    assert {v.reclaim_policy for v in plane.state(cluster).volumes.values()} == {ReclaimPolicy.retain}
    assert manager.sync(cluster) == []


def test_reclaim_policy_with_delete_retention_is_a_noop_on_fresh_volumes():
    cluster = make_cluster(retention=RetentionPolicy.delete)
    plane = provisioned(cluster)

    assert ReclaimPolicyManager(volume_control=plane).sync(cluster) == []
    assert "set_reclaim_policy" not in plane.calls


def test_reclaim_policy_failure_propagates():
    cluster = make_cluster()
    plane = provisioned(cluster)
    plane.fail("list_volumes", RuntimeError("volume api down"))

    with pytest.raises(RuntimeError, match="volume api down"):
        ReclaimPolicyManager(volume_control=plane).sync(cluster)


def test_meta_manager_labels_pods_and_claims():
    cluster = make_cluster()
    plane = provisioned(cluster)
    manager = MetaManager(pod_control=plane, volume_control=plane)

    updated = manager.sync(cluster)

    assert len(updated) == 7
    pod = plane.state(cluster).pods["demo-storage-2"]
    assert pod.labels[LABEL_CLUSTER] == "demo"
    assert pod.labels[LABEL_TIER] == "storage"
    assert pod.labels[LABEL_ORDINAL] == "2"
    assert plane.state(cluster).claim_labels["storage-demo-storage-2"] == identity_labels("demo", Tier.storage, 2)
    assert "demo-query-0" in updated
    assert not any(claim.startswith("query-") for claim in plane.state(cluster).claim_labels)


def test_meta_manager_is_idempotent():
    cluster = make_cluster()
    plane = provisioned(cluster)
    manager = MetaManager(pod_control=plane, volume_control=plane)
    manager.sync(cluster)
    plane.calls.clear()

    assert manager.sync(cluster) == []
    assert plane.calls == ["list_pods"]


def test_meta_manager_skips_pods_without_ordinal():
    cluster = make_cluster()
    plane = provisioned(cluster)
    plane.add_pod(cluster, PodRecord(name="demo-debug", tier=Tier.query, owner="demo-query"))

    updated = MetaManager(pod_control=plane, volume_control=plane).sync(cluster)

    assert "demo-debug" not in updated
    assert plane.state(cluster).pods["demo-debug"].labels == {}


def test_orphan_cleaner_keeps_live_pods():
    cluster = make_cluster()
    plane = provisioned(cluster)

    assert OrphanPodCleaner(pod_control=plane, workload_control=plane).clean(cluster) == []
    assert len(plane.state(cluster).pods) == 7


def test_orphan_cleaner_deletes_pods_beyond_desired_replicas():
    plane = provisioned(make_cluster(storage=3))
    smaller = make_cluster(storage=1)

    deleted = OrphanPodCleaner(pod_control=plane, workload_control=plane).clean(smaller)

    assert deleted == ["demo-storage-1", "demo-storage-2"]
    assert "demo-storage-0" in plane.state(smaller).pods


def test_orphan_cleaner_deletes_pods_without_live_workload():
    cluster = make_cluster()
    plane = provisioned(cluster)
    plane.add_pod(cluster, PodRecord(name="stray-query-0", tier=Tier.query, owner="stray-query"))
    plane.add_pod(cluster, PodRecord(name="unowned-metadata-0", tier=Tier.metadata))
    plane.delete_workload(cluster, Tier.query)

    deleted = OrphanPodCleaner(pod_control=plane, workload_control=plane).clean(cluster)

    assert deleted == ["demo-query-0", "stray-query-0", "unowned-metadata-0"]


def test_orphan_cleaner_failure_propagates():
    cluster = make_cluster()
    plane = provisioned(cluster)
    plane.add_pod(cluster, PodRecord(name="stray-query-0", tier=Tier.query, owner="stray-query"))
    plane.fail("delete_pod", RuntimeError("forbidden"))

    with pytest.raises(RuntimeError, match="forbidden"):
        OrphanPodCleaner(pod_control=plane, workload_control=plane).clean(cluster)


def test_meta_manager_finishes_claim_labels_after_failed_pass():
    cluster = make_cluster()
    plane = provisioned(cluster)
    manager = MetaManager(pod_control=plane, volume_control=plane)
    plane.fail("update_claim_labels", RuntimeError("claim api down"))

    with pytest.raises(RuntimeError, match="claim api down"):
        manager.sync(cluster)

    plane.clear_failures()
    manager.sync(cluster)

    claims = plane.state(cluster).claim_labels
    assert claims["metadata-demo-metadata-0"] == identity_labels("demo", Tier.metadata, 0)
    assert len(claims) == 6
    assert manager.sync(cluster) == []
