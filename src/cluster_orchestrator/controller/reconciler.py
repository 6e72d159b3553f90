"""
Reconciliation controller.

This controller drives one cluster one pass closer to its declared state.

Stage order
1) reclaim policy sync
2) metadata tier sync, then metadata tier gate
3) storage tier sync, then storage tier gate
4) query tier sync
5) meta manager sync
6) orphan pod clean

Fail fast
The first stage that fails stops the pass. Nothing already done is undone;
every stage is idempotent, so the next pass simply starts again from the top.

Two outcomes besides success
RequeueError when a gate is not satisfied yet. That is a normal transient
state and the work queue retries later.
StageError when a stage failed. The message starts with the stage name.

Status
Tier managers return fresh tier status which is merged here. At the end of
the pass, whatever the outcome, status is written back only if it changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable

from cluster_orchestrator.control.base import ClusterStatusWriter
from cluster_orchestrator.core.errors import (
    MemberSyncError,
    OrchestratorError,
    RequeueError,
    StageError,
    is_requeue_error,
)
from cluster_orchestrator.core.types import Cluster, ClusterStatus
from cluster_orchestrator.events.recorder import EventRecorder, EventSeverity
from cluster_orchestrator.gates.readiness import (
    require_metadata_tier_ready,
    require_storage_tier_ready,
)
from cluster_orchestrator.manager.base import MetaSyncer, OrphanCleaner, ReclaimPolicySyncer
from cluster_orchestrator.member.base import TierMemberManager
from cluster_orchestrator.state.snapshot import merge_fragment, snapshot_status, status_changed

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    """Pipeline stage names. They prefix hard error messages."""

    reclaim_policy = "reclaim policy sync"
    metadata_tier = "metadata tier member manager sync"
    storage_tier = "storage tier member manager sync"
    query_tier = "query tier member manager sync"
    meta = "meta manager sync"
    orphan_pods = "orphan pods clean"
    status_update = "cluster status update"


@dataclass(frozen=True)
class ReconcilerConfig:
    """
    Reconciler configuration.

    emit_success_events
    Record a Normal event every time a pass converges.
    """

    emit_success_events: bool = True


class ClusterReconciler:
    """
    Cluster reconciler.

    Every collaborator is injected so tests can swap any of them for a fake.

    status_writer
    Optional. Without it status only lives on the in memory cluster.
    """

    def __init__(
        self,
        reclaim_policy_manager: ReclaimPolicySyncer,
        metadata_member_manager: TierMemberManager,
        storage_member_manager: TierMemberManager,
        query_member_manager: TierMemberManager,
        meta_manager: MetaSyncer,
        orphan_pod_cleaner: OrphanCleaner,
        recorder: EventRecorder,
        status_writer: ClusterStatusWriter | None = None,
        config: ReconcilerConfig | None = None,
    ) -> None:
        self._reclaim_policy_manager = reclaim_policy_manager
        self._metadata_member_manager = metadata_member_manager
        self._storage_member_manager = storage_member_manager
        self._query_member_manager = query_member_manager
        self._meta_manager = meta_manager
        self._orphan_pod_cleaner = orphan_pod_cleaner
        self._recorder = recorder
        self._status_writer = status_writer
        self._config = config or ReconcilerConfig()

    def reconcile(self, cluster: Cluster) -> None:
        """
        Run one reconcile pass.

        Returns None when every stage succeeded.
        Raises RequeueError or StageError otherwise.
        """
        before = snapshot_status(cluster)
        pass_error: OrchestratorError | None = None

        try:
            self._run_pipeline(cluster)
        except (RequeueError, StageError) as exc:
            pass_error = exc

        try:
            self._write_status(cluster, before)
        except StageError as write_error:
            if isinstance(pass_error, StageError):
                logger.warning("cluster %s: %s", cluster.key, write_error)
            else:
                pass_error = write_error

        if pass_error is None:
            logger.debug("cluster %s: pass converged", cluster.key)
            if self._config.emit_success_events:
                self._recorder.record(
                    EventSeverity.normal,
                    "Synced",
                    f"cluster {cluster.key} synced successfully",
                )
            return

        if is_requeue_error(pass_error):
            logger.info("cluster %s: requeue, %s", cluster.key, pass_error)
        else:
            logger.warning("cluster %s: %s", cluster.key, pass_error)
            self._recorder.record(
                EventSeverity.warning,
                "FailedSync",
                f"cluster {cluster.key}: {pass_error}",
            )
        raise pass_error

    def _run_pipeline(self, cluster: Cluster) -> None:
        self._run_stage(Stage.reclaim_policy, self._reclaim_policy_manager.sync, cluster)

        self._sync_tier(Stage.metadata_tier, self._metadata_member_manager, cluster)
        require_metadata_tier_ready(cluster.spec, cluster.status.metadata)

        self._sync_tier(Stage.storage_tier, self._storage_member_manager, cluster)
        require_storage_tier_ready(cluster.spec, cluster.status.storage)

        self._sync_tier(Stage.query_tier, self._query_member_manager, cluster)

        self._run_stage(Stage.meta, self._meta_manager.sync, cluster)
        self._run_stage(Stage.orphan_pods, self._orphan_pod_cleaner.clean, cluster)

    def _run_stage(self, stage: Stage, fn: Callable[[Cluster], object], cluster: Cluster) -> None:
        logger.debug("cluster %s: %s", cluster.key, stage.value)
        try:
            fn(cluster)
        except RequeueError:
            raise
        except Exception as exc:
            raise StageError(stage.value, exc) from exc

    def _sync_tier(self, stage: Stage, manager: TierMemberManager, cluster: Cluster) -> None:
        """
        Sync one tier and merge the status it reports.

        A failed sync still merges the partial status it carried, so the
        next pass and the status write see what was observed.
        """
        logger.debug("cluster %s: %s", cluster.key, stage.value)
        try:
            fragment = manager.sync(cluster)
        except RequeueError:
            raise
        except MemberSyncError as exc:
            if exc.status is not None:
                merge_fragment(cluster, exc.status)
            raise StageError(stage.value, exc) from exc
        except Exception as exc:
            raise StageError(stage.value, exc) from exc

        merge_fragment(cluster, fragment)

    def _write_status(self, cluster: Cluster, before: ClusterStatus) -> None:
        if self._status_writer is None or not status_changed(before, cluster.status):
            return
        try:
            self._status_writer.update_status(cluster)
        except Exception as exc:
            raise StageError(Stage.status_update.value, exc) from exc
