"""
Reconcile worker.

Purpose
Continuously:
- Load clusters
- Reconcile each one
- Turn the outcome into a work queue decision

This is the runtime loop, not the reconciler. Backoff policy belongs to the
queue; the worker only says which kind of retry a pass asked for.

forget   the pass converged, drop the key
requeue  a tier is still converging, retry with the normal rate limit
backoff  a stage failed, retry with error backoff
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from enum import StrEnum

from cluster_orchestrator.controller.reconciler import ClusterReconciler
from cluster_orchestrator.core.errors import ConfigError, OrchestratorError, is_requeue_error
from cluster_orchestrator.core.types import Cluster
from cluster_orchestrator.source.base import ClusterSource

logger = logging.getLogger(__name__)

ENV_INTERVAL_SECONDS = "CLUSTER_ORCHESTRATOR_INTERVAL_SECONDS"
ENV_MAX_PASSES = "CLUSTER_ORCHESTRATOR_MAX_PASSES"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


class QueueDecision(StrEnum):
    forget = "forget"
    requeue = "requeue"
    backoff = "backoff"


@dataclass(frozen=True)
class WorkerConfig:
    """
    Worker configuration.

    interval_seconds
    Sleep duration between cycles.

    max_passes
    Stop after this many cycles, or passes per cluster when converging.
    Zero means no limit for run_forever.
    """

    interval_seconds: int = 10
    max_passes: int = 0

    @classmethod
    def from_env(cls) -> WorkerConfig:
        """Read overrides from the environment, keeping defaults for unset values."""
        defaults = cls()
        return cls(
            interval_seconds=_env_int(ENV_INTERVAL_SECONDS, defaults.interval_seconds),
            max_passes=_env_int(ENV_MAX_PASSES, defaults.max_passes),
        )


@dataclass(frozen=True)
class PassResult:
    cluster_key: str
    decision: QueueDecision
    message: str = ""


class ReconcileWorker:
    """Top level reconcile loop for every cluster of a source."""

    def __init__(
        self,
        reconciler: ClusterReconciler,
        source: ClusterSource,
        config: WorkerConfig | None = None,
    ) -> None:
        self._reconciler = reconciler
        self._source = source
        self._config = config or WorkerConfig()

    def process(self, cluster: Cluster) -> PassResult:
        """Reconcile one cluster and map the outcome to a queue decision."""
        try:
            self._reconciler.reconcile(cluster)
        except OrchestratorError as exc:
            if is_requeue_error(exc):
                return PassResult(cluster.key, QueueDecision.requeue, str(exc))
            return PassResult(cluster.key, QueueDecision.backoff, str(exc))
        return PassResult(cluster.key, QueueDecision.forget)

    def converge(self, cluster: Cluster, max_passes: int | None = None) -> list[PassResult]:
        """
        Reconcile the same cluster until it converges or the pass limit is hit.

        The cluster object carries its status from pass to pass, the way a
        written back status is read again by the next pass.
        """
        limit = max_passes or self._config.max_passes or 1
        results: list[PassResult] = []
        for _ in range(limit):
            result = self.process(cluster)
            results.append(result)
            logger.info("cluster %s: %s %s", result.cluster_key, result.decision.value, result.message)
            if result.decision == QueueDecision.forget:
                break
        return results

    def run_cycle(self) -> list[PassResult]:
        """Execute one cycle over every cluster."""
        results: list[PassResult] = []
        for cluster in self._source.fetch():
            result = self.process(cluster)
            if result.decision != QueueDecision.forget:
                logger.info("cluster %s: %s %s", result.cluster_key, result.decision.value, result.message)
            results.append(result)
        return results

    def run_forever(self) -> None:
        """Continuous loop execution."""
        cycles = 0
        while True:
            self.run_cycle()
            cycles += 1
            if self._config.max_passes and cycles >= self._config.max_passes:
                return
            time.sleep(self._config.interval_seconds)
