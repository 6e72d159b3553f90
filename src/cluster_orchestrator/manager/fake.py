"""
Fake stage managers for reconciler tests.

Each fake records how many times it ran and raises an injected error when one
is set.
"""

from __future__ import annotations

from dataclasses import dataclass

from cluster_orchestrator.core.types import Cluster


@dataclass
class _FakeStage:
    error: Exception | None = None
    calls: int = 0

    def set_sync_error(self, exc: Exception | None) -> None:
        self.error = exc

    def _run(self) -> list[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return []


class FakeReclaimPolicyManager(_FakeStage):
    def sync(self, cluster: Cluster) -> list[str]:
        return self._run()


class FakeMetaManager(_FakeStage):
    def sync(self, cluster: Cluster) -> list[str]:
        return self._run()


class FakeOrphanPodCleaner(_FakeStage):
    def clean(self, cluster: Cluster) -> list[str]:
        return self._run()
