"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
RequeueError means a tier is still converging. The pass stops and the work
queue retries later. It is not an operational fault.
StageError means a stage failed. It names the stage and keeps the cause.
MemberSyncError is raised by tier member managers and may carry the status
they still managed to observe.
"""

from __future__ import annotations

from typing import Any


class OrchestratorError(Exception):
    """Base class for all orchestrator exceptions."""


class RequeueError(OrchestratorError):
    """
    Raised when the pass should be retried later.

    reason
    Human readable wait reason, such as waiting for metadata tier cluster running.

    stage
    Name of the stage that asked for the requeue.
    """

    def __init__(self, reason: str, stage: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.stage = stage


class StageError(OrchestratorError):
    """Raised when a pipeline stage fails with a hard error."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage} error: {cause}")
        self.stage = stage
        self.cause = cause


class MemberSyncError(OrchestratorError):
    """
    Raised by a tier member manager when its sync fails.

    status is the best effort tier status observed before the failure, or None.
    """

    def __init__(self, message: str, status: Any | None = None) -> None:
        super().__init__(message)
        self.status = status


class ClusterSourceError(OrchestratorError):
    """Raised when a cluster document cannot be parsed."""


class ConfigError(OrchestratorError):
    """Raised when configuration values are invalid."""


def is_requeue_error(exc: BaseException | None) -> bool:
    """
    Return True if exc, or any exception it was raised from, is a RequeueError.

    Only explicit chains are followed. Callers branch on this instead of
    matching message text.
    """
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, RequeueError):
            return True
        seen.add(id(exc))
        exc = exc.__cause__
    return False
