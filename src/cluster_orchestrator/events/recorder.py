"""
Event recording.

The reconciler tells operators what happened through events:
Normal when a cluster fully converged, Warning when a stage failed.

Recording is delegated to an EventRecorder so the reconciler does not care
whether events end up in the log, a file, or a cluster event API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class EventSeverity(StrEnum):
    normal = "Normal"
    warning = "Warning"


@dataclass(frozen=True)
class Event:
    severity: EventSeverity
    reason: str
    message: str


class EventRecorder(Protocol):
    """Record one human readable event."""

    def record(self, severity: EventSeverity, reason: str, message: str) -> None:
        """Record an event."""


class LoggingEventRecorder:
    """Send events to the standard logger. Warnings log at warning level."""

    def __init__(self, name: str = "cluster_orchestrator.events") -> None:
        self._logger = logging.getLogger(name)

    def record(self, severity: EventSeverity, reason: str, message: str) -> None:
        level = logging.WARNING if severity == EventSeverity.warning else logging.INFO
        self._logger.log(level, "%s %s: %s", severity.value, reason, message)


@dataclass
class FakeRecorder:
    """
    In memory recorder for tests.

    capacity
    Oldest events are dropped once more than capacity events were recorded.
    """

    capacity: int = 10
    events: list[Event] = field(default_factory=list)

    def record(self, severity: EventSeverity, reason: str, message: str) -> None:
        self.events.append(Event(severity=severity, reason=reason, message=message))
        if len(self.events) > self.capacity:
            dropped = self.events.pop(0)
            logger.debug("fake recorder full, dropped event %s", dropped.reason)
