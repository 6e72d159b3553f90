from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path

from cluster_orchestrator.events.recorder import EventSeverity


@dataclass(frozen=True)
class JsonlEventRecorder:
    """
    JSON line event recorder.

    Each call appends one JSON object per line.
    """

    path: Path

    def record(self, severity: EventSeverity, reason: str, message: str) -> None:
        payload = {
            "severity": severity.value,
            "reason": reason,
            "message": message,
            "ts_unix": int(time.time()),
        }
        line = json.dumps(payload, sort_keys=True)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
