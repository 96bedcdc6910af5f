from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path

from service_rollout.core.types import RolloutRecord


@dataclass(frozen=True)
class AuditLogger:
    """
    Rollout audit trail.

    Appends one JSON object per rollout record, one per line, so the file can
    be tailed or shipped line by line. Keys are sorted and stage is written as
    its plain string value.
    """

    path: Path
    event: str = "service_rollout"

    def log(self, record: RolloutRecord) -> None:
        payload = asdict(record)
        payload["stage"] = str(record.stage) if record.stage is not None else None
        payload["event"] = self.event
        payload["ts_unix"] = int(time.time())

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, sort_keys=True) + "\n")
