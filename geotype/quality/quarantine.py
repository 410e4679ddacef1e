"""Quarantine handling for rejected input records."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List

import orjson
import structlog

LOGGER = structlog.get_logger(__name__)


class Quarantine:
    """Writes malformed feature records to a directory for inspection."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def reject(self, *, record: object, reason: List[str], line: int) -> Path:
        """Persist the rejected record with accompanying reasons."""
        self._root.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = self._root / f"reject_{timestamp}_{line}.json"
        blob = {"line": line, "record": record, "reason": reason}
        target.write_bytes(orjson.dumps(blob, option=orjson.OPT_INDENT_2))
        self._count += 1
        LOGGER.warning("record_rejected", line=line, reason=reason)
        return target
