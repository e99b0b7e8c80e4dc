"""Retention sweep for debug records.

Runs once when the server starts (and from ``figma-bridge sweep``). It is
not scheduled, so a long-running bridge accumulates records until restart.
The token map and snapshots are never pruned.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, List

from figma_bridge.storage.repository import DebugRecordStore
from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)

DEBUG_RECORD_TTL = timedelta(hours=24)


@dataclass
class SweepResult:
    """Outcome of one retention pass."""

    removed: List[str] = field(default_factory=list)
    kept: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        text = f"{len(self.removed)} removed, {self.kept} kept"
        if self.errors:
            text += f", {len(self.errors)} errors"
        return text


def sweep_debug_records(
    store: DebugRecordStore,
    max_age: timedelta = DEBUG_RECORD_TTL,
    now: Optional[datetime] = None,
) -> SweepResult:
    """Delete debug records whose file mtime is older than max_age."""
    now = now or datetime.now(timezone.utc)
    result = SweepResult()

    try:
        records = store.list()
    except StorageError as e:
        logger.warning(f"Debug record sweep skipped: {e}")
        result.errors.append(str(e))
        return result

    for info in records:
        if now - info.modified <= max_age:
            result.kept += 1
            continue
        try:
            if store.delete(info.token):
                result.removed.append(info.token)
                logger.info(f"Cleaned: {info.file}")
        except StorageError as e:
            logger.warning(f"Failed to clean {info.file}: {e}")
            result.errors.append(str(e))

    logger.info(f"Debug record sweep: {result.summary}")
    return result
