"""File-backed storage tiers."""

from .repository import (
    ExportRepository,
    DebugRecordStore,
    TokenMapStore,
    SnapshotStore,
    RealTimeSnapshotStore,
    DebugFileInfo,
    DEBUG_TIER,
    TOKENS_TIER,
    REAL_TIME_TIER,
    LATEST_TIER,
)

__all__ = [
    "ExportRepository",
    "DebugRecordStore",
    "TokenMapStore",
    "SnapshotStore",
    "RealTimeSnapshotStore",
    "DebugFileInfo",
    "DEBUG_TIER",
    "TOKENS_TIER",
    "REAL_TIME_TIER",
    "LATEST_TIER",
]
