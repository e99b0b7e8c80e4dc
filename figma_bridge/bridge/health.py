"""Health report for GET /health.

Each tier is read independently. A tier that fails to read degrades its
field to an empty list or None instead of failing the report.
"""

import logging
from typing import Optional, Dict, Any, List

from figma_bridge import __version__
from figma_bridge.models.records import TokenRecord, isoformat_z, utc_now
from figma_bridge.storage.repository import ExportRepository
from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)

RECENT_DEBUG_LOGS = 10


def describe_component(component: Any) -> Dict[str, Any]:
    """Display fields for a stored component payload."""
    if not isinstance(component, dict):
        component = {}
    children = component.get("children")
    return {
        "componentName": component.get("component") or component.get("name") or "Unknown",
        "componentType": component.get("suggestedComponentType") or "component",
        "hasEnhancedVisuals": component.get("enhancedVisuals") is not None,
        "hasChildren": isinstance(children, list) and len(children) > 0,
    }


class HealthReporter:
    """Aggregates tier state into a status snapshot."""

    def __init__(
        self,
        repository: ExportRepository,
        port: int,
        recent_limit: int = RECENT_DEBUG_LOGS,
    ):
        self.repository = repository
        self.port = port
        self.recent_limit = recent_limit

    def report(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "version": __version__,
            "port": self.port,
            "exportDir": str(self.repository.export_dir),
            "timestamp": isoformat_z(utc_now()),
            "debugLogs": self.debug_logs(),
            "tokens": self.tokens(),
            "realTimeExport": self.real_time_summary(),
        }

    def debug_logs(self) -> List[Dict[str, Any]]:
        """Most recently modified debug records, newest first."""
        try:
            infos = self.repository.debug_records.list()
        except StorageError as e:
            logger.warning(f"Health: debug records unavailable: {e}")
            return []
        return [
            {
                "file": info.file,
                "token": info.token,
                "created": isoformat_z(info.modified),
                "size": info.size,
            }
            for info in infos[: self.recent_limit]
        ]

    def tokens(self) -> List[Dict[str, Any]]:
        try:
            entries = self.repository.token_map.load()
        except StorageError as e:
            logger.warning(f"Health: token map unavailable: {e}")
            return []

        tokens = []
        for token, entry in entries.items():
            if not isinstance(entry, dict):
                continue
            record = TokenRecord.from_dict(token, entry)
            tokens.append(
                {
                    "token": token,
                    "created": record.created,
                    "expires": record.expires,
                    "expired": record.is_expired,
                    **describe_component(record.component),
                }
            )
        return tokens

    def real_time_summary(self) -> Optional[Dict[str, Any]]:
        store = self.repository.real_time
        try:
            if not store.exists:
                return {"exists": False}
            size = store.size()
            snapshot = store.get_snapshot()
        except (StorageError, OSError) as e:
            logger.warning(f"Health: real-time snapshot unavailable: {e}")
            return None
        if snapshot is None:
            return {"exists": True, "size": size, "token": None, "exportedAt": None, "componentCount": 0}
        return {
            "exists": True,
            "size": size,
            "token": snapshot.token or None,
            "exportedAt": snapshot.exportedAt or None,
            "componentCount": len(snapshot.components),
        }
