"""Export handling for POST /export.

Real-time exports write their tiers in this order:
1. real-time snapshot
2. token map entry
3. debug record

Nothing is rolled back if a later write fails. The debug record is the
authoritative tier: it is written last and the resolver reads it first.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

from figma_bridge.models.payload import ExportRequest, ExportType, select_component
from figma_bridge.models.records import (
    TokenRecord,
    DebugRecord,
    RealTimeSnapshot,
    isoformat_z,
    utc_now,
)
from figma_bridge.models.metadata import derive_metadata, derive_figment_context
from figma_bridge.storage.repository import ExportRepository
from figma_bridge.tokens import resolve_token

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of a successful export."""

    message: str
    file: Path
    token: Optional[str] = None
    token_provided: bool = False

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": True}
        if self.token is not None:
            body["token"] = self.token
        body["message"] = self.message
        body["file"] = str(self.file)
        return body


def stamp_component(component: Dict[str, Any], token: str) -> Dict[str, Any]:
    """Return a copy of the raw component whose id and tokenId are the token."""
    stamped = dict(component)
    stamped["id"] = token
    stamped["tokenId"] = token
    return stamped


class ExportService:
    """Writes export payloads to the storage tiers."""

    def __init__(self, repository: ExportRepository):
        self.repository = repository

    def export(self, request: ExportRequest) -> ExportResult:
        logger.info(f"Export request: type={request.type.value}")
        if request.type == ExportType.FIGMENT:
            return self.save_figment(request.figment)
        return self.save_real_time(request)

    def save_figment(self, figment: Dict[str, Any]) -> ExportResult:
        """Overwrite the latest-figment snapshot with the figment as sent."""
        self.repository.ensure_directory()
        path = self.repository.latest.put(figment)
        return ExportResult(message="Figment export saved successfully", file=path)

    def save_real_time(self, request: ExportRequest) -> ExportResult:
        """Write the real-time snapshot, token map entry and debug record."""
        token, provided = resolve_token(request.token)
        logger.info(f"Token: {token} ({'provided' if provided else 'generated'})")

        figment = request.figment
        component = select_component(figment, request.component_id)
        if component is None:
            # No components list: the whole figment is the exported component
            component = figment
        component_data = stamp_component(component, token)
        metadata = derive_metadata(component_data)
        logger.info(f"Component: {metadata['componentName']} | ID: {token}")

        now = utc_now()
        self.repository.ensure_directory()

        snapshot = RealTimeSnapshot(figment=figment, token=token, exportedAt=isoformat_z(now))
        snapshot_path = self.repository.real_time.put_snapshot(snapshot)

        self.repository.token_map.put(TokenRecord.create(token, component_data, now=now))

        self.repository.debug_records.put(
            DebugRecord(
                token=token,
                timestamp=isoformat_z(now),
                component=component_data,
                metadata=metadata,
                figmentContext=derive_figment_context(component_data),
            )
        )

        return ExportResult(
            message="Real-time export saved successfully",
            file=snapshot_path,
            token=token,
            token_provided=provided,
        )
