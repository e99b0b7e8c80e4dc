"""Export payload schema and persisted record types."""

from .payload import (
    ExportType,
    ExportRequest,
    ComponentPayload,
    SemanticHints,
    select_component,
    component_matches,
)
from .records import (
    TOKEN_TTL,
    TokenRecord,
    DebugRecord,
    RealTimeSnapshot,
    isoformat_z,
    utc_now,
)
from .metadata import derive_metadata, derive_figment_context

__all__ = [
    "ExportType",
    "ExportRequest",
    "ComponentPayload",
    "SemanticHints",
    "select_component",
    "component_matches",
    "TOKEN_TTL",
    "TokenRecord",
    "DebugRecord",
    "RealTimeSnapshot",
    "isoformat_z",
    "utc_now",
    "derive_metadata",
    "derive_figment_context",
]
