"""Export handling, token resolution, retention and health reporting."""

from .exporter import ExportService, ExportResult, stamp_component
from .resolver import Resolver, Resolution
from .sweeper import sweep_debug_records, SweepResult, DEBUG_RECORD_TTL
from .health import HealthReporter, describe_component

__all__ = [
    "ExportService",
    "ExportResult",
    "stamp_component",
    "Resolver",
    "Resolution",
    "sweep_debug_records",
    "SweepResult",
    "DEBUG_RECORD_TTL",
    "HealthReporter",
    "describe_component",
]
