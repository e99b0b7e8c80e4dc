"""Persisted record types for the three storage tiers.

Field names match the on-disk JSON read by downstream tooling, which is why
they are camelCase where the files use camelCase.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List

TOKEN_TTL = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_z(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> Optional[datetime]:
    """Parse an ISO timestamp written by isoformat_z or by other export tooling."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None


@dataclass
class TokenRecord:
    """One entry in the token map."""

    token: str
    component: Dict[str, Any]
    created: str
    expires: str

    @classmethod
    def create(cls, token: str, component: Dict[str, Any], now: Optional[datetime] = None) -> "TokenRecord":
        now = now or utc_now()
        return cls(
            token=token,
            component=component,
            created=isoformat_z(now),
            expires=isoformat_z(now + TOKEN_TTL),
        )

    @property
    def is_expired(self) -> bool:
        expires = parse_iso(self.expires)
        return expires is not None and expires <= utc_now()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, token: str, data: Dict[str, Any]) -> "TokenRecord":
        # Entries written by older bridges carry no token field
        return cls(
            token=data.get("token") or token,
            component=data.get("component"),
            created=data.get("created", ""),
            expires=data.get("expires", ""),
        )


@dataclass
class DebugRecord:
    """Full payload plus derived metadata for one token."""

    token: str
    timestamp: str
    component: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)
    figmentContext: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RealTimeSnapshot:
    """Most recent token-scoped export."""

    figment: Dict[str, Any]
    token: str
    exportedAt: str

    @property
    def components(self) -> List[Any]:
        components = self.figment.get("components") if isinstance(self.figment, dict) else None
        return components if isinstance(components, list) else []

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RealTimeSnapshot":
        return cls(
            figment=data.get("figment") or {},
            token=data.get("token", ""),
            exportedAt=data.get("exportedAt", ""),
        )
