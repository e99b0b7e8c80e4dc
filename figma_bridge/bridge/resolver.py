"""Token resolution across storage tiers.

Lookup order, first hit wins:
1. debug record (debugFile)
2. token map entry (tokensFile)
3. real-time snapshot, only if its embedded token matches (realTimeFile)

Every response reports what exists on every tier so a miss can be
diagnosed without shell access to the export directory.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Callable

from figma_bridge.storage.repository import (
    ExportRepository,
    DEBUG_TIER,
    TOKENS_TIER,
    REAL_TIME_TIER,
)
from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Result of resolving one token."""

    token: str
    source: Optional[str]
    data: Optional[Dict[str, Any]]
    sources: Dict[str, Dict[str, Any]]
    available_tokens: List[str] = field(default_factory=list)
    export_dir: str = ""

    @property
    def found(self) -> bool:
        return self.source is not None

    def to_response(self) -> Dict[str, Any]:
        if self.found:
            return {
                "success": True,
                "source": self.source,
                "token": self.token,
                "data": self.data,
                "sources": self.sources,
            }
        return {
            "success": False,
            "error": f"Token not found: {self.token}",
            "token": self.token,
            "sources": self.sources,
            "availableTokens": self.available_tokens,
            "exportDir": self.export_dir,
        }


class Resolver:
    """Resolves tokens against the repository's tiers in priority order."""

    def __init__(self, repository: ExportRepository):
        self.repository = repository

    def resolve(self, token: str) -> Resolution:
        sources = self._probe(token)

        lookups: List[tuple] = [
            (DEBUG_TIER, self._from_debug_record),
            (TOKENS_TIER, self._from_token_map),
            (REAL_TIME_TIER, self._from_real_time),
        ]
        for tier, lookup in lookups:
            data = self._safe_lookup(tier, lookup, token, sources)
            if data is not None:
                logger.info(f"Resolved {token} from {tier}")
                return Resolution(token=token, source=tier, data=data, sources=sources)

        logger.info(f"Token not found in any tier: {token}")
        return Resolution(
            token=token,
            source=None,
            data=None,
            sources=sources,
            available_tokens=self._available_tokens(sources),
            export_dir=str(self.repository.export_dir),
        )

    def _probe(self, token: str) -> Dict[str, Dict[str, Any]]:
        """Existence checks on every tier, independent of which one matches."""
        repo = self.repository
        debug_path = None
        try:
            debug_path = str(repo.debug_records.path_for(token))
        except ValueError:
            pass
        return {
            DEBUG_TIER: {
                "path": debug_path,
                "exists": repo.debug_records.exists(token),
            },
            TOKENS_TIER: {
                "path": str(repo.token_map.path),
                "exists": repo.token_map.exists,
            },
            REAL_TIME_TIER: {
                "path": str(repo.real_time.path),
                "exists": repo.real_time.exists,
            },
        }

    @staticmethod
    def _safe_lookup(
        tier: str,
        lookup: Callable[[str], Optional[Dict[str, Any]]],
        token: str,
        sources: Dict[str, Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        # An unreadable tier counts as a miss for that tier only
        try:
            return lookup(token)
        except StorageError as e:
            logger.warning(f"Failed to read {tier} for {token}: {e}")
            sources[tier]["error"] = str(e)
            return None

    def _from_debug_record(self, token: str) -> Optional[Dict[str, Any]]:
        data = self.repository.debug_records.get(token)
        return data if isinstance(data, dict) else None

    def _from_token_map(self, token: str) -> Optional[Dict[str, Any]]:
        record = self.repository.token_map.get(token)
        return record.to_dict() if record else None

    def _from_real_time(self, token: str) -> Optional[Dict[str, Any]]:
        snapshot = self.repository.real_time.get_snapshot()
        if snapshot is None or snapshot.token != token:
            return None
        return snapshot.to_dict()

    def _available_tokens(self, sources: Dict[str, Dict[str, Any]]) -> List[str]:
        try:
            return self.repository.token_map.keys()
        except StorageError as e:
            logger.warning(f"Failed to list tokens: {e}")
            sources[TOKENS_TIER].setdefault("error", str(e))
            return []
