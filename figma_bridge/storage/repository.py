"""File-backed storage tiers for exported components.

Layout inside the export directory:
- tokens.json: token map, one TokenRecord per token
- token-<token>-debug.json: one debug record per token
- real-time-export.json: most recent token-scoped export
- latest-figment.json: most recent plain figment export

The token map is rewritten whole on every put. A process-local lock
serialises that read-modify-write; other processes writing the same file
still race and the last writer wins.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any

from figma_bridge.models.records import TokenRecord, DebugRecord, RealTimeSnapshot
from figma_bridge.storage.files import read_json, write_json, delete_file
from figma_bridge.tokens import is_safe_token
from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)

TOKENS_FILENAME = "tokens.json"
LATEST_EXPORT_FILENAME = "latest-figment.json"
REAL_TIME_FILENAME = "real-time-export.json"
DEBUG_PREFIX = "token-"
DEBUG_SUFFIX = "-debug.json"

# Tier names, as reported in /debug responses
DEBUG_TIER = "debugFile"
TOKENS_TIER = "tokensFile"
REAL_TIME_TIER = "realTimeFile"
LATEST_TIER = "latestFile"


@dataclass
class DebugFileInfo:
    """Directory entry for one debug record."""

    token: str
    path: Path
    modified: datetime
    size: int

    @property
    def file(self) -> str:
        return self.path.name


class DebugRecordStore:
    """One JSON file per token holding the full payload and metadata."""

    tier = DEBUG_TIER

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, token: str) -> Path:
        if not is_safe_token(token):
            raise ValueError(f"Token cannot be used in a file name: {token!r}")
        return self.directory / f"{DEBUG_PREFIX}{token}{DEBUG_SUFFIX}"

    @staticmethod
    def token_from_filename(name: str) -> Optional[str]:
        if name.startswith(DEBUG_PREFIX) and name.endswith(DEBUG_SUFFIX):
            token = name[len(DEBUG_PREFIX):-len(DEBUG_SUFFIX)]
            return token or None
        return None

    def exists(self, token: str) -> bool:
        if not is_safe_token(token):
            return False
        return self.path_for(token).is_file()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        """Load the raw debug record for a token, or None."""
        if not is_safe_token(token):
            return None
        return read_json(self.path_for(token), tier=self.tier)

    def put(self, record: DebugRecord) -> Path:
        path = write_json(self.path_for(record.token), record.to_dict(), tier=self.tier)
        logger.info(f"Debug record written: {path.name}")
        return path

    def delete(self, token: str) -> bool:
        if not is_safe_token(token):
            return False
        return delete_file(self.path_for(token), tier=self.tier)

    def list(self) -> List[DebugFileInfo]:
        """List debug records, newest first by modification time."""
        try:
            entries = list(self.directory.iterdir())
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Failed to list {self.directory}: {e}", tier=self.tier, path=self.directory) from e

        infos = []
        for path in entries:
            token = self.token_from_filename(path.name)
            if token is None:
                continue
            try:
                stat = path.stat()
            except OSError:
                # Removed between listing and stat
                continue
            infos.append(
                DebugFileInfo(
                    token=token,
                    path=path,
                    modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    size=stat.st_size,
                )
            )
        infos.sort(key=lambda i: i.modified, reverse=True)
        return infos


class TokenMapStore:
    """Aggregate token -> TokenRecord map in a single JSON file."""

    tier = TOKENS_TIER

    def __init__(self, directory: Path):
        self.path = directory / TOKENS_FILENAME
        self._lock = threading.Lock()

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Dict[str, Dict[str, Any]]:
        """Load the whole map. A missing file is an empty map."""
        data = read_json(self.path, tier=self.tier)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"{self.path.name} is not a JSON object", tier=self.tier, path=self.path)
        return data

    def keys(self) -> List[str]:
        return list(self.load().keys())

    def get(self, token: str) -> Optional[TokenRecord]:
        entry = self.load().get(token)
        if not isinstance(entry, dict):
            return None
        return TokenRecord.from_dict(token, entry)

    def put(self, record: TokenRecord) -> Path:
        """Insert or overwrite one token's entry."""
        with self._lock:
            tokens = self.load()
            tokens[record.token] = record.to_dict()
            write_json(self.path, tokens, tier=self.tier)
        logger.info(f"Token mapped: {record.token} ({len(tokens)} total)")
        return self.path

    def delete(self, token: str) -> bool:
        with self._lock:
            tokens = self.load()
            if token not in tokens:
                return False
            del tokens[token]
            write_json(self.path, tokens, tier=self.tier)
        return True


class SnapshotStore:
    """Singleton JSON document, overwritten on every put."""

    def __init__(self, path: Path, tier: str):
        self.path = path
        self.tier = tier

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def size(self) -> int:
        return self.path.stat().st_size

    def get(self) -> Optional[Any]:
        return read_json(self.path, tier=self.tier)

    def put(self, data: Any) -> Path:
        path = write_json(self.path, data, tier=self.tier)
        logger.info(f"Snapshot written: {path.name}")
        return path

    def delete(self) -> bool:
        return delete_file(self.path, tier=self.tier)


class RealTimeSnapshotStore(SnapshotStore):
    """Snapshot of the last token-scoped export."""

    def __init__(self, directory: Path):
        super().__init__(directory / REAL_TIME_FILENAME, REAL_TIME_TIER)

    def get_snapshot(self) -> Optional[RealTimeSnapshot]:
        data = self.get()
        if not isinstance(data, dict):
            return None
        return RealTimeSnapshot.from_dict(data)

    def put_snapshot(self, snapshot: RealTimeSnapshot) -> Path:
        return self.put(snapshot.to_dict())


class ExportRepository:
    """The bridge's storage directory and its named stores."""

    def __init__(self, export_dir: Path):
        self.export_dir = Path(export_dir)
        self.debug_records = DebugRecordStore(self.export_dir)
        self.token_map = TokenMapStore(self.export_dir)
        self.real_time = RealTimeSnapshotStore(self.export_dir)
        self.latest = SnapshotStore(self.export_dir / LATEST_EXPORT_FILENAME, LATEST_TIER)

    def ensure_directory(self) -> None:
        if not self.export_dir.exists():
            try:
                self.export_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to create export directory: {e}", path=self.export_dir) from e
            logger.info(f"Created export directory {self.export_dir}")
