"""JSON file helpers shared by the storage tiers."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)


def read_json(path: Path, tier: Optional[str] = None) -> Optional[Any]:
    """Read a JSON file. Returns None if the file doesn't exist."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Failed to read {path.name}: {e}", tier=tier, path=path) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path.name}: {e}", tier=tier, path=path) from e


def write_json(path: Path, data: Any, tier: Optional[str] = None) -> Path:
    """Write a JSON file via a temp file and os.replace.

    Readers see either the previous document or the new one, never a
    partially written file.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
    except (OSError, TypeError, ValueError) as e:
        raise StorageError(f"Failed to write {path.name}: {e}", tier=tier, path=path) from e

    logger.debug(f"Wrote {path.name} ({len(payload)} bytes)")
    return path


def delete_file(path: Path, tier: Optional[str] = None) -> bool:
    """Delete a file. Returns False if it was already gone."""
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageError(f"Failed to delete {path.name}: {e}", tier=tier, path=path) from e
