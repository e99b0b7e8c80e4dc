"""Error hierarchy for Figma Bridge.

HTTP handlers map StorageError to a 500; request validation errors come
from pydantic and map to a 400.
"""

from pathlib import Path
from typing import Optional


class BridgeError(Exception):
    """Base exception for all Figma Bridge errors."""

    pass


class ConfigError(BridgeError):
    """Raised when a configuration value cannot be used."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message)
        self.setting = setting


class StorageError(BridgeError):
    """Raised when a storage tier cannot be read or written.

    Carries the tier name (debugFile, tokensFile, realTimeFile, latestFile)
    and the file path involved so the HTTP layer can report it.
    """

    def __init__(
        self,
        message: str,
        tier: Optional[str] = None,
        path: Optional[Path] = None,
    ):
        super().__init__(message)
        self.tier = tier
        self.path = path


class BridgeClientError(BridgeError):
    """Raised by BridgeClient when the bridge is unreachable or misbehaves."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
