"""Utility modules for Figma Bridge."""

from .errors import (
    BridgeError,
    ConfigError,
    StorageError,
    BridgeClientError,
)

__all__ = [
    "BridgeError",
    "ConfigError",
    "StorageError",
    "BridgeClientError",
]
