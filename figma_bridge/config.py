"""Bridge configuration.

Every setting can be overridden from the environment:
- FIGMA_BRIDGE_PORT: listening port (default 8473)
- FIGMA_BRIDGE_HOST: bind address (default 127.0.0.1)
- FIGMA_EXPORT_DIR: storage directory (default ~/.figma-exports)
- FIGMA_BRIDGE_LOG_LEVEL: log level (default INFO)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from figma_bridge.utils.errors import ConfigError

DEFAULT_PORT = 8473
DEFAULT_HOST = "127.0.0.1"
DEFAULT_EXPORT_DIR = Path.home() / ".figma-exports"
DEFAULT_LOG_LEVEL = "INFO"

PORT_ENV = "FIGMA_BRIDGE_PORT"
HOST_ENV = "FIGMA_BRIDGE_HOST"
EXPORT_DIR_ENV = "FIGMA_EXPORT_DIR"
LOG_LEVEL_ENV = "FIGMA_BRIDGE_LOG_LEVEL"


def parse_port(value) -> int:
    """Parse and range-check a TCP port."""
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Port must be an integer, got {value!r}", setting="port") from None
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range (1-65535): {port}", setting="port")
    return port


@dataclass
class BridgeConfig:
    """Runtime settings for the bridge server."""

    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    export_dir: Path = field(default_factory=lambda: DEFAULT_EXPORT_DIR)
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        self.port = parse_port(self.port)
        self.export_dir = Path(self.export_dir).expanduser()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            port=env.get(PORT_ENV, DEFAULT_PORT),
            host=env.get(HOST_ENV) or DEFAULT_HOST,
            export_dir=Path(env.get(EXPORT_DIR_ENV) or DEFAULT_EXPORT_DIR),
            log_level=(env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
        )
