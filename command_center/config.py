# Command Center: configuration
# Override storage, backend and API endpoints via command_center.yaml,
# environment variables, or CLI args.

import os
import logging
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

from .client import LOCAL_API_BASE, REMOTE_API_BASE, select_base_url

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent.parent / "config" / "command_center.yaml"
BACKENDS = ("local", "remote")


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


@dataclass
class DashboardConfig:
    """Runtime configuration for the dashboard."""

    # Which persistence backend to use: "local" or "remote"
    backend: str = "local"

    # Local backend
    storage_path: str = "~/.local/share/command-center/storage.db"
    storage_key: str = "fulmen-data"

    # Remote backend
    hostname: str = "localhost"        # where the dashboard is served from
    local_api_base: str = LOCAL_API_BASE
    remote_api_base: str = REMOTE_API_BASE
    api_key_env: str = "COMMAND_CENTER_API_KEY"
    api_key: str = ""
    request_timeout: Optional[float] = None  # None = wait indefinitely

    log_level: str = "INFO"

    def resolve(self):
        """Apply environment overrides, expand paths and check the backend."""
        self.backend = os.environ.get("COMMAND_CENTER_BACKEND", self.backend).strip().lower()
        self.storage_path = os.environ.get("COMMAND_CENTER_DB", self.storage_path)
        self.storage_path = str(Path(self.storage_path).expanduser())
        if not self.api_key:
            self.api_key = os.environ.get(self.api_key_env, "")
        if self.backend not in BACKENDS:
            raise ConfigError(
                f"Unknown backend '{self.backend}'. Available: {list(BACKENDS)}"
            )
        if self.backend == "remote" and not self.api_key:
            logger.warning(f"{self.api_key_env} is not set; API calls will be unauthenticated")

    @property
    def api_base(self) -> str:
        return select_base_url(self.hostname, self.local_api_base, self.remote_api_base)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "DashboardConfig":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        known = {f.name for f in fields(cls)}
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except (yaml.YAMLError, OSError, TypeError, AttributeError) as e:
                logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
                cfg = cls()
        else:
            cfg = cls()
        cfg.resolve()
        return cfg
