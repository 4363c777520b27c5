from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from logcord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_MESSAGE_CACHE_SIZE = 250
DEFAULT_ATTACHMENT_FETCH_TIMEOUT = 60.0

_TRUTHY = {"1", "true", "yes", "on"}


class AppConfig:
    """Accessor around the optional YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed shortcuts for the few tunables the bot has. A missing file is not an
    error: every setting has a default. Secrets (the API token, the database
    URL) never live here; they come from the environment.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.debug("[APP CONFIGURATION] No config file at %s; using defaults", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it", self.config_path)
            return {}
        return data

    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file and return the loaded mapping (empty on error)."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def debug(self) -> bool:
        """Debug mode registers slash commands to ``DEBUG_GUILD`` only.

        ``LOGCORD_DEBUG`` in the environment overrides the file.
        """
        env_value = os.getenv("LOGCORD_DEBUG")
        if env_value is not None:
            return env_value.strip().lower() in _TRUTHY
        return bool(self._data.get("debug", False))

    @property
    def message_cache_size(self) -> int:
        """How many messages py-cord keeps cached; uncached deletes cannot be logged."""
        try:
            value = int(self._data.get("message_cache_size", DEFAULT_MESSAGE_CACHE_SIZE))
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid message_cache_size; using %d", DEFAULT_MESSAGE_CACHE_SIZE)
            return DEFAULT_MESSAGE_CACHE_SIZE
        return max(value, 0)

    @property
    def attachment_fetch_timeout(self) -> float:
        try:
            value = float(self._data.get("attachment_fetch_timeout", DEFAULT_ATTACHMENT_FETCH_TIMEOUT))
        except (TypeError, ValueError):
            return DEFAULT_ATTACHMENT_FETCH_TIMEOUT
        return value if value > 0 else DEFAULT_ATTACHMENT_FETCH_TIMEOUT
