"""
Configuration management for Eureka.

Uses XDG base directories:
- Config: ~/.config/eureka/config.toml (optional, hand-edited)
- Settings: ~/.config/eureka/settings.json (written by eureka on first run)
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_SSH_KEY = Path.home() / ".ssh" / "id_rsa"
DEFAULT_BRANCH = "main"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/eureka)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "eureka"


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_settings_path() -> Path:
    """Get the path to settings.json."""
    return get_config_dir() / "settings.json"


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist. Sections missing from the
    file fall back to their defaults.
    """
    config_path = get_config_path()
    config = get_default_config()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        loaded = tomli.load(f)

    for section, values in loaded.items():
        if isinstance(values, dict):
            config.setdefault(section, {}).update(values)
        else:
            config[section] = values
    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "git": {
            "branch": DEFAULT_BRANCH,
        },
        "editor": {
            "editor": None,  # falls back to $EDITOR, then vi
            "pager": None,  # falls back to $PAGER, then less
        },
    }


class ConfigKey(str, Enum):
    """Values eureka asks for on first run."""

    REPO = "repo"
    SSH_KEY = "ssh_key"


class StoredConfig(BaseModel):
    """Schema for settings.json."""

    repo: str | None = None
    ssh_key: str | None = None

    @field_validator("repo", "ssh_key")
    @classmethod
    def not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value


class ConfigManager:
    """Reads and writes settings.json."""

    def __init__(self, settings_path: Path | None = None):
        self.settings_path = settings_path or get_settings_path()

    def _load(self) -> StoredConfig:
        if not self.settings_path.exists():
            return StoredConfig()
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                return StoredConfig.model_validate_json(f.read())
        except ValidationError as e:
            raise ValueError(f"Corrupt settings at {self.settings_path}: {e}") from e

    def _save(self, stored: StoredConfig) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, "w", encoding="utf-8") as f:
            f.write(stored.model_dump_json(indent=2))

    def read(self, key: ConfigKey) -> str | None:
        """Read a stored value. EUREKA_REPO overrides the stored repo."""
        if key is ConfigKey.REPO and (env_repo := os.environ.get("EUREKA_REPO")):
            return env_repo
        return getattr(self._load(), key.value)

    def write(self, key: ConfigKey, value: str) -> None:
        """Validate and persist a single value."""
        data = self._load().model_dump()
        data[key.value] = value
        self._save(StoredConfig.model_validate(data))
        logger.debug("Stored %s in %s", key.value, self.settings_path)

    def clear(self) -> None:
        """Forget everything stored."""
        if self.settings_path.exists():
            self.settings_path.unlink()
            logger.debug("Removed %s", self.settings_path)

    def is_missing(self) -> bool:
        """True when any first-run value is still unknown."""
        stored = self._load()
        repo = os.environ.get("EUREKA_REPO") or stored.repo
        return repo is None or stored.ssh_key is None
