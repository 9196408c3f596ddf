# SPDX-License-Identifier: MIT
"""Configuration management for zotero-md."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .constants import (
    CACHE_FILE_NAME,
    DEFAULT_AUTO_UPDATE_INTERVAL,
    DEFAULT_BATCH_LIMIT,
    DEFAULT_CACHE_EXPIRATION,
    DEFAULT_CITATION_FORMAT,
    DEFAULT_PRELOAD_DELAY_MS,
    DEFAULT_PREVIEW_FORMAT,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_SEARCH_FIELDS,
    DEFAULT_SQLITE_BINARY,
)
from .enums import QueryEngine


APP_DIR_NAME = "zotero-md"
ENV_PREFIX = "ZOTERO_MD_"


def default_zotero_db_path() -> Path:
    """Zotero keeps its data directory in the home folder on every platform."""
    return Path.home() / "Zotero" / "zotero.sqlite"


def default_cache_dir() -> Path:
    base = os.environ.get("XDG_CACHE_HOME")
    return (Path(base) if base else Path.home() / ".cache") / APP_DIR_NAME


def default_data_dir() -> Path:
    base = os.environ.get("XDG_DATA_HOME")
    return (Path(base) if base else Path.home() / ".local" / "share") / APP_DIR_NAME


class DatabaseConfig(BaseModel):
    """Configuration for access to the Zotero database."""

    path: Path = Field(
        default_factory=default_zotero_db_path, description="Zotero SQLite database"
    )
    snapshot_dir: Path = Field(
        default_factory=default_cache_dir,
        description="Private directory holding the lock-free snapshot",
    )
    engine: QueryEngine = Field(
        QueryEngine.NATIVE, description="native (sqlite3 module) or cli (sqlite3 binary)"
    )
    sqlite_binary: str = Field(
        DEFAULT_SQLITE_BINARY, description="sqlite3 executable for the cli engine"
    )
    batch_limit: int = Field(
        DEFAULT_BATCH_LIMIT, ge=1, description="Maximum number of items per load"
    )
    timeout: float = Field(
        DEFAULT_QUERY_TIMEOUT, gt=0, description="Query timeout in seconds"
    )


class CacheConfig(BaseModel):
    """Configuration for the reference cache."""

    file: Path = Field(
        default_factory=lambda: default_data_dir() / CACHE_FILE_NAME,
        description="Persisted cache file",
    )
    expiration: int = Field(
        DEFAULT_CACHE_EXPIRATION, ge=0, description="Cache lifetime in seconds"
    )


class FormatConfig(BaseModel):
    """Configuration for citation and preview rendering."""

    citation: str = Field(DEFAULT_CITATION_FORMAT, description="Citation template")
    preview: str = Field(DEFAULT_PREVIEW_FORMAT, description="Preview template")
    search_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_FIELDS),
        description="Record fields used to build picker search text",
    )


class RefreshConfig(BaseModel):
    """Configuration for background loading."""

    preload: bool = Field(True, description="Load references shortly after startup")
    preload_delay: int = Field(
        DEFAULT_PRELOAD_DELAY_MS, ge=0, description="Preload delay in milliseconds"
    )
    auto_update: bool = Field(True, description="Refresh on editor activity")
    auto_update_interval: int = Field(
        DEFAULT_AUTO_UPDATE_INTERVAL,
        ge=0,
        description="Minimum seconds between automatic refreshes",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    format: FormatConfig = Field(default_factory=FormatConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)


class ConfigManager:
    """Manages application configuration from files and environment."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._find_config_file()
        self._config: AppConfig | None = None

    def _find_config_file(self) -> Path | None:
        """Find configuration file in standard locations."""
        search_paths = [
            Path.cwd() / ".zotero-md" / "config.yaml",  # Local project config
            Path.cwd() / "zotero-md.yaml",
            Path.home() / ".config" / APP_DIR_NAME / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return path

        return None

    def load_config(self) -> AppConfig:
        """Load configuration from file or create default."""
        if self._config is not None:
            return self._config

        default_config = self.get_default_config()

        if self.config_path and self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}

            config_data = self._deep_merge_configs(default_config, file_config)
        else:
            config_data = default_config

        config_data = self._apply_env_overrides(config_data)

        self._config = AppConfig(**config_data)
        return self._config

    def _deep_merge_configs(
        self, default_config: dict[str, Any], override_config: dict[str, Any]
    ) -> dict[str, Any]:
        """Deep merge override config into default config.

        Nested sections are merged key by key so a user file may override a
        single setting (e.g. ``cache: {expiration: 60}``) and keep every
        other default of that section.

        Args:
            default_config: Base configuration with all defaults
            override_config: User-provided overrides

        Returns:
            Merged configuration
        """
        result = copy.deepcopy(default_config)

        for key, value in override_config.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        # Example: ZOTERO_MD_DB_PATH=/data/zotero.sqlite
        overrides = {
            "DB_PATH": ("database", "path"),
            "CACHE_FILE": ("cache", "file"),
            "CACHE_EXPIRATION": ("cache", "expiration"),
        }
        for suffix, (section, option) in overrides.items():
            value = os.environ.get(ENV_PREFIX + suffix)
            if value is None:
                continue
            config_data.setdefault(section, {})
            config_data[section][option] = value

        return config_data

    def get_complete_config_dict(self) -> dict[str, Any]:
        """Get the complete configuration as a dictionary for display."""
        config = self.load_config()
        return config.model_dump(mode="json")

    def show_config(self) -> str:
        """Show the complete configuration in YAML format.

        Returns:
            YAML formatted configuration string
        """
        config_dict = self.get_complete_config_dict()
        return yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    def get_default_config(self) -> dict[str, Any]:
        """Get default configuration as a plain dictionary."""
        return AppConfig().model_dump(mode="json")

    def create_default_config(self, output_path: Path) -> None:
        """Create a default configuration file."""
        default_config = self.get_default_config()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)
