"""Configuration management for callscope."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .types import SortOption


@dataclass
class SearchConfig:
    """Search defaults used by the CLI and the workspace."""

    default_sort: SortOption = SortOption.DATE_DESC
    default_limit: int = 50


def _default_project_path() -> Path:
    """Get default project file path."""
    data_dir = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return data_dir / "callscope" / "project.json"


def _parse_sort(value: Any) -> SortOption | None:
    try:
        return SortOption(str(value).lower())
    except ValueError:
        return None


def _parse_limit(value: Any) -> int | None:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return None
    return limit if limit > 0 else None


@dataclass
class Config:
    """Main application configuration."""

    project_path: Path = field(default_factory=_default_project_path)
    log_level: str = "WARNING"
    search: SearchConfig = field(default_factory=SearchConfig)

    @classmethod
    def from_env(cls, config: "Config | None" = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            config: Optional base configuration to override in place.

        Returns:
            Configuration with environment overrides applied.
        """
        config = config or cls()

        if path := os.environ.get("CALLSCOPE_PROJECT"):
            config.project_path = Path(path)

        if level := os.environ.get("CALLSCOPE_LOG_LEVEL"):
            config.log_level = level.upper()

        if (sort := _parse_sort(os.environ.get("CALLSCOPE_SORT", ""))) is not None:
            config.search.default_sort = sort

        if (limit := _parse_limit(os.environ.get("CALLSCOPE_LIMIT"))) is not None:
            config.search.default_limit = limit

        return config

    @classmethod
    def from_file(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file.

        Expected format:
            project_path: ~/cases/op-delta/project.json
            log_level: INFO
            search:
              default_sort: duration_desc
              default_limit: 100

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Config populated from the file; missing keys keep their defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigError: If the file is not a valid YAML mapping.
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        config = cls()
        if project := data.get("project_path"):
            config.project_path = Path(project).expanduser()
        if level := data.get("log_level"):
            config.log_level = str(level).upper()

        search = data.get("search") or {}
        if not isinstance(search, dict):
            raise ConfigError(f"'search' in {path} must be a mapping")
        if "default_sort" in search:
            sort = _parse_sort(search["default_sort"])
            if sort is None:
                raise ConfigError(f"Unknown sort option: {search['default_sort']!r}")
            config.search.default_sort = sort
        if "default_limit" in search:
            limit = _parse_limit(search["default_limit"])
            if limit is None:
                raise ConfigError(f"Invalid default_limit: {search['default_limit']!r}")
            config.search.default_limit = limit

        return config


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from an optional file, then the environment.

    Environment variables take precedence over file values.

    Args:
        path: Optional YAML config file.

    Returns:
        Resolved configuration.
    """
    config = Config.from_file(path) if path else Config()
    return Config.from_env(config)
