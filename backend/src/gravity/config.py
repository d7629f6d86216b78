# backend/src/gravity/config.py
"""Configuration system for the Gravity Note backend.

This module handles loading settings from environment variables and an INI
file, providing sensible defaults, and computing derived paths for the
data directory.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os

from gravity.timestamps import load_zone


CONFIG_FILE_NAME = "config.ini"


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "search": {
        "max_results": (int, 200, 1, 1000, "Default cap on search/browse results"),
        "group_by_time": (bool, True, None, None, "Group results into time sections"),
        "show_empty_groups": (bool, False, None, None, "Keep empty time sections"),
        "loose_min_length": (int, 3, 1, 20, "Minimum query length for loose matching"),
        "timezone": (str, "", None, None, "IANA zone for day boundaries, blank for system"),
    },
    "notes": {
        "max_content_length": (int, 10_000, 1, 1_000_000, "Maximum note length"),
    },
    "paths": {
        "db_file": (str, "gravity.db", None, None, "Database file name"),
    },
}


@dataclass(frozen=True)
class SearchConfig:
    """Unified search/browse configuration."""

    max_results: int
    group_by_time: bool
    show_empty_groups: bool
    loose_min_length: int
    timezone: str


@dataclass(frozen=True)
class NotesConfig:
    """Note validation configuration."""

    max_content_length: int


@dataclass(frozen=True)
class PathsConfig:
    """Path names configuration."""

    db_file: str


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: bool | int | float | str
            try:
                if typ is bool:
                    value = raw_value.lower() in ("true", "1", "yes", "on")
                elif typ is int:
                    value = int(raw_value)
                elif typ is float:
                    value = float(raw_value)
                else:
                    value = raw_value
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = default

        # Validate range for numeric types
        if typ in (int, float) and value is not None:
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    return result


def _defaults(section: str) -> dict[str, Any]:
    return {key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA[section].items()}


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Returns a Config with a placeholder data_dir; load_settings() replaces it
    with the directory taken from the environment.

    Args:
        config_path: Path to config file. If None, uses defaults from schema.

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path)

    search = SearchConfig(**_load_section(parser, "search", CONFIG_SCHEMA["search"]))
    if search.timezone:
        try:
            load_zone(search.timezone)
        except ValueError as e:
            raise ConfigError(f"Invalid value for [search].timezone: {e}") from e
    notes = NotesConfig(**_load_section(parser, "notes", CONFIG_SCHEMA["notes"]))
    paths = PathsConfig(**_load_section(parser, "paths", CONFIG_SCHEMA["paths"]))

    return Config(data_dir=Path("."), search=search, notes=notes, paths=paths)


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    data_dir: Path
    db_path_override: Optional[Path] = None

    # Section configs - defaults set in __post_init__
    search: SearchConfig = None  # type: ignore[assignment]
    notes: NotesConfig = None  # type: ignore[assignment]
    paths: PathsConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.search is None:
            object.__setattr__(self, "search", SearchConfig(**_defaults("search")))
        if self.notes is None:
            object.__setattr__(self, "notes", NotesConfig(**_defaults("notes")))
        if self.paths is None:
            object.__setattr__(self, "paths", PathsConfig(**_defaults("paths")))

    @property
    def db_path(self) -> Path:
        """Path to the SQLite notes database."""
        if self.db_path_override is not None:
            return self.db_path_override
        return self.data_dir / self.paths.db_file

    @property
    def config_path(self) -> Path:
        """Path to the INI config file."""
        return self.data_dir / CONFIG_FILE_NAME


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the application.
    Use load_settings.cache_clear() to reload settings.

    Environment:
        GRAVITY_DATA_DIR: Data directory (defaults to ~/.gravity).
        GRAVITY_DB_PATH: Explicit database path, overriding the data directory.

    Raises:
        ConfigError: If the config file holds invalid values.
    """
    data_dir_str = os.getenv("GRAVITY_DATA_DIR")
    data_dir = Path(data_dir_str) if data_dir_str else Path.home() / ".gravity"

    config_file = data_dir / CONFIG_FILE_NAME
    try:
        config_exists = config_file.exists()
    except PermissionError:
        config_exists = False
    base_config = _load_config(config_file if config_exists else None)

    db_path_str = os.getenv("GRAVITY_DB_PATH")

    return Config(
        data_dir=data_dir,
        db_path_override=Path(db_path_str) if db_path_str else None,
        search=base_config.search,
        notes=base_config.notes,
        paths=base_config.paths,
    )
