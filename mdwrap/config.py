"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

# Narrowest line that still leaves room for text after indentation.
WIDTH_MINIMUM = 10


@dataclass
class WrapConfig:
    """Configuration for reflowing text.

    Attributes:
        width: Maximum output line width in columns.
        markdown: Whether to recognize Markdown block structure.
        doxygen: Whether to recognize Doxygen commands and ``-#`` list items.
        tab_spaces: Columns a tab advances to in plain-text mode.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum input line length allowed while wrapping.

    Examples:
        WrapConfig(width=72, doxygen=True)
    """

    # Formatting
    width: int = 80
    markdown: bool = True
    doxygen: bool = False
    tab_spaces: int = 8

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`width` must be >= 10")
    """


# Files searched in each directory, with the tables that may hold settings.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "mdwrap"),)),
    (".mdwrap.toml", (("mdwrap",), ("tool", "mdwrap"))),
)


def load_config(search_path: Path) -> WrapConfig:
    """Load configuration from the nearest config file.

    Each directory from `search_path` up to the filesystem root is checked for
    the files in `CONFIG_SOURCES`; the first one holding a settings table wins,
    even when that table is empty. TOML files that cannot be read or decoded
    are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        WrapConfig: Loaded configuration, or defaults when none is found.

    Raises:
        ConfigError: If a settings table is not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config_file = directory / filename
            data = _read_toml(config_file)
            if data is None:
                continue
            for table_path in table_paths:
                table = _find_table(data, table_path)
                if table is not _MISSING:
                    return _config_from_table(table, config_file, ".".join(table_path))

    return WrapConfig()


_MISSING = object()


def _read_toml(config_file: Path) -> dict | None:
    if not config_file.is_file():
        return None
    try:
        return tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _find_table(data: dict, table_path: tuple[str, ...]) -> object:
    table: object = data
    for key in table_path:
        if not isinstance(table, dict):
            return _MISSING
        table = table.get(key, _MISSING)
    return table


def _config_from_table(table: object, config_file: Path, table_name: str) -> WrapConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid `[{table_name}]` settings in {config_file}")

    # TOML keys may use dashes; dataclass fields use underscores.
    settings = {key.replace("-", "_"): value for key, value in table.items()}
    unknown = sorted(settings.keys() - {field.name for field in fields(WrapConfig)})
    if unknown:
        raise ConfigError(
            f"Unsupported key(s) {', '.join(unknown)} in `[{table_name}]` of {config_file}"
        )
    return WrapConfig(**settings)


def validate_config(config: WrapConfig) -> None:
    """Validate a `WrapConfig` instance.

    Every field must hold a value of its declared type (an `int` field rejects
    booleans), numeric fields must be positive, and `width` must be at least
    `WIDTH_MINIMUM`.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If any field is invalid.

    Examples:
        validate_config(WrapConfig(width=72))
    """
    for field in fields(config):
        value = getattr(config, field.name)
        if field.type == "bool":
            if not isinstance(value, bool):
                raise ConfigError(f"`{field.name}` must be a boolean")
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{field.name}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{field.name}` must be a positive integer")

    if config.width < WIDTH_MINIMUM:
        raise ConfigError(f"`width` must be >= {WIDTH_MINIMUM}")


def apply_overrides(config: WrapConfig, **overrides: object) -> WrapConfig:
    """Return `config` with the given fields replaced.

    Overrides set to None (an option the user did not give) are ignored, and
    `config` itself is returned when nothing is left to change.

    Raises:
        TypeError: If an override name is not a `WrapConfig` field.

    Examples:
        updated = apply_overrides(config, width=72, doxygen=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def build_config(search_path: Path, **overrides: object) -> WrapConfig:
    """Load configuration for `search_path`, apply `overrides`, and validate it.

    Raises:
        ConfigError: If a config file is invalid or the result fails validation.
    """
    config = apply_overrides(load_config(search_path), **overrides)
    validate_config(config)
    return config
