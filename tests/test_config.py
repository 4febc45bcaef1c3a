from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from mdwrap.config import (
    ConfigError,
    WrapConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".mdwrap.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 72
        markdown = false
        doxygen = true
        tab_spaces = 4
        max_file_size = 1
        max_line_length = 2
        """,
    )

    config = load_config(tmp_path)

    assert config == WrapConfig(
        width=72,
        markdown=False,
        doxygen=True,
        tab_spaces=4,
        max_file_size=1,
        max_line_length=2,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [mdwrap]
        width = 60
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.width == 60


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.mdwrap]
        doxygen = true
        """,
    )

    assert load_config(tmp_path).doxygen is True


def test_dashed_keys_are_accepted(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        tab-spaces = 2
        max-line-length = 500
        """,
    )

    config = load_config(tmp_path)

    assert config.tab_spaces == 2
    assert config.max_line_length == 500


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 66
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    assert load_config(nested).width == 66


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 66
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "other"
        """,
    )

    assert load_config(child).width == 66


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 66
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.mdwrap]
        """,
    )

    assert load_config(child).width == WrapConfig().width


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == WrapConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 70
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()

    assert load_config(nested).width == 70


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 72
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError, match="unexpected"):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_dotfile(tmp_path, 'mdwrap = "wide"\n')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        WrapConfig(width=9),
        WrapConfig(width=0),
        WrapConfig(tab_spaces=0),
        WrapConfig(max_file_size=0),
        WrapConfig(max_line_length=-1),
    ],
)
def test_validate_config_rejects_invalid_values(config: WrapConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        WrapConfig(width="wide"),  # type: ignore[arg-type]
        WrapConfig(width=True),
        WrapConfig(max_file_size="big"),  # type: ignore[arg-type]
        WrapConfig(markdown="yes"),  # type: ignore[arg-type]
        WrapConfig(doxygen=1),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_wrong_types(config: WrapConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_minimum_width():
    validate_config(WrapConfig(width=10))


def test_apply_overrides_ignores_none():
    config = WrapConfig(width=72)

    assert apply_overrides(config, width=None, doxygen=None) is config
    assert apply_overrides(config, doxygen=True) == WrapConfig(width=72, doxygen=True)


def test_build_config_prefers_overrides(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdwrap]
        width = 72
        markdown = false
        """,
    )

    config = build_config(tmp_path, width=40)

    assert config.width == 40
    assert config.markdown is False


def test_build_config_validates(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, width=5)
