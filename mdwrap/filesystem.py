"""Safe reading and in-place rewriting of the files mdwrap processes."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH, TEXT_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "MDWRAP_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "MDWRAP_MAX_LINE_LENGTH"


def _positive_int_from_env(env_var: str, default: int) -> int:
    raw = os.environ.get(env_var)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as error:
        raise ValueError(f"Invalid value for {env_var}: {raw} (expected positive integer)") from error
    if value <= 0:
        raise ValueError(f"{env_var} must be a positive integer, got {value}.")
    return value


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum file size, honoring ``MDWRAP_MAX_FILE_SIZE``.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    return _positive_int_from_env(MAX_FILE_SIZE_ENV_VAR, default)


def get_max_line_length(default: int = DEFAULT_MAX_LINE_LENGTH) -> int:
    """Resolve the maximum line length, honoring ``MDWRAP_MAX_LINE_LENGTH``."""
    return _positive_int_from_env(MAX_LINE_LENGTH_ENV_VAR, default)


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any of its parents is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a text filepath under a base directory.

    Args:
        raw_path: User-supplied path (absolute or relative).
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path traverses a symlink, does not exist, is not a
            regular file, lies outside `base_dir`, or has an extension other
            than those in `TEXT_EXTENSIONS`.

    Examples:
        normalize_filepath("docs/guide.md", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    problem = None
    if not resolved.is_file():
        problem = "is not a regular file."
    elif not resolved.is_relative_to(base_dir):
        problem = f"is outside of the working directory {base_dir}."
    elif resolved.suffix.lower() not in TEXT_EXTENSIONS:
        problem = f"is not a text file.\nSupported extensions are: {', '.join(TEXT_EXTENSIONS)}"
    if problem is not None:
        raise ValueError(f"{resolved} {problem}")
    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat a file without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        result = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(result.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    return result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path) -> None:
    """Raise IOError when the file is larger than `max_size` bytes."""
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
) -> None:
    """Raise IOError when inode, device, size, or modification time differ."""

    def identity(result: os.stat_result) -> tuple[object, ...]:
        return (result.st_ino, result.st_dev, result.st_size, result.st_mtime_ns)

    if identity(expected_stat) != identity(current_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def read_text(filepath: Path) -> str:
    """Read a UTF-8 file, keeping its end-of-line characters as they are.

    Raises:
        IOError: If the file cannot be opened or is not valid UTF-8.
    """
    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as stream:
            return stream.read()
    except UnicodeDecodeError as error:
        raise IOError(f"{filepath} is not valid UTF-8: {error}") from error
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def read_checked(filepath: Path, max_size: int) -> tuple[str, os.stat_result]:
    """Read a file after checking its type and size.

    The file is stat-ed before and after reading so that a file swapped or
    modified while it was read is refused.

    Args:
        filepath: File to read.
        max_size: Largest accepted size in bytes.

    Returns:
        tuple[str, os.stat_result]: The contents and the stat taken before
            reading, to hand to `rewrite_file`.

    Raises:
        IOError: If a check fails or the file cannot be read.

    Examples:
        text, stat_before = read_checked(Path("README.md"), get_max_file_size())
    """
    before = collect_file_stat(filepath)
    enforce_file_size(before, max_size, filepath)
    text = read_text(filepath)
    ensure_file_unchanged(before, collect_file_stat(filepath), filepath)
    return text, before


def rewrite_file(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
) -> None:
    """Atomically replace a file's contents.

    The new contents go to a temporary file next to the original, which takes
    over the original's mode (and owner when permitted) and is then renamed
    over it.

    Args:
        filepath: File to rewrite.
        content: New contents, written without newline translation.
        expected_stat: Stat from `read_checked`; the rewrite is refused if the
            file has changed since.
        warn: Optional callback for non-fatal warnings.

    Raises:
        IOError: If the file changed since it was read or cannot be replaced.
    """
    ensure_file_unchanged(expected_stat, collect_file_stat(filepath), filepath)

    fd, temp_name = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with open(fd, "w", encoding="UTF-8", newline="") as stream:
            stream.write(content)
            stream.flush()
            os.fsync(stream.fileno())
        os.chmod(temp_path, stat.S_IMODE(expected_stat.st_mode))
        if hasattr(os, "chown"):
            try:
                os.chown(temp_path, expected_stat.st_uid, expected_stat.st_gid)
            except PermissionError:
                if warn is not None:
                    warn(f"Warning: Could not preserve file ownership for {filepath.name}")
        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error rewriting {filepath}: {error}") from error
    finally:
        temp_path.unlink(missing_ok=True)
