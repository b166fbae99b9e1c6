"""File helpers for gitcache.

Atomic byte writes for the file-backed blob store and best-effort
removal of scratch directories.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path


def ensure_parent_dir(path: Path | str) -> Path:
    """Ensure the parent directory of a path exists.

    Args:
        path: File path whose parent directory should be created.

    Returns:
        The path as a Path object.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes(path: Path | str, data: bytes) -> None:
    """Write bytes to a file atomically.

    Uses write-to-temp + rename so readers never observe a partial
    value. The destination is replaced if it exists.

    Raises:
        OSError: If the directory cannot be created or the write fails.
    """
    path = ensure_parent_dir(path)
    # Create temp file in same directory for atomic rename
    fd, tmp_path = tempfile.mkstemp(
        suffix=".tmp",
        prefix=path.name + ".",
        dir=path.parent,
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def safe_rmtree(path: Path | str) -> bool:
    """Remove a directory tree if it exists.

    Returns True if the tree was removed or did not exist, False on failure.
    """
    try:
        shutil.rmtree(path)
        return True
    except FileNotFoundError:
        return True
    except OSError:
        return False


def safe_unlink(path: Path | str) -> bool:
    """Delete a file if it exists.

    Returns True if the file was removed or did not exist, False on failure.
    """
    try:
        Path(path).unlink(missing_ok=True)
        return True
    except OSError:
        return False
