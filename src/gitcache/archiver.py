"""Archive a fetched working tree as tar.gz.

Entry names are forward-slash paths relative to the tree root, so the
directory structure round-trips on extraction. The root ``.git``
directory is never included.
"""

from __future__ import annotations

import os
import shutil
import tarfile
from collections.abc import Iterator
from pathlib import Path

from gitcache.errors import ArchiveError, FilesystemError
from gitcache.io import safe_unlink
from gitcache.locator import RepositoryReference
from gitcache.logging import get_logger

_logger = get_logger("archiver")

VCS_DIR = ".git"


def archive_name(reference: RepositoryReference) -> str:
    """File name of the archive for a repository."""
    return f"{reference.name}.tar.gz"


def strip_vcs_metadata(tree: Path | str) -> None:
    """Remove the ``.git`` directory from a working tree.

    Does nothing if there is none.

    Raises:
        FilesystemError: If the directory exists but cannot be removed.
    """
    vcs = Path(tree) / VCS_DIR
    if not os.path.lexists(vcs):
        return
    try:
        if vcs.is_dir() and not vcs.is_symlink():
            shutil.rmtree(vcs)
        else:
            vcs.unlink()
    except OSError as e:
        raise FilesystemError(f"cannot remove {vcs}: {e}") from e
    _logger.debug("Removed %s", vcs)


def _walk(tree: Path) -> Iterator[tuple[Path, str]]:
    """Yield (path, archive name) pairs in a stable order, skipping .git."""

    def _raise(err: OSError) -> None:
        raise err

    for dirpath, dirnames, filenames in os.walk(tree, onerror=_raise):
        current = Path(dirpath)
        if current == tree:
            dirnames[:] = [d for d in dirnames if d != VCS_DIR]
            filenames = [f for f in filenames if f != VCS_DIR]
        dirnames.sort()
        for entry in sorted([*dirnames, *filenames]):
            path = current / entry
            yield path, path.relative_to(tree).as_posix()


def create_archive(tree: Path | str, target: Path | str) -> Path:
    """Write ``tree`` into a gzip-compressed tar file at ``target``.

    Directories become content-less directory entries, regular files
    carry their bytes and symlinks are stored as links.

    Args:
        tree: Root of the working tree to archive.
        target: Path of the ``.tar.gz`` file to create.

    Returns:
        The target path.

    Raises:
        ArchiveError: On any I/O error reading the tree or writing the
            archive. A partially written target is removed.
    """
    tree = Path(tree)
    target = Path(target)
    count = 0
    try:
        with tarfile.open(target, "w:gz") as tar:
            for path, arcname in _walk(tree):
                tar.add(path, arcname=arcname, recursive=False)
                count += 1
    except (OSError, tarfile.TarError) as e:
        safe_unlink(target)
        raise ArchiveError(f"cannot archive {tree} to {target}: {e}") from e

    _logger.info("Archived %d entries to %s", count, target)
    return target
