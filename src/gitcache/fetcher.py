"""Shallow source fetching via the git binary.

Clones only the tip of the default branch (depth 1) and reads the tip
commit's author timestamp. Every failure raises; nothing is retried.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from gitcache.errors import FetchError, FilesystemError
from gitcache.locator import RepositoryReference
from gitcache.logging import get_logger

_logger = get_logger("fetcher")

# sha, strict ISO 8601 author date with offset
_HEAD_FORMAT = "%H%x00%aI"


@dataclass(frozen=True)
class CommitMetadata:
    """Metadata of the tip commit of a clone."""

    sha: str
    author_time: datetime


def _run_git(args: list[str], cwd: Path | None = None) -> str:
    """Run a git command, returning stdout or raising FetchError."""
    env = dict(os.environ)
    # Fail on private repositories instead of waiting on a credential prompt
    env["GIT_TERMINAL_PROMPT"] = "0"

    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise FetchError("git executable not found") from e
    except OSError as e:
        raise FetchError(f"git {args[0]} failed to start: {e}") from e

    if result.stderr.strip():
        _logger.debug("git %s: %s", args[0], result.stderr.strip())
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise FetchError(f"git {args[0]} failed: {detail}")
    return result.stdout


def shallow_clone(url: str, dest: Path | str) -> Path:
    """Clone the default branch of ``url`` into ``dest`` with depth 1.

    Args:
        url: Remote repository URL.
        dest: Destination directory; created if missing, must be empty.

    Returns:
        The destination path.

    Raises:
        FilesystemError: If the destination directory cannot be created.
        FetchError: If the clone fails (network, auth, unknown repo).
    """
    dest = Path(dest)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"cannot create clone directory {dest}: {e}") from e

    _logger.info("Cloning %s into %s", url, dest)
    _run_git(["clone", "--depth", "1", "--quiet", "--", url, str(dest)])
    return dest


def read_head_commit(tree: Path | str) -> CommitMetadata:
    """Resolve HEAD of a working tree and read its author timestamp.

    Raises:
        FetchError: If HEAD cannot be resolved, e.g. the repository has
            no commits.
    """
    out = _run_git(["log", "-1", f"--format={_HEAD_FORMAT}"], cwd=Path(tree)).strip()
    sha, sep, iso_date = out.partition("\x00")
    if not sep or not sha:
        raise FetchError(f"cannot resolve HEAD commit in {tree}")
    try:
        author_time = datetime.fromisoformat(iso_date)
    except ValueError as e:
        raise FetchError(f"unparseable author date {iso_date!r} for {sha}") from e

    return CommitMetadata(sha=sha, author_time=author_time)


def fetch_source(
    reference: RepositoryReference,
    dest: Path | str,
    *,
    scheme: str = "http",
) -> CommitMetadata:
    """Shallow-clone ``reference`` into ``dest`` and return its tip commit."""
    shallow_clone(reference.clone_url(scheme), dest)
    commit = read_head_commit(dest)
    _logger.info("Fetched %s at %s (%s)", reference, commit.sha[:12], commit.author_time)
    return commit
