"""Snapshot one repository into the blob store.

Runs clone, commit lookup, archive and upload strictly in sequence.
Any error aborts the run and propagates to the caller; scratch
directories are removed on the way out unless the settings keep them.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gitcache.archiver import archive_name, create_archive, strip_vcs_metadata
from gitcache.config import Settings
from gitcache.errors import ArchiveError, FilesystemError
from gitcache.fetcher import CommitMetadata, fetch_source
from gitcache.io import safe_rmtree
from gitcache.locator import RepositoryReference
from gitcache.logging import get_logger
from gitcache.store import blob_keys, encode_timestamp, open_store, publish

_logger = get_logger("sync")


@dataclass
class SyncResult:
    """Outcome of a successful sync."""

    reference: RepositoryReference
    commit: CommitMetadata
    archive_size: int
    synced_at: datetime
    keys_written: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "repository": str(self.reference),
            "host": self.reference.host,
            "owner": self.reference.owner,
            "name": self.reference.name,
            "commit": {
                "sha": self.commit.sha,
                "author_time": self.commit.author_time.isoformat(),
            },
            "archive_size": self.archive_size,
            "synced_at": self.synced_at.isoformat(),
            "keys_written": self.keys_written,
        }


@dataclass(frozen=True)
class ScratchWorkspace:
    """The two scratch directories of a run."""

    tree_dir: Path
    archive_dir: Path

    @classmethod
    def create(cls, reference: RepositoryReference, base: Path | None) -> ScratchWorkspace:
        try:
            if base is not None:
                base.mkdir(parents=True, exist_ok=True)
            tree_dir = Path(
                tempfile.mkdtemp(prefix=f"{reference.owner}-{reference.name}-", dir=base)
            )
        except OSError as e:
            raise FilesystemError(f"cannot create scratch directory: {e}") from e
        try:
            archive_dir = Path(tempfile.mkdtemp(prefix="gitcache-tar-", dir=base))
        except OSError as e:
            safe_rmtree(tree_dir)
            raise FilesystemError(f"cannot create scratch directory: {e}") from e
        return cls(tree_dir=tree_dir, archive_dir=archive_dir)

    def cleanup(self) -> None:
        for d in (self.tree_dir, self.archive_dir):
            if not safe_rmtree(d):
                _logger.warning("Could not remove scratch directory %s", d)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def sync_repository(
    reference: RepositoryReference,
    settings: Settings,
    *,
    now: Callable[[], datetime] | None = None,
) -> SyncResult:
    """Snapshot ``reference`` and publish it to the configured blob store.

    Order of work: clone, read tip commit, open store, write
    ``lastcommit``, strip ``.git``, archive, write ``tar`` and (when
    enabled) ``lastsync``.

    Args:
        reference: Repository to snapshot.
        settings: Resolved settings (blob URL, scratch options, flags).
        now: Clock for the ``lastsync`` record. Defaults to UTC wall time.

    Returns:
        SyncResult describing what was written.

    Raises:
        GitCacheError: Any subclass, from whichever step failed first.
    """
    clock = now or _utcnow
    keys = blob_keys(reference)

    workspace = ScratchWorkspace.create(reference, settings.scratch_dir)
    _logger.info("Scratch directories: %s, %s", workspace.tree_dir, workspace.archive_dir)
    try:
        commit = fetch_source(reference, workspace.tree_dir, scheme=settings.clone_scheme)

        store = open_store(settings.blob_url)

        written = publish(store, [(keys.lastcommit, encode_timestamp(commit.author_time))])

        strip_vcs_metadata(workspace.tree_dir)
        target = create_archive(
            workspace.tree_dir, workspace.archive_dir / archive_name(reference)
        )

        try:
            data = target.read_bytes()
        except OSError as e:
            raise ArchiveError(f"cannot read archive {target}: {e}") from e

        synced_at = clock()
        records = [(keys.tar, data)]
        if settings.write_sync_record:
            records.append((keys.lastsync, encode_timestamp(synced_at)))
        written += publish(store, records)
    finally:
        if settings.keep_scratch:
            _logger.info("Keeping scratch directories")
        else:
            workspace.cleanup()

    return SyncResult(
        reference=reference,
        commit=commit,
        archive_size=len(data),
        synced_at=synced_at,
        keys_written=written,
    )
