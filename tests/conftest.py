"""Shared fixtures for gitcache tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gitcache.fetcher import CommitMetadata
from gitcache.locator import RepositoryReference

FAKE_COMMIT = CommitMetadata(
    sha="a" * 40,
    author_time=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
)


def _write_fake_clone(
    reference: RepositoryReference, dest: Path, *, scheme: str = "http"
) -> CommitMetadata:
    dest = Path(dest)
    (dest / "src").mkdir(parents=True, exist_ok=True)
    (dest / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
    (dest / ".git").mkdir(exist_ok=True)
    (dest / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    return FAKE_COMMIT


@pytest.fixture
def fake_fetch() -> Iterator[MagicMock]:
    """Replace the network clone with a small fake working tree."""
    with patch("gitcache.sync.fetch_source", side_effect=_write_fake_clone) as mock:
        yield mock
