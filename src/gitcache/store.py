"""Blob store handles and record publishing.

A blob store is anything with ``set(key, value)``. Two backends are
provided and selected by the scheme of BLOB_URL:

    http(s)://host/prefix   PUT <url>/<key> with the raw bytes
    file:///some/dir        one file per key under the directory

Each record is written independently; a failed write leaves earlier
records in place (last write wins, no cross-key transaction).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import unquote, urlsplit

import requests

from gitcache.errors import ConfigurationError, StoreWriteError
from gitcache.io import write_bytes
from gitcache.locator import RepositoryReference
from gitcache.logging import get_logger

_logger = get_logger("store")


class BlobStore(Protocol):
    """Minimal key-value byte store."""

    def set(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...


class HttpBlobStore:
    """Blob store reached over HTTP, one PUT per key."""

    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key.lstrip('/')}"

    def set(self, key: str, value: bytes) -> None:
        url = self.url_for(key)
        try:
            resp = self._session.put(
                url,
                data=value,
                headers={"Content-Type": "application/octet-stream"},
            )
        except requests.RequestException as e:
            raise StoreWriteError(f"cannot write {key}: {e}") from e
        if not resp.ok:
            raise StoreWriteError(f"cannot write {key}: HTTP {resp.status_code} from {url}")


class FileBlobStore:
    """Blob store backed by a local directory."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        rel = PurePosixPath(key)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise StoreWriteError(f"invalid key {key!r}")
        return self.root.joinpath(*rel.parts)

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        try:
            write_bytes(path, value)
        except OSError as e:
            raise StoreWriteError(f"cannot write {key} to {path}: {e}") from e


def open_store(url: str) -> BlobStore:
    """Open a blob store handle from a BLOB_URL value.

    Raises:
        ConfigurationError: If the URL scheme is unsupported or an http
            URL has no host.
        StoreWriteError: If a file store root cannot be created.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()

    if scheme in ("http", "https"):
        if not parts.netloc:
            raise ConfigurationError(f"blob store URL has no host: {url}")
        return HttpBlobStore(url)

    if scheme == "file":
        root = Path(unquote(parts.path))
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(f"cannot open file store {root}: {e}") from e
        return FileBlobStore(root)

    raise ConfigurationError(f"unsupported blob store URL scheme {scheme!r}: {url}")


@dataclass(frozen=True)
class BlobKeys:
    """The three record keys of a repository."""

    lastcommit: str
    lastsync: str
    tar: str


def blob_keys(reference: RepositoryReference) -> BlobKeys:
    prefix = reference.key_prefix
    return BlobKeys(
        lastcommit=f"{prefix}/lastcommit",
        lastsync=f"{prefix}/lastsync",
        tar=f"{prefix}/tar",
    )


def encode_timestamp(when: datetime) -> bytes:
    """Encode a time as whole Unix seconds in ASCII decimal.

    Naive datetimes are taken to be UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return str(int(when.timestamp())).encode("ascii")


def decode_timestamp(data: bytes) -> datetime:
    """Inverse of ``encode_timestamp``; returns an aware UTC datetime."""
    return datetime.fromtimestamp(int(data.decode("ascii")), tz=timezone.utc)


def publish(store: BlobStore, records: Iterable[tuple[str, bytes]]) -> list[str]:
    """Write records in order, stopping at the first failure.

    Returns:
        Keys written, in order.

    Raises:
        StoreWriteError: From the first failing write; later records are
            not attempted.
    """
    written: list[str] = []
    for key, value in records:
        store.set(key, value)
        _logger.info("Wrote %s (%d bytes)", key, len(value))
        written.append(key)
    return written
