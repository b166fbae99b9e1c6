"""Repository locator parsing.

Turns a user-supplied string such as ``example.com/acme/widgets`` or
``https://example.com/acme/widgets/tree/main`` into a
``RepositoryReference``.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from gitcache.errors import ReferenceParseError

DEFAULT_SCHEME = "https"
KEY_NAMESPACE = "gitcache"

# Segments that would walk out of the gitcache/<owner>/<name> key namespace
_DOT_SEGMENTS = {".", ".."}


@dataclass(frozen=True)
class RepositoryReference:
    """A remote repository identified by host, owner and name."""

    host: str
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.host}/{self.owner}/{self.name}"

    def clone_url(self, scheme: str = "http") -> str:
        """URL the repository is cloned from."""
        return f"{scheme}://{self.host}/{quote(self.owner)}/{quote(self.name)}"

    @property
    def key_prefix(self) -> str:
        """Blob store key prefix for this repository."""
        return f"{KEY_NAMESPACE}/{self.owner}/{self.name}"


def parse_reference(text: str) -> RepositoryReference:
    """Parse a repository locator string.

    A missing scheme defaults to https. Note that this means a bare
    ``owner/name`` is read as host ``owner`` with a single path segment,
    which is rejected.

    Args:
        text: Locator with or without scheme, e.g. ``host/owner/name``.

    Returns:
        The parsed reference. Path segments after the name are ignored.

    Raises:
        ReferenceParseError: If the string is not a valid URL, has no
            host, or lacks a non-empty owner and name. Owner and name are
            percent-decoded and may not be "." or ".." or contain "/".
    """
    raw = text.strip()
    url = raw if "://" in raw else f"{DEFAULT_SCHEME}://{raw}"

    try:
        parts = urlsplit(url)
        # Accessing .port validates it
        _ = parts.port
    except ValueError as e:
        raise ReferenceParseError(f"invalid repository {text!r}: {e}") from e

    host = parts.netloc.rpartition("@")[2]
    if not host:
        raise ReferenceParseError(
            f"invalid repository {text!r}: missing host, pass the full repository URL"
        )

    segments = parts.path.strip("/").split("/", 1)
    if len(segments) != 2:
        raise ReferenceParseError(
            f"invalid repository {text!r}: pass the full repository URL"
        )

    owner = unquote(segments[0]).strip()
    name = unquote(segments[1].split("/", 1)[0]).strip()
    if not owner or not name:
        raise ReferenceParseError(
            f"invalid repository {text!r}: owner and name must be non-empty"
        )
    for segment in (owner, name):
        if segment in _DOT_SEGMENTS or "/" in segment:
            raise ReferenceParseError(
                f"invalid repository {text!r}: {segment!r} is not a valid owner or name"
            )

    return RepositoryReference(host=host, owner=owner, name=name)
