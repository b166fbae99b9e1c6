"""Error taxonomy for gitcache.

Every failure is terminal. Components raise one of these; the CLI is the
only place that catches them, logs the message and maps the class to a
process exit status (sysexits.h values).
"""

from __future__ import annotations


class GitCacheError(Exception):
    """Base class for all gitcache failures."""

    exit_code = 1


class ConfigurationError(GitCacheError):
    """Required configuration is missing or unusable."""

    exit_code = 78  # EX_CONFIG


class ReferenceParseError(GitCacheError):
    """The repository locator string is malformed or incomplete."""

    exit_code = 64  # EX_USAGE


class FetchError(GitCacheError):
    """Cloning the repository or resolving its tip commit failed."""

    exit_code = 69  # EX_UNAVAILABLE


class FilesystemError(GitCacheError):
    """A scratch directory could not be created or cleaned."""

    exit_code = 73  # EX_CANTCREAT


class ArchiveError(GitCacheError):
    """Writing or reading the tar.gz archive failed."""

    exit_code = 74  # EX_IOERR


class StoreWriteError(GitCacheError):
    """A blob store write failed."""

    exit_code = 75  # EX_TEMPFAIL
