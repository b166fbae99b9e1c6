"""gitcache: snapshot a repository's default branch into a blob store.

This package provides:
- Repository locator parsing
- Shallow clone and tar.gz archiving of the fetched tree
- Blob store publishing of the archive and commit/sync timestamps
"""

__version__ = "0.1.0"

# Re-export commonly used entry points
from gitcache.errors import GitCacheError
from gitcache.locator import RepositoryReference, parse_reference
from gitcache.logging import get_logger

__all__ = [
    "GitCacheError",
    "RepositoryReference",
    "get_logger",
    "parse_reference",
]
