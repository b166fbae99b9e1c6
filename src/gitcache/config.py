"""Environment configuration for gitcache.

All settings are resolved once at startup into an immutable ``Settings``
value that is passed explicitly to the sync flow.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gitcache.errors import ConfigurationError

BLOB_URL_VAR = "BLOB_URL"
SCRATCH_DIR_VAR = "GITCACHE_SCRATCH_DIR"
KEEP_SCRATCH_VAR = "GITCACHE_KEEP_SCRATCH"
WRITE_LASTSYNC_VAR = "GITCACHE_WRITE_LASTSYNC"
CLONE_SCHEME_VAR = "GITCACHE_CLONE_SCHEME"

DEFAULT_CLONE_SCHEME = "http"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings.

    Attributes:
        blob_url: Blob store target (``http(s)://`` or ``file://``).
        scratch_dir: Base directory for scratch dirs; None means system temp.
        keep_scratch: Retain scratch dirs after the run.
        write_sync_record: Also write the ``lastsync`` record.
        clone_scheme: Transport used to build the clone URL.
    """

    blob_url: str
    scratch_dir: Path | None = None
    keep_scratch: bool = False
    write_sync_record: bool = True
    clone_scheme: str = DEFAULT_CLONE_SCHEME


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Resolved settings.

    Raises:
        ConfigurationError: If BLOB_URL is unset or blank, or a flag
            variable holds something other than a boolean.
    """
    env = os.environ if environ is None else environ

    blob_url = env.get(BLOB_URL_VAR, "").strip()
    if not blob_url:
        raise ConfigurationError(f"{BLOB_URL_VAR} env is not set")

    scratch = env.get(SCRATCH_DIR_VAR, "").strip()

    return Settings(
        blob_url=blob_url,
        scratch_dir=Path(scratch) if scratch else None,
        keep_scratch=_env_flag(env, KEEP_SCRATCH_VAR, False),
        write_sync_record=_env_flag(env, WRITE_LASTSYNC_VAR, True),
        clone_scheme=env.get(CLONE_SCHEME_VAR, "").strip() or DEFAULT_CLONE_SCHEME,
    )
