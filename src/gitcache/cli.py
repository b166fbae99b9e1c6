"""Command-line entry point for gitcache.

    gitcache example.com/acme/widgets
    gitcache --no-sync-record https://example.com/acme/widgets

Prints the sync result as JSON on stdout; logs go to stderr. Every
gitcache error is handled here: logged and mapped to an exit status.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Annotated

import typer

from gitcache import __version__
from gitcache.config import load_settings
from gitcache.errors import GitCacheError
from gitcache.locator import parse_reference
from gitcache.logging import get_logger
from gitcache.sync import sync_repository

_logger = get_logger("cli")

app = typer.Typer(
    name="gitcache",
    help="Snapshot a repository's default branch into a blob store.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitcache {__version__}")
        raise typer.Exit()


@app.command()
def run(
    repository: Annotated[
        str,
        typer.Argument(help="Repository locator, e.g. host.example.com/owner/name"),
    ],
    sync_record: Annotated[
        bool | None,
        typer.Option(
            "--sync-record/--no-sync-record",
            help="Also write the lastsync record (default: GITCACHE_WRITE_LASTSYNC or on)",
        ),
    ] = None,
    keep_scratch: Annotated[
        bool,
        typer.Option("--keep-scratch", help="Keep scratch directories after the run"),
    ] = False,
    scratch_dir: Annotated[
        Path | None,
        typer.Option("--scratch-dir", help="Base directory for scratch directories"),
    ] = None,
    scheme: Annotated[
        str | None,
        typer.Option("--scheme", help="Clone transport (default: GITCACHE_CLONE_SCHEME or http)"),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", "-c", help="Output compact JSON (no indentation)"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = None,
) -> None:
    """Clone REPOSITORY at depth 1, archive it and publish it to BLOB_URL."""
    try:
        settings = load_settings()
        overrides: dict[str, object] = {}
        if sync_record is not None:
            overrides["write_sync_record"] = sync_record
        if keep_scratch:
            overrides["keep_scratch"] = True
        if scratch_dir is not None:
            overrides["scratch_dir"] = scratch_dir
        if scheme:
            overrides["clone_scheme"] = scheme
        settings = dataclasses.replace(settings, **overrides)

        reference = parse_reference(repository)
        result = sync_repository(reference, settings)
    except GitCacheError as e:
        _logger.error("%s", e)
        raise typer.Exit(e.exit_code) from e

    indent = None if compact else 2
    typer.echo(json.dumps(result.to_dict(), indent=indent, ensure_ascii=False))


def main() -> None:
    """Main entry point for the gitcache CLI."""
    app()


if __name__ == "__main__":
    main()
