# src/shardstore/cli.py
"""Shardstore Command Line Interface.

Thin adapter over FilesystemBlobStore: put, get, rm, ls, path.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from shardstore import __version__
from shardstore.contracts.errors import BlobStoreError
from shardstore.core.config import ShardStoreSettings, load_settings
from shardstore.core.factory import create_store
from shardstore.core.logging import configure_logging
from shardstore.core.store import FilesystemBlobStore

__all__ = ["app"]

app = typer.Typer(
    name="shardstore",
    help="Shardstore: local-disk blob store with sharded directory layout.",
    no_args_is_help=True,
)

SETTINGS_OPTION = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML file.",
)
ROOT_OPTION = typer.Option(
    None,
    "--root",
    "-r",
    help="Store root directory (overrides settings).",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shardstore version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Shardstore: local-disk blob store with sharded directory layout."""


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


def _open_store(settings_path: Path | None, root: Path | None) -> FilesystemBlobStore:
    """Load settings, configure logging, and build the store.

    Raises:
        typer.Exit: If settings cannot be loaded
    """
    if settings_path is not None:
        try:
            settings = load_settings(settings_path)
        except FileNotFoundError as e:
            raise _fail(str(e)) from None
        except ValidationError as e:
            raise _fail(f"Invalid settings in {settings_path}:\n{e}") from None
    else:
        settings = ShardStoreSettings()

    store_settings = settings.store
    if root is not None:
        store_settings = store_settings.model_copy(update={"root_path": root})

    configure_logging(json_output=settings.logging.json_output, level=settings.logging.level)
    return create_store(store_settings)


@app.command()
def put(
    file: Path = typer.Argument(..., help="File to store, or '-' for stdin."),
    identifier: str | None = typer.Option(
        None,
        "--id",
        help="Store under this identifier instead of generating one.",
    ),
    settings: Path | None = SETTINGS_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """Store a file and print its identifier."""
    store = _open_store(settings, root)
    try:
        if str(file) == "-":
            stdin = typer.get_binary_stream("stdin")
            new_id = store.create(stdin, identifier)
        else:
            with file.open("rb") as stream:
                new_id = store.create(stream, identifier)
    except (BlobStoreError, OSError) as e:
        raise _fail(str(e)) from None
    typer.echo(new_id)


@app.command()
def get(
    identifier: str = typer.Argument(..., help="Blob identifier."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to this file instead of stdout.",
    ),
    settings: Path | None = SETTINGS_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """Write a blob's content to stdout or a file."""
    import shutil

    store = _open_store(settings, root)
    try:
        with store.read(identifier) as stream:
            if output is not None:
                with output.open("wb") as target:
                    shutil.copyfileobj(stream, target)
            else:
                stdout = typer.get_binary_stream("stdout")
                shutil.copyfileobj(stream, stdout)
                stdout.flush()
    except (BlobStoreError, OSError) as e:
        raise _fail(str(e)) from None


@app.command()
def rm(
    identifier: str = typer.Argument(..., help="Blob identifier."),
    settings: Path | None = SETTINGS_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """Delete a blob and prune empty directories."""
    store = _open_store(settings, root)
    try:
        store.delete(identifier)
    except (BlobStoreError, OSError) as e:
        raise _fail(str(e)) from None


@app.command("ls")
def list_blobs(
    settings: Path | None = SETTINGS_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """List all blob identifiers, sorted."""
    store = _open_store(settings, root)
    try:
        identifiers = store.list()
    except OSError as e:
        raise _fail(str(e)) from None
    for identifier in sorted(identifiers):
        typer.echo(identifier)


@app.command()
def path(
    identifier: str = typer.Argument(..., help="Blob identifier."),
    must_exist: bool = typer.Option(
        False,
        "--must-exist",
        help="Fail if the blob is not stored.",
    ),
    settings: Path | None = SETTINGS_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """Print the filesystem path for an identifier."""
    store = _open_store(settings, root)
    try:
        resolved = store.read_file(identifier) if must_exist else store.resolve_path(identifier)
    except BlobStoreError as e:
        raise _fail(str(e)) from None
    typer.echo(str(resolved))


if __name__ == "__main__":
    app()
