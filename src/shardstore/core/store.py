# src/shardstore/core/store.py
"""Filesystem blob store.

Each blob is one regular file under the root directory, at the path the
configured PathMapper derives from its identifier. The directory tree is
the store's only persisted state - there are no sidecar metadata files.

Concurrency:
    The store takes no locks. Creates use exclusive open, so of two
    concurrent creates for one identifier exactly one succeeds and the
    other raises BlobExistsError. Deletes prune empty parent directories
    with rmdir, which only succeeds on an empty directory; creates
    recreate parents that a concurrent prune removed, using tenacity for
    the bounded retry.
"""

from __future__ import annotations

import errno
import io
import mmap
import os
import shutil
from pathlib import Path
from typing import BinaryIO

import structlog
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from shardstore.contracts.errors import (
    BlobExistsError,
    BlobNotFoundError,
    InvalidIdentifierError,
    LayoutConflictError,
    StoreIOError,
)
from shardstore.contracts.store import IdGenerator, OwnershipEnforcer, PathMapper
from shardstore.core.identifiers import UUIDGenerator
from shardstore.core.path_mapping import DashSegmentedMapper, validate_identifier

__all__ = ["FilesystemBlobStore"]

logger = structlog.get_logger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024

# Attempts to recreate parent directories removed by a concurrent delete
_MAX_PARENT_ATTEMPTS = 5


class FilesystemBlobStore:
    """Blob store backed by a local directory tree.

    Structure (default dash layout): root/xxxxxxxx/xxxx/xxxx/xxxx/xxxxxxxxxxxx

    Blobs are immutable: created once, read any number of times, deleted.
    """

    def __init__(
        self,
        root: Path,
        *,
        generator: IdGenerator | None = None,
        mapper: PathMapper | None = None,
        enforcer: OwnershipEnforcer | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fsync: bool = True,
    ) -> None:
        """Initialize store, creating root (and missing ancestors) if absent.

        Args:
            root: Base directory; never removed by the store
            generator: Identifier source (default: random UUIDs)
            mapper: Identifier/path layout (default: dash-segmented)
            enforcer: Post-write ownership/permission step (default: none)
            chunk_size: Copy buffer size when writing streams
            fsync: Sync file contents to disk before create returns
        """
        if root is None:
            raise ValueError("root must not be None")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.generator: IdGenerator = generator if generator is not None else UUIDGenerator()
        self.mapper: PathMapper = mapper if mapper is not None else DashSegmentedMapper()
        self.enforcer = enforcer
        self._chunk_size = chunk_size
        self._fsync = fsync

    # -- path resolution --------------------------------------------------

    def resolve_path(self, identifier: str) -> Path:
        """Path where identifier's blob lives (may not exist)."""
        return self.mapper.to_path(self.root, validate_identifier(identifier))

    def read_file(self, identifier: str) -> Path:
        """Path of an existing blob.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        path = self.resolve_path(identifier)
        if not path.is_file():
            raise BlobNotFoundError(identifier, path)
        return path

    def exists(self, identifier: str) -> bool:
        return self.resolve_path(identifier).is_file()

    def size(self, identifier: str) -> int:
        """Size of a stored blob in bytes."""
        return self.read_file(identifier).stat().st_size

    # -- create -----------------------------------------------------------

    def create(self, stream: BinaryIO, identifier: str | None = None) -> str:
        """Store all bytes from stream.

        The stream is read to exhaustion but not closed; callers must not
        reuse it afterwards.

        Args:
            stream: Binary file-like object to consume
            identifier: Use this identifier instead of generating one

        Returns:
            The blob's identifier

        Raises:
            BlobExistsError: If a blob is already stored under identifier
            LayoutConflictError: If the identifier's path runs through, or
                sits on top of, another blob's path
            OwnershipError: If owner/permission enforcement fails. The blob
                is stored regardless and is not rolled back.
        """
        if stream is None:
            raise ValueError("stream must not be None")
        if identifier is None:
            identifier = self.generator.generate()
        path = self.resolve_path(identifier)
        self._check_target(identifier, path)

        output = self._open_exclusive(identifier, path)
        logger.debug("Storing blob", identifier=identifier, path=str(path))
        try:
            with output:
                shutil.copyfileobj(stream, output, self._chunk_size)
                output.flush()
                if self._fsync:
                    os.fsync(output.fileno())
        except BaseException:
            # Never leave a truncated blob behind under a valid identifier
            path.unlink(missing_ok=True)
            self._prune_empty_parents(path.parent)
            raise

        if self.enforcer is not None and self.enforcer.enabled:
            self.enforcer.apply(path)
        return identifier

    def create_bytes(self, data: bytes, identifier: str | None = None) -> str:
        """Store an in-memory bytes object. See create()."""
        if data is None:
            raise ValueError("data must not be None")
        return self.create(io.BytesIO(data), identifier)

    def _check_target(self, identifier: str, path: Path) -> None:
        """Fail fast when the target is occupied or blocked by another blob."""
        if path.is_file():
            raise BlobExistsError(identifier, path)
        if path.is_dir():
            raise LayoutConflictError(identifier, path, "path is a directory holding other blobs")
        for ancestor in path.parents:
            if ancestor == self.root or self.root not in ancestor.parents:
                break
            if ancestor.exists() and not ancestor.is_dir():
                raise LayoutConflictError(identifier, path, f"{ancestor} is an existing blob")

    def _open_exclusive(self, identifier: str, path: Path) -> BinaryIO:
        """Open path for exclusive writing, creating parent directories.

        A concurrent delete may prune a freshly created parent before the
        open; parents are recreated up to _MAX_PARENT_ATTEMPTS times.
        """
        try:
            for attempt_state in Retrying(
                stop=stop_after_attempt(_MAX_PARENT_ATTEMPTS),
                retry=retry_if_exception_type(FileNotFoundError),
                reraise=False,
            ):
                with attempt_state:
                    attempt = attempt_state.retry_state.attempt_number
                    try:
                        return self._mkdir_and_open(identifier, path)
                    except FileNotFoundError:
                        logger.debug(
                            "Parent directory vanished before write, recreating",
                            identifier=identifier,
                            path=str(path.parent),
                            attempt=attempt,
                        )
                        raise
        except RetryError as e:
            raise StoreIOError(
                f"Could not create parent directories for {path} after {_MAX_PARENT_ATTEMPTS} attempts"
            ) from e.last_attempt.exception()

        raise RuntimeError("Unexpected state in retry loop")  # pragma: no cover

    def _mkdir_and_open(self, identifier: str, path: Path) -> BinaryIO:
        try:
            # FileNotFoundError here means an ancestor was pruned mid-creation
            path.parent.mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            raise LayoutConflictError(identifier, path, f"{e.filename} is an existing blob") from e
        except NotADirectoryError as e:
            raise LayoutConflictError(identifier, path, "a parent directory is an existing blob") from e
        try:
            return path.open("xb")
        except FileExistsError as e:
            if path.is_dir():
                raise LayoutConflictError(identifier, path, "path is a directory holding other blobs") from e
            raise BlobExistsError(identifier, path) from e
        except NotADirectoryError as e:
            raise LayoutConflictError(identifier, path, "a parent directory was replaced by a blob") from e

    # -- read -------------------------------------------------------------

    def read(self, identifier: str) -> BinaryIO:
        """Open a blob for streaming reads. Caller closes the stream.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        path = self.resolve_path(identifier)
        logger.debug("Reading blob", identifier=identifier, path=str(path))
        try:
            return path.open("rb")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as e:
            # NotADirectoryError: an ancestor component is another blob's file
            raise BlobNotFoundError(identifier, path) from e

    def read_bytes(self, identifier: str) -> bytes:
        with self.read(identifier) as stream:
            return stream.read()

    def view(self, identifier: str) -> memoryview:
        """Map a whole blob read-only into memory.

        The view is not guaranteed to reflect later changes to the file.
        Release the view to unmap it.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        with self.read(identifier) as stream:
            size = os.fstat(stream.fileno()).st_size
            if size == 0:
                # Zero-length files cannot be mapped
                return memoryview(b"")
            mapped = mmap.mmap(stream.fileno(), size, access=mmap.ACCESS_READ)
        return memoryview(mapped)

    # -- delete -----------------------------------------------------------

    def delete(self, identifier: str) -> None:
        """Remove a blob, then prune ancestor directories left empty.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        path = self.resolve_path(identifier)
        if path.is_dir():
            raise BlobNotFoundError(identifier, path)
        try:
            path.unlink()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as e:
            raise BlobNotFoundError(identifier, path) from e
        logger.debug("Removed blob", identifier=identifier, path=str(path))
        self._prune_empty_parents(path.parent)

    def _prune_empty_parents(self, directory: Path) -> None:
        """Walk upward removing empty directories; never removes root."""
        current = directory
        while current != self.root and self.root in current.parents:
            try:
                current.rmdir()
            except FileNotFoundError:
                # Already pruned by a concurrent delete
                pass
            except OSError as e:
                if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                    logger.debug("Keeping non empty directory", path=str(current))
                    return
                raise
            else:
                logger.debug("Deleted empty directory", path=str(current))
            current = current.parent

    # -- list -------------------------------------------------------------

    def list(self) -> set[str]:
        """Identifiers of all stored blobs, in no particular order.

        Files the mapper cannot translate back are skipped with a warning.

        Raises:
            StoreIOError: If a directory under the root cannot be read
        """
        identifiers: set[str] = set()
        for dirpath, _dirnames, filenames in os.walk(self.root, onerror=self._walk_error):
            for filename in filenames:
                path = Path(dirpath) / filename
                if not path.is_file():
                    continue
                try:
                    identifiers.add(self.mapper.to_identifier(self.root, path))
                except (ValueError, InvalidIdentifierError):
                    logger.warning("Skipping file not produced by this store", path=str(path))
        return identifiers

    def _walk_error(self, error: OSError) -> None:
        # Shard directories vanish when a concurrent delete prunes them
        if isinstance(error, FileNotFoundError) and error.filename and Path(error.filename) != self.root:
            return
        raise StoreIOError(f"Could not list {error.filename}: {error.strerror}") from error

    def __repr__(self) -> str:
        return f"FilesystemBlobStore(root={str(self.root)!r}, mapper={self.mapper!r})"
