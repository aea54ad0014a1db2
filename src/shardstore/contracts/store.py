# src/shardstore/contracts/store.py
"""Protocols for the blob store and its pluggable strategies.

The store is composed from three strategy objects injected at construction:
- IdGenerator: produces new identifiers
- PathMapper: translates identifiers to paths under the root and back
- OwnershipEnforcer: adjusts owner/permissions after a blob is written

Consolidated here so core modules and callers share one source of truth.
"""

from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class IdGenerator(Protocol):
    """Produces new opaque identifiers.

    Implementations must not touch the store's filesystem and must make
    collisions negligible over a store's lifetime. A broken generator shows
    up later as BlobExistsError on create.
    """

    def generate(self) -> str:
        """Return a new identifier."""
        ...


@runtime_checkable
class PathMapper(Protocol):
    """Bidirectional mapping between identifiers and paths under a root."""

    def to_path(self, root: Path, identifier: str) -> Path:
        """Map an identifier to the blob's file path.

        Must be deterministic and a pure function of its inputs.

        Raises:
            InvalidIdentifierError: If the identifier cannot be mapped
        """
        ...

    def to_identifier(self, root: Path, path: Path) -> str:
        """Map a path produced by to_path back to its identifier.

        Raises:
            ValueError: If the path could not have been produced by to_path
        """
        ...


@runtime_checkable
class OwnershipEnforcer(Protocol):
    """Applies owner and permission settings to a freshly written file."""

    @property
    def enabled(self) -> bool:
        """True when apply() would do anything."""
        ...

    def apply(self, path: Path) -> None:
        """Apply the configured owner/permissions to path.

        Raises:
            OwnershipError: If an external command fails or is interrupted
        """
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for blob storage backends."""

    def create(self, stream: BinaryIO, identifier: str | None = None) -> str:
        """Store all bytes from stream and return the blob's identifier.

        Raises:
            BlobExistsError: If identifier is already stored
        """
        ...

    def read(self, identifier: str) -> BinaryIO:
        """Open a stored blob for reading.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        ...

    def view(self, identifier: str) -> memoryview:
        """Return a read-only memory-mapped view of a stored blob.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        ...

    def delete(self, identifier: str) -> None:
        """Remove a blob and prune now-empty parent directories.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        ...

    def list(self) -> set[str]:
        """Return the identifiers of all stored blobs."""
        ...

    def resolve_path(self, identifier: str) -> Path:
        """Return the path a blob lives at, whether or not it exists."""
        ...

    def read_file(self, identifier: str) -> Path:
        """Return the path of an existing blob.

        Raises:
            BlobNotFoundError: If the blob does not exist
        """
        ...
