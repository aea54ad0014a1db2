# src/shardstore/contracts/errors.py
"""Store exception taxonomy.

AlreadyExists and NotFound are expected, recoverable outcomes. StoreIOError
(and raw OSError from the filesystem) are environment-level faults.
Apart from recreating pruned parent directories during create, nothing is
retried internally; every error surfaces to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence


class BlobStoreError(Exception):
    """Base class for all store errors."""


class BlobExistsError(BlobStoreError):
    """Raised when create targets an identifier that is already stored."""

    def __init__(self, identifier: str, path: object) -> None:
        self.identifier = identifier
        self.path = path
        super().__init__(f"Blob {identifier!r} is already present at {path}")


class BlobNotFoundError(BlobStoreError, KeyError):
    """Raised when an operation requires a blob that does not exist.

    Also a KeyError so mapping-style callers can treat the store like a dict.
    """

    def __init__(self, identifier: str, path: object) -> None:
        self.identifier = identifier
        self.path = path
        super().__init__(f"Blob {identifier!r} not found at {path}")

    def __str__(self) -> str:
        # KeyError.__str__ repr()s its argument
        return str(self.args[0])


class InvalidIdentifierError(BlobStoreError, ValueError):
    """Raised for a missing, empty, or unmappable identifier."""


class StoreIOError(BlobStoreError, OSError):
    """Raised for I/O failures detected by the store itself."""


class LayoutConflictError(StoreIOError):
    """Raised when an identifier's path collides with another blob's path.

    Happens when identifiers are path prefixes of each other, e.g. "abc"
    and "abc-def" under the dash layout. The collision is permanent, so
    it is never retried.
    """

    def __init__(self, identifier: str, path: object, reason: str) -> None:
        self.identifier = identifier
        self.path = path
        super().__init__(f"Blob {identifier!r} cannot be stored at {path}: {reason}")

    def __str__(self) -> str:
        return str(self.args[0])


class OwnershipError(StoreIOError):
    """Raised when an external ownership/permission command fails.

    The blob content is already stored when this is raised; it is not
    rolled back.

    Attributes:
        command: The argv that was executed
        returncode: Process exit code, or None if it never completed
        stderr: Decoded error output captured from the process
    """

    def __init__(
        self,
        command: Sequence[str],
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"{' '.join(self.command)} {message}{detail}")

    def __str__(self) -> str:
        return str(self.args[0])
