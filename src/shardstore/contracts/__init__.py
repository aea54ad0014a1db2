"""Shared contracts: store protocols and the error taxonomy.

This package is a LEAF MODULE with no outbound dependencies to core.

Import patterns:
    from shardstore.contracts import BlobStore, BlobNotFoundError
"""

from shardstore.contracts.errors import (
    BlobExistsError,
    BlobNotFoundError,
    BlobStoreError,
    InvalidIdentifierError,
    LayoutConflictError,
    OwnershipError,
    StoreIOError,
)
from shardstore.contracts.store import (
    BlobStore,
    IdGenerator,
    OwnershipEnforcer,
    PathMapper,
)

__all__ = [
    "BlobExistsError",
    "BlobNotFoundError",
    "BlobStore",
    "BlobStoreError",
    "IdGenerator",
    "InvalidIdentifierError",
    "LayoutConflictError",
    "OwnershipEnforcer",
    "OwnershipError",
    "PathMapper",
    "StoreIOError",
]
