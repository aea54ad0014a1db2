# src/shardstore/core/factory.py
"""Build a configured store from settings.

Usage:
    from shardstore.core.config import load_settings
    from shardstore.core.factory import create_store

    settings = load_settings(Path("settings.yaml"))
    store = create_store(settings.store)
"""

from __future__ import annotations

import structlog

from shardstore.contracts.store import IdGenerator, PathMapper
from shardstore.core.config import StoreSettings
from shardstore.core.identifiers import SequentialGenerator, UUIDGenerator
from shardstore.core.ownership import CommandOwnershipEnforcer
from shardstore.core.path_mapping import DashSegmentedMapper, FixedWidthMapper
from shardstore.core.store import FilesystemBlobStore

logger = structlog.get_logger(__name__)


def create_generator(settings: StoreSettings) -> IdGenerator:
    if settings.id_generator == "sequential":
        return SequentialGenerator()
    return UUIDGenerator()


def create_mapper(settings: StoreSettings) -> PathMapper:
    if settings.path_layout == "fixed":
        return FixedWidthMapper(width=settings.segment_width)
    return DashSegmentedMapper()


def create_store(settings: StoreSettings) -> FilesystemBlobStore:
    """Create a FilesystemBlobStore wired from settings.

    The ownership enforcer is only attached when owner or permissions
    is configured.
    """
    enforcer = CommandOwnershipEnforcer(
        owner=settings.owner,
        permissions=settings.permissions,
        timeout=settings.ownership_timeout,
    )
    store = FilesystemBlobStore(
        settings.root_path.expanduser(),
        generator=create_generator(settings),
        mapper=create_mapper(settings),
        enforcer=enforcer if enforcer.enabled else None,
        chunk_size=settings.chunk_size,
        fsync=settings.fsync,
    )
    logger.debug(
        "Store created",
        root=str(store.root),
        id_generator=settings.id_generator,
        path_layout=settings.path_layout,
        ownership=enforcer.enabled,
    )
    return store
