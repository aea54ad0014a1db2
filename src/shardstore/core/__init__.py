# src/shardstore/core/__init__.py
"""Core infrastructure: store, strategies, configuration, logging."""

from shardstore.core.config import (
    LoggingSettings,
    ShardStoreSettings,
    StoreSettings,
    load_settings,
)
from shardstore.core.factory import create_store
from shardstore.core.identifiers import SequentialGenerator, UUIDGenerator
from shardstore.core.logging import configure_logging, get_logger
from shardstore.core.ownership import CommandOwnershipEnforcer
from shardstore.core.path_mapping import DashSegmentedMapper, FixedWidthMapper
from shardstore.core.store import FilesystemBlobStore

__all__ = [
    "CommandOwnershipEnforcer",
    "DashSegmentedMapper",
    "FilesystemBlobStore",
    "FixedWidthMapper",
    "LoggingSettings",
    "SequentialGenerator",
    "ShardStoreSettings",
    "StoreSettings",
    "UUIDGenerator",
    "configure_logging",
    "create_store",
    "get_logger",
    "load_settings",
]
