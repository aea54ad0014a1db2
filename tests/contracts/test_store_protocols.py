"""Tests for the store and strategy protocols."""

from pathlib import Path


class TestProtocolDefinitions:
    def test_blob_store_protocol_has_required_methods(self) -> None:
        from shardstore.contracts.store import BlobStore

        for name in ("create", "read", "view", "delete", "list", "resolve_path", "read_file"):
            assert hasattr(BlobStore, name)

    def test_path_mapper_protocol_has_both_directions(self) -> None:
        from shardstore.contracts.store import PathMapper

        assert hasattr(PathMapper, "to_path")
        assert hasattr(PathMapper, "to_identifier")


class TestImplementationsSatisfyProtocols:
    def test_filesystem_store_is_blob_store(self, tmp_path: Path) -> None:
        from shardstore.contracts.store import BlobStore
        from shardstore.core.store import FilesystemBlobStore

        assert isinstance(FilesystemBlobStore(tmp_path), BlobStore)

    def test_generators_are_id_generators(self) -> None:
        from shardstore.contracts.store import IdGenerator
        from shardstore.core.identifiers import SequentialGenerator, UUIDGenerator

        assert isinstance(UUIDGenerator(), IdGenerator)
        assert isinstance(SequentialGenerator(), IdGenerator)

    def test_mappers_are_path_mappers(self) -> None:
        from shardstore.contracts.store import PathMapper
        from shardstore.core.path_mapping import DashSegmentedMapper, FixedWidthMapper

        assert isinstance(DashSegmentedMapper(), PathMapper)
        assert isinstance(FixedWidthMapper(), PathMapper)

    def test_command_enforcer_is_ownership_enforcer(self) -> None:
        from shardstore.contracts.store import OwnershipEnforcer
        from shardstore.core.ownership import CommandOwnershipEnforcer

        assert isinstance(CommandOwnershipEnforcer(), OwnershipEnforcer)
