"""Tests for identifier generators."""

from __future__ import annotations

import re
import threading
import uuid

import pytest

_UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class TestUUIDGenerator:
    def test_generates_canonical_dashed_uuid4(self) -> None:
        from shardstore.core.identifiers import UUIDGenerator

        value = UUIDGenerator().generate()

        assert len(value) == 36
        assert _UUID_PATTERN.match(value)
        assert str(uuid.UUID(value)) == value

    def test_values_are_unique(self) -> None:
        from shardstore.core.identifiers import UUIDGenerator

        generator = UUIDGenerator()
        values = {generator.generate() for _ in range(1000)}

        assert len(values) == 1000


class TestSequentialGenerator:
    def test_counts_from_start_with_padding(self) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        generator = SequentialGenerator(start=7, width=4)

        assert [generator.generate() for _ in range(3)] == ["0007", "0008", "0009"]

    def test_prefix_is_prepended(self) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        generator = SequentialGenerator(prefix="img-", width=3)

        assert generator.generate() == "img-000"

    def test_grows_past_width_instead_of_wrapping(self) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        generator = SequentialGenerator(start=99, width=2)

        assert generator.generate() == "99"
        assert generator.generate() == "100"

    @pytest.mark.parametrize("width", [0, -1])
    def test_rejects_non_positive_width(self, width: int) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        with pytest.raises(ValueError, match="width"):
            SequentialGenerator(width=width)

    def test_rejects_negative_start(self) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        with pytest.raises(ValueError, match="start"):
            SequentialGenerator(start=-1)

    def test_unique_across_threads(self) -> None:
        from shardstore.core.identifiers import SequentialGenerator

        generator = SequentialGenerator()
        results: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            local = [generator.generate() for _ in range(500)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4000
        assert len(set(results)) == 4000
