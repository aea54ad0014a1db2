# src/shardstore/core/identifiers.py
"""Identifier generators.

UUIDGenerator is the store default. SequentialGenerator is only unique
within one process, so it suits tests and short-lived scratch stores.
"""

from __future__ import annotations

import uuid
from threading import Lock

__all__ = ["SequentialGenerator", "UUIDGenerator"]


class UUIDGenerator:
    """Random 128-bit identifiers in canonical dashed form (36 chars)."""

    def generate(self) -> str:
        return str(uuid.uuid4())


class SequentialGenerator:
    """Zero-padded decimal counter, optionally prefixed.

    Thread-safe. Counters wider than ``width`` digits keep growing rather
    than wrapping, so values stay unique.
    """

    def __init__(self, start: int = 0, width: int = 12, prefix: str = "") -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if start < 0:
            raise ValueError(f"start must not be negative, got {start}")
        self._next = start
        self._width = width
        self._prefix = prefix
        self._lock = Lock()

    def generate(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self._prefix}{value:0{self._width}d}"
