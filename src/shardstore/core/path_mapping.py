# src/shardstore/core/path_mapping.py
"""Path mappers: identifier <-> sharded file path under the store root.

A flat directory holding millions of files makes lookups slow, so blobs
are spread over nested directories derived from the identifier's own
characters. Two layouts are supported:

    DashSegmentedMapper (default):
        9f0c2b1e-6a4d-4f7e-8b1a-2c3d4e5f6a7b
        -> root/9f0c2b1e/6a4d/4f7e/8b1a/2c3d4e5f6a7b

    FixedWidthMapper(width=4):
        9f0c2b1e-6a4d-...
        -> root/9f0c/2b1e/-6a4/d-4f/...

The layouts are not interchangeable: a store written with one cannot be
read with the other.
"""

from __future__ import annotations

import os
from pathlib import Path

from shardstore.contracts.errors import InvalidIdentifierError

__all__ = ["DashSegmentedMapper", "FixedWidthMapper", "validate_identifier"]

# Characters that would let an identifier escape its own path component
_FORBIDDEN_CHARS = frozenset({"/", "\\", "\0", os.sep} | ({os.altsep} if os.altsep else set()))
_RESERVED_COMPONENTS = frozenset({".", ".."})


def validate_identifier(identifier: object) -> str:
    """Check that identifier is a non-empty string safe to use in paths.

    Returns:
        The identifier, typed as str

    Raises:
        InvalidIdentifierError: If identifier is None, not a string, empty,
            or contains path separators or NUL
    """
    if identifier is None:
        raise InvalidIdentifierError("Identifier must not be None")
    if not isinstance(identifier, str):
        raise InvalidIdentifierError(f"Identifier must be a string, got {type(identifier).__name__}")
    if not identifier:
        raise InvalidIdentifierError("Identifier must not be empty")
    bad = _FORBIDDEN_CHARS.intersection(identifier)
    if bad:
        raise InvalidIdentifierError(f"Identifier {identifier[:50]!r} contains forbidden characters {sorted(bad)!r}")
    return identifier


def _check_components(identifier: str, components: list[str]) -> None:
    for component in components:
        if component in _RESERVED_COMPONENTS:
            raise InvalidIdentifierError(f"Identifier {identifier[:50]!r} maps to reserved path component {component!r}")


def _relative_parts(root: Path, path: Path) -> tuple[str, ...]:
    try:
        parts = path.relative_to(root).parts
    except ValueError as e:
        raise ValueError(f"Path {path} is not under store root {root}") from e
    if not parts:
        raise ValueError(f"Path {path} is the store root, not a blob")
    return parts


class DashSegmentedMapper:
    """Split the identifier on its separator; one path component per segment.

    Empty segments (leading, trailing, or doubled separators) are rejected
    because they cannot be represented as path components.
    """

    def __init__(self, separator: str = "-") -> None:
        if len(separator) != 1 or separator in _FORBIDDEN_CHARS:
            raise ValueError(f"separator must be a single non-path character, got {separator!r}")
        self.separator = separator

    def to_path(self, root: Path, identifier: str) -> Path:
        identifier = validate_identifier(identifier)
        segments = identifier.split(self.separator)
        if "" in segments:
            raise InvalidIdentifierError(f"Identifier {identifier[:50]!r} has an empty {self.separator!r}-delimited segment")
        _check_components(identifier, segments)
        return root.joinpath(*segments)

    def to_identifier(self, root: Path, path: Path) -> str:
        parts = _relative_parts(root, path)
        for part in parts:
            if self.separator in part:
                raise ValueError(f"Path {path} was not produced by this mapper: component {part!r} contains {self.separator!r}")
        return self.separator.join(parts)

    def __repr__(self) -> str:
        return f"DashSegmentedMapper(separator={self.separator!r})"


class FixedWidthMapper:
    """Insert a path separator after every ``width`` characters.

    Works for any identifier format, not just dashed ones.
    """

    def __init__(self, width: int = 4) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self.width = width

    def to_path(self, root: Path, identifier: str) -> Path:
        identifier = validate_identifier(identifier)
        chunks = [identifier[i : i + self.width] for i in range(0, len(identifier), self.width)]
        _check_components(identifier, chunks)
        return root.joinpath(*chunks)

    def to_identifier(self, root: Path, path: Path) -> str:
        parts = _relative_parts(root, path)
        *directories, name = parts
        for part in directories:
            if len(part) != self.width:
                raise ValueError(f"Path {path} was not produced by this mapper: directory {part!r} is not {self.width} characters wide")
        if len(name) > self.width:
            raise ValueError(f"Path {path} was not produced by this mapper: file name {name!r} is wider than {self.width}")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"FixedWidthMapper(width={self.width})"
