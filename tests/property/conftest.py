"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import binary_content, uuid_identifiers

    @given(content=binary_content)
    def test_round_trip(content: bytes) -> None:
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

# =============================================================================
# Blob content
# =============================================================================

binary_content = st.binary(min_size=0, max_size=10_000)

small_binary = st.binary(min_size=0, max_size=256)

# =============================================================================
# Identifiers
# =============================================================================

uuid_identifiers = st.uuids(version=4).map(str)

# Characters safe inside a single path component on POSIX and Windows
_SAFE_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_."

# One dash-free segment that is not a reserved component
_segment = st.text(alphabet=_SAFE_ALPHABET, min_size=1, max_size=12).filter(lambda s: s not in (".", ".."))

# Dash-joined identifiers: 1-6 non-empty segments
dash_identifiers = st.lists(_segment, min_size=1, max_size=6).map("-".join)

# Arbitrary identifiers for the fixed-width layout. No dots, so no chunk can be "." or ".."
opaque_identifiers = st.text(alphabet=_SAFE_ALPHABET.replace(".", "") + "-", min_size=1, max_size=48)

segment_widths = st.integers(min_value=1, max_value=8)
