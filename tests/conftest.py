# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from shardstore.core.logging import configure_logging
from shardstore.core.store import FilesystemBlobStore


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Route store logs through stdlib at WARNING; tests that need more reconfigure."""
    configure_logging(level="WARNING")
    yield
    configure_logging(level="WARNING")


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """Root directory for a store; not created yet."""
    return tmp_path / "store"


@pytest.fixture
def store(store_root: Path) -> FilesystemBlobStore:
    """Store with default strategies. fsync is off to keep tests fast."""
    return FilesystemBlobStore(store_root, fsync=False)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Filesystem timing varies
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
