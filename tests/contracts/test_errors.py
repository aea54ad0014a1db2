"""Tests for the store exception taxonomy."""

from pathlib import Path

import pytest

from shardstore.contracts.errors import (
    BlobExistsError,
    BlobNotFoundError,
    BlobStoreError,
    InvalidIdentifierError,
    LayoutConflictError,
    OwnershipError,
    StoreIOError,
)


class TestErrorHierarchy:
    """Callers distinguish recoverable outcomes from environment faults by type."""

    def test_all_errors_share_base(self) -> None:
        for cls in (BlobExistsError, BlobNotFoundError, InvalidIdentifierError, StoreIOError, LayoutConflictError, OwnershipError):
            assert issubclass(cls, BlobStoreError)

    def test_not_found_is_key_error(self) -> None:
        assert issubclass(BlobNotFoundError, KeyError)

    def test_invalid_identifier_is_value_error(self) -> None:
        assert issubclass(InvalidIdentifierError, ValueError)

    def test_io_errors_are_os_errors(self) -> None:
        assert issubclass(StoreIOError, OSError)
        assert issubclass(OwnershipError, StoreIOError)
        assert issubclass(LayoutConflictError, StoreIOError)

    def test_recoverable_errors_are_not_os_errors(self) -> None:
        """AlreadyExists/NotFound must not be caught by an OSError handler."""
        assert not issubclass(BlobExistsError, OSError)
        assert not issubclass(BlobNotFoundError, OSError)


class TestErrorMessages:
    def test_not_found_message_is_not_quoted(self) -> None:
        """KeyError normally repr()s its message; ours reads plainly."""
        err = BlobNotFoundError("abc", Path("/store/abc"))

        assert str(err) == "Blob 'abc' not found at /store/abc"
        assert err.identifier == "abc"
        assert err.path == Path("/store/abc")

    def test_exists_message_names_identifier_and_path(self) -> None:
        err = BlobExistsError("abc", Path("/store/abc"))

        assert "'abc'" in str(err)
        assert "/store/abc" in str(err)

    def test_layout_conflict_names_identifier_and_reason(self) -> None:
        err = LayoutConflictError("abc-def", Path("/store/abc/def"), "/store/abc is an existing blob")

        assert str(err) == "Blob 'abc-def' cannot be stored at /store/abc/def: /store/abc is an existing blob"
        assert err.identifier == "abc-def"
        assert not isinstance(err, BlobExistsError)

    def test_ownership_error_carries_process_details(self) -> None:
        err = OwnershipError(
            ["chmod", "0640", "/store/abc"],
            "exited with status 1",
            returncode=1,
            stderr="chmod: changing permissions: Operation not permitted\n",
        )

        assert err.command == ("chmod", "0640", "/store/abc")
        assert err.returncode == 1
        assert "Operation not permitted" in err.stderr
        assert str(err) == "chmod 0640 /store/abc exited with status 1: chmod: changing permissions: Operation not permitted"

    def test_ownership_error_without_stderr(self) -> None:
        err = OwnershipError(["chown", "web", "/x"], "interrupted after 1.0s")

        assert err.returncode is None
        assert str(err) == "chown web /x interrupted after 1.0s"

    def test_ownership_error_raises_as_os_error(self) -> None:
        with pytest.raises(OSError):
            raise OwnershipError(["chmod"], "failed")
