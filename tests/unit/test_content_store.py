"""
Unit tests for the file-per-id content store.

Tests cover:
- Write/read/delete/list
- Missing ids
- Identifier validation
"""

from pathlib import Path

import pytest

from dbaas.docvault.errors import InvalidIdentifierError, NotFoundError, StorageError
from dbaas.docvault.storage import ContentStore, validate_identifier


class TestContentStore:
    """Tests for ContentStore."""

    @pytest.fixture
    def store(self, data_dir):
        """Create store in a temporary directory."""
        return ContentStore(data_dir)

    def test_write_then_read(self, store):
        """Read returns exactly the bytes written."""
        store.write("test", b"Hello, World!")
        assert store.read("test") == b"Hello, World!"

    def test_write_overwrites(self, store):
        """Second write replaces the first."""
        store.write("test", b"first")
        store.write("test", b"second")
        assert store.read("test") == b"second"

    def test_file_layout(self, store, data_dir):
        """One <id>.json file per id under the base path."""
        store.write("user1", b"{}")
        assert (Path(data_dir) / "user1.json").read_bytes() == b"{}"

    def test_read_missing(self, store):
        """Reading a missing id raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            store.read("missing")
        assert exc_info.value.resource_id == "missing"
        assert exc_info.value.code == "NOT_FOUND"

    def test_not_found_is_storage_error(self, store):
        """NotFoundError belongs to the storage error kind."""
        with pytest.raises(StorageError):
            store.read("missing")

    def test_delete(self, store):
        """Deleted ids can no longer be read."""
        store.write("test", b"data")
        store.delete("test")
        assert not store.exists("test")
        with pytest.raises(NotFoundError):
            store.read("test")

    def test_delete_missing(self, store):
        """Deleting a missing id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.delete("missing")

    def test_list(self, store):
        """List returns stored ids, sorted."""
        store.write("b", b"2")
        store.write("a", b"1")
        assert store.list() == ["a", "b"]

    def test_list_empty(self, store):
        """Empty store lists nothing."""
        assert store.list() == []

    def test_list_ignores_other_files(self, store, data_dir):
        """Only *.json files count as documents."""
        base = Path(data_dir)
        (base / "certs").mkdir()
        (base / "certs" / "alice.cert").write_bytes(b"x")
        (base / "notes.txt").write_bytes(b"x")
        (base / ".hidden.json").write_bytes(b"x")
        store.write("doc", b"{}")
        assert store.list() == ["doc"]

    def test_creates_base_directory(self, data_dir):
        """Missing base directory is created."""
        nested = Path(data_dir) / "a" / "b"
        ContentStore(nested)
        assert nested.is_dir()


class TestValidateIdentifier:
    """Tests for identifier validation."""

    @pytest.mark.parametrize("identifier", ["user1", "user-1_x", "with space", "émile", "a.b"])
    def test_valid(self, identifier):
        """Plain names are accepted unchanged."""
        assert validate_identifier(identifier) == identifier

    @pytest.mark.parametrize("identifier", ["", ".git", "..", "../escape", "a/b", "a\\b", "a\x00b"])
    def test_invalid(self, identifier):
        """Empty, hidden and path-like ids are rejected."""
        with pytest.raises(InvalidIdentifierError):
            validate_identifier(identifier)

    def test_store_rejects_traversal(self, data_dir):
        """Store operations validate ids before touching disk."""
        store = ContentStore(data_dir)
        with pytest.raises(InvalidIdentifierError):
            store.write("../outside", b"x")
        assert not (Path(data_dir).parent / "outside.json").exists()
