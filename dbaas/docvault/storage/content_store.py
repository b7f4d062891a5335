"""
File-per-id content store for DocVault.

Layout:
    <base>/<id>.json    one blob per id (possibly encrypted)

Invariants:
    - read() returns exactly the bytes last written for an id
    - Missing ids raise NotFoundError on read and delete
    - No partial-write protection beyond what the filesystem provides

How to change safely:
    - Keep the ".json" suffix; list() derives ids from it
    - New identifier rules must still accept every id already on disk
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import InvalidIdentifierError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

BLOB_SUFFIX = ".json"


def validate_identifier(identifier: str) -> str:
    """Check that an identifier maps to a single file name.

    Args:
        identifier: Document id or username

    Returns:
        The identifier, unchanged

    Raises:
        InvalidIdentifierError: If the id is empty, hidden or contains a path separator
    """
    if not identifier:
        raise InvalidIdentifierError(identifier, "must not be empty")
    if identifier.startswith("."):
        raise InvalidIdentifierError(identifier, "must not start with '.'")
    for bad in ("/", "\\", "\x00"):
        if bad in identifier:
            raise InvalidIdentifierError(identifier, f"must not contain {bad!r}")
    return identifier


class ContentStore:
    """Maps document ids to byte blobs on disk.

    Thread safety:
        None. A single writer process is assumed.

    Example:
        >>> store = ContentStore("/var/lib/docvault")
        >>> store.write("user1", b"{}")
        >>> store.read("user1")
        b'{}'
    """

    def __init__(self, base_path: str | Path) -> None:
        """Initialize the store, creating the base directory if needed.

        Args:
            base_path: Directory holding the blobs
        """
        self.base_path = Path(base_path)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create store directory {self.base_path}: {e}") from e

    def path_for(self, doc_id: str) -> Path:
        """Get the blob file path for an id."""
        return self.base_path / f"{validate_identifier(doc_id)}{BLOB_SUFFIX}"

    def exists(self, doc_id: str) -> bool:
        return self.path_for(doc_id).is_file()

    def write(self, doc_id: str, data: bytes) -> None:
        """Persist bytes under an id, replacing any previous value.

        Args:
            doc_id: Document identifier
            data: Blob to store
        """
        path = self.path_for(doc_id)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {doc_id}: {e}") from e
        logger.debug("Wrote blob", extra={"doc_id": doc_id, "size": len(data)})

    def read(self, doc_id: str) -> bytes:
        """Read the bytes stored for an id.

        Raises:
            NotFoundError: If nothing is stored under the id
            StorageError: On any other I/O failure
        """
        path = self.path_for(doc_id)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(doc_id) from e
        except OSError as e:
            raise StorageError(f"Failed to read {doc_id}: {e}") from e

    def delete(self, doc_id: str) -> None:
        """Remove the blob for an id.

        Raises:
            NotFoundError: If nothing is stored under the id
        """
        path = self.path_for(doc_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(doc_id) from e
        except OSError as e:
            raise StorageError(f"Failed to delete {doc_id}: {e}") from e
        logger.debug("Deleted blob", extra={"doc_id": doc_id})

    def list(self) -> list[str]:
        """List stored ids, sorted."""
        try:
            entries = list(self.base_path.iterdir())
        except OSError as e:
            raise StorageError(f"Failed to list {self.base_path}: {e}") from e

        ids = [
            entry.name[: -len(BLOB_SUFFIX)]
            for entry in entries
            if entry.name.endswith(BLOB_SUFFIX)
            and not entry.name.startswith(".")
            and entry.is_file()
        ]
        return sorted(ids)
