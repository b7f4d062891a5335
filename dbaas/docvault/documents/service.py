"""
Document service: create/read/update/delete/list/find.

Write path:
    Document -> JSON -> envelope.encrypt -> ContentStore.write -> VersionLog.commit

Read path:
    ContentStore.read -> envelope.decrypt -> JSON -> Document [-> filter]

Invariants:
    - Commit messages are "Create document <id>", "Update document <id>",
      "Delete document <id>"
    - The blob write happens before the commit; they are not atomic
    - find() scans every document; a filter error aborts the whole query

How to change safely:
    - Keep errors propagating unmodified; callers branch on their types
    - Concurrent writers against one directory are unsupported
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from ..crypto import Envelope
from ..errors import CorruptDocumentError
from ..history import VersionLog
from ..query import Filter, evaluate
from ..storage import ContentStore
from .models import Document

logger = logging.getLogger(__name__)


class DocumentService:
    """Orchestrates storage, encryption and history for documents.

    Attributes:
        store: Content store holding the document blobs
        envelope: Envelope applied to every blob
        version_log: Version log snapshotted after each mutation

    Example:
        >>> service = DocumentService(store, envelope, version_log)
        >>> doc = service.create("user1", {"name": "Alice", "age": 25})
        >>> service.find(condition("age", "gte", 25))
        [Document(id='user1', ...)]
    """

    def __init__(
        self,
        store: ContentStore,
        envelope: Envelope,
        version_log: VersionLog,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the service.

        Args:
            store: Content store
            envelope: Crypto envelope (AES-GCM or pass-through)
            version_log: Version log for the store directory
            clock: Source of the current time in seconds
        """
        self.store = store
        self.envelope = envelope
        self.version_log = version_log
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def _persist(self, doc: Document) -> None:
        blob = self.envelope.encrypt(doc.to_json().encode("utf-8"))
        self.store.write(doc.id, blob)

    def create(self, doc_id: str, data: Any) -> Document:
        """Create a document.

        An existing document with the same id is overwritten.

        Args:
            doc_id: Document identifier
            data: JSON value to store

        Returns:
            The stored document
        """
        if self.store.exists(doc_id):
            logger.warning("Overwriting existing document on create", extra={"doc_id": doc_id})

        now = self._now()
        doc = Document(id=doc_id, data=data, created_at=now, updated_at=now)
        self._persist(doc)
        self.version_log.commit(f"Create document {doc_id}")

        logger.info("Created document", extra={"doc_id": doc_id})
        return doc

    def read(self, doc_id: str) -> Document:
        """Read a document.

        Raises:
            NotFoundError: If the document does not exist
            DecryptionFailedError: If the blob cannot be decrypted
            CorruptDocumentError: If the decrypted blob is not a document
        """
        blob = self.store.read(doc_id)
        plaintext = self.envelope.decrypt(blob)
        doc = Document.from_json(plaintext, doc_id=doc_id)
        if doc.id != doc_id:
            raise CorruptDocumentError(doc_id, f"stored under {doc_id!r} but has id {doc.id!r}")
        return doc

    def update(self, doc_id: str, data: Any) -> Document:
        """Replace a document's data.

        Raises:
            NotFoundError: If the document does not exist
        """
        doc = self.read(doc_id)
        doc.data = data
        doc.updated_at = max(self._now(), doc.created_at)
        self._persist(doc)
        self.version_log.commit(f"Update document {doc_id}")

        logger.info("Updated document", extra={"doc_id": doc_id})
        return doc

    def delete(self, doc_id: str) -> None:
        """Delete a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        self.store.delete(doc_id)
        self.version_log.commit(f"Delete document {doc_id}")
        logger.info("Deleted document", extra={"doc_id": doc_id})

    def list(self) -> list[str]:
        """Ids of all stored documents."""
        return self.store.list()

    def find(self, flt: Optional[Filter] = None) -> list[Document]:
        """Read every document, keeping those that match the filter.

        Args:
            flt: Filter tree, or None to return everything

        Returns:
            Matching documents in id order

        Raises:
            FilterError: If evaluating the filter fails for any document
        """
        results = []
        for doc_id in self.store.list():
            doc = self.read(doc_id)
            if flt is None or evaluate(flt, doc.data):
                results.append(doc)

        logger.debug(
            "Find completed",
            extra={"matched": len(results), "filtered": flt is not None},
        )
        return results
