"""
Documents module for DocVault - CRUD and query over JSON documents.

The DocumentService is the only writer of documents. It serializes each
Document to JSON, seals it with the crypto envelope, stores it in the
content store and snapshots the store into the version log.

Invariants:
    - updated_at >= created_at for every stored document
    - Document ids are immutable; one document per id
    - Every successful mutation produces exactly one commit

How to change safely:
    - The serialized Document layout is on disk; add fields with defaults
    - Callers authorize before invoking the service; it does no auth itself
"""

from .models import Document
from .service import DocumentService

__all__ = [
    "Document",
    "DocumentService",
]
