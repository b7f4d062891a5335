"""
Storage module for DocVault - opaque blobs on the local filesystem.

The content store maps an identifier to a byte blob in one file per id.
It knows nothing about encryption, JSON or documents.

Invariants:
    - One file per id: <base>/<id>.json
    - write() overwrites any prior value
    - An id can never resolve outside the base directory

How to change safely:
    - Changing the file naming scheme orphans existing data
    - Keep list() free of non-document files (certs/, .git/)
"""

from .content_store import ContentStore, validate_identifier

__all__ = [
    "ContentStore",
    "validate_identifier",
]
