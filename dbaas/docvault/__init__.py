"""
DocVault - encrypted, version-controlled JSON document store.

This package implements a small document store built on:
- One file per document under a base directory
- Optional AES-256-GCM encryption of every stored blob
- A git history of the directory, one commit per mutation
- Self-issued X.509 certificates as capability tokens
- Structured filters evaluated over a full scan

Architecture:
    ┌─────────────┐     ┌──────────────┐     ┌──────────────────┐
    │  CLI / API  │────▶│ Certificate  │────▶│ DocumentService  │
    │   caller    │     │   Manager    │     │                  │
    └─────────────┘     └──────────────┘     └────────┬─────────┘
                                                      │
                        ┌──────────────┬──────────────┼──────────────┐
                        ▼              ▼              ▼              ▼
                   ┌─────────┐   ┌──────────┐   ┌──────────┐   ┌──────────┐
                   │ Filter  │   │ Envelope │   │ Content  │   │ Version  │
                   │ Engine  │   │ (AESGCM) │   │  Store   │   │ Log (git)│
                   └─────────┘   └──────────┘   └──────────┘   └──────────┘

Invariants:
    - The document service is the only writer of <base>/<id>.json
    - Every mutation is followed by a commit of the whole directory
    - Certificates are checked by possession, not by chain of trust

How to change safely:
    - On-disk formats (document JSON, envelope layout, cert paths) are
      persistent; changes need a migration
    - Single writer process per directory

Version: see _version.py.
"""

from ._version import __version__
from .database import DocVault
from .documents import Document
from .errors import DocVaultError

__all__ = [
    "__version__",
    "DocVault",
    "Document",
    "DocVaultError",
]
