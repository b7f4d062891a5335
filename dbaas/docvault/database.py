"""
DocVault facade - one handle per store directory.

Wires the subsystems together for a base path:
- ContentStore: <base>/<id>.json blobs
- Envelope: AES-256-GCM or pass-through, chosen by the key
- VersionLog: git history of <base>
- CertificateManager: <base>/certs/
- DocumentService: CRUD and find over the above

Invariants:
    - Exactly one instance of each subsystem per DocVault
    - Document and certificate files share the same envelope
    - No module-level state; two DocVaults on different paths are independent

How to change safely:
    - Callers are expected to authenticate() before document operations
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from .config import Settings
from .crypto import Envelope, create_envelope
from .documents import Document, DocumentService
from .history import CommitInfo, VersionLog
from .history.version_log import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME
from .identity import CertificateManager, IssuedCertificate
from .query import Filter
from .storage import ContentStore

logger = logging.getLogger(__name__)


class DocVault:
    """Encrypted, version-controlled JSON document store.

    Attributes:
        path: Store base path
        envelope: Crypto envelope shared by documents and certificates
        store: Content store
        version_log: Version log
        certificates: Certificate manager
        documents: Document service

    Example:
        >>> db = DocVault("/tmp/vault", encryption_key=b"k" * 32)
        >>> cert, key = db.generate_certificate("alice")
        >>> db.authenticate(cert)
        'alice'
        >>> db.create("user1", {"name": "Alice"})
        Document(id='user1', ...)
    """

    def __init__(
        self,
        path: str | Path,
        encryption_key: Optional[bytes] = None,
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
    ) -> None:
        """Open (or initialize) a store.

        Args:
            path: Store base path
            encryption_key: 32-byte key, or None for plaintext storage
            author_name: Commit author name
            author_email: Commit author email

        Raises:
            InvalidKeyLengthError: If the key is not 32 bytes
            VersionLogError: If the git repository cannot be opened or created
        """
        self.path = Path(path)
        self.envelope: Envelope = create_envelope(encryption_key)
        self.store = ContentStore(self.path)
        self.version_log = VersionLog(self.path, author_name=author_name, author_email=author_email)
        self.certificates = CertificateManager(self.path, self.envelope)
        self.documents = DocumentService(self.store, self.envelope, self.version_log)

        logger.debug(
            "Opened store",
            extra={"path": str(self.path), "encrypted": self.envelope.is_encrypted},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> DocVault:
        """Open the store described by the settings."""
        return cls(
            settings.path,
            encryption_key=settings.encryption_key_bytes(),
            author_name=settings.author_name,
            author_email=settings.author_email,
        )

    # Certificates

    def generate_certificate(self, username: str) -> IssuedCertificate:
        return self.certificates.issue(username)

    def verify_certificate(self, certificate_bytes: bytes) -> bool:
        """Check a presented certificate against the identity in its common name."""
        return self.certificates.verify_presented(certificate_bytes)

    def authenticate(self, certificate_bytes: bytes) -> str:
        """Return the certificate's username, or raise UnauthorizedError."""
        return self.certificates.authenticate(certificate_bytes)

    def revoke_certificate(self, username: str) -> None:
        self.certificates.revoke(username)

    def list_certificates(self) -> list[str]:
        return self.certificates.list()

    # Documents

    def create(self, doc_id: str, data: Any) -> Document:
        return self.documents.create(doc_id, data)

    def read(self, doc_id: str) -> Document:
        return self.documents.read(doc_id)

    def update(self, doc_id: str, data: Any) -> Document:
        return self.documents.update(doc_id, data)

    def delete(self, doc_id: str) -> None:
        self.documents.delete(doc_id)

    def list(self) -> list[str]:
        return self.documents.list()

    def find(self, flt: Optional[Filter] = None) -> list[Document]:
        return self.documents.find(flt)

    # History

    def history(self, limit: Optional[int] = None) -> list[CommitInfo]:
        return self.version_log.history(limit=limit)
