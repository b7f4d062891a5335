"""
Certificate issuance, verification, revocation and listing.

Layout:
    <base>/certs/<username>.cert    PEM certificate (through the envelope)
    <base>/certs/<username>.key     PKCS#8 PEM private key (through the envelope)

Invariants:
    - Issued certificates are self-signed: subject == issuer == CN=<username>
    - Validity window is exactly CERT_VALIDITY_DAYS from issuance
    - verify() returns False for unknown users; only unparseable input raises

How to change safely:
    - Changing the canonical encoding used for comparison invalidates every
      previously issued certificate
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from ..crypto import Envelope
from ..errors import (
    CertificateError,
    InvalidCertificateError,
    InvalidIdentifierError,
    UnauthorizedError,
)
from ..storage import validate_identifier

logger = logging.getLogger(__name__)

CERTS_DIR = "certs"
CERT_SUFFIX = ".cert"
KEY_SUFFIX = ".key"
CERT_VALIDITY_DAYS = 365
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


@dataclass(frozen=True)
class IssuedCertificate:
    """Plaintext material handed back to the caller on issuance.

    Attributes:
        certificate_pem: PEM-encoded certificate
        private_key_pem: PKCS#8 PEM-encoded private key
    """

    certificate_pem: bytes
    private_key_pem: bytes

    def __iter__(self) -> Iterator[bytes]:
        # Allows `cert, key = manager.issue(...)`
        yield self.certificate_pem
        yield self.private_key_pem


def load_certificate(certificate_bytes: bytes) -> x509.Certificate:
    """Parse PEM certificate bytes.

    Raises:
        InvalidCertificateError: If the bytes are not a PEM certificate
    """
    try:
        return x509.load_pem_x509_certificate(certificate_bytes)
    except (ValueError, TypeError) as e:
        raise InvalidCertificateError(f"Invalid certificate: {e}") from e


def common_name(certificate_bytes: bytes) -> str:
    """Extract the subject common name (the username) from a certificate.

    Args:
        certificate_bytes: PEM certificate

    Returns:
        The common name

    Raises:
        InvalidCertificateError: If the certificate cannot be parsed
        CertificateError: If there is no usable common name
    """
    cert = load_certificate(certificate_bytes)
    attributes = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        raise CertificateError("No username found in certificate")
    value = attributes[0].value
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CertificateError(f"Invalid username encoding: {e}") from e
    return value


def _canonical(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


class CertificateManager:
    """Issues and checks self-signed identity certificates.

    Thread safety:
        None. A single writer process is assumed.

    Example:
        >>> manager = CertificateManager("/var/lib/docvault", PassthroughEnvelope())
        >>> cert, key = manager.issue("alice")
        >>> manager.verify("alice", cert)
        True
        >>> manager.revoke("alice")
        >>> manager.verify("alice", cert)
        False
    """

    def __init__(self, base_path: str | Path, envelope: Envelope) -> None:
        """Initialize the manager.

        Args:
            base_path: Store base path; certificates live in its certs/ subdirectory
            envelope: Envelope applied to stored certificate and key files
        """
        self.certs_path = Path(base_path) / CERTS_DIR
        self.envelope = envelope
        self.certs_path.mkdir(parents=True, exist_ok=True)

    def _cert_path(self, username: str) -> Path:
        return self.certs_path / f"{validate_identifier(username)}{CERT_SUFFIX}"

    def _key_path(self, username: str) -> Path:
        return self.certs_path / f"{validate_identifier(username)}{KEY_SUFFIX}"

    def issue(self, username: str) -> IssuedCertificate:
        """Generate a key pair and a self-signed certificate for a user.

        Any existing identity for the username is replaced.

        Args:
            username: Username, stored as the certificate common name

        Returns:
            Plaintext PEM certificate and private key
        """
        cert_path = self._cert_path(username)
        key_path = self._key_path(username)

        try:
            name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, username)])
        except ValueError as e:
            raise CertificateError(f"Cannot issue certificate for {username!r}: {e}") from e

        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=RSA_KEY_SIZE,
        )
        now = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
        certificate = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + datetime.timedelta(days=CERT_VALIDITY_DAYS))
        ).sign(private_key=private_key, algorithm=hashes.SHA256())

        certificate_pem = certificate.public_bytes(serialization.Encoding.PEM)
        private_key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

        try:
            cert_path.write_bytes(self.envelope.encrypt(certificate_pem))
            key_path.write_bytes(self.envelope.encrypt(private_key_pem))
        except OSError as e:
            raise CertificateError(f"Failed to store certificate for {username}: {e}") from e

        logger.info(
            "Issued certificate",
            extra={"username": username, "serial": format(certificate.serial_number, "x")},
        )
        return IssuedCertificate(certificate_pem=certificate_pem, private_key_pem=private_key_pem)

    def verify(self, username: str, certificate_bytes: bytes) -> bool:
        """Check that a presented certificate is the one stored for a user.

        This is a possession check: the encoded certificate must match the
        stored one exactly. Validity dates and signatures are not checked.

        Args:
            username: Claimed username
            certificate_bytes: Presented PEM certificate

        Returns:
            True if the stored certificate matches

        Raises:
            InvalidCertificateError: If the presented bytes are not a certificate
        """
        presented = load_certificate(certificate_bytes)

        try:
            cert_path = self._cert_path(username)
        except InvalidIdentifierError:
            # No identity can be stored under a name that is not a valid identifier
            logger.debug("Certificate names an invalid username", extra={"username": username})
            return False
        if not cert_path.is_file():
            logger.debug("No stored certificate", extra={"username": username})
            return False

        try:
            stored_blob = cert_path.read_bytes()
        except OSError as e:
            raise CertificateError(f"Failed to read certificate for {username}: {e}") from e
        stored = load_certificate(self.envelope.decrypt(stored_blob))

        return _canonical(presented) == _canonical(stored)

    def verify_presented(self, certificate_bytes: bytes) -> bool:
        """Verify a certificate against the identity named in its common name."""
        return self.verify(common_name(certificate_bytes), certificate_bytes)

    def authenticate(self, certificate_bytes: bytes) -> str:
        """Resolve a presented certificate to its username.

        Returns:
            The username from the certificate

        Raises:
            UnauthorizedError: If the certificate is unknown or revoked
        """
        username = common_name(certificate_bytes)
        if not self.verify(username, certificate_bytes):
            logger.warning("Rejected certificate", extra={"username": username})
            raise UnauthorizedError(username)
        return username

    def revoke(self, username: str) -> None:
        """Delete the stored certificate and key. No error if already absent."""
        for path in (self._cert_path(username), self._key_path(username)):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise CertificateError(f"Failed to revoke {username}: {e}") from e
        logger.info("Revoked certificate", extra={"username": username})

    def list(self) -> list[str]:
        """Usernames with a stored certificate, sorted."""
        return sorted(
            entry.name[: -len(CERT_SUFFIX)]
            for entry in self.certs_path.iterdir()
            if entry.name.endswith(CERT_SUFFIX) and entry.is_file()
        )
