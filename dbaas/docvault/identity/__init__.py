"""
Identity module for DocVault - self-issued certificates as capability tokens.

A user holds a self-signed X.509 certificate whose common name is their
username. Presenting the exact certificate that the store issued (and still
holds) grants access to document operations.

Invariants:
    - One certificate/key pair per username under <base>/certs/
    - Verification is a byte-for-byte possession check against the stored
      certificate; no expiry or chain validation is performed
    - Revocation deletes the stored pair; re-issuing creates a new identity

How to change safely:
    - Adding expiry checks changes who is authorized; treat it as a migration
    - Stored files go through the crypto envelope; rotating the key requires
      re-encrypting them
"""

from .certificates import (
    CERT_VALIDITY_DAYS,
    RSA_KEY_SIZE,
    CertificateManager,
    IssuedCertificate,
    common_name,
    load_certificate,
)

__all__ = [
    "CERT_VALIDITY_DAYS",
    "RSA_KEY_SIZE",
    "CertificateManager",
    "IssuedCertificate",
    "common_name",
    "load_certificate",
]
