"""
Error types for DocVault.

Every failure raised by the store is a DocVaultError subclass, grouped by the
subsystem that produced it:
- StorageError: content store I/O and missing documents
- EncryptionError: key length, truncated ciphertext, failed authentication
- VersionLogError: git init/add/commit failures
- JsonError: malformed document payloads
- CertificateError: unparseable or unknown certificates
- FilterError: invalid filter shape, missing field, type mismatch

Invariants:
    - All errors inherit from DocVaultError
    - Errors carry a stable code for programmatic handling
    - Errors never include key material or document payloads

How to change safely:
    - Add new subclasses under the existing kind, don't move classes between kinds
    - Keep codes stable, callers branch on them
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DocVaultError(Exception):
    """Base exception for all DocVault errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    default_code = "DOCVAULT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}


# Storage


class StorageError(DocVaultError):
    """Content store I/O failure."""

    default_code = "STORAGE_ERROR"


class NotFoundError(StorageError):
    """Requested document does not exist.

    Raised when:
    - Reading, updating or deleting an id with no stored blob
    """

    def __init__(self, resource_id: str, resource_type: str = "document") -> None:
        super().__init__(
            f"{resource_type.capitalize()} not found: {resource_id}",
            code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_id = resource_id
        self.resource_type = resource_type


class InvalidIdentifierError(StorageError):
    """Identifier cannot be mapped to a file under the base directory."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(
            f"Invalid identifier {identifier!r}: {reason}",
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier, "reason": reason},
        )
        self.identifier = identifier
        self.reason = reason


# Encryption


class EncryptionError(DocVaultError):
    """Crypto envelope failure."""

    default_code = "ENCRYPTION_ERROR"


class InvalidKeyLengthError(EncryptionError):
    """Encryption key is not exactly 256 bits."""

    def __init__(self, actual: int, expected: int = 32) -> None:
        super().__init__(
            f"Key must be exactly {expected} bytes, got {actual}",
            code="INVALID_KEY_LENGTH",
            details={"expected": expected, "actual": actual},
        )
        self.actual = actual
        self.expected = expected


class DecryptionFailedError(EncryptionError):
    """Stored blob could not be decrypted."""

    default_code = "DECRYPTION_FAILED"


class InvalidCiphertextError(DecryptionFailedError):
    """Blob is too short to contain a nonce."""

    default_code = "INVALID_CIPHERTEXT"


class AuthenticationFailedError(DecryptionFailedError):
    """Authentication tag did not verify (tampered data or wrong key)."""

    default_code = "AUTHENTICATION_FAILED"


# Version log


class VersionLogError(DocVaultError):
    """Git operation failed.

    Attributes:
        command: The git command that failed
        stderr: Captured standard error, if any
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        stderr: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="GIT_ERROR",
            details={"command": command or [], "stderr": stderr or ""},
        )
        self.command = command or []
        self.stderr = stderr or ""


# JSON


class JsonError(DocVaultError):
    """Malformed JSON payload."""

    default_code = "JSON_ERROR"


class CorruptDocumentError(JsonError):
    """Stored document could not be deserialized."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(
            f"Document {document_id} is corrupt: {reason}",
            code="CORRUPT_DOCUMENT",
            details={"document_id": document_id, "reason": reason},
        )
        self.document_id = document_id
        self.reason = reason


# Certificates


class CertificateError(DocVaultError):
    """Certificate handling failure."""

    default_code = "CERTIFICATE_ERROR"


class InvalidCertificateError(CertificateError):
    """Certificate bytes are not a parseable PEM certificate."""

    default_code = "INVALID_CERTIFICATE"


class UnauthorizedError(CertificateError):
    """Presented certificate does not match a stored identity."""

    def __init__(self, username: Optional[str] = None) -> None:
        super().__init__(
            "Invalid or revoked certificate",
            code="UNAUTHORIZED",
            details={"username": username},
        )
        self.username = username


# Filters


class FilterError(DocVaultError):
    """Filter parsing or evaluation failure."""

    default_code = "FILTER_ERROR"


class InvalidFilterError(FilterError):
    """Filter JSON does not match the expected wire shape."""

    default_code = "INVALID_FILTER"


class FieldNotFoundError(FilterError):
    """Dotted path does not resolve in the document."""

    def __init__(self, field: str, segment: str) -> None:
        super().__init__(
            f"Field not found: {field}",
            code="FIELD_NOT_FOUND",
            details={"field": field, "segment": segment},
        )
        self.field = field
        self.segment = segment


class TypeMismatchError(FilterError):
    """Operator applied to values of incompatible JSON types."""

    def __init__(self, field: str, op: str, actual: Any, expected: Any) -> None:
        actual_type = json_type_name(actual)
        expected_type = json_type_name(expected)
        super().__init__(
            f"Type mismatch on {field}: cannot apply {op} to {actual_type} and {expected_type}",
            code="TYPE_MISMATCH",
            details={
                "field": field,
                "op": op,
                "actual_type": actual_type,
                "expected_type": expected_type,
            },
        )
        self.field = field
        self.op = op


def json_type_name(value: Any) -> str:
    """Name of the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
