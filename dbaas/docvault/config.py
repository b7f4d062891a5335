"""
Configuration for DocVault.

Uses pydantic-settings for environment variable loading. Every setting can
also be passed explicitly (the command line does this for its flags).

Environment:
    DB_PATH            Store directory (default: .docvault)
    DB_KEY             Encryption key; its UTF-8 bytes must be exactly 32 bytes
    DB_CERT            Path to a PEM certificate for document commands
    DB_CERT_CONTENT    Base64-encoded PEM certificate (alternative to DB_CERT)
    DB_JSON_OUTPUT     Print JSON instead of human-readable output
    DB_AUTHOR_NAME     Commit author name
    DB_AUTHOR_EMAIL    Commit author email
    DB_LOG_LEVEL       Logging level (DEBUG, INFO, WARNING, ERROR)
    DB_LOG_FORMAT      Log format (text, json)

Invariants:
    - Secrets are never logged or exposed in error messages
    - Key length is validated by the crypto envelope, not here

How to change safely:
    - Add new settings with defaults that keep existing stores readable
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import CertificateError
from .history.version_log import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """DocVault configuration loaded from environment."""

    # Store
    path: Path = Field(default=Path(".docvault"), description="Store directory")
    key: Optional[SecretStr] = Field(default=None, description="Encryption key (32 bytes)")

    # Authentication for document commands
    cert: Optional[Path] = Field(default=None, description="PEM certificate file")
    cert_content: Optional[str] = Field(default=None, description="Base64-encoded PEM certificate")

    # Version log identity
    author_name: str = Field(default=DEFAULT_AUTHOR_NAME, description="Commit author name")
    author_email: str = Field(default=DEFAULT_AUTHOR_EMAIL, description="Commit author email")

    # Output
    json_output: bool = Field(default=False, description="Print JSON output")
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: Literal["text", "json"] = Field(default="text", description="Log format")

    model_config = SettingsConfigDict(env_prefix="DB_")

    def encryption_key_bytes(self) -> Optional[bytes]:
        """Raw key bytes, or None when no key is configured."""
        if self.key is None:
            return None
        return self.key.get_secret_value().encode("utf-8")

    def load_certificate(self) -> bytes:
        """Load the certificate presented for document commands.

        The certificate file takes precedence over the inline content.

        Raises:
            CertificateError: If no certificate is configured or it can't be read
        """
        if self.cert is not None:
            try:
                return self.cert.read_bytes()
            except OSError as e:
                raise CertificateError(f"Cannot read certificate file {self.cert}: {e}") from e
        if self.cert_content:
            try:
                return base64.b64decode("".join(self.cert_content.split()), validate=True)
            except (binascii.Error, ValueError) as e:
                raise CertificateError(f"Certificate content is not valid base64: {e}") from e
        raise CertificateError("Certificate required. Provide --cert or --cert-content")

    def log_config(self) -> None:
        """Log configuration (redacting secrets)."""
        logger.info(
            "Configuration loaded",
            extra={
                "path": str(self.path),
                "encrypted": self.key is not None,
                "cert": str(self.cert) if self.cert else None,
                "cert_content": self.cert_content is not None,
                "author_name": self.author_name,
                "json_output": self.json_output,
                "log_level": self.log_level,
            },
        )
