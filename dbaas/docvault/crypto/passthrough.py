"""
Pass-through envelope used when no encryption key is configured.
"""

from __future__ import annotations


class PassthroughEnvelope:
    """Envelope that stores blobs as-is."""

    @property
    def is_encrypted(self) -> bool:
        return False

    def encrypt(self, plaintext: bytes) -> bytes:
        return bytes(plaintext)

    def decrypt(self, blob: bytes) -> bytes:
        return bytes(blob)

    def __repr__(self) -> str:
        return "PassthroughEnvelope()"
