"""
Base protocol for crypto envelopes.

Invariants:
    - encrypt() and decrypt() are inverses for a given envelope
    - Envelopes hold no state between calls besides the key

How to change safely:
    - Protocol changes require updating all implementations
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


@runtime_checkable
class Envelope(Protocol):
    """Uniform wrapper applied to every blob before storage.

    Implementations:
        - AesGcmEnvelope: AES-256-GCM, nonce prepended
        - PassthroughEnvelope: no encryption
    """

    @property
    def is_encrypted(self) -> bool:
        """Whether blobs are actually encrypted."""
        ...

    def encrypt(self, plaintext: bytes) -> bytes:
        """Wrap plaintext for storage."""
        ...

    def decrypt(self, blob: bytes) -> bytes:
        """Recover plaintext from a stored blob.

        Raises:
            DecryptionFailedError: If the blob cannot be opened
        """
        ...


def create_envelope(key: Optional[bytes] = None) -> Envelope:
    """Create the envelope matching the configured key.

    Args:
        key: 32-byte key, or None to store plaintext

    Returns:
        AesGcmEnvelope when a key is given, PassthroughEnvelope otherwise

    Raises:
        InvalidKeyLengthError: If the key is not 32 bytes
    """
    if key is None:
        from .passthrough import PassthroughEnvelope

        logger.info("No encryption key configured, storing plaintext")
        return PassthroughEnvelope()

    from .aesgcm import AesGcmEnvelope

    return AesGcmEnvelope(key)
