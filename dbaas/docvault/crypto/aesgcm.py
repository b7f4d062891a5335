"""
AES-256-GCM envelope.

Blob format:
    nonce (12 bytes) || ciphertext || tag (16 bytes)

Invariants:
    - A fresh nonce from os.urandom() is used for every encrypt() call
    - No associated data is bound; the blob alone is authenticated

How to change safely:
    - Nonces are random, not counted; at very high write volumes per key
      the birthday bound on 96-bit nonces becomes relevant
"""

from __future__ import annotations

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import AuthenticationFailedError, InvalidCiphertextError, InvalidKeyLengthError
from .base import KEY_SIZE, NONCE_SIZE

logger = logging.getLogger(__name__)


class AesGcmEnvelope:
    """Authenticated encryption of blobs with a single 256-bit key.

    Example:
        >>> envelope = AesGcmEnvelope(os.urandom(32))
        >>> envelope.decrypt(envelope.encrypt(b"secret"))
        b'secret'
    """

    def __init__(self, key: bytes) -> None:
        """Initialize the envelope.

        Args:
            key: 32-byte symmetric key

        Raises:
            InvalidKeyLengthError: If the key is not 32 bytes
        """
        if len(key) != KEY_SIZE:
            raise InvalidKeyLengthError(len(key), KEY_SIZE)
        self._aesgcm = AESGCM(bytes(key))

    @property
    def is_encrypted(self) -> bool:
        return True

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt plaintext under a fresh random nonce.

        Args:
            plaintext: Bytes to protect

        Returns:
            nonce || ciphertext-with-tag
        """
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aesgcm.encrypt(nonce, plaintext, None)

    def decrypt(self, blob: bytes) -> bytes:
        """Split off the nonce and open the ciphertext.

        Raises:
            InvalidCiphertextError: If the blob is shorter than a nonce
            AuthenticationFailedError: If the tag does not verify
        """
        if len(blob) < NONCE_SIZE:
            raise InvalidCiphertextError(
                f"Encrypted blob is {len(blob)} bytes, shorter than the {NONCE_SIZE}-byte nonce"
            )
        nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise AuthenticationFailedError(
                "Authentication tag mismatch: data was tampered with or the key is wrong"
            ) from e

    def __repr__(self) -> str:
        return "AesGcmEnvelope(key=<redacted>)"
