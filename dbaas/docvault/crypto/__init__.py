"""
Crypto envelope for DocVault - optional authenticated encryption of blobs.

Every blob passes through an Envelope before it reaches disk:
- AES-256-GCM when a key is configured
- Pass-through (identity) when no key is configured

The choice is made once, at construction, by create_envelope().

Invariants:
    - Keys are exactly 32 bytes
    - Each encrypt() call draws a fresh random 96-bit nonce
    - Tampered or wrong-key blobs fail loudly, never decrypt to garbage

How to change safely:
    - The wire format (nonce || ciphertext || tag) is on disk; don't change it
    - New envelopes must implement the Envelope protocol
"""

from .aesgcm import AesGcmEnvelope
from .base import KEY_SIZE, NONCE_SIZE, TAG_SIZE, Envelope, create_envelope
from .passthrough import PassthroughEnvelope

__all__ = [
    # Protocol and constants
    "Envelope",
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    # Factory
    "create_envelope",
    # Implementations
    "AesGcmEnvelope",
    "PassthroughEnvelope",
]
