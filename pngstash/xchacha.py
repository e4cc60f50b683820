"""XChaCha20-Poly1305 helper backed by PyCryptodomex.

``Cryptodome.Cipher.ChaCha20_Poly1305`` switches to XChaCha20-Poly1305 when
given a 24-byte nonce; this wrapper pins the key and nonce sizes and returns
ciphertext and tag separately.
"""

from __future__ import annotations

from typing import Tuple

from Cryptodome.Cipher import ChaCha20_Poly1305


KEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16


class XChaCha20Poly1305:
    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise ValueError("Key must be 32 bytes for XChaCha20-Poly1305")
        self._key = key

    def _new(self, nonce: bytes, associated_data: bytes):
        if len(nonce) != NONCE_SIZE:
            raise ValueError("Nonce must be 24 bytes for XChaCha20-Poly1305")
        cipher = ChaCha20_Poly1305.new(key=self._key, nonce=nonce)
        if associated_data:
            cipher.update(associated_data)
        return cipher

    def encrypt(self, nonce: bytes, plaintext: bytes, *, associated_data: bytes = b"") -> Tuple[bytes, bytes]:
        """Returns (ciphertext, tag)."""
        return self._new(nonce, associated_data).encrypt_and_digest(plaintext)

    def decrypt(self, nonce: bytes, ciphertext: bytes, tag: bytes, *, associated_data: bytes = b"") -> bytes:
        """Raises ValueError when the tag does not verify."""
        if len(tag) != TAG_SIZE:
            raise ValueError("Authentication tag must be 16 bytes")
        return self._new(nonce, associated_data).decrypt_and_verify(ciphertext, tag)
