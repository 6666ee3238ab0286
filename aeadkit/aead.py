"""Common interface for authenticated encryption with associated data."""

from __future__ import annotations

import abc


class AeadError(Exception):
    """Raised when an AEAD operation fails, e.g. on a tag mismatch or a length limit."""

    def __init__(self, message: str = "aead operation failed") -> None:
        super().__init__(message)


class Aead(abc.ABC):
    """Base class for AEAD ciphers.

    Subclasses provide the detached operations; the combined forms append the
    authentication tag after the ciphertext.
    """

    nonce_size: int = 0
    tag_size: int = 16

    def encrypt(self, nonce: bytes, plaintext: bytes, associated_data: bytes = b"") -> bytes:
        """Encrypt ``plaintext`` and return the ciphertext followed by the tag."""
        ciphertext, tag = self.encrypt_detached(nonce, associated_data, plaintext)
        return ciphertext + tag

    def decrypt(self, nonce: bytes, ciphertext: bytes, associated_data: bytes = b"") -> bytes:
        """Verify and decrypt a ciphertext that carries its tag at the end."""
        ciphertext = bytes(ciphertext)
        if len(ciphertext) < self.tag_size:
            raise AeadError("ciphertext is shorter than the tag")
        split = len(ciphertext) - self.tag_size
        return self.decrypt_detached(nonce, associated_data, ciphertext[:split], ciphertext[split:])

    @abc.abstractmethod
    def encrypt_detached(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        """Encrypt ``plaintext`` and return ``(ciphertext, tag)``."""

    @abc.abstractmethod
    def decrypt_detached(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        """Verify ``tag`` and return the plaintext, raising :class:`AeadError` on failure."""

    def _require_nonce(self, nonce: bytes) -> bytes:
        nonce = bytes(nonce)
        if len(nonce) != self.nonce_size:
            raise ValueError(f"nonce must be {self.nonce_size} bytes, got {len(nonce)}")
        return nonce