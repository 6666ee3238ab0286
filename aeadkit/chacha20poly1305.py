"""ChaCha20Poly1305 (RFC 8439) and XChaCha20Poly1305 authenticated encryption."""

from __future__ import annotations

import hmac
import struct

from cryptography.hazmat.primitives import poly1305
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from aeadkit.aead import Aead, AeadError

KEY_SIZE = 32
NONCE_SIZE = 12
XNONCE_SIZE = 24
TAG_SIZE = 16

_BLOCK_SIZE = 64
"""Size of a ChaCha20 block in bytes."""

_MAX_BLOCKS = 0xFFFFFFFF
"""Number of blocks ChaCha20 can encrypt before its 32-bit counter overflows."""

_MASK32 = 0xFFFFFFFF
_SIGMA = struct.unpack("<4I", b"expand 32-byte k")


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) & _MASK32) | (value >> (32 - shift))


def _quarter_round(state: list[int], a: int, b: int, c: int, d: int) -> None:
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 7)


def hchacha20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte subkey from a 32-byte key and a 16-byte nonce."""
    key = bytes(key)
    nonce = bytes(nonce)
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != 16:
        raise ValueError(f"nonce must be 16 bytes, got {len(nonce)}")

    state = [*_SIGMA, *struct.unpack("<8I", key), *struct.unpack("<4I", nonce)]
    for _ in range(10):
        _quarter_round(state, 0, 4, 8, 12)
        _quarter_round(state, 1, 5, 9, 13)
        _quarter_round(state, 2, 6, 10, 14)
        _quarter_round(state, 3, 7, 11, 15)
        _quarter_round(state, 0, 5, 10, 15)
        _quarter_round(state, 1, 6, 11, 12)
        _quarter_round(state, 2, 7, 8, 13)
        _quarter_round(state, 3, 4, 9, 14)
    return struct.pack("<8I", *state[0:4], *state[12:16])


def _pad16(data: bytes) -> bytes:
    remainder = len(data) % 16
    return data + bytes(16 - remainder) if remainder else data


def _chacha20(key: bytes, nonce: bytes, counter: int, data: bytes) -> bytes:
    full_nonce = counter.to_bytes(4, "little") + nonce
    encryptor = Cipher(algorithms.ChaCha20(key, full_nonce), mode=None).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def _tag(mac_key: bytes, associated_data: bytes, ciphertext: bytes) -> bytes:
    mac = poly1305.Poly1305(mac_key)
    mac.update(_pad16(associated_data))
    mac.update(_pad16(ciphertext))
    mac.update(struct.pack("<QQ", len(associated_data), len(ciphertext)))
    return mac.finalize()


class _ChaChaPoly1305(Aead):
    """ChaCha20 stream cipher combined with the Poly1305 authenticator."""

    tag_size = TAG_SIZE

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != KEY_SIZE:
            raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
        self._key = key

    def _stream(self, nonce: bytes) -> tuple[bytes, bytes]:
        """Return the ChaCha20 key and 12-byte nonce for ``nonce``."""
        return self._key, nonce

    def _setup(self, nonce: bytes) -> tuple[bytes, bytes, bytes]:
        key, stream_nonce = self._stream(self._require_nonce(nonce))
        mac_key = _chacha20(key, stream_nonce, 0, bytes(32))
        return key, stream_nonce, mac_key

    @staticmethod
    def _check_length(data: bytes) -> None:
        if len(data) // _BLOCK_SIZE >= _MAX_BLOCKS:
            raise AeadError("message too long")

    def _seal(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        associated_data = bytes(associated_data)
        plaintext = bytes(plaintext)
        self._check_length(plaintext)
        key, stream_nonce, mac_key = self._setup(nonce)
        ciphertext = _chacha20(key, stream_nonce, 1, plaintext)
        return ciphertext, _tag(mac_key, associated_data, ciphertext)

    def _open(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        associated_data = bytes(associated_data)
        ciphertext = bytes(ciphertext)
        tag = bytes(tag)
        self._check_length(ciphertext)
        key, stream_nonce, mac_key = self._setup(nonce)
        expected = _tag(mac_key, associated_data, ciphertext)
        if len(tag) != TAG_SIZE or not hmac.compare_digest(expected, tag):
            raise AeadError("authentication failed")
        return _chacha20(key, stream_nonce, 1, ciphertext)


class ChaCha20Poly1305(_ChaChaPoly1305):
    """ChaCha20Poly1305 with a 96-bit nonce (RFC 8439)."""

    nonce_size = NONCE_SIZE

    def __init__(self, key: bytes) -> None:
        super().__init__(key)

    def encrypt_detached(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        """Encrypt ``plaintext`` and return ``(ciphertext, tag)``."""
        return self._seal(nonce, associated_data, plaintext)

    def decrypt_detached(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        """Verify ``tag`` and return the plaintext, raising :class:`AeadError` on failure."""
        return self._open(nonce, associated_data, ciphertext, tag)


class XChaCha20Poly1305(_ChaChaPoly1305):
    """ChaCha20Poly1305 with an extended 192-bit nonce."""

    nonce_size = XNONCE_SIZE

    def __init__(self, key: bytes) -> None:
        super().__init__(key)

    def _stream(self, nonce: bytes) -> tuple[bytes, bytes]:
        subkey = hchacha20(self._key, nonce[:16])
        return subkey, bytes(4) + nonce[16:]

    def encrypt_detached(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        """Encrypt ``plaintext`` and return ``(ciphertext, tag)``."""
        return self._seal(nonce, associated_data, plaintext)

    def decrypt_detached(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        """Verify ``tag`` and return the plaintext, raising :class:`AeadError` on failure."""
        return self._open(nonce, associated_data, ciphertext, tag)