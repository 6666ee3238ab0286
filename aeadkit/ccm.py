"""Counter with CBC-MAC (CCM) authenticated encryption (RFC 3610, NIST SP 800-38C)."""

from __future__ import annotations

import hmac

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from aeadkit.aead import Aead, AeadError

TAG_SIZES = (4, 6, 8, 10, 12, 14, 16)
"""Valid CCM tag sizes in bytes."""

NONCE_SIZES = (7, 8, 9, 10, 11, 12, 13)
"""Valid CCM nonce sizes in bytes."""

KEY_SIZES = (16, 24, 32)

_BLOCK = 16


def fill_aad_header(adata_len: int) -> tuple[int, bytes]:
    """Encode the associated-data length prefix.

    Returns the number of header bytes and a 16-byte block holding the header
    followed by zeros.
    """
    if adata_len <= 0:
        raise ValueError("associated data length must be positive")
    if adata_len < 0xFF00:
        header = adata_len.to_bytes(2, "big")
    elif adata_len <= 0xFFFFFFFF:
        header = b"\xff\xfe" + adata_len.to_bytes(4, "big")
    else:
        header = b"\xff\xff" + adata_len.to_bytes(8, "big")
    return len(header), header.ljust(_BLOCK, b"\x00")


def _pad(data: bytes) -> bytes:
    remainder = len(data) % _BLOCK
    return data + bytes(_BLOCK - remainder) if remainder else data


def _xor(data: bytes, keystream: bytes) -> bytes:
    size = len(data)
    if not size:
        return b""
    return (int.from_bytes(data, "big") ^ int.from_bytes(keystream[:size], "big")).to_bytes(
        size, "big"
    )


class Ccm(Aead):
    """CCM over AES with a chosen tag size and nonce size."""

    def __init__(self, key: bytes, tag_size: int, nonce_size: int) -> None:
        key = bytes(key)
        if len(key) not in KEY_SIZES:
            raise ValueError(f"key must be 16, 24 or 32 bytes, got {len(key)}")
        if tag_size not in TAG_SIZES:
            raise ValueError(f"invalid tag size: {tag_size}")
        if nonce_size not in NONCE_SIZES:
            raise ValueError(f"invalid nonce size: {nonce_size}")
        self._algorithm = algorithms.AES(key)
        self.tag_size = tag_size
        self.nonce_size = nonce_size

    @property
    def _l(self) -> int:
        return 15 - self.nonce_size

    @property
    def max_len(self) -> int:
        """Largest message length, in bytes, that the length field can hold."""
        return min((1 << (8 * self._l)) - 1, (1 << 64) - 1)

    def _calc_mac(self, nonce: bytes, adata: bytes, message: bytes) -> bytes:
        if len(message) > self.max_len:
            raise AeadError("message too long for this nonce size")
        m_tick = (self.tag_size - 2) // 2
        flags = 64 * bool(adata) + 8 * m_tick + (self._l - 1)
        b0 = bytes([flags]) + nonce + len(message).to_bytes(self._l, "big")

        data = b0
        if adata:
            n, header = fill_aad_header(len(adata))
            data += _pad(header[:n] + adata)
        data += _pad(message)

        encryptor = Cipher(self._algorithm, modes.CBC(bytes(_BLOCK))).encryptor()
        return encryptor.update(data)[-_BLOCK:]

    def _keystream(self, nonce: bytes, length: int) -> bytes:
        """Keystream starting at counter block 0, covering the tag block plus ``length`` bytes."""
        ext_nonce = bytes([self._l - 1]) + nonce + bytes(self._l)
        width = 8 if self._l > 4 else 4
        prefix = ext_nonce[: _BLOCK - width]
        start = int.from_bytes(ext_nonce[_BLOCK - width :], "big")
        mask = (1 << (8 * width)) - 1
        count = 1 + -(-length // _BLOCK)
        counters = b"".join(
            prefix + ((start + i) & mask).to_bytes(width, "big") for i in range(count)
        )
        encryptor = Cipher(self._algorithm, modes.ECB()).encryptor()
        return encryptor.update(counters)

    def encrypt_detached(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        nonce = self._require_nonce(nonce)
        associated_data = bytes(associated_data)
        plaintext = bytes(plaintext)
        full_tag = self._calc_mac(nonce, associated_data, plaintext)
        keystream = self._keystream(nonce, len(plaintext))
        tag = _xor(full_tag, keystream[:_BLOCK])[: self.tag_size]
        return _xor(plaintext, keystream[_BLOCK:]), tag

    def decrypt_detached(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        nonce = self._require_nonce(nonce)
        associated_data = bytes(associated_data)
        ciphertext = bytes(ciphertext)
        tag = bytes(tag)
        if len(tag) != self.tag_size:
            raise AeadError("tag has the wrong length")
        keystream = self._keystream(nonce, len(ciphertext))
        plaintext = _xor(ciphertext, keystream[_BLOCK:])
        full_tag = self._calc_mac(nonce, associated_data, plaintext)
        expected = _xor(full_tag, keystream[:_BLOCK])[: self.tag_size]
        if not hmac.compare_digest(expected, tag):
            raise AeadError("authentication failed")
        return plaintext