"""AES-GCM-SIV misuse-resistant authenticated encryption (RFC 8452)."""

from __future__ import annotations

import hmac

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from aeadkit.aead import Aead, AeadError

A_MAX = 1 << 36
"""Maximum length of associated data in bytes (RFC 8452, section 6)."""

P_MAX = 1 << 36
"""Maximum length of plaintext in bytes (RFC 8452, section 6)."""

C_MAX = (1 << 36) + 16
"""Maximum length of ciphertext in bytes (RFC 8452, section 6)."""

NONCE_SIZE = 12
TAG_SIZE = 16

_BLOCK = 16
_MASK = (1 << 128) - 1
# x^128 + x^127 + x^126 + x^121 + 1, the POLYVAL field polynomial.
_POLY = (1 << 128) | (1 << 127) | (1 << 126) | (1 << 121) | 1


def _reduce(value: int) -> int:
    for bit in range(value.bit_length() - 1, 127, -1):
        if value >> bit & 1:
            value ^= _POLY << (bit - 128)
    return value


def _clmul(a: int, b: int) -> int:
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        b >>= 1
    return result


def _field_mul(a: int, b: int) -> int:
    return _reduce(_clmul(a, b))


def _field_inverse(value: int) -> int:
    result, base, exponent = 1, value, (1 << 128) - 2
    while exponent:
        if exponent & 1:
            result = _field_mul(result, base)
        base = _field_mul(base, base)
        exponent >>= 1
    return result


def _times_x(value: int) -> int:
    value <<= 1
    if value >> 128:
        value ^= _POLY
    return value


_X_INV_128 = _field_inverse(_reduce(1 << 128))
_NIBBLE_REDUCTION = tuple(_reduce(top << 128) for top in range(16))


class _Polyval:
    """POLYVAL universal hash over GF(2^128)."""

    def __init__(self, key: bytes) -> None:
        h = _field_mul(int.from_bytes(key, "little"), _X_INV_128)
        table = [0, h]
        for k in range(2, 16):
            table.append(_times_x(table[k // 2]) if k % 2 == 0 else table[k - 1] ^ h)
        self._table = tuple(table)
        self._acc = 0

    def _mul_h(self, value: int) -> int:
        acc = 0
        for shift in range(124, -4, -4):
            acc = ((acc << 4) & _MASK) ^ _NIBBLE_REDUCTION[acc >> 124] ^ self._table[(value >> shift) & 15]
        return acc

    def update_padded(self, data: bytes) -> None:
        for offset in range(0, len(data), _BLOCK):
            block = data[offset : offset + _BLOCK].ljust(_BLOCK, b"\x00")
            self._acc = self._mul_h(self._acc ^ int.from_bytes(block, "little"))

    def digest(self) -> bytes:
        return self._acc.to_bytes(_BLOCK, "little")


def _xor(data: bytes, keystream: bytes) -> bytes:
    size = len(data)
    return (int.from_bytes(data, "big") ^ int.from_bytes(keystream[:size], "big")).to_bytes(size, "big")


def _apply_ctr32le(encryptor, tag: bytes, data: bytes) -> bytes:
    """Counter mode whose initial block is the tag with its top bit set."""
    if not data:
        return b""
    initial = bytearray(tag)
    initial[15] |= 0x80
    start = int.from_bytes(initial[:4], "little")
    tail = bytes(initial[4:])
    count = -(-len(data) // _BLOCK)
    counters = b"".join(((start + i) & 0xFFFFFFFF).to_bytes(4, "little") + tail for i in range(count))
    return _xor(data, encryptor.update(counters))


def _aes(key: bytes) -> Cipher:
    return Cipher(algorithms.AES(key), modes.ECB())


class AesGcmSiv(Aead):
    """AES-GCM-SIV with a 128- or 256-bit key-generating key."""

    nonce_size = NONCE_SIZE
    tag_size = TAG_SIZE
    _KEY_SIZES: tuple[int, ...] = (16, 32)

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) not in self._KEY_SIZES:
            sizes = " or ".join(str(size) for size in self._KEY_SIZES)
            raise ValueError(f"key must be {sizes} bytes, got {len(key)}")
        self.key_size = len(key)
        self._key_generating_key = _aes(key)

    def _derive(self, nonce: bytes):
        """Derive the per-nonce POLYVAL hash and encryption cipher."""
        blocks = b"".join(
            counter.to_bytes(4, "little") + nonce for counter in range(2 + self.key_size // 8)
        )
        derived = self._key_generating_key.encryptor().update(blocks)
        halves = [derived[offset : offset + 8] for offset in range(0, len(derived), _BLOCK)]
        mac_key = b"".join(halves[:2])
        enc_key = b"".join(halves[2:])
        return _Polyval(mac_key), _aes(enc_key).encryptor()

    @staticmethod
    def _finish_tag(polyval: _Polyval, encryptor, nonce: bytes, aad_len: int, msg_len: int) -> bytes:
        polyval.update_padded((aad_len * 8).to_bytes(8, "little") + (msg_len * 8).to_bytes(8, "little"))
        s = bytearray(polyval.digest())
        for index, byte in enumerate(nonce):
            s[index] ^= byte
        s[15] &= 0x7F
        return encryptor.update(bytes(s))

    def encrypt_detached(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> tuple[bytes, bytes]:
        nonce = self._require_nonce(nonce)
        associated_data = bytes(associated_data)
        plaintext = bytes(plaintext)
        if len(plaintext) > P_MAX or len(associated_data) > A_MAX:
            raise AeadError("message or associated data too long")

        polyval, encryptor = self._derive(nonce)
        polyval.update_padded(associated_data)
        polyval.update_padded(plaintext)
        tag = self._finish_tag(polyval, encryptor, nonce, len(associated_data), len(plaintext))
        return _apply_ctr32le(encryptor, tag, plaintext), tag

    def decrypt_detached(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        nonce = self._require_nonce(nonce)
        associated_data = bytes(associated_data)
        ciphertext = bytes(ciphertext)
        tag = bytes(tag)
        if len(ciphertext) > C_MAX or len(associated_data) > A_MAX:
            raise AeadError("message or associated data too long")
        if len(tag) != TAG_SIZE:
            raise AeadError("tag has the wrong length")

        polyval, encryptor = self._derive(nonce)
        polyval.update_padded(associated_data)
        plaintext = _apply_ctr32le(encryptor, tag, ciphertext)
        polyval.update_padded(plaintext)
        expected = self._finish_tag(polyval, encryptor, nonce, len(associated_data), len(plaintext))
        if not hmac.compare_digest(expected, tag):
            raise AeadError("authentication failed")
        return plaintext


class Aes128GcmSiv(AesGcmSiv):
    """AES-GCM-SIV with a 128-bit key."""

    _KEY_SIZES = (16,)

    def __init__(self, key: bytes) -> None:
        super().__init__(key)


class Aes256GcmSiv(AesGcmSiv):
    """AES-GCM-SIV with a 256-bit key."""

    _KEY_SIZES = (32,)

    def __init__(self, key: bytes) -> None:
        super().__init__(key)