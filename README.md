# aeadkit

Authenticated encryption with associated data (AEAD) in Python. The AES block
cipher, the ChaCha20 stream cipher and Poly1305 come from `cryptography`; the
modes built on them live in this package.

- `aeadkit.aes_gcm_siv`: **AES-GCM-SIV** (RFC 8452). `AesGcmSiv` takes a 16- or
  32-byte key; `Aes128GcmSiv` and `Aes256GcmSiv` take exactly 16 or 32 bytes.
  Nonces are 12 bytes and tags 16 bytes.
- `aeadkit.ccm`: **CCM** (RFC 3610, NIST SP 800-38C). `Ccm(key, tag_size,
  nonce_size)` takes a 16-, 24- or 32-byte AES key, a tag size of 4, 6, 8, 10,
  12, 14 or 16 and a nonce size from 7 to 13. `Ccm.max_len` gives the longest
  message the nonce size allows, and `fill_aad_header(adata_len)` returns the
  encoded associated-data length prefix.
- `aeadkit.chacha20poly1305`: **ChaCha20Poly1305** (RFC 8439) with 12-byte
  nonces and **XChaCha20Poly1305** with 24-byte nonces, both with 32-byte keys.
  `hchacha20(key, nonce)` derives the XChaCha subkey.
- `aeadkit.aead`: the shared base class `Aead` and the exception `AeadError`.

Every cipher raises `AeadError` when a tag does not verify or a length limit
is exceeded, and `ValueError` when a key or nonce has the wrong size.

## Installing

```
pip install .
```

## Using

Combined form: `encrypt` returns the ciphertext followed by the tag, and
`decrypt` takes it back. Associated data is optional and defaults to empty.

```python
from aeadkit.aes_gcm_siv import Aes256GcmSiv

key = bytes(32)          # use a random key in practice
nonce = b"unique nonce"  # 12 bytes, unique per message

cipher = Aes256GcmSiv(key)
sealed = cipher.encrypt(nonce, b"plaintext message", b"header")
assert cipher.decrypt(nonce, sealed, b"header") == b"plaintext message"
```

Detached form: the tag is kept apart from the ciphertext. Note the argument
order `(nonce, associated_data, data)`.

```python
from aeadkit.chacha20poly1305 import ChaCha20Poly1305

cipher = ChaCha20Poly1305(bytes(32))
ciphertext, tag = cipher.encrypt_detached(bytes(12), b"", b"hello")
assert cipher.decrypt_detached(bytes(12), b"", ciphertext, tag) == b"hello"
```

CCM takes its tag and nonce sizes when it is built:

```python
from aeadkit.ccm import Ccm

cipher = Ccm(bytes(16), tag_size=10, nonce_size=13)
sealed = cipher.encrypt(bytes(13), b"data", b"")
assert cipher.decrypt(bytes(13), sealed, b"") == b"data"
```

Failures:

```python
from aeadkit.aead import AeadError

try:
    cipher.decrypt(bytes(13), b"tampered" * 3, b"")
except AeadError:
    ...
```

## What it does not do

- There is no AES-SIV (RFC 5297) cipher, neither a vector interface over
  several headers nor an AEAD wrapper.
- There is no key or nonce generation; callers supply their own random bytes
  (for instance from `os.urandom`).
- There is no command-line tool; the package is a library only.

## Testing

```
pip install .[test]
pytest
```