import pytest

from aeadkit.aead import AeadError
from aeadkit.ccm import Ccm, fill_aad_header


def h(text: str) -> bytes:
    return bytes.fromhex(text)


SP800_KEY = h("40414243 44454647 48494a4b 4c4d4e4f")

SP800_VECTORS = [
    (
        4,
        7,
        h("10111213 141516"),
        h("00010203 04050607"),
        h("20212223"),
        h("7162015b 4dac255d"),
    ),
    (
        6,
        8,
        h("10111213 14151617"),
        h("00010203 04050607 08090a0b 0c0d0e0f"),
        h("20212223 24252627 28292a2b 2c2d2e2f"),
        h("d2a1f0e0 51ea5f62 081a7792 073d593d 1fc64fbf accd"),
    ),
    (
        8,
        12,
        h("10111213 14151617 18191a1b"),
        h("00010203 04050607 08090a0b 0c0d0e0f 10111213"),
        h("20212223 24252627 28292a2b 2c2d2e2f 30313233 34353637"),
        h(
            "e3b201a9 f5b71a7a 9b1ceaec cd97e70b"
            "6176aad9 a4428aa5 484392fb c1b09951"
        ),
    ),
    (
        14,
        13,
        h("10111213 14151617 18191a1b 1c"),
        bytes(i % 256 for i in range(524288 // 8)),
        h(
            "20212223 24252627 28292a2b 2c2d2e2f"
            "30313233 34353637 38393a3b 3c3d3e3f"
        ),
        h(
            "69915dad 1e84c637 6a68c296 7e4dab61"
            "5ae0fd1f aec44cc4 84828529 463ccf72"
            "b4ac6bec 93e8598e 7f0dadbc ea5b"
        ),
    ),
]


@pytest.mark.parametrize("tag_size,nonce_size,nonce,adata,pt,ct", SP800_VECTORS)
def test_sp800_38c_encrypt(tag_size, nonce_size, nonce, adata, pt, ct):
    cipher = Ccm(SP800_KEY, tag_size, nonce_size)
    assert cipher.encrypt(nonce, pt, adata) == ct


@pytest.mark.parametrize("tag_size,nonce_size,nonce,adata,pt,ct", SP800_VECTORS)
def test_sp800_38c_decrypt(tag_size, nonce_size, nonce, adata, pt, ct):
    cipher = Ccm(SP800_KEY, tag_size, nonce_size)
    assert cipher.decrypt(nonce, ct, adata) == pt


@pytest.mark.parametrize("tag_size,nonce_size,nonce,adata,pt,ct", SP800_VECTORS)
def test_sp800_38c_detached(tag_size, nonce_size, nonce, adata, pt, ct):
    cipher = Ccm(SP800_KEY, tag_size, nonce_size)
    ciphertext, tag = cipher.encrypt_detached(nonce, adata, pt)
    assert ciphertext == ct[: len(pt)]
    assert tag == ct[len(pt):]
    assert cipher.decrypt_detached(nonce, adata, ciphertext, tag) == pt


@pytest.mark.parametrize("tag_size,nonce_size,nonce,adata,pt,ct", SP800_VECTORS)
def test_decrypt_modified_fails(tag_size, nonce_size, nonce, adata, pt, ct):
    cipher = Ccm(SP800_KEY, tag_size, nonce_size)
    tampered = bytes([ct[0] ^ 0xAA]) + ct[1:]
    with pytest.raises(AeadError):
        cipher.decrypt(nonce, tampered, adata)


def test_data_len_check():
    key = h("D7828D13B2B0BDC325A76236DF93CC6B")
    nonce = h("2F1DBD38CE3EDA7C23F04DD650")
    cipher = Ccm(key, 10, 13)

    ciphertext, tag = cipher.encrypt_detached(nonce, b"", b"\x01" * 0xFFFF)
    assert len(ciphertext) == 0xFFFF
    assert len(tag) == 10

    with pytest.raises(AeadError):
        cipher.encrypt_detached(nonce, b"", b"\x01" * 0x10000)


def test_fill_aad_header():
    assert fill_aad_header(0x0123) == (2, h("01230000000000000000000000000000"))
    assert fill_aad_header(0xFF00) == (6, h("FFFE0000FF0000000000000000000000"))
    assert fill_aad_header(0x01234567) == (6, h("FFFE0123456700000000000000000000"))
    assert fill_aad_header(0x0123456789ABCDEF) == (10, h("FFFF0123456789ABCDEF000000000000"))


def test_fill_aad_header_rejects_zero():
    with pytest.raises(ValueError):
        fill_aad_header(0)


@pytest.mark.parametrize("key_size", [16, 24, 32])
@pytest.mark.parametrize("tag_size,nonce_size", [(4, 7), (8, 10), (16, 11), (12, 13)])
def test_round_trip(key_size, tag_size, nonce_size):
    cipher = Ccm(bytes(range(key_size)), tag_size, nonce_size)
    nonce = bytes(range(nonce_size))
    message = bytes(range(100))
    sealed = cipher.encrypt(nonce, message, b"header")
    assert len(sealed) == len(message) + tag_size
    assert cipher.decrypt(nonce, sealed, b"header") == message


def test_wrong_associated_data_fails():
    cipher = Ccm(SP800_KEY, 8, 12)
    nonce = bytes(12)
    sealed = cipher.encrypt(nonce, b"message", b"one")
    with pytest.raises(AeadError):
        cipher.decrypt(nonce, sealed, b"two")


def test_wrong_tag_length_fails():
    cipher = Ccm(SP800_KEY, 8, 12)
    nonce = bytes(12)
    ciphertext, tag = cipher.encrypt_detached(nonce, b"", b"message")
    with pytest.raises(AeadError):
        cipher.decrypt_detached(nonce, b"", ciphertext, tag[:4])


@pytest.mark.parametrize("tag_size,nonce_size", [(5, 13), (2, 13), (18, 13), (8, 6), (8, 14)])
def test_invalid_sizes(tag_size, nonce_size):
    with pytest.raises(ValueError):
        Ccm(SP800_KEY, tag_size, nonce_size)


def test_invalid_key_size():
    with pytest.raises(ValueError):
        Ccm(bytes(15), 8, 13)


def test_wrong_nonce_size():
    cipher = Ccm(SP800_KEY, 8, 13)
    with pytest.raises(ValueError):
        cipher.encrypt(bytes(12), b"message")


def test_ciphertext_shorter_than_tag_fails():
    cipher = Ccm(SP800_KEY, 8, 13)
    with pytest.raises(AeadError):
        cipher.decrypt(bytes(13), b"\x00" * 7)