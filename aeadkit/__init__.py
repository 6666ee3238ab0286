"""AEAD ciphers: AES-GCM-SIV, CCM and (X)ChaCha20-Poly1305."""

__version__ = "0.1.0"

__all__ = ["aead", "aes_gcm_siv", "ccm", "chacha20poly1305"]