"""Cipher and KDF registry exports."""
from .registry import (
    BCRYPT,
    CIPHERS,
    DEFAULT_CIPHER,
    DEFAULT_KDF,
    DEFAULT_ROUNDS,
    KDFS,
    NONE,
    SALT_SIZE,
    CipherSpec,
    KdfOptions,
    KdfSpec,
    get_cipher,
    get_kdf,
)

__all__ = [
    "BCRYPT",
    "CIPHERS",
    "DEFAULT_CIPHER",
    "DEFAULT_KDF",
    "DEFAULT_ROUNDS",
    "KDFS",
    "NONE",
    "SALT_SIZE",
    "CipherSpec",
    "KdfOptions",
    "KdfSpec",
    "get_cipher",
    "get_kdf",
]
