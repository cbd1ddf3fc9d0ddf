"""Central exception hierarchy."""
from __future__ import annotations

import secrets


class KeyforgeError(Exception):
    """Base exception for all failures"""


class DecodeError(KeyforgeError):
    """Raised for truncated or malformed binary fields and length inconsistencies"""


class UnknownKeyTypeError(KeyforgeError):
    """Raised when an algorithm name or id is not registered"""


class UnsupportedAlgorithmError(KeyforgeError):
    """Raised when a cipher, KDF or digest name is not registered"""


class IntegrityError(KeyforgeError):
    """Raised on checksum or padding mismatch in a private section.

    A wrong passphrase and a corrupted ciphertext are indistinguishable here.
    """


class KeyMismatchError(KeyforgeError):
    """Raised when embedded public material disagrees with the outer public key"""


class InvalidKeyError(KeyforgeError):
    """Raised for structurally invalid key material"""


class PassphraseRequiredError(KeyforgeError):
    """Raised when an encrypted private key is opened without a passphrase"""


def constant_time_compare(lhs: bytes | str, rhs: bytes | str) -> bool:
    """Compare two byte sequences without leaking timing information"""
    if isinstance(lhs, str):
        lhs = lhs.encode("utf-8")
    if isinstance(rhs, str):
        rhs = rhs.encode("utf-8")
    return secrets.compare_digest(lhs, rhs)


__all__ = [
    "KeyforgeError",
    "DecodeError",
    "UnknownKeyTypeError",
    "UnsupportedAlgorithmError",
    "IntegrityError",
    "KeyMismatchError",
    "InvalidKeyError",
    "PassphraseRequiredError",
    "constant_time_compare",
]
