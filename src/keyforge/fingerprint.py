"""Key fingerprints in the formats printed by ``ssh-keygen -l``."""
from __future__ import annotations

import base64
import hashlib
from typing import Any, Callable, Dict

from .exceptions import UnsupportedAlgorithmError
from .keys.models import PrivateKey, PublicKey
from .keys.public import encode_public

DEFAULT_HASH = "sha256"

_DIGESTS: Dict[str, Callable[[bytes], Any]] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}

_PREFIXES = {"md5": "MD5", "sha1": "SHA1", "sha256": "SHA256"}


def _digest(algorithm: str, blob: bytes) -> bytes:
    try:
        factory = _DIGESTS[algorithm.lower()]
    except KeyError:
        raise UnsupportedAlgorithmError(f"Unsupported fingerprint hash: {algorithm!r}") from None
    return factory(blob).digest()


def fingerprint(key: PublicKey | PrivateKey, algorithm: str = DEFAULT_HASH) -> str:
    """Return the bare fingerprint of ``key``.

    MD5 renders as colon separated lowercase hex pairs; SHA-1 and SHA-256 as
    base64 with the trailing ``=`` padding removed. The comment never takes
    part in the digest.
    """
    digest = _digest(algorithm, encode_public(key))
    if algorithm.lower() == "md5":
        return ":".join(f"{byte:02x}" for byte in digest)
    return base64.b64encode(digest).decode("ascii").rstrip("=")


def fingerprint_display(key: PublicKey | PrivateKey, algorithm: str = DEFAULT_HASH) -> str:
    rendered = fingerprint(key, algorithm)
    return f"{_PREFIXES[algorithm.lower()]}:{rendered}"


def fingerprint_line(key: PublicKey | PrivateKey, algorithm: str = DEFAULT_HASH) -> str:
    """``BITS HASH:FINGERPRINT COMMENT (TYPE)``"""
    public = key.public_key() if isinstance(key, PrivateKey) else key
    comment = public.comment or "no comment"
    return f"{public.bits} {fingerprint_display(public, algorithm)} {comment} ({public.kind.short_name})"


def supported_hashes() -> tuple[str, ...]:
    return tuple(_DIGESTS)


__all__ = [
    "DEFAULT_HASH",
    "fingerprint",
    "fingerprint_display",
    "fingerprint_line",
    "supported_hashes",
]
