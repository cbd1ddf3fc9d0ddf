"""OpenSSH key toolkit: key files, fingerprints and key generation."""
from .envelope import decode_private, encode_private
from .exceptions import (
    DecodeError,
    IntegrityError,
    InvalidKeyError,
    KeyforgeError,
    KeyMismatchError,
    PassphraseRequiredError,
    UnknownKeyTypeError,
    UnsupportedAlgorithmError,
)
from .fingerprint import fingerprint, fingerprint_display, fingerprint_line
from .generate import generate_key
from .keys import (
    EnvelopeConfig,
    PrivateKey,
    PublicKey,
    encode_public,
    format_public_line,
    parse_public_line,
    public_from_blob,
)
from .version import __version__

__all__ = [
    "DecodeError",
    "EnvelopeConfig",
    "IntegrityError",
    "InvalidKeyError",
    "KeyMismatchError",
    "KeyforgeError",
    "PassphraseRequiredError",
    "PrivateKey",
    "PublicKey",
    "UnknownKeyTypeError",
    "UnsupportedAlgorithmError",
    "__version__",
    "decode_private",
    "encode_private",
    "encode_public",
    "fingerprint",
    "fingerprint_display",
    "fingerprint_line",
    "format_public_line",
    "generate_key",
    "parse_public_line",
    "public_from_blob",
]
