"""Key models, the key type registry and public key handling."""
from .models import EnvelopeConfig, PrivateKey, PublicKey
from .public import (
    decode_public,
    encode_public,
    format_public_line,
    key_bits,
    parse_public_line,
    public_from_blob,
    write_public,
)
from .registry import KEY_TYPES, KeyKind, KeyTypeDescriptor, KeyTypeRegistry, get_key_type

__all__ = [
    "EnvelopeConfig",
    "KEY_TYPES",
    "KeyKind",
    "KeyTypeDescriptor",
    "KeyTypeRegistry",
    "PrivateKey",
    "PublicKey",
    "decode_public",
    "encode_public",
    "format_public_line",
    "get_key_type",
    "key_bits",
    "parse_public_line",
    "public_from_blob",
    "write_public",
]
