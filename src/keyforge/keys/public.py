"""Public key blob and ``authorized_keys`` line handling."""
from __future__ import annotations

import base64

from ..exceptions import DecodeError, KeyMismatchError
from ..wire import BinaryStream, Decoded, FieldReader, FieldWriter, read_blob
from .models import PrivateKey, PublicKey
from .registry import KEY_TYPES, KeyTypeRegistry


def decode_public(stream: BinaryStream, *, registry: KeyTypeRegistry = KEY_TYPES) -> Decoded[PublicKey]:
    reader = FieldReader(stream)
    name = reader.string(text=True)
    kind = registry.get(name)
    material = reader.nested(kind.decode_public(stream))
    return reader.done(PublicKey(kind=kind, material=material))


def write_public(key: PublicKey, stream: BinaryStream) -> int:
    writer = FieldWriter(stream)
    writer.string(key.kind.name)
    return writer.written + key.kind.encode_public(key.material, stream)


def encode_public(key: PublicKey | PrivateKey) -> bytes:
    """Canonical public key blob, without comment."""
    if isinstance(key, PrivateKey):
        key = key.public
    stream = BinaryStream()
    write_public(key, stream)
    return stream.getvalue()


def public_from_blob(blob: bytes, *, registry: KeyTypeRegistry = KEY_TYPES) -> PublicKey:
    return read_blob(blob, lambda stream: decode_public(stream, registry=registry))


def key_bits(key: PublicKey | PrivateKey) -> int:
    return key.kind.key_bits(key.public.material if isinstance(key, PrivateKey) else key.material)


def parse_public_line(line: str | bytes, *, registry: KeyTypeRegistry = KEY_TYPES) -> PublicKey:
    """Parse ``<name> <base64 blob> [comment]``."""
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="surrogateescape")
    parts = line.strip().split(None, 2)
    if len(parts) < 2:
        raise DecodeError("Public key line needs an algorithm name and a key blob")
    name, body = parts[0], parts[1]
    registry.get(name)
    try:
        blob = base64.b64decode(body, validate=True)
    except ValueError as exc:
        raise DecodeError("Public key blob is not valid base64") from exc
    key = public_from_blob(blob, registry=registry)
    if key.kind.name != name:
        raise KeyMismatchError(f"Key type {name!r} does not match blob type {key.kind.name!r}")
    comment = parts[2].strip() if len(parts) > 2 else ""
    return key.with_comment(comment)


def format_public_line(key: PublicKey | PrivateKey) -> str:
    if isinstance(key, PrivateKey):
        key = key.public_key()
    body = base64.b64encode(encode_public(key)).decode("ascii")
    line = f"{key.kind.name} {body}"
    if key.comment:
        line += f" {key.comment}"
    return line


__all__ = [
    "decode_public",
    "encode_public",
    "format_public_line",
    "key_bits",
    "parse_public_line",
    "public_from_blob",
    "write_public",
]
