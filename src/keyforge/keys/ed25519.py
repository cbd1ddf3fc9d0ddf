"""Ed25519 key format.

Public:
    string point (32 bytes)
Private:
    string point
    string seed || point (64 bytes)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..exceptions import InvalidKeyError
from ..wire import BinaryStream, Decoded, FieldReader, FieldWriter
from .checks import ensure_same

POINT_SIZE = 32
SECRET_SIZE = 64
KEY_BITS = 256


@dataclass(frozen=True, slots=True)
class Ed25519Public:
    point: bytes


@dataclass(frozen=True, slots=True)
class Ed25519Secret:
    seed_and_point: bytes = field(repr=False)

    @property
    def seed(self) -> bytes:
        return self.seed_and_point[:POINT_SIZE]


def _public_from_seed(seed: bytes) -> bytes:
    return Ed25519PrivateKey.from_private_bytes(seed).public_key().public_bytes_raw()


class Ed25519Format:
    def decode_public(self, stream: BinaryStream) -> Decoded[Ed25519Public]:
        reader = FieldReader(stream)
        point = reader.buffer()
        if len(point) != POINT_SIZE:
            raise InvalidKeyError(f"Ed25519 public key must be {POINT_SIZE} bytes, got {len(point)}")
        return reader.done(Ed25519Public(point=point))

    def encode_public(self, material: Ed25519Public, stream: BinaryStream) -> int:
        return FieldWriter(stream).buffer(material.point)

    def decode_private(self, stream: BinaryStream, expected: Ed25519Public) -> Decoded[Ed25519Secret]:
        reader = FieldReader(stream)
        point = reader.buffer()
        keypair = reader.buffer()
        ensure_same("ssh-ed25519", Ed25519Public(point=point), expected)
        if len(keypair) != SECRET_SIZE:
            raise InvalidKeyError(f"Ed25519 private key must be {SECRET_SIZE} bytes, got {len(keypair)}")
        ensure_same("ssh-ed25519", Ed25519Public(point=keypair[POINT_SIZE:]), expected)
        if _public_from_seed(keypair[:POINT_SIZE]) != point:
            raise InvalidKeyError("Ed25519 seed does not derive the public key")
        return reader.done(Ed25519Secret(seed_and_point=keypair))

    def encode_private(self, material: Ed25519Public, secret: Ed25519Secret, stream: BinaryStream) -> int:
        writer = FieldWriter(stream)
        writer.buffer(material.point)
        writer.buffer(secret.seed_and_point)
        return writer.written

    def key_bits(self, material: Ed25519Public) -> int:
        return KEY_BITS

    def generate(self, bits: int | None = None) -> Tuple[Ed25519Public, Ed25519Secret]:
        if bits not in (None, KEY_BITS):
            raise InvalidKeyError("Ed25519 keys have a fixed size of 256 bits")
        private_key = Ed25519PrivateKey.generate()
        seed = private_key.private_bytes_raw()
        point = private_key.public_key().public_bytes_raw()
        return Ed25519Public(point=point), Ed25519Secret(seed_and_point=seed + point)


__all__ = ["Ed25519Format", "Ed25519Public", "Ed25519Secret"]
