"""DSA key format.

Public:
    mpint p, q, g, y
Private:
    mpint p, q, g, y, x
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import dsa

from ..exceptions import InvalidKeyError
from ..wire import BinaryStream, Decoded, FieldReader, FieldWriter
from .checks import ensure_non_negative, ensure_same

KEY_BITS = 1024


@dataclass(frozen=True, slots=True)
class DsaPublic:
    p: int
    q: int
    g: int
    y: int


@dataclass(frozen=True, slots=True)
class DsaSecret:
    x: int = field(repr=False)


class DsaFormat:
    def decode_public(self, stream: BinaryStream) -> Decoded[DsaPublic]:
        reader = FieldReader(stream)
        material = DsaPublic(p=reader.mpint(), q=reader.mpint(), g=reader.mpint(), y=reader.mpint())
        self._validate_public(material)
        return reader.done(material)

    def encode_public(self, material: DsaPublic, stream: BinaryStream) -> int:
        writer = FieldWriter(stream)
        writer.mpint(material.p)
        writer.mpint(material.q)
        writer.mpint(material.g)
        writer.mpint(material.y)
        return writer.written

    def decode_private(self, stream: BinaryStream, expected: DsaPublic) -> Decoded[DsaSecret]:
        reader = FieldReader(stream)
        embedded = DsaPublic(p=reader.mpint(), q=reader.mpint(), g=reader.mpint(), y=reader.mpint())
        x = reader.mpint()
        ensure_same("ssh-dss", embedded, expected)
        ensure_non_negative("ssh-dss", x)
        if not 0 < x < expected.q:
            raise InvalidKeyError("DSA private value out of range")
        if pow(expected.g, x, expected.p) != expected.y:
            raise InvalidKeyError("DSA private value does not match public value")
        return reader.done(DsaSecret(x=x))

    def encode_private(self, material: DsaPublic, secret: DsaSecret, stream: BinaryStream) -> int:
        written = self.encode_public(material, stream)
        return written + FieldWriter(stream).mpint(secret.x)

    def key_bits(self, material: DsaPublic) -> int:
        return material.p.bit_length()

    def generate(self, bits: int | None = None) -> Tuple[DsaPublic, DsaSecret]:
        if bits not in (None, KEY_BITS):
            raise InvalidKeyError(f"DSA keys must be exactly {KEY_BITS} bits")
        private_key = dsa.generate_private_key(key_size=KEY_BITS)
        numbers = private_key.private_numbers()
        params = numbers.public_numbers.parameter_numbers
        public = DsaPublic(p=params.p, q=params.q, g=params.g, y=numbers.public_numbers.y)
        return public, DsaSecret(x=numbers.x)

    @staticmethod
    def _validate_public(material: DsaPublic) -> None:
        ensure_non_negative("ssh-dss", material.p, material.q, material.g, material.y)
        if material.p.bit_length() != KEY_BITS:
            raise InvalidKeyError(f"DSA keys must be exactly {KEY_BITS} bits")
        if material.q <= 1 or not 1 < material.g < material.p or not 1 < material.y < material.p:
            raise InvalidKeyError("DSA domain parameters out of range")


__all__ = ["DsaFormat", "DsaPublic", "DsaSecret", "KEY_BITS"]
