"""ECDSA key format over the NIST curves.

Public:
    string curve identifier
    string point (uncompressed X9.62)
Private:
    string curve identifier
    string point
    mpint secret
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ..exceptions import InvalidKeyError, KeyMismatchError
from ..wire import BinaryStream, Decoded, FieldReader, FieldWriter
from .checks import ensure_non_negative, ensure_same

UNCOMPRESSED = 0x04


@dataclass(frozen=True, slots=True)
class EcdsaPublic:
    curve: str
    point: bytes


@dataclass(frozen=True, slots=True)
class EcdsaSecret:
    d: int = field(repr=False)


def _point_of(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return private_key.public_key().public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


class EcdsaFormat:
    def __init__(self, curve_name: str, curve: ec.EllipticCurve) -> None:
        self.curve_name = curve_name
        self.curve = curve

    @property
    def bits(self) -> int:
        return self.curve.key_size

    def decode_public(self, stream: BinaryStream) -> Decoded[EcdsaPublic]:
        reader = FieldReader(stream)
        curve_name = reader.string(text=True)
        point = reader.buffer()
        self._check_curve(curve_name)
        material = EcdsaPublic(curve=curve_name, point=point)
        self._validate_point(point)
        return reader.done(material)

    def encode_public(self, material: EcdsaPublic, stream: BinaryStream) -> int:
        writer = FieldWriter(stream)
        writer.string(material.curve)
        writer.buffer(material.point)
        return writer.written

    def decode_private(self, stream: BinaryStream, expected: EcdsaPublic) -> Decoded[EcdsaSecret]:
        reader = FieldReader(stream)
        curve_name = reader.string(text=True)
        point = reader.buffer()
        d = reader.mpint()
        self._check_curve(curve_name)
        ensure_same(self.curve_name, EcdsaPublic(curve=curve_name, point=point), expected)
        ensure_non_negative(self.curve_name, d)
        try:
            derived = _point_of(ec.derive_private_key(d, self.curve))
        except ValueError as exc:
            raise InvalidKeyError(f"{self.curve_name}: private scalar out of range") from exc
        if derived != point:
            raise InvalidKeyError(f"{self.curve_name}: private scalar does not match public point")
        return reader.done(EcdsaSecret(d=d))

    def encode_private(self, material: EcdsaPublic, secret: EcdsaSecret, stream: BinaryStream) -> int:
        written = self.encode_public(material, stream)
        return written + FieldWriter(stream).mpint(secret.d)

    def key_bits(self, material: EcdsaPublic) -> int:
        return self.bits

    def generate(self, bits: int | None = None) -> Tuple[EcdsaPublic, EcdsaSecret]:
        if bits not in (None, self.bits):
            raise InvalidKeyError(f"{self.curve_name} keys have a fixed size of {self.bits} bits")
        private_key = ec.generate_private_key(self.curve)
        d = private_key.private_numbers().private_value
        return EcdsaPublic(curve=self.curve_name, point=_point_of(private_key)), EcdsaSecret(d=d)

    def _check_curve(self, curve_name: str) -> None:
        if curve_name != self.curve_name:
            raise KeyMismatchError(
                f"Curve identifier {curve_name!r} does not match expected {self.curve_name!r}"
            )

    def _validate_point(self, point: bytes) -> None:
        field_bytes = (self.bits + 7) // 8
        if len(point) != 1 + 2 * field_bytes or point[0] != UNCOMPRESSED:
            raise InvalidKeyError(f"{self.curve_name}: expected an uncompressed point")
        try:
            ec.EllipticCurvePublicKey.from_encoded_point(self.curve, point)
        except ValueError as exc:
            raise InvalidKeyError(f"{self.curve_name}: point is not on the curve") from exc


__all__ = ["EcdsaFormat", "EcdsaPublic", "EcdsaSecret"]
