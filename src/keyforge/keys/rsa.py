"""RSA key format.

Public:
    mpint e, n
Private:
    mpint n, e, d, iqmp, p, q
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import InvalidKeyError
from ..wire import BinaryStream, Decoded, FieldReader, FieldWriter
from .checks import ensure_non_negative, ensure_same

MIN_BITS = 1024
MAX_BITS = 16384
DEFAULT_BITS = 3072
PUBLIC_EXPONENT = 65537


@dataclass(frozen=True, slots=True)
class RsaPublic:
    e: int
    n: int


@dataclass(frozen=True, slots=True)
class RsaSecret:
    d: int = field(repr=False)
    iqmp: int = field(repr=False)
    p: int = field(repr=False)
    q: int = field(repr=False)


class RsaFormat:
    def decode_public(self, stream: BinaryStream) -> Decoded[RsaPublic]:
        reader = FieldReader(stream)
        e = reader.mpint()
        n = reader.mpint()
        material = RsaPublic(e=e, n=n)
        self._validate_public(material)
        return reader.done(material)

    def encode_public(self, material: RsaPublic, stream: BinaryStream) -> int:
        writer = FieldWriter(stream)
        writer.mpint(material.e)
        writer.mpint(material.n)
        return writer.written

    def decode_private(self, stream: BinaryStream, expected: RsaPublic) -> Decoded[RsaSecret]:
        reader = FieldReader(stream)
        n = reader.mpint()
        e = reader.mpint()
        d = reader.mpint()
        iqmp = reader.mpint()
        p = reader.mpint()
        q = reader.mpint()
        ensure_same("ssh-rsa", RsaPublic(e=e, n=n), expected)
        secret = RsaSecret(d=d, iqmp=iqmp, p=p, q=q)
        self._validate_private(expected, secret)
        return reader.done(secret)

    def encode_private(self, material: RsaPublic, secret: RsaSecret, stream: BinaryStream) -> int:
        writer = FieldWriter(stream)
        writer.mpint(material.n)
        writer.mpint(material.e)
        writer.mpint(secret.d)
        writer.mpint(secret.iqmp)
        writer.mpint(secret.p)
        writer.mpint(secret.q)
        return writer.written

    def key_bits(self, material: RsaPublic) -> int:
        return material.n.bit_length()

    def generate(self, bits: int | None = None) -> Tuple[RsaPublic, RsaSecret]:
        bits = bits or DEFAULT_BITS
        if not MIN_BITS <= bits <= MAX_BITS:
            raise InvalidKeyError(f"RSA key size must be between {MIN_BITS} and {MAX_BITS} bits")
        private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bits)
        numbers = private_key.private_numbers()
        public = RsaPublic(e=numbers.public_numbers.e, n=numbers.public_numbers.n)
        secret = RsaSecret(d=numbers.d, iqmp=numbers.iqmp, p=numbers.p, q=numbers.q)
        return public, secret

    @staticmethod
    def _validate_public(material: RsaPublic) -> None:
        ensure_non_negative("ssh-rsa", material.e, material.n)
        if material.e <= 1 or material.e % 2 == 0:
            raise InvalidKeyError("RSA public exponent must be odd and greater than one")
        bits = material.n.bit_length()
        if not MIN_BITS <= bits <= MAX_BITS:
            raise InvalidKeyError(f"RSA modulus of {bits} bits is outside {MIN_BITS}..{MAX_BITS}")

    @staticmethod
    def _validate_private(material: RsaPublic, secret: RsaSecret) -> None:
        ensure_non_negative("ssh-rsa", secret.d, secret.iqmp, secret.p, secret.q)
        if secret.d == 0 or secret.p <= 1 or secret.q <= 1:
            raise InvalidKeyError("RSA private values must be positive")
        if secret.p * secret.q != material.n:
            raise InvalidKeyError("RSA primes do not multiply to the modulus")
        if (secret.iqmp * secret.q) % secret.p != 1:
            raise InvalidKeyError("RSA iqmp is not the inverse of q mod p")


__all__ = ["RsaFormat", "RsaPublic", "RsaSecret", "DEFAULT_BITS", "MIN_BITS", "MAX_BITS"]
