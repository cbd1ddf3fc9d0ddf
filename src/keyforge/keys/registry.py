"""Key type registry: the single dispatch point from algorithm name to format."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

from cryptography.hazmat.primitives.asymmetric import ec

from ..exceptions import UnknownKeyTypeError
from ..wire import BinaryStream, Decoded
from .dsa import DsaFormat
from .ecdsa import EcdsaFormat
from .ed25519 import Ed25519Format
from .rsa import RsaFormat


class KeyKind(IntEnum):
    RSA = 0
    DSA = 1
    ECDSA = 2
    ED25519 = 3


@dataclass(frozen=True, eq=False, slots=True)
class KeyTypeDescriptor:
    """Immutable capability set for one algorithm identifier."""

    name: str
    short_name: str
    id: KeyKind
    is_certificate: bool
    decode_public: Callable[[BinaryStream], Decoded[Any]]
    encode_public: Callable[[Any, BinaryStream], int]
    decode_private: Callable[[BinaryStream, Any], Decoded[Any]]
    encode_private: Callable[[Any, Any, BinaryStream], int]
    key_bits: Callable[[Any], int]
    generate: Callable[[int | None], Tuple[Any, Any]]
    curve: str | None = None

    def __repr__(self) -> str:
        return f"KeyTypeDescriptor({self.name!r})"


def describe(name: str, short_name: str, kind: KeyKind, fmt: Any, curve: str | None = None) -> KeyTypeDescriptor:
    return KeyTypeDescriptor(
        name=name,
        short_name=short_name,
        id=kind,
        is_certificate=False,
        decode_public=fmt.decode_public,
        encode_public=fmt.encode_public,
        decode_private=fmt.decode_private,
        encode_private=fmt.encode_private,
        key_bits=fmt.key_bits,
        generate=fmt.generate,
        curve=curve,
    )


class KeyTypeRegistry:
    """Lookup table for key type descriptors by name or id."""

    def __init__(self) -> None:
        self._types: Dict[str, KeyTypeDescriptor] = {}

    def register(self, descriptor: KeyTypeDescriptor) -> None:
        if descriptor.name in self._types:
            raise ValueError(f"Key type already registered: {descriptor.name}")
        self._types[descriptor.name] = descriptor

    def get(self, name: str) -> KeyTypeDescriptor:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownKeyTypeError(f"Unknown key type: {name!r}") from None

    def get_by_id(self, kind: int, curve: str | None = None) -> KeyTypeDescriptor:
        for descriptor in self._types.values():
            if descriptor.id == kind and (curve is None or descriptor.curve == curve):
                return descriptor
        raise UnknownKeyTypeError(f"Unknown key type id: {kind} (curve={curve})")

    def all(self) -> Mapping[str, KeyTypeDescriptor]:
        return dict(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)


def _build_key_types() -> KeyTypeRegistry:
    registry = KeyTypeRegistry()
    registry.register(describe("ssh-rsa", "RSA", KeyKind.RSA, RsaFormat()))
    registry.register(describe("ssh-dss", "DSA", KeyKind.DSA, DsaFormat()))
    for curve_name, curve in (
        ("nistp256", ec.SECP256R1()),
        ("nistp384", ec.SECP384R1()),
        ("nistp521", ec.SECP521R1()),
    ):
        registry.register(
            describe(
                f"ecdsa-sha2-{curve_name}",
                "ECDSA",
                KeyKind.ECDSA,
                EcdsaFormat(curve_name, curve),
                curve=curve_name,
            )
        )
    registry.register(describe("ssh-ed25519", "ED25519", KeyKind.ED25519, Ed25519Format()))
    return registry


KEY_TYPES = _build_key_types()


def get_key_type(name: str) -> KeyTypeDescriptor:
    return KEY_TYPES.get(name)


__all__ = [
    "KEY_TYPES",
    "KeyKind",
    "KeyTypeDescriptor",
    "KeyTypeRegistry",
    "describe",
    "get_key_type",
]
