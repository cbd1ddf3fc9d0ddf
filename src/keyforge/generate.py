"""Fresh key pair generation."""
from __future__ import annotations


from .exceptions import InvalidKeyError
from .keys.checks import random_checksum
from .keys.models import EnvelopeConfig, PrivateKey, PublicKey
from .keys.registry import KEY_TYPES, KeyKind, KeyTypeDescriptor, KeyTypeRegistry
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_KEY_TYPE = "ssh-ed25519"
ECDSA_CURVES = {256: "nistp256", 384: "nistp384", 521: "nistp521"}

_ALIASES = {
    "rsa": KeyKind.RSA,
    "dsa": KeyKind.DSA,
    "ecdsa": KeyKind.ECDSA,
    "ed25519": KeyKind.ED25519,
}


def resolve_key_type(
    key_type: str,
    bits: int | None = None,
    *,
    registry: KeyTypeRegistry = KEY_TYPES,
) -> KeyTypeDescriptor:
    """Map ``ssh-keygen -t`` style names (``rsa``, ``ecdsa`` ...) to a descriptor.

    For the ``ecdsa`` alias ``bits`` selects the curve.
    """
    kind = _ALIASES.get(key_type.lower())
    if kind is None:
        return registry.get(key_type)
    if kind is not KeyKind.ECDSA:
        return registry.get_by_id(kind)
    curve = ECDSA_CURVES.get(bits or 256)
    if curve is None:
        raise InvalidKeyError(f"ECDSA key size must be one of {sorted(ECDSA_CURVES)}, got {bits}")
    return registry.get_by_id(kind, curve=curve)


def generate_key(
    key_type: str = DEFAULT_KEY_TYPE,
    bits: int | None = None,
    comment: str = "",
    *,
    registry: KeyTypeRegistry = KEY_TYPES,
) -> PrivateKey:
    """Generate an unencrypted key pair.

    The returned key has cipher and KDF ``none`` and a freshly drawn
    checkint; call :meth:`PrivateKey.set_passphrase` before encoding to
    encrypt it.
    """
    kind = resolve_key_type(key_type, bits, registry=registry)
    material, secret = kind.generate(bits)
    public = PublicKey(kind=kind, material=material)
    key = PrivateKey(
        public=public,
        secret=secret,
        comment=comment,
        envelope=EnvelopeConfig(checksum=random_checksum()),
    )
    logger.debug("keygen.generate", key_type=kind.name, bits=public.bits)
    return key


__all__ = ["DEFAULT_KEY_TYPE", "ECDSA_CURVES", "generate_key", "resolve_key_type"]
