"""Key objects shared across the package."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from ..ciphers import (
    DEFAULT_CIPHER,
    DEFAULT_KDF,
    NONE,
    KdfOptions,
    get_cipher,
    get_kdf,
)
from .registry import KeyTypeDescriptor


def _as_bytes(passphrase: bytes | str | None) -> bytes | None:
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    return passphrase


@dataclass(frozen=True, slots=True)
class PublicKey:
    kind: KeyTypeDescriptor
    material: Any
    comment: str = ""

    @property
    def name(self) -> str:
        return self.kind.name

    @property
    def bits(self) -> int:
        return self.kind.key_bits(self.material)

    def with_comment(self, comment: str) -> "PublicKey":
        return replace(self, comment=comment)


@dataclass(slots=True)
class EnvelopeConfig:
    """Mutable encryption settings of a private key file.

    ``checksum`` and the salt inside ``kdf_options`` are reused on encode so an
    unchanged key re-encodes to the same bytes; :meth:`set_passphrase` draws
    fresh ones.
    """

    cipher_name: str = NONE
    kdf_name: str = NONE
    kdf_options: KdfOptions = field(default_factory=KdfOptions)
    passphrase: bytes | None = field(default=None, repr=False)
    checksum: int | None = field(default=None, repr=False)

    @property
    def encrypted(self) -> bool:
        return self.cipher_name != NONE

    def set_passphrase(
        self,
        passphrase: bytes | str | None,
        *,
        cipher: str = DEFAULT_CIPHER,
        kdf: str = DEFAULT_KDF,
        rounds: int | None = None,
    ) -> None:
        """Re-key the envelope. An empty passphrase removes encryption."""
        passphrase = _as_bytes(passphrase)
        if not passphrase:
            self.cipher_name = self.kdf_name = NONE
            self.kdf_options = KdfOptions()
            self.passphrase = None
            return
        cipher_spec = get_cipher(cipher)
        kdf_spec = get_kdf(kdf)
        if cipher_spec.is_none or kdf_spec.is_none:
            raise ValueError("An encrypting cipher and a key-derivation function are both required")
        self.cipher_name = cipher_spec.name
        self.kdf_name = kdf_spec.name
        self.kdf_options = kdf_spec.new_options(rounds)
        self.passphrase = passphrase

    def set_rounds(self, rounds: int) -> None:
        """Change the KDF work factor; a fresh salt is drawn."""
        if rounds < 1:
            raise ValueError("KDF rounds must be at least 1")
        if self.kdf_name == NONE:
            raise ValueError("Key is not encrypted; set a passphrase first")
        self.kdf_options = get_kdf(self.kdf_name).new_options(rounds)


@dataclass(slots=True)
class PrivateKey:
    public: PublicKey
    secret: Any = field(repr=False)
    comment: str = ""
    envelope: EnvelopeConfig = field(default_factory=EnvelopeConfig)

    @property
    def kind(self) -> KeyTypeDescriptor:
        return self.public.kind

    @property
    def name(self) -> str:
        return self.public.kind.name

    @property
    def bits(self) -> int:
        return self.public.bits

    @property
    def checksum(self) -> int | None:
        return self.envelope.checksum

    def public_key(self) -> PublicKey:
        """The embedded public key carrying this key's comment."""
        return self.public.with_comment(self.comment)

    def set_passphrase(self, passphrase: bytes | str | None, **options: Any) -> None:
        self.envelope.set_passphrase(passphrase, **options)


__all__ = ["EnvelopeConfig", "PrivateKey", "PublicKey"]
