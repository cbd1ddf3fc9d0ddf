"""Cipher and KDF lookup tables for private key envelopes.

The tables only select and parameterize primitives; all cryptographic work is
delegated to ``cryptography`` (block ciphers, AES-GCM) and ``bcrypt``
(bcrypt-pbkdf).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Mapping, Tuple

import bcrypt
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..exceptions import DecodeError, IntegrityError, UnsupportedAlgorithmError
from ..wire import BinaryStream, FieldReader, FieldWriter, read_blob

NONE = "none"
BCRYPT = "bcrypt"
DEFAULT_CIPHER = "aes256-ctr"
DEFAULT_KDF = BCRYPT
DEFAULT_ROUNDS = 16
SALT_SIZE = 16

CryptFn = Callable[[bytes, bytes, bytes], bytes]


@dataclass(frozen=True, slots=True)
class CipherSpec:
    name: str
    key_size: int
    iv_size: int
    block_size: int
    encrypt_fn: CryptFn
    decrypt_fn: CryptFn
    auth_len: int = 0

    @property
    def is_none(self) -> bool:
        return self.name == NONE

    @property
    def seed_size(self) -> int:
        """Bytes of KDF output needed for key and IV."""
        return self.key_size + self.iv_size

    def split_seed(self, seed: bytes) -> Tuple[bytes, bytes]:
        if len(seed) != self.seed_size:
            raise ValueError(f"{self.name} needs {self.seed_size} bytes of key material")
        return seed[: self.key_size], seed[self.key_size :]

    def encrypt(self, key: bytes, iv: bytes, data: bytes) -> bytes:
        return self.encrypt_fn(key, iv, data)

    def decrypt(self, key: bytes, iv: bytes, data: bytes) -> bytes:
        return self.decrypt_fn(key, iv, data)


@dataclass(frozen=True, slots=True)
class KdfOptions:
    salt: bytes = b""
    rounds: int = 0


@dataclass(frozen=True, slots=True)
class KdfSpec:
    name: str
    salt_size: int
    default_rounds: int
    derive_fn: Callable[[bytes, KdfOptions, int], bytes]
    decode_options_fn: Callable[[bytes], KdfOptions]
    encode_options_fn: Callable[[KdfOptions], bytes]

    @property
    def is_none(self) -> bool:
        return self.name == NONE

    def new_options(self, rounds: int | None = None) -> KdfOptions:
        if self.is_none:
            return KdfOptions()
        return KdfOptions(salt=os.urandom(self.salt_size), rounds=rounds or self.default_rounds)

    def derive(self, passphrase: bytes, options: KdfOptions, length: int) -> bytes:
        return self.derive_fn(passphrase, options, length)

    def decode_options(self, data: bytes) -> KdfOptions:
        return self.decode_options_fn(data)

    def encode_options(self, options: KdfOptions) -> bytes:
        return self.encode_options_fn(options)


# ---------- cipher primitives ----------
def _identity(_key: bytes, _iv: bytes, data: bytes) -> bytes:
    return bytes(data)


def _block_cipher(algorithm: Callable, mode: Callable) -> Tuple[CryptFn, CryptFn]:
    def encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
        encryptor = Cipher(algorithm(key), mode(iv)).encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def decrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
        decryptor = Cipher(algorithm(key), mode(iv)).decryptor()
        return decryptor.update(data) + decryptor.finalize()

    return encrypt, decrypt


def _gcm_encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    return AESGCM(key).encrypt(iv, data, None)


def _gcm_decrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    try:
        return AESGCM(key).decrypt(iv, data, None)
    except InvalidTag as exc:
        raise IntegrityError("AEAD tag verification failed") from exc


# ---------- KDF primitives ----------
def _none_derive(_passphrase: bytes, _options: KdfOptions, length: int) -> bytes:
    if length:
        raise UnsupportedAlgorithmError("KDF 'none' cannot derive key material")
    return b""


def _none_decode_options(data: bytes) -> KdfOptions:
    if data:
        raise DecodeError("KDF 'none' carries no options")
    return KdfOptions()


def _none_encode_options(_options: KdfOptions) -> bytes:
    return b""


def _bcrypt_derive(passphrase: bytes, options: KdfOptions, length: int) -> bytes:
    return bcrypt.kdf(
        password=passphrase,
        salt=options.salt,
        desired_key_bytes=length,
        rounds=options.rounds,
        ignore_few_rounds=True,
    )


def _bcrypt_decode_options(data: bytes) -> KdfOptions:
    def parse(stream: BinaryStream):
        reader = FieldReader(stream)
        salt = reader.string()
        rounds = reader.uint32()
        return reader.done(KdfOptions(salt=salt, rounds=rounds))

    options = read_blob(data, parse)
    if not options.salt or options.rounds < 1:
        raise DecodeError("bcrypt options need a salt and at least one round")
    return options


def _bcrypt_encode_options(options: KdfOptions) -> bytes:
    stream = BinaryStream()
    writer = FieldWriter(stream)
    writer.string(options.salt)
    writer.uint32(options.rounds)
    return stream.getvalue()


# ---------- registries ----------
class CipherRegistry:
    """Lookup table from cipher name to :class:`CipherSpec`."""

    def __init__(self) -> None:
        self._ciphers: Dict[str, CipherSpec] = {}

    def register(self, spec: CipherSpec) -> None:
        if spec.name in self._ciphers:
            raise ValueError(f"Cipher already registered: {spec.name}")
        self._ciphers[spec.name] = spec

    def get(self, name: str) -> CipherSpec:
        try:
            return self._ciphers[name]
        except KeyError:
            raise UnsupportedAlgorithmError(f"Unsupported cipher: {name!r}") from None

    def all(self) -> Mapping[str, CipherSpec]:
        return dict(self._ciphers)

    def __contains__(self, name: object) -> bool:
        return name in self._ciphers

    def __iter__(self) -> Iterator[str]:
        return iter(self._ciphers)


class KdfRegistry:
    """Lookup table from KDF name to :class:`KdfSpec`."""

    def __init__(self) -> None:
        self._kdfs: Dict[str, KdfSpec] = {}

    def register(self, spec: KdfSpec) -> None:
        if spec.name in self._kdfs:
            raise ValueError(f"KDF already registered: {spec.name}")
        self._kdfs[spec.name] = spec

    def get(self, name: str) -> KdfSpec:
        try:
            return self._kdfs[name]
        except KeyError:
            raise UnsupportedAlgorithmError(f"Unsupported KDF: {name!r}") from None

    def all(self) -> Mapping[str, KdfSpec]:
        return dict(self._kdfs)

    def __contains__(self, name: object) -> bool:
        return name in self._kdfs

    def __iter__(self) -> Iterator[str]:
        return iter(self._kdfs)


def _build_ciphers() -> CipherRegistry:
    registry = CipherRegistry()
    registry.register(CipherSpec(NONE, 0, 0, 8, _identity, _identity))
    registry.register(CipherSpec("3des-cbc", 24, 8, 8, *_block_cipher(TripleDES, modes.CBC)))
    for bits in (128, 192, 256):
        registry.register(
            CipherSpec(f"aes{bits}-cbc", bits // 8, 16, 16, *_block_cipher(algorithms.AES, modes.CBC))
        )
        registry.register(
            CipherSpec(f"aes{bits}-ctr", bits // 8, 16, 16, *_block_cipher(algorithms.AES, modes.CTR))
        )
    for bits in (128, 256):
        registry.register(
            CipherSpec(
                f"aes{bits}-gcm@openssh.com", bits // 8, 12, 16, _gcm_encrypt, _gcm_decrypt, auth_len=16
            )
        )
    return registry


def _build_kdfs() -> KdfRegistry:
    registry = KdfRegistry()
    registry.register(KdfSpec(NONE, 0, 0, _none_derive, _none_decode_options, _none_encode_options))
    registry.register(
        KdfSpec(
            BCRYPT,
            SALT_SIZE,
            DEFAULT_ROUNDS,
            _bcrypt_derive,
            _bcrypt_decode_options,
            _bcrypt_encode_options,
        )
    )
    return registry


CIPHERS = _build_ciphers()
KDFS = _build_kdfs()


def get_cipher(name: str) -> CipherSpec:
    return CIPHERS.get(name)


def get_kdf(name: str) -> KdfSpec:
    return KDFS.get(name)


__all__ = [
    "BCRYPT",
    "CIPHERS",
    "CipherRegistry",
    "CipherSpec",
    "DEFAULT_CIPHER",
    "DEFAULT_KDF",
    "DEFAULT_ROUNDS",
    "KDFS",
    "KdfOptions",
    "KdfRegistry",
    "KdfSpec",
    "NONE",
    "SALT_SIZE",
    "get_cipher",
    "get_kdf",
]
