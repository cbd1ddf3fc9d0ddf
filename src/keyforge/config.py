"""Configuration loading for the keyforge command line."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .ciphers import CIPHERS, DEFAULT_CIPHER, DEFAULT_KDF, DEFAULT_ROUNDS, KDFS, NONE
from .exceptions import KeyforgeError
from .fingerprint import DEFAULT_HASH, supported_hashes
from .generate import DEFAULT_KEY_TYPE, ECDSA_CURVES, resolve_key_type
from .keys.rsa import DEFAULT_BITS, MAX_BITS, MIN_BITS
from .paths import default_config_path


class KeygenConfig(BaseModel):
    key_type: str = Field(default=DEFAULT_KEY_TYPE, description="Key type for new keys")
    rsa_bits: int = Field(default=DEFAULT_BITS, ge=MIN_BITS, le=MAX_BITS)
    ecdsa_bits: int = Field(default=256, description="ECDSA curve size: 256|384|521")

    @field_validator("key_type")
    @classmethod
    def _validate_key_type(cls, value: str) -> str:
        try:
            resolve_key_type(value)
        except KeyforgeError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("ecdsa_bits")
    @classmethod
    def _validate_ecdsa_bits(cls, value: int) -> int:
        if value not in ECDSA_CURVES:
            raise ValueError(f"ecdsa_bits must be one of {sorted(ECDSA_CURVES)}")
        return value

    def bits_for(self, key_type: str) -> Optional[int]:
        name = key_type.lower()
        if name in ("rsa", "ssh-rsa"):
            return self.rsa_bits
        if name == "ecdsa":
            return self.ecdsa_bits
        return None


class EnvelopeDefaults(BaseModel):
    cipher: str = Field(default=DEFAULT_CIPHER, description="Cipher for encrypted keys")
    kdf: str = Field(default=DEFAULT_KDF, description="Key derivation function")
    rounds: int = Field(default=DEFAULT_ROUNDS, ge=1, description="KDF rounds")

    @field_validator("cipher")
    @classmethod
    def _validate_cipher(cls, value: str) -> str:
        if value not in CIPHERS or value == NONE:
            raise ValueError(f"Unknown or non-encrypting cipher: {value!r}")
        return value

    @field_validator("kdf")
    @classmethod
    def _validate_kdf(cls, value: str) -> str:
        if value not in KDFS or value == NONE:
            raise ValueError(f"Unknown key derivation function: {value!r}")
        return value


class FingerprintConfig(BaseModel):
    hash: str = Field(default=DEFAULT_HASH, description="Digest: md5|sha1|sha256")

    @field_validator("hash")
    @classmethod
    def _validate_hash(cls, value: str) -> str:
        value = value.lower()
        if value not in supported_hashes():
            raise ValueError(f"hash must be one of {', '.join(supported_hashes())}")
        return value


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    keygen: KeygenConfig = Field(default_factory=KeygenConfig)
    envelope: EnvelopeDefaults = Field(default_factory=EnvelopeDefaults)
    fingerprint: FingerprintConfig = Field(default_factory=FingerprintConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


_HEADER = "# keyforge configuration; every key is optional.\n"


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".keyforge" / "config.yaml"
    yield default_config_path()


def find_config_file(explicit: Optional[Path] = None) -> Optional[Path]:
    return next((path for path in config_search_paths(explicit) if path.is_file()), None)


def read_config_file(path: Path) -> AppConfig:
    """Parse and validate one YAML file; any problem becomes a ``ValueError``."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid configuration in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration in {path}: expected a mapping at the top level")
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> AppConfig:
    found = find_config_file(path)
    if found is None:
        return DEFAULT_CONFIG.model_copy(deep=True)
    return read_config_file(found)


def write_default_config(target: Optional[Path] = None, *, overwrite: bool = False) -> Path:
    """Write the default settings as YAML and return the path written."""
    target = target or default_config_path()
    if target.exists() and not overwrite:
        raise FileExistsError(f"{target} already exists")
    target.parent.mkdir(parents=True, exist_ok=True)
    body = yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), sort_keys=False)
    target.write_text(_HEADER + body, encoding="utf-8")
    return target


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "EnvelopeDefaults",
    "FingerprintConfig",
    "KeygenConfig",
    "LoggingConfig",
    "config_search_paths",
    "find_config_file",
    "load_config",
    "read_config_file",
    "write_default_config",
]
