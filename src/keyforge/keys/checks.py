"""Validation helpers shared by the algorithm formats."""
from __future__ import annotations

import os

from ..exceptions import InvalidKeyError, KeyMismatchError


def ensure_non_negative(label: str, *values: int) -> None:
    if any(value < 0 for value in values):
        raise InvalidKeyError(f"{label}: negative integer in key material")


def ensure_same(label: str, embedded: object, outer: object) -> None:
    if embedded != outer:
        raise KeyMismatchError(f"{label}: embedded public key does not match outer public key")


def random_checksum() -> int:
    return int.from_bytes(os.urandom(4), "big")


__all__ = ["ensure_non_negative", "ensure_same", "random_checksum"]
