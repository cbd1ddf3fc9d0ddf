from __future__ import annotations

import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"
PASSPHRASE = "correct horse"

UNENCRYPTED = ["rsa_2048", "dsa_1024", "ecdsa_256", "ecdsa_384", "ecdsa_521", "ed25519"]
ENCRYPTED = {
    "ed25519_aes256ctr": "aes256-ctr",
    "ed25519_aes128cbc": "aes128-cbc",
    "ed25519_aes256gcm": "aes256-gcm@openssh.com",
    "ecdsa_3descbc": "3des-cbc",
    "rsa_aes192ctr": "aes192-ctr",
}


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def reference_fingerprints() -> list[dict]:
    return json.loads((FIXTURES / "fingerprints.json").read_text(encoding="utf-8"))
