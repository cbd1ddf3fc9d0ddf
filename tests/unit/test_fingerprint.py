import pytest

from conftest import PASSPHRASE, read_fixture
from keyforge.envelope import decode_private
from keyforge.exceptions import UnsupportedAlgorithmError
from keyforge.fingerprint import fingerprint, fingerprint_display, fingerprint_line
from keyforge.keys import parse_public_line


def test_fingerprints_match_ssh_keygen(reference_fingerprints):
    assert reference_fingerprints
    for entry in reference_fingerprints:
        key = parse_public_line(read_fixture(f"{entry['key']}.pub"))
        assert fingerprint(key, entry["hash"]) == entry["fingerprint"], entry
        assert key.bits == entry["bits"]


def test_private_key_fingerprint_uses_public_part(reference_fingerprints):
    for entry in reference_fingerprints:
        private = decode_private(read_fixture(entry["key"]), PASSPHRASE)
        assert fingerprint(private, entry["hash"]) == entry["fingerprint"]


def test_comment_does_not_change_fingerprint():
    key = parse_public_line(read_fixture("ed25519.pub"))
    assert fingerprint(key) == fingerprint(key.with_comment("other"))


def test_display_prefixes():
    key = parse_public_line(read_fixture("ed25519.pub"))
    assert fingerprint_display(key, "md5") == "MD5:5c:c1:68:af:0a:91:9c:0d:62:5e:fd:bf:4b:fc:2e:55"
    assert fingerprint_display(key) == "SHA256:CMIzZBYjb87zZA48cqw8LmAJnvMITXRJ3uiNkqN1Wek"
    assert fingerprint_display(key, "SHA1").startswith("SHA1:")


def test_fingerprint_line():
    key = parse_public_line(read_fixture("rsa_2048.pub"))
    assert fingerprint_line(key, "md5") == (
        "2048 MD5:7a:32:f9:21:a6:ef:d4:42:aa:58:be:e9:e6:77:5b:d2 rsa-fixture@keyforge (RSA)"
    )
    bare = key.with_comment("")
    assert fingerprint_line(bare, "md5").endswith(" no comment (RSA)")


def test_fingerprint_line_for_private_key_uses_its_comment():
    private = decode_private(read_fixture("ed25519"))
    assert fingerprint_line(private) == (
        "256 SHA256:CMIzZBYjb87zZA48cqw8LmAJnvMITXRJ3uiNkqN1Wek ed25519-fixture@keyforge (ED25519)"
    )


def test_unknown_hash():
    key = parse_public_line(read_fixture("ed25519.pub"))
    with pytest.raises(UnsupportedAlgorithmError):
        fingerprint(key, "sha512")
    with pytest.raises(UnsupportedAlgorithmError):
        fingerprint_display(key, "blake2b")


def test_hash_defaults_to_sha256_and_accepts_keyword(reference_fingerprints):
    entry = next(e for e in reference_fingerprints if e["key"] == "ed25519" and e["hash"] == "sha256")
    key = parse_public_line(read_fixture("ed25519.pub"))
    assert fingerprint(key) == entry["fingerprint"]
    assert fingerprint(key, algorithm="SHA256") == entry["fingerprint"]
