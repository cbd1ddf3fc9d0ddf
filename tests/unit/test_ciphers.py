import pytest

from keyforge.ciphers import BCRYPT, CIPHERS, KDFS, NONE, KdfOptions, get_cipher, get_kdf
from keyforge.ciphers.registry import CipherRegistry, CipherSpec
from keyforge.exceptions import DecodeError, IntegrityError, UnsupportedAlgorithmError


@pytest.mark.parametrize(
    ("name", "key_size", "iv_size", "block_size", "auth_len"),
    [
        ("none", 0, 0, 8, 0),
        ("3des-cbc", 24, 8, 8, 0),
        ("aes128-cbc", 16, 16, 16, 0),
        ("aes192-cbc", 24, 16, 16, 0),
        ("aes256-cbc", 32, 16, 16, 0),
        ("aes128-ctr", 16, 16, 16, 0),
        ("aes192-ctr", 24, 16, 16, 0),
        ("aes256-ctr", 32, 16, 16, 0),
        ("aes128-gcm@openssh.com", 16, 12, 16, 16),
        ("aes256-gcm@openssh.com", 32, 12, 16, 16),
    ],
)
def test_cipher_table(name, key_size, iv_size, block_size, auth_len):
    spec = get_cipher(name)
    assert (spec.key_size, spec.iv_size, spec.block_size, spec.auth_len) == (
        key_size,
        iv_size,
        block_size,
        auth_len,
    )


@pytest.mark.parametrize("name", [name for name in CIPHERS if name != NONE])
def test_cipher_encrypt_decrypt(name):
    spec = get_cipher(name)
    key, iv = spec.split_seed(bytes(range(spec.seed_size)))
    plaintext = bytes(range(spec.block_size)) * 3
    ciphertext = spec.encrypt(key, iv, plaintext)
    assert len(ciphertext) == len(plaintext) + spec.auth_len
    assert ciphertext[: len(plaintext)] != plaintext
    assert spec.decrypt(key, iv, ciphertext) == plaintext


def test_gcm_tag_failure_is_integrity_error():
    spec = get_cipher("aes256-gcm@openssh.com")
    key, iv = spec.split_seed(b"\x01" * spec.seed_size)
    ciphertext = bytearray(spec.encrypt(key, iv, b"\x00" * 32))
    ciphertext[-1] ^= 0x01
    with pytest.raises(IntegrityError):
        spec.decrypt(key, iv, bytes(ciphertext))


def test_unknown_cipher_and_kdf():
    with pytest.raises(UnsupportedAlgorithmError):
        get_cipher("chacha20-poly1305@openssh.com")
    with pytest.raises(UnsupportedAlgorithmError):
        get_kdf("scrypt")


def test_registry_rejects_duplicates():
    registry = CipherRegistry()
    spec = CipherSpec("x", 0, 0, 8, lambda k, i, d: d, lambda k, i, d: d)
    registry.register(spec)
    with pytest.raises(ValueError):
        registry.register(spec)
    assert "x" in registry
    assert list(registry) == ["x"]


def test_bcrypt_options_round_trip():
    kdf = get_kdf(BCRYPT)
    options = kdf.new_options(8)
    assert len(options.salt) == 16
    assert options.rounds == 8
    encoded = kdf.encode_options(options)
    assert encoded == b"\x00\x00\x00\x10" + options.salt + b"\x00\x00\x00\x08"
    assert kdf.decode_options(encoded) == options


def test_bcrypt_options_fresh_salt():
    kdf = get_kdf(BCRYPT)
    assert kdf.new_options().salt != kdf.new_options().salt
    assert kdf.new_options().rounds == 16


def test_bcrypt_options_malformed():
    kdf = get_kdf(BCRYPT)
    with pytest.raises(DecodeError):
        kdf.decode_options(b"\x00\x00\x00\x10short")
    with pytest.raises(DecodeError):
        kdf.decode_options(b"\x00\x00\x00\x01s\x00\x00\x00\x00")
    with pytest.raises(DecodeError):
        kdf.decode_options(b"\x00\x00\x00\x01s\x00\x00\x00\x01extra")


def test_bcrypt_derive_is_deterministic():
    kdf = get_kdf(BCRYPT)
    options = KdfOptions(salt=b"\x00" * 16, rounds=2)
    first = kdf.derive(b"secret", options, 48)
    assert len(first) == 48
    assert kdf.derive(b"secret", options, 48) == first
    assert kdf.derive(b"other", options, 48) != first


def test_none_kdf():
    kdf = get_kdf(NONE)
    assert kdf.is_none
    assert kdf.encode_options(KdfOptions()) == b""
    assert kdf.decode_options(b"") == KdfOptions()
    with pytest.raises(DecodeError):
        kdf.decode_options(b"\x00")
    assert set(KDFS) == {NONE, BCRYPT}
