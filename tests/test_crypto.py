"""Hashing helpers, Ed25519 keys and seeded key generation."""

from __future__ import annotations

import hashlib

import pytest

from libra_fixtures.crypto.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
    KeyGen,
    keypair_from_seed,
)
from libra_fixtures.crypto.hashing import (
    ASSIGNMENTS,
    authentication_key,
    derive_address,
    hash_salt,
    prefixed_hash,
    sha3_256,
)
from libra_fixtures.errors import ErrorCode, FixtureError

# RFC 8032 section 7.1, test 1
RFC8032_SECRET = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RFC8032_PUBLIC = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
RFC8032_SIGNATURE = (
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e06522490155"
    "5fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


def test_hash_salt() -> None:
    assert hash_salt("RawTransaction") == hashlib.sha3_256(b"LIBRA::RawTransaction").digest()


def test_prefixed_hash() -> None:
    expected = hashlib.sha3_256(hash_salt("StructTag") + b"abc").digest()
    assert prefixed_hash("StructTag", b"abc") == expected


def test_authentication_key_and_address() -> None:
    pub = bytes.fromhex(RFC8032_PUBLIC)
    assert authentication_key(pub) == sha3_256(pub + b"\x00")
    assert derive_address(pub) == authentication_key(pub)[16:]


def test_assignments_table() -> None:
    purposes = {a.purpose for a in ASSIGNMENTS}
    assert {"authentication_key", "account_address", "writeset_digest"} <= purposes


def test_rfc8032_vector() -> None:
    private_key = Ed25519PrivateKey.from_hex(RFC8032_SECRET)
    assert private_key.public_key().to_bytes().hex() == RFC8032_PUBLIC
    signature = private_key.sign(b"")
    assert signature.hex() == RFC8032_SIGNATURE
    assert Ed25519PublicKey.from_hex(RFC8032_PUBLIC).verify(signature, b"")
    assert not Ed25519PublicKey.from_hex(RFC8032_PUBLIC).verify(signature, b"x")


def test_verify_rejects_short_signature() -> None:
    _, pub = keypair_from_seed(bytes(32))
    assert not pub.verify(b"\x00" * 10, b"")


@pytest.mark.parametrize("length", [0, 31, 33])
def test_key_length_checked(length: int) -> None:
    with pytest.raises(FixtureError) as exc:
        Ed25519PrivateKey(bytes(length))
    assert exc.value.code == ErrorCode.INVALID_KEY
    with pytest.raises(FixtureError) as exc:
        Ed25519PublicKey(bytes(length))
    assert exc.value.code == ErrorCode.INVALID_KEY


def test_seeded_keygen_reproducible() -> None:
    seed = bytes([1]) * 32
    first = [KeyGen.from_seed(seed).generate_keypair() for _ in range(2)]
    assert first[0] == first[1]

    keygen = KeyGen.from_seed(seed)
    a, b = keygen.generate_keypair(), keygen.generate_keypair()
    assert a[0] != b[0]


def test_keygen_seed_length() -> None:
    with pytest.raises(FixtureError) as exc:
        KeyGen.from_seed(b"short")
    assert exc.value.code == ErrorCode.INVALID_KEY


def test_os_rng_keys_differ() -> None:
    keygen = KeyGen.from_os_rng()
    assert keygen.generate_private_key() != keygen.generate_private_key()


def test_keypair_from_seed() -> None:
    private_key, public_key = keypair_from_seed(bytes.fromhex(RFC8032_SECRET))
    assert public_key.to_bytes().hex() == RFC8032_PUBLIC
    assert private_key.to_bytes().hex() == RFC8032_SECRET
