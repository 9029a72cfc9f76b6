"""Hash assignments used by the ledger's account and storage schema."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from ..config import (
    ADDRESS_LENGTH,
    AUTH_KEY_PREFIX_LENGTH,
    ED25519_SCHEME_ID,
    LIBRA_HASH_PREFIX,
)


@dataclass(frozen=True)
class HashAssignment:
    purpose: str
    algorithm: str
    output_size: int
    input_spec: str


ASSIGNMENTS = [
    HashAssignment("authentication_key", "SHA3-256", 32, "ed25519 public key || scheme byte"),
    HashAssignment("account_address", "SHA3-256", 16, "last 16 bytes of authentication key"),
    HashAssignment("struct_tag", "SHA3-256", 32, "salt(StructTag) || lcs(struct_tag)"),
    HashAssignment("raw_transaction", "SHA3-256", 32, "salt(RawTransaction) || lcs(raw_txn)"),
    HashAssignment("writeset_digest", "BLAKE3", 32, "lcs(write_set)"),
]


def sha3_256(data: bytes) -> bytes:
    return hashlib.sha3_256(data).digest()


def hash_salt(type_name: str) -> bytes:
    """Domain separator for values of ``type_name``: sha3_256(b"LIBRA::" + name)."""
    return sha3_256(LIBRA_HASH_PREFIX + type_name.encode())


def prefixed_hash(type_name: str, serialized: bytes) -> bytes:
    hasher = hashlib.sha3_256()
    hasher.update(hash_salt(type_name))
    hasher.update(serialized)
    return hasher.digest()


def authentication_key(public_key: bytes) -> bytes:
    return sha3_256(bytes(public_key) + bytes([ED25519_SCHEME_ID]))


def authentication_key_prefix(public_key: bytes) -> bytes:
    return authentication_key(public_key)[:AUTH_KEY_PREFIX_LENGTH]


def derive_address(public_key: bytes) -> bytes:
    return authentication_key(public_key)[-ADDRESS_LENGTH:]
