"""Ed25519 keys, signing and key generation for fixture accounts."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..config import (
    ED25519_PRIVATE_KEY_LENGTH,
    ED25519_PUBLIC_KEY_LENGTH,
    ED25519_SIGNATURE_LENGTH,
)
from ..errors import ErrorCode, FixtureError
from .hashing import sha3_256

logger = logging.getLogger(__name__)


class Ed25519PublicKey:
    """32-byte Ed25519 verifying key."""

    def __init__(self, public_key_bytes: bytes):
        if len(public_key_bytes) != ED25519_PUBLIC_KEY_LENGTH:
            raise FixtureError(
                ErrorCode.INVALID_KEY,
                f"Ed25519 public key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, "
                f"got {len(public_key_bytes)}",
            )
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(bytes(public_key_bytes))
        except ValueError as exc:
            raise FixtureError(ErrorCode.INVALID_KEY, f"invalid Ed25519 public key: {exc}") from exc
        self._key_bytes = bytes(public_key_bytes)

    @classmethod
    def from_hex(cls, hex_string: str) -> "Ed25519PublicKey":
        return cls(bytes.fromhex(hex_string))

    def to_bytes(self) -> bytes:
        return self._key_bytes

    def verify(self, signature: bytes, message: bytes) -> bool:
        if len(signature) != ED25519_SIGNATURE_LENGTH:
            return False
        try:
            self._crypto_key.verify(bytes(signature), message)
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return NotImplemented
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self._key_bytes.hex()}')"


class Ed25519PrivateKey:
    """32-byte Ed25519 signing key (the RFC 8032 seed)."""

    def __init__(self, private_key_bytes: bytes):
        if len(private_key_bytes) != ED25519_PRIVATE_KEY_LENGTH:
            raise FixtureError(
                ErrorCode.INVALID_KEY,
                f"Ed25519 private key must be {ED25519_PRIVATE_KEY_LENGTH} bytes, "
                f"got {len(private_key_bytes)}",
            )
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(bytes(private_key_bytes))
        self._key_bytes = bytes(private_key_bytes)

    @classmethod
    def generate(cls) -> "Ed25519PrivateKey":
        """Fresh key from the operating system's CSPRNG."""
        crypto_key = CryptoEd25519PrivateKey.generate()
        raw = crypto_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls(raw)

    @classmethod
    def from_hex(cls, hex_string: str) -> "Ed25519PrivateKey":
        return cls(bytes.fromhex(hex_string))

    def to_bytes(self) -> bytes:
        return self._key_bytes

    def public_key(self) -> Ed25519PublicKey:
        raw = self._crypto_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return Ed25519PublicKey(raw)

    def sign(self, message: bytes) -> bytes:
        try:
            signature = self._crypto_key.sign(message)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise FixtureError(ErrorCode.SIGNING_FAILED, f"ed25519 signing failed: {exc}") from exc
        logger.debug("signed %d-byte message", len(message))
        return signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ed25519PrivateKey):
            return NotImplemented
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(<public {self.public_key().to_bytes().hex()}>)"


KeyPair = Tuple[Ed25519PrivateKey, Ed25519PublicKey]


class KeyGen:
    """Key pair source, either seeded (reproducible) or backed by the OS RNG."""

    def __init__(self, seed: Optional[bytes] = None):
        if seed is not None and len(seed) != ED25519_PRIVATE_KEY_LENGTH:
            raise FixtureError(
                ErrorCode.INVALID_KEY, f"key generator seed must be {ED25519_PRIVATE_KEY_LENGTH} bytes"
            )
        self._seed = seed
        self._counter = 0

    @classmethod
    def from_seed(cls, seed: bytes) -> "KeyGen":
        return cls(bytes(seed))

    @classmethod
    def from_os_rng(cls) -> "KeyGen":
        return cls(None)

    def generate_private_key(self) -> Ed25519PrivateKey:
        if self._seed is None:
            return Ed25519PrivateKey.generate()
        material = sha3_256(self._seed + self._counter.to_bytes(8, "little"))
        self._counter += 1
        return Ed25519PrivateKey(material)

    def generate_keypair(self) -> KeyPair:
        private_key = self.generate_private_key()
        return private_key, private_key.public_key()


def keypair_from_seed(seed: bytes) -> KeyPair:
    """Key pair whose private key *is* ``seed`` (used for well-known identities)."""
    private_key = Ed25519PrivateKey(seed)
    return private_key, private_key.public_key()
