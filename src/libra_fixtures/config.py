"""Ledger constants used by the account fixture builders."""

from __future__ import annotations

from dataclasses import dataclass


def _short_address(value: int) -> bytes:
    return value.to_bytes(ADDRESS_LENGTH, "big")


# Addresses / keys
ADDRESS_LENGTH = 16
AUTH_KEY_LENGTH = 32
AUTH_KEY_PREFIX_LENGTH = AUTH_KEY_LENGTH - ADDRESS_LENGTH
ED25519_PUBLIC_KEY_LENGTH = 32
ED25519_PRIVATE_KEY_LENGTH = 32
ED25519_SIGNATURE_LENGTH = 64
ED25519_SCHEME_ID = 0x00

CORE_CODE_ADDRESS = _short_address(0x1)
ASSOCIATION_ADDRESS = _short_address(0xA550C18)
TREASURY_COMPLIANCE_ADDRESS = _short_address(0xB1E55ED)

# Hashing
LIBRA_HASH_PREFIX = b"LIBRA::"

# Access paths
RESOURCE_TAG = 0x01

# Currencies
LBR_NAME = "LBR"
COIN1_NAME = "Coin1"
COIN2_NAME = "Coin2"

# Move modules / structs (all published under CORE_CODE_ADDRESS)
ACCOUNT_MODULE_NAME = "LibraAccount"
ACCOUNT_STRUCT_NAME = "LibraAccount"
BALANCE_STRUCT_NAME = "Balance"
WITHDRAW_CAPABILITY_STRUCT_NAME = "WithdrawCapability"
KEY_ROTATION_CAPABILITY_STRUCT_NAME = "KeyRotationCapability"
SENT_PAYMENT_EVENT_STRUCT_NAME = "SentPaymentEvent"
RECEIVED_PAYMENT_EVENT_STRUCT_NAME = "ReceivedPaymentEvent"
EVENT_MODULE_NAME = "Event"
EVENT_HANDLE_STRUCT_NAME = "EventHandle"
EVENT_HANDLE_GENERATOR_STRUCT_NAME = "EventHandleGenerator"

# Events
EVENT_KEY_SALT_LENGTH = 8
EVENT_KEY_LENGTH = EVENT_KEY_SALT_LENGTH + ADDRESS_LENGTH
RECEIVED_EVENTS_SALT = 0
SENT_EVENTS_SALT = 1
# Two handles are derived from the generator when an account is created.
INITIAL_EVENT_GENERATOR_COUNTER = 2

# Transactions
# TTL is 86400s in production. Initial logical time is 0.
DEFAULT_EXPIRATION_TIME = 40_000
TXN_RESERVED = 500_000
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
WRITESET_EXPIRATION_TIME = U64_MAX


@dataclass(frozen=True)
class GenesisConfig:
    """Well-known identities baked into the genesis state."""

    genesis_seed: bytes = bytes([42]) * ED25519_PRIVATE_KEY_LENGTH
    association_address: bytes = ASSOCIATION_ADDRESS
    treasury_compliance_address: bytes = TREASURY_COMPLIANCE_ADDRESS


DEFAULT_GENESIS_CONFIG = GenesisConfig()
