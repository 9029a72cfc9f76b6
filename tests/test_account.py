"""Identity: address derivation, key rotation and storage paths."""

from __future__ import annotations

import pytest

from libra_fixtures.account import Account
from libra_fixtures.config import (
    ASSOCIATION_ADDRESS,
    DEFAULT_GENESIS_CONFIG,
    RESOURCE_TAG,
    TREASURY_COMPLIANCE_ADDRESS,
    GenesisConfig,
)
from libra_fixtures.crypto.ed25519 import KeyGen
from libra_fixtures.crypto.hashing import sha3_256
from libra_fixtures.errors import ErrorCode, FixtureError


def _keypair(seed: int):
    return KeyGen.from_seed(bytes([seed]) * 32).generate_keypair()


def test_new_accounts_are_distinct() -> None:
    a, b = Account.new(), Account.new()
    assert a.address != b.address
    assert a.pubkey != b.pubkey


def test_address_is_suffix_of_auth_key() -> None:
    acct = Account.with_keypair(*_keypair(1))
    auth_key = acct.auth_key()
    assert auth_key == sha3_256(acct.pubkey.to_bytes() + b"\x00")
    assert len(auth_key) == 32
    assert acct.address == auth_key[16:]
    assert acct.auth_key_prefix() == auth_key[:16]


def test_with_keypair_is_deterministic() -> None:
    assert Account.with_keypair(*_keypair(2)) == Account.with_keypair(*_keypair(2))


def test_rotate_key_keeps_address() -> None:
    acct = Account.with_keypair(*_keypair(3))
    address = acct.address
    old_auth_key = acct.auth_key()
    privkey, pubkey = _keypair(4)

    acct.rotate_key(privkey, pubkey)

    assert acct.address == address
    assert acct.pubkey == pubkey
    assert acct.auth_key() != old_auth_key
    assert acct.auth_key()[16:] != address


def test_address_is_read_only() -> None:
    acct = Account.with_keypair(*_keypair(5))
    with pytest.raises(AttributeError):
        acct.address = b"\x00" * 16


def test_genesis_accounts() -> None:
    assoc = Account.new_association()
    tc = Account.new_blessed_tc()
    assert assoc.address == ASSOCIATION_ADDRESS
    assert tc.address == TREASURY_COMPLIANCE_ADDRESS
    assert assoc.pubkey == tc.pubkey
    assert assoc.privkey.to_bytes() == DEFAULT_GENESIS_CONFIG.genesis_seed


def test_genesis_config_is_injected() -> None:
    config = GenesisConfig(genesis_seed=bytes([7]) * 32, association_address=bytes([9]) * 16)
    assoc = Account.new_association(config)
    assert assoc.address == bytes([9]) * 16
    assert assoc.privkey.to_bytes() == bytes([7]) * 32


def test_invalid_genesis_address() -> None:
    with pytest.raises(FixtureError) as exc:
        Account.new_genesis_account(b"\x01" * 20)
    assert exc.value.code == ErrorCode.INVALID_ADDRESS


def test_access_paths() -> None:
    acct = Account.with_keypair(*_keypair(6))
    paths = [
        acct.make_account_access_path(),
        acct.make_event_generator_access_path(),
        acct.make_balance_access_path("LBR"),
        acct.make_balance_access_path("Coin1"),
    ]
    for path in paths:
        assert path.address == acct.address
        assert path.path[0] == RESOURCE_TAG
        assert len(path.path) == 33
    assert len({p.path for p in paths}) == len(paths)


def test_access_path_depends_on_address() -> None:
    a = Account.with_keypair(*_keypair(7))
    b = Account.with_keypair(*_keypair(8))
    assert a.make_account_access_path().path == b.make_account_access_path().path
    assert a.make_account_access_path() != b.make_account_access_path()


def test_invalid_currency_code_path() -> None:
    acct = Account.with_keypair(*_keypair(9))
    with pytest.raises(FixtureError) as exc:
        acct.make_balance_access_path("1bad")
    assert exc.value.code == ErrorCode.INVALID_CURRENCY_CODE
