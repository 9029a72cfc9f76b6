"""Write-set synthesis: canonical order, determinism and byte layout."""

from __future__ import annotations

import pytest

from libra_fixtures.account import Account
from libra_fixtures.account_data import AccountData
from libra_fixtures.crypto.ed25519 import KeyGen
from libra_fixtures.errors import ErrorCode, FixtureError
from libra_fixtures.resources import BALANCE_LAYOUT, EVENT_HANDLE_GENERATOR_LAYOUT
from libra_fixtures.types import AccessPath, AccountRoleSpecifier, WriteOp, WriteOpKind, WriteSet
from libra_fixtures.values import simple_deserialize
from libra_fixtures.writeset_digest import compute_writeset_digest
from libra_fixtures.test_accounts import ALICE, account


def _alice_data(balance: int = 1_000_000) -> AccountData:
    return AccountData.with_account(
        account("ALICE"), balance, "LBR", 0, AccountRoleSpecifier.PARENT_VASP
    )


def test_writeset_has_three_entries(account_fixture) -> None:
    data = _alice_data()
    ws = data.to_writeset()
    assert len(ws) == 3
    paths = [path for path, _ in ws]
    assert paths == [
        data.make_account_access_path(),
        data.make_balance_access_path("LBR"),
        data.make_event_generator_access_path(),
    ]
    assert all(op.kind == WriteOpKind.VALUE for _, op in ws)
    assert all(path.address == ALICE for path in paths)
    account_fixture("alice_lbr", data)


def test_balance_round_trip() -> None:
    ws = _alice_data().to_writeset()
    balance_op = ws.get(_alice_data().make_balance_access_path("LBR"))
    assert balance_op is not None
    assert balance_op.value == (1_000_000).to_bytes(8, "little")
    coin = simple_deserialize(balance_op.value, BALANCE_LAYOUT).as_struct().fields[0].value
    assert coin == 1_000_000


def test_event_generator_bytes() -> None:
    data = _alice_data()
    op = data.to_writeset().get(data.make_event_generator_access_path())
    assert op.value == (2).to_bytes(8, "little") + ALICE
    decoded = simple_deserialize(op.value, EVENT_HANDLE_GENERATOR_LAYOUT)
    assert decoded.as_struct().fields[1].value == ALICE


def test_account_blob_prefix() -> None:
    data = _alice_data()
    op = data.to_writeset().get(data.make_account_access_path())
    blob = op.value
    auth_key = data.account().auth_key()
    assert blob[0] == 32
    assert blob[1:33] == auth_key
    # one withdraw capability, then one key rotation capability
    assert blob[33] == 1
    assert blob[34:50] == ALICE
    assert blob[50] == 1
    assert blob[51:67] == ALICE
    # received handle: count 0, key (salt 0)
    assert blob[67:75] == bytes(8)
    assert blob[75] == 24
    assert blob[76:100] == bytes(8) + ALICE
    # sent handle: count 0, key (salt 1)
    assert blob[100:108] == bytes(8)
    assert blob[108] == 24
    assert blob[109:133] == (1).to_bytes(8, "little") + ALICE
    # sequence number, frozen, role id
    assert blob[133:] == bytes(8) + b"\x00" + (5).to_bytes(8, "little")


def test_writeset_is_deterministic() -> None:
    first = _alice_data().to_writeset()
    second = _alice_data().to_writeset()
    assert first == second
    assert compute_writeset_digest(first) == compute_writeset_digest(second)


def test_balances_sorted_by_currency(account_fixture) -> None:
    data = _alice_data()
    data.add_balance_currency("Coin2")
    data.add_balance_currency("Coin1")
    ws = data.to_writeset()
    assert len(ws) == 5
    paths = [path for path, _ in ws]
    assert paths[1:4] == [
        data.make_balance_access_path("Coin1"),
        data.make_balance_access_path("Coin2"),
        data.make_balance_access_path("LBR"),
    ]
    account_fixture("alice_multi_currency", data)


def test_paths_unique_within_writeset() -> None:
    data = _alice_data()
    data.add_balance_currency("Coin1")
    paths = [path for path, _ in data.to_writeset()]
    assert len(set(paths)) == len(paths)


def test_distinct_accounts_do_not_collide() -> None:
    a = AccountData.new(1, 0).to_writeset()
    b = AccountData.new(1, 0).to_writeset()
    assert not {p for p, _ in a} & {p for p, _ in b}


def test_assoc_root_writeset(account_fixture) -> None:
    data = AccountData.new_assoc_root()
    ws = data.to_writeset()
    assert len(ws) == 3
    account_fixture("association_root", data)


def test_layout_mismatch_produces_no_writeset() -> None:
    data = _alice_data(balance=1 << 64)
    with pytest.raises(FixtureError) as exc:
        data.to_writeset()
    assert exc.value.code == ErrorCode.LAYOUT_MISMATCH


def test_duplicate_access_path_rejected() -> None:
    path = AccessPath(ALICE, b"\x01")
    with pytest.raises(FixtureError) as exc:
        WriteSet.new([(path, WriteOp.of_value(b"")), (path, WriteOp.deletion())])
    assert exc.value.code == ErrorCode.DUPLICATE_ACCESS_PATH


def test_digest_depends_on_content() -> None:
    seed = bytes([11]) * 32
    acct = Account.with_keypair(*KeyGen.from_seed(seed).generate_keypair())
    low = AccountData.with_account(acct, 1, "LBR", 0, AccountRoleSpecifier.PARENT_VASP)
    high = AccountData.with_account(acct, 2, "LBR", 0, AccountRoleSpecifier.PARENT_VASP)
    digest = compute_writeset_digest(low.to_writeset())
    assert len(digest) == 64
    assert digest != compute_writeset_digest(high.to_writeset())
