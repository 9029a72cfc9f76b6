"""Consume generated fixtures and re-check them against the library."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from libra_fixtures.encoding import encode_raw_transaction  # noqa: E402
from libra_fixtures.errors import FixtureError  # noqa: E402
from libra_fixtures.resources import BALANCE_LAYOUT, balance_struct_tag  # noqa: E402
from libra_fixtures.access_path import resource_access_path  # noqa: E402
from libra_fixtures.transaction import decode_signed_transaction  # noqa: E402
from libra_fixtures.types import WriteOpKind  # noqa: E402
from libra_fixtures.values import simple_deserialize  # noqa: E402
from libra_fixtures.writeset_digest import compute_writeset_digest  # noqa: E402
from fixtures_io import writeset_from_json  # noqa: E402
from yaml_dump import load_yaml  # noqa: E402


def _load(path: Path) -> dict:
    if path.suffix in (".yaml", ".yml"):
        return load_yaml(path.read_text())
    return json.loads(path.read_text())


def _check_accounts(path: Path) -> list[str]:
    failures: list[str] = []
    data = _load(path)

    for case in data.get("cases", []):
        name = case["name"]
        account = case["account"]
        write_set = writeset_from_json(account["write_set"])
        if compute_writeset_digest(write_set) != account["digest"]:
            failures.append(f"{name}: digest_mismatch")
            continue

        address = bytes.fromhex(account["address"])
        for code, expected in account["balances"].items():
            op = write_set.get(resource_access_path(address, balance_struct_tag(code)))
            if op is None or op.kind != WriteOpKind.VALUE:
                failures.append(f"{name}: missing_balance_{code}")
                break
            coin = simple_deserialize(op.value, BALANCE_LAYOUT).as_struct().fields[0].value
            if coin != expected:
                failures.append(f"{name}: balance_mismatch_{code}")
                break

    return failures


def _check_transactions(path: Path) -> list[str]:
    failures: list[str] = []
    data = _load(path)
    for case in data.get("cases", []):
        txn = decode_signed_transaction(bytes.fromhex(case["txn"]["signed_hex"]))
        if encode_raw_transaction(txn.raw_txn).hex() != case["txn"]["raw_hex"]:
            failures.append(f"{case['name']}: raw_mismatch")
            continue
        try:
            txn.check_signature()
        except FixtureError:
            failures.append(f"{case['name']}: bad_signature")
    return failures


def main() -> None:
    fixtures = ROOT / "fixtures"

    failures: list[str] = []

    for suffix in (".json", ".yaml"):
        accounts = fixtures / f"accounts{suffix}"
        if accounts.exists():
            failures.extend(_check_accounts(accounts))

        txns = fixtures / f"transactions{suffix}"
        if txns.exists():
            failures.extend(_check_transactions(txns))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
