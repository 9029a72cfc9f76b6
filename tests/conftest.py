"""Pytest hooks to generate account and transaction fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from libra_fixtures.account_data import AccountData
from libra_fixtures.transaction import SignedTransaction
from tools.fixtures_io import account_data_to_json, signed_txn_to_json
from tools.yaml_dump import write_yaml

_ACCOUNT_CASES: list[dict[str, Any]] = []
_TXN_CASES: list[dict[str, Any]] = []
_VECTOR_CASES: dict[str, list[dict[str, Any]]] = {}


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated fixtures",
    )
    parser.addoption(
        "--fixture-format",
        action="store",
        default="json",
        choices=("json", "yaml"),
        help="Serialization format of generated fixtures",
    )


@pytest.fixture
def account_fixture() -> Callable[[str, AccountData], None]:
    """Collect an account snapshot together with its write-set."""

    def _account_fixture(name: str, data: AccountData) -> None:
        _ACCOUNT_CASES.append({"name": name, "account": account_data_to_json(data)})

    return _account_fixture


@pytest.fixture
def txn_fixture() -> Callable[[str, SignedTransaction], None]:
    """Collect a signed transaction with its raw and signed encodings."""

    def _txn_fixture(name: str, txn: SignedTransaction) -> None:
        _TXN_CASES.append({"name": name, "txn": signed_txn_to_json(txn)})

    return _txn_fixture


@pytest.fixture
def vector_test_group() -> Callable[[str, dict[str, Any]], None]:
    """Collect pre-built test_vectors under a specific fixture path."""

    def _vector_test_group(rel_path: str, vector: dict[str, Any]) -> None:
        _VECTOR_CASES.setdefault(rel_path, []).append(vector)

    return _vector_test_group


def _write(target: Path, data: dict[str, Any], fixture_format: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    if fixture_format == "yaml":
        write_yaml(target.with_suffix(".yaml"), data)
    else:
        target.with_suffix(".json").write_text(json.dumps(data, indent=2))


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir:
        return
    fixture_format = session.config.getoption("--fixture-format")

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    if _ACCOUNT_CASES:
        _write(out / "accounts", {"cases": _ACCOUNT_CASES}, fixture_format)

    if _TXN_CASES:
        _write(out / "transactions", {"cases": _TXN_CASES}, fixture_format)

    for rel_path, vectors in _VECTOR_CASES.items():
        if not vectors:
            continue
        _write(out / Path(rel_path).with_suffix(""), {"test_vectors": vectors}, fixture_format)
