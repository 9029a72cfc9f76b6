"""Helpers to serialize/deserialize account and transaction fixtures."""

from __future__ import annotations

from typing import Any

from libra_fixtures.account_data import AccountData
from libra_fixtures.encoding import encode_raw_transaction
from libra_fixtures.transaction import SignedTransaction, encode_signed_transaction
from libra_fixtures.types import (
    AccessPath,
    Module,
    Script,
    TransactionArgument,
    WriteOp,
    WriteOpKind,
    WriteSet,
    WriteSetPayload,
)
from libra_fixtures.writeset_digest import compute_writeset_digest


def _hex_to_bytes(v: str) -> bytes:
    return bytes.fromhex(v)


def _bytes_to_hex(v: bytes) -> str:
    return v.hex()


def writeset_to_json(write_set: WriteSet) -> list[dict[str, Any]]:
    return [
        {
            "address": _bytes_to_hex(path.address),
            "path": _bytes_to_hex(path.path),
            "value": _bytes_to_hex(op.value) if op.kind == WriteOpKind.VALUE else None,
        }
        for path, op in write_set
    ]


def writeset_from_json(entries: list[dict[str, Any]]) -> WriteSet:
    ops = []
    for e in entries:
        path = AccessPath(address=_hex_to_bytes(e["address"]), path=_hex_to_bytes(e["path"]))
        value = e.get("value")
        op = WriteOp.deletion() if value is None else WriteOp.of_value(_hex_to_bytes(value))
        ops.append((path, op))
    return WriteSet.new(ops)


def account_data_to_json(data: AccountData) -> dict[str, Any]:
    write_set = data.to_writeset()
    account = data.account()
    return {
        "address": _bytes_to_hex(data.address()),
        "public_key": _bytes_to_hex(account.pubkey.to_bytes()),
        "auth_key": _bytes_to_hex(account.auth_key()),
        "role": data.account_role().name,
        "role_id": data.role_id(),
        "sequence_number": data.sequence_number(),
        "frozen": data.is_frozen(),
        "balances": data.balances(),
        "sent_events": {
            "key": _bytes_to_hex(data.sent_events_key()),
            "count": data.sent_events_count(),
        },
        "received_events": {
            "key": _bytes_to_hex(data.received_events_key()),
            "count": data.received_events_count(),
        },
        "paths": {
            "account": _bytes_to_hex(data.make_account_access_path().path),
            "event_generator": _bytes_to_hex(data.make_event_generator_access_path().path),
            "balances": {
                code: _bytes_to_hex(data.make_balance_access_path(code).path)
                for code in data.balances()
            },
        },
        "write_set": writeset_to_json(write_set),
        "digest": compute_writeset_digest(write_set),
    }


def _argument_to_json(arg: TransactionArgument) -> dict[str, Any]:
    value = arg.value
    if isinstance(value, (bytes, bytearray)):
        value = _bytes_to_hex(bytes(value))
    return {"kind": arg.kind.name, "value": value}


def _payload_to_json(payload: Any) -> dict[str, Any]:
    if isinstance(payload, Script):
        return {
            "type": "script",
            "code": _bytes_to_hex(payload.code),
            "ty_args": len(payload.ty_args),
            "args": [_argument_to_json(a) for a in payload.args],
        }
    if isinstance(payload, Module):
        return {"type": "module", "code": _bytes_to_hex(payload.code)}
    if isinstance(payload, WriteSetPayload):
        return {"type": "write_set", "write_set": writeset_to_json(payload.write_set)}
    raise TypeError(f"unsupported payload {type(payload).__name__}")


def signed_txn_to_json(txn: SignedTransaction) -> dict[str, Any]:
    raw = txn.raw_txn
    return {
        "sender": _bytes_to_hex(raw.sender),
        "sequence_number": raw.sequence_number,
        "payload": _payload_to_json(raw.payload),
        "max_gas_amount": raw.max_gas_amount,
        "gas_unit_price": raw.gas_unit_price,
        "gas_currency_code": raw.gas_currency_code,
        "expiration_time": raw.expiration_time,
        "public_key": _bytes_to_hex(txn.public_key.to_bytes()),
        "signature": _bytes_to_hex(txn.signature),
        "raw_hex": _bytes_to_hex(encode_raw_transaction(raw)),
        "signed_hex": _bytes_to_hex(encode_signed_transaction(txn)),
    }
