"""Raw/signed transaction construction for fixture accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import (
    DEFAULT_EXPIRATION_TIME,
    ED25519_SIGNATURE_LENGTH,
    LBR_NAME,
    U64_MAX,
    WRITESET_EXPIRATION_TIME,
)
from .crypto.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from .crypto.hashing import hash_salt
from .encoding import (
    Reader,
    Writer,
    encode_raw_transaction,
    read_raw_transaction,
    write_raw_transaction,
)
from .errors import ErrorCode, FixtureError
from .types import (
    Module,
    RawTransaction,
    Script,
    TransactionPayload,
    WriteSetPayload,
    check_address,
)

logger = logging.getLogger(__name__)

ED25519_AUTHENTICATOR = 0


@dataclass(frozen=True)
class SignedTransaction:
    raw_txn: RawTransaction
    public_key: Ed25519PublicKey
    signature: bytes

    @property
    def sender(self) -> bytes:
        return self.raw_txn.sender

    @property
    def sequence_number(self) -> int:
        return self.raw_txn.sequence_number

    @property
    def payload(self) -> TransactionPayload:
        return self.raw_txn.payload

    def check_signature(self) -> None:
        """Verify the signature against the embedded public key.

        The sender address is not compared with the key; a transaction signed
        by someone other than its sender still passes this check.
        """
        if not self.public_key.verify(self.signature, raw_txn_signing_message(self.raw_txn)):
            raise FixtureError(ErrorCode.INVALID_SIGNATURE, "signature does not verify")


def raw_txn_signing_message(raw_txn: RawTransaction) -> bytes:
    return hash_salt("RawTransaction") + encode_raw_transaction(raw_txn)


def _check_u64(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
        raise FixtureError(ErrorCode.INVALID_ARGUMENT, f"{name} must be a u64, got {value!r}")
    return value


def new_raw_transaction(
    sender: bytes,
    sequence_number: int,
    payload: TransactionPayload,
    max_gas_amount: int,
    gas_unit_price: int,
    gas_currency_code: str,
    expiration_time: int = DEFAULT_EXPIRATION_TIME,
) -> RawTransaction:
    return RawTransaction(
        sender=check_address(sender, "sender"),
        sequence_number=_check_u64(sequence_number, "sequence_number"),
        payload=payload,
        max_gas_amount=_check_u64(max_gas_amount, "max_gas_amount"),
        gas_unit_price=_check_u64(gas_unit_price, "gas_unit_price"),
        gas_currency_code=gas_currency_code,
        expiration_time=_check_u64(expiration_time, "expiration_time"),
    )


def new_change_set_transaction(
    sender: bytes, sequence_number: int, payload: WriteSetPayload
) -> RawTransaction:
    # Write-set transactions are not metered and never expire.
    return new_raw_transaction(
        sender,
        sequence_number,
        payload,
        max_gas_amount=0,
        gas_unit_price=0,
        gas_currency_code=LBR_NAME,
        expiration_time=WRITESET_EXPIRATION_TIME,
    )


def create_raw_txn(
    sender: bytes,
    payload: TransactionPayload,
    sequence_number: int,
    max_gas_amount: int,
    gas_unit_price: int,
    gas_currency_code: str,
) -> RawTransaction:
    """Build an unsigned transaction for ``payload``.

    Max gas amount and gas unit price are ignored for write-set payloads.
    """
    if isinstance(payload, WriteSetPayload):
        return new_change_set_transaction(sender, sequence_number, payload)
    if isinstance(payload, (Script, Module)):
        return new_raw_transaction(
            sender,
            sequence_number,
            payload,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
            DEFAULT_EXPIRATION_TIME,
        )
    raise FixtureError(ErrorCode.INVALID_ARGUMENT, f"unknown payload {type(payload).__name__}")


def sign_raw_txn(
    raw_txn: RawTransaction, privkey: Ed25519PrivateKey, pubkey: Ed25519PublicKey
) -> SignedTransaction:
    signature = privkey.sign(raw_txn_signing_message(raw_txn))
    logger.debug(
        "signed txn sender=%s seq=%d", raw_txn.sender.hex(), raw_txn.sequence_number
    )
    return SignedTransaction(raw_txn=raw_txn, public_key=pubkey, signature=signature)


def encode_signed_transaction(txn: SignedTransaction) -> bytes:
    """[raw_txn:var][authenticator variant][public_key:var][signature:var]"""
    w = Writer(bytearray())
    write_raw_transaction(w, txn.raw_txn)
    w.write_uleb128(ED25519_AUTHENTICATOR)
    w.write_var_bytes(txn.public_key.to_bytes())
    w.write_var_bytes(txn.signature)
    return bytes(w.buf)


def decode_signed_transaction(data: bytes) -> SignedTransaction:
    r = Reader(data)
    raw_txn = read_raw_transaction(r)
    variant = r.read_uleb128()
    if variant != ED25519_AUTHENTICATOR:
        raise FixtureError(ErrorCode.NOT_IMPLEMENTED, f"authenticator {variant} not supported")
    public_key = Ed25519PublicKey(r.read_var_bytes())
    signature = r.read_var_bytes()
    if len(signature) != ED25519_SIGNATURE_LENGTH:
        raise FixtureError(ErrorCode.INVALID_ENCODING, "signature must be 64 bytes")
    r.finish()
    return SignedTransaction(raw_txn=raw_txn, public_key=public_key, signature=signature)
