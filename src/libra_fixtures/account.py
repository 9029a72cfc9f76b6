"""Logical accounts (identity + keys) for fixture construction.

An ``Account`` is a purely in-memory entity: it is not added to any store.
Use ``AccountData`` and its write-set to publish it.
"""

from __future__ import annotations

from typing import Sequence

from .access_path import resource_access_path
from .config import DEFAULT_GENESIS_CONFIG, LBR_NAME, TXN_RESERVED, GenesisConfig
from .crypto.ed25519 import Ed25519PrivateKey, Ed25519PublicKey, KeyGen, keypair_from_seed
from .crypto.hashing import authentication_key, authentication_key_prefix, derive_address
from .resources import account_struct_tag, balance_struct_tag, event_handle_generator_struct_tag
from .transaction import (
    SignedTransaction,
    create_raw_txn,
    new_raw_transaction,
    sign_raw_txn,
)
from .types import (
    AccessPath,
    RawTransaction,
    Script,
    StructTag,
    TransactionArgument,
    TransactionPayload,
    TypeTag,
    check_address,
)


class Account:
    """Address plus the current key pair.

    The address is derived from the public key the account was created with
    and never changes, including after ``rotate_key``.
    """

    __slots__ = ("_addr", "privkey", "pubkey")

    def __init__(self, addr: bytes, privkey: Ed25519PrivateKey, pubkey: Ed25519PublicKey):
        self._addr = check_address(addr)
        self.privkey = privkey
        self.pubkey = pubkey

    @classmethod
    def new(cls) -> "Account":
        """Fresh random account; returns a distinct value on every call."""
        privkey, pubkey = KeyGen.from_os_rng().generate_keypair()
        return cls.with_keypair(privkey, pubkey)

    @classmethod
    def with_keypair(cls, privkey: Ed25519PrivateKey, pubkey: Ed25519PublicKey) -> "Account":
        return cls(derive_address(pubkey.to_bytes()), privkey, pubkey)

    @classmethod
    def new_genesis_account(
        cls, address: bytes, config: GenesisConfig = DEFAULT_GENESIS_CONFIG
    ) -> "Account":
        privkey, pubkey = keypair_from_seed(config.genesis_seed)
        return cls(address, privkey, pubkey)

    @classmethod
    def new_association(cls, config: GenesisConfig = DEFAULT_GENESIS_CONFIG) -> "Account":
        return cls.new_genesis_account(config.association_address, config)

    @classmethod
    def new_blessed_tc(cls, config: GenesisConfig = DEFAULT_GENESIS_CONFIG) -> "Account":
        return cls.new_genesis_account(config.treasury_compliance_address, config)

    @property
    def address(self) -> bytes:
        return self._addr

    def rotate_key(self, privkey: Ed25519PrivateKey, pubkey: Ed25519PublicKey) -> None:
        self.privkey = privkey
        self.pubkey = pubkey

    def auth_key(self) -> bytes:
        """Authentication key as stored on chain.

        Equal to sha3(pubkey || scheme); its last 16 bytes match the address
        only while the keys have never been rotated.
        """
        return authentication_key(self.pubkey.to_bytes())

    def auth_key_prefix(self) -> bytes:
        return authentication_key_prefix(self.pubkey.to_bytes())

    # Storage paths

    def make_access_path(self, tag: StructTag) -> AccessPath:
        return resource_access_path(self._addr, tag)

    def make_account_access_path(self) -> AccessPath:
        return self.make_access_path(account_struct_tag())

    def make_event_generator_access_path(self) -> AccessPath:
        return self.make_access_path(event_handle_generator_struct_tag())

    def make_balance_access_path(self, balance_currency_code: str) -> AccessPath:
        return self.make_access_path(balance_struct_tag(balance_currency_code))

    # Transactions with this account as the sender

    def create_user_txn(
        self,
        payload: TransactionPayload,
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> SignedTransaction:
        """Most generic way to build a test transaction.

        Max gas amount and gas unit price are ignored for write-set payloads.
        """
        raw = self.create_raw_user_txn(
            self._addr,
            payload,
            sequence_number,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
        )
        return sign_raw_txn(raw, self.privkey, self.pubkey)

    @staticmethod
    def create_raw_user_txn(
        address: bytes,
        payload: TransactionPayload,
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> RawTransaction:
        return create_raw_txn(
            address, payload, sequence_number, max_gas_amount, gas_unit_price, gas_currency_code
        )

    def create_signed_txn_with_args(
        self,
        program: bytes,
        ty_args: Sequence[TypeTag],
        args: Sequence[TransactionArgument],
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> SignedTransaction:
        return self.create_signed_txn_impl(
            self._addr,
            Script(program, tuple(ty_args), tuple(args)),
            sequence_number,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
        )

    @classmethod
    def create_raw_txn_with_args(
        cls,
        address: bytes,
        program: bytes,
        ty_args: Sequence[TypeTag],
        args: Sequence[TransactionArgument],
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> RawTransaction:
        return cls.create_raw_txn_impl(
            address,
            Script(program, tuple(ty_args), tuple(args)),
            sequence_number,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
        )

    def create_signed_txn_with_args_and_sender(
        self,
        sender: bytes,
        program: bytes,
        ty_args: Sequence[TypeTag],
        args: Sequence[TransactionArgument],
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> SignedTransaction:
        """Script transaction with a custom sender.

        Signed with this account's key, not the sender's.
        """
        return self.create_signed_txn_impl(
            sender,
            Script(program, tuple(ty_args), tuple(args)),
            sequence_number,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
        )

    @classmethod
    def create_raw_txn_with_args_and_sender(
        cls,
        sender: bytes,
        program: bytes,
        ty_args: Sequence[TypeTag],
        args: Sequence[TransactionArgument],
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> RawTransaction:
        return cls.create_raw_txn_impl(
            sender,
            Script(program, tuple(ty_args), tuple(args)),
            sequence_number,
            max_gas_amount,
            gas_unit_price,
            gas_currency_code,
        )

    def create_signed_txn_impl(
        self,
        sender: bytes,
        program: TransactionPayload,
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> SignedTransaction:
        raw = self.create_raw_txn_impl(
            sender, program, sequence_number, max_gas_amount, gas_unit_price, gas_currency_code
        )
        return sign_raw_txn(raw, self.privkey, self.pubkey)

    def signed_script_txn(self, script: Script, sequence_number: int) -> SignedTransaction:
        """``script`` with default gas (2 * TXN_RESERVED), zero price and LBR."""
        return self.create_signed_txn_impl(
            self._addr,
            script,
            sequence_number,
            TXN_RESERVED * 2,
            0,
            LBR_NAME,
        )

    @staticmethod
    def create_raw_txn_impl(
        sender: bytes,
        program: TransactionPayload,
        sequence_number: int,
        max_gas_amount: int,
        gas_unit_price: int,
        gas_currency_code: str,
    ) -> RawTransaction:
        return new_raw_transaction(
            sender, sequence_number, program, max_gas_amount, gas_unit_price, gas_currency_code
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return (self._addr, self.privkey, self.pubkey) == (other._addr, other.privkey, other.pubkey)

    def __hash__(self) -> int:
        return hash(self._addr)

    def __repr__(self) -> str:
        return f"Account(address={self._addr.hex()}, pubkey={self.pubkey.to_bytes().hex()})"
