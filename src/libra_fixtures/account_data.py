"""In-memory account snapshot and its write-set."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .account import Account
from .config import (
    DEFAULT_GENESIS_CONFIG,
    INITIAL_EVENT_GENERATOR_COUNTER,
    RECEIVED_EVENTS_SALT,
    SENT_EVENTS_SALT,
    GenesisConfig,
)
from .crypto.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from .errors import ErrorCode, FixtureError
from .resources import (
    ACCOUNT_LAYOUT,
    RECEIVED_PAYMENT_EVENT_LAYOUT,
    SENT_PAYMENT_EVENT_LAYOUT,
    AccountRole,
    Balance,
    EventHandle,
    EventHandleGenerator,
    KeyRotationCapability,
    WithdrawCapability,
    currency_code,
    lbr_currency_code,
)
from .types import AccessPath, AccountRoleSpecifier, WriteOp, WriteSet
from .values import MoveValue, StructLayout, simple_serialize

logger = logging.getLogger(__name__)


class AccountData:
    """An account plus the resources published under it.

    Build one with a constructor, adjust it with the mutators, then call
    ``to_writeset`` to get the storage writes that install it.
    """

    def __init__(
        self,
        account: Account,
        balances: Dict[str, Balance],
        sequence_number: int,
        sent_events: EventHandle,
        received_events: EventHandle,
        account_specifier: AccountRoleSpecifier,
        is_frozen: bool = False,
    ):
        self._account = account
        self._balances = dict(balances)
        self._sequence_number = sequence_number
        self._sent_events = sent_events
        self._received_events = received_events
        self._is_frozen = is_frozen
        self._account_role = AccountRole(account.address, account_specifier)
        self._role_id = account_specifier.id
        self._event_generator = EventHandleGenerator(
            account.address, INITIAL_EVENT_GENERATOR_COUNTER
        )
        self.withdrawal_capability: Optional[WithdrawCapability] = WithdrawCapability(
            account.address
        )
        self.key_rotation_capability: Optional[KeyRotationCapability] = KeyRotationCapability(
            account.address
        )

    # --- Constructors ---

    @classmethod
    def new(cls, balance: int, sequence_number: int) -> "AccountData":
        """Fresh random ParentVASP account holding ``balance`` LBR.

        Most tests want this one.
        """
        return cls.with_account(
            Account.new(),
            balance,
            lbr_currency_code(),
            sequence_number,
            AccountRoleSpecifier.default(),
        )

    @classmethod
    def new_assoc_root(cls, config: GenesisConfig = DEFAULT_GENESIS_CONFIG) -> "AccountData":
        return cls.with_account(
            Account.new_association(config),
            0,
            lbr_currency_code(),
            0,
            AccountRoleSpecifier.ASSOC_ROOT,
        )

    @classmethod
    def new_unhosted(cls) -> "AccountData":
        return cls.with_account(
            Account.new(), 0, lbr_currency_code(), 0, AccountRoleSpecifier.UNHOSTED
        )

    @classmethod
    def with_account(
        cls,
        account: Account,
        balance: int,
        balance_currency_code: str,
        sequence_number: int,
        account_specifier: AccountRoleSpecifier,
    ) -> "AccountData":
        return cls.with_account_and_event_counts(
            account,
            balance,
            balance_currency_code,
            sequence_number,
            0,
            0,
            account_specifier,
            False,
        )

    @classmethod
    def with_keypair(
        cls,
        privkey: Ed25519PrivateKey,
        pubkey: Ed25519PublicKey,
        balance: int,
        balance_currency_code: str,
        sequence_number: int,
        account_specifier: AccountRoleSpecifier,
    ) -> "AccountData":
        return cls.with_account(
            Account.with_keypair(privkey, pubkey),
            balance,
            balance_currency_code,
            sequence_number,
            account_specifier,
        )

    @classmethod
    def with_account_and_event_counts(
        cls,
        account: Account,
        balance: int,
        balance_currency_code: str,
        sequence_number: int,
        sent_events_count: int,
        received_events_count: int,
        account_specifier: AccountRoleSpecifier,
        is_frozen: bool,
    ) -> "AccountData":
        code = currency_code(balance_currency_code)
        address = account.address
        return cls(
            account=account,
            balances={code: Balance(balance)},
            sequence_number=sequence_number,
            sent_events=EventHandle.new_from_address(address, SENT_EVENTS_SALT, sent_events_count),
            received_events=EventHandle.new_from_address(
                address, RECEIVED_EVENTS_SALT, received_events_count
            ),
            account_specifier=account_specifier,
            is_frozen=is_frozen,
        )

    # --- Mutators ---

    def add_balance_currency(self, balance_currency_code: str) -> None:
        """Add a zero balance in another currency."""
        code = currency_code(balance_currency_code)
        if code in self._balances:
            raise FixtureError(
                ErrorCode.DUPLICATE_CURRENCY, f"account already holds a {code} balance"
            )
        self._balances[code] = Balance(0)

    def rotate_key(self, privkey: Ed25519PrivateKey, pubkey: Ed25519PublicKey) -> None:
        self._account.rotate_key(privkey, pubkey)

    # --- Layouts ---

    @staticmethod
    def layout() -> StructLayout:
        return ACCOUNT_LAYOUT

    @staticmethod
    def sent_payment_event_layout() -> StructLayout:
        return SENT_PAYMENT_EVENT_LAYOUT

    @staticmethod
    def received_payment_event_layout() -> StructLayout:
        return RECEIVED_PAYMENT_EVENT_LAYOUT

    # --- Views ---

    def account_role(self) -> AccountRoleSpecifier:
        return self._account_role.account_specifier

    def address(self) -> bytes:
        return self._account.address

    def account(self) -> Account:
        return self._account

    def into_account(self) -> Account:
        return self._account

    def balance(self, code: str) -> int:
        held = self._balances.get(code)
        if held is None:
            raise FixtureError(ErrorCode.CURRENCY_NOT_FOUND, f"no {code} balance")
        return held.coin

    def balances(self) -> Dict[str, int]:
        return {code: b.coin for code, b in sorted(self._balances.items())}

    def sequence_number(self) -> int:
        return self._sequence_number

    def sent_events_key(self) -> bytes:
        return self._sent_events.key

    def sent_events_count(self) -> int:
        return self._sent_events.count

    def received_events_key(self) -> bytes:
        return self._received_events.key

    def received_events_count(self) -> int:
        return self._received_events.count

    def event_generator(self) -> EventHandleGenerator:
        return self._event_generator

    def is_frozen(self) -> bool:
        return self._is_frozen

    def role_id(self) -> int:
        return self._role_id

    # --- Storage ---

    def make_account_access_path(self) -> AccessPath:
        return self._account.make_account_access_path()

    def make_balance_access_path(self, code: str) -> AccessPath:
        return self._account.make_balance_access_path(code)

    def make_event_generator_access_path(self) -> AccessPath:
        return self._account.make_event_generator_access_path()

    def to_value(self) -> Tuple[MoveValue, List[Tuple[str, MoveValue]], MoveValue]:
        """Top-level resources published under the account.

        Returns (account struct, [(currency code, balance)], event generator);
        balances are sorted by currency code.
        """
        account = MoveValue.struct_(
            [
                MoveValue.vector_u8(self._account.auth_key()),
                WithdrawCapability.optional_value(self.withdrawal_capability),
                KeyRotationCapability.optional_value(self.key_rotation_capability),
                self._received_events.to_value(),
                self._sent_events.to_value(),
                MoveValue.u64(self._sequence_number),
                MoveValue.bool_(self._is_frozen),
                MoveValue.u64(self._role_id),
            ],
            True,
        )
        balances = [(code, b.to_value()) for code, b in sorted(self._balances.items())]
        return account, balances, self._event_generator.to_value()

    def to_writeset(self) -> WriteSet:
        """Writes that install this account into storage.

        Order is fixed: account struct, balances by currency code, event
        generator. Nothing is returned if any resource fails to serialize.
        """
        account_value, balance_values, generator_value = self.to_value()
        ops = [
            (
                self.make_account_access_path(),
                WriteOp.of_value(simple_serialize(account_value, ACCOUNT_LAYOUT)),
            )
        ]
        for code, value in balance_values:
            ops.append(
                (
                    self.make_balance_access_path(code),
                    WriteOp.of_value(simple_serialize(value, Balance.layout())),
                )
            )
        ops.append(
            (
                self.make_event_generator_access_path(),
                WriteOp.of_value(simple_serialize(generator_value, EventHandleGenerator.layout())),
            )
        )
        write_set = WriteSet.new(ops)
        logger.debug(
            "account %s write-set: %d entries (%s)",
            self.address().hex(),
            len(write_set),
            ",".join(code for code, _ in balance_values),
        )
        return write_set

    def __repr__(self) -> str:
        return (
            f"AccountData(address={self.address().hex()}, role={self.account_role().name}, "
            f"seq={self._sequence_number}, balances={self.balances()})"
        )
