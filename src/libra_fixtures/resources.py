"""Move resources published under a fixture account.

Each resource pairs ``to_value()`` with a ``layout()`` schema constant that
mirrors the on-chain struct field-for-field. Layouts are module-level
constants so they can be compared against golden descriptors without
building an instance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .config import (
    ACCOUNT_MODULE_NAME,
    ACCOUNT_STRUCT_NAME,
    BALANCE_STRUCT_NAME,
    COIN1_NAME,
    COIN2_NAME,
    CORE_CODE_ADDRESS,
    EVENT_HANDLE_GENERATOR_STRUCT_NAME,
    EVENT_HANDLE_STRUCT_NAME,
    EVENT_KEY_SALT_LENGTH,
    EVENT_MODULE_NAME,
    KEY_ROTATION_CAPABILITY_STRUCT_NAME,
    LBR_NAME,
    RECEIVED_PAYMENT_EVENT_STRUCT_NAME,
    SENT_PAYMENT_EVENT_STRUCT_NAME,
    WITHDRAW_CAPABILITY_STRUCT_NAME,
)
from .errors import ErrorCode, FixtureError
from .types import AccountRoleSpecifier, StructTag, TypeTag, check_address
from .values import MoveTypeLayout, MoveValue, StructLayout

_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


# --- Currency codes ---


def currency_code(name: str) -> str:
    """Validate a currency code string (a Move identifier)."""
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise FixtureError(ErrorCode.INVALID_CURRENCY_CODE, f"invalid currency code {name!r}")
    return name


def lbr_currency_code() -> str:
    return currency_code(LBR_NAME)


def coin1_currency_code() -> str:
    return currency_code(COIN1_NAME)


def coin2_currency_code() -> str:
    return currency_code(COIN2_NAME)


def type_tag_for_currency_code(code: str) -> TypeTag:
    code = currency_code(code)
    return TypeTag.struct_(
        StructTag(address=CORE_CODE_ADDRESS, module=code, name=code, type_params=())
    )


# --- Layout constants ---

_U64 = MoveTypeLayout.u64()
_BOOL = MoveTypeLayout.bool_()
_ADDRESS = MoveTypeLayout.address()
_BYTES = MoveTypeLayout.vector(MoveTypeLayout.u8())

BALANCE_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=BALANCE_STRUCT_NAME,
    is_resource=True,
    ty_args=(),
    fields=(_U64,),
)

EVENT_HANDLE_GENERATOR_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=EVENT_MODULE_NAME,
    name=EVENT_HANDLE_GENERATOR_STRUCT_NAME,
    is_resource=True,
    ty_args=(),
    fields=(_U64, _ADDRESS),
)

WITHDRAW_CAPABILITY_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=WITHDRAW_CAPABILITY_STRUCT_NAME,
    is_resource=True,
    ty_args=(),
    fields=(_ADDRESS,),
)

KEY_ROTATION_CAPABILITY_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=KEY_ROTATION_CAPABILITY_STRUCT_NAME,
    is_resource=True,
    ty_args=(),
    fields=(_ADDRESS,),
)

# amount, payee/payer, metadata
SENT_PAYMENT_EVENT_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=SENT_PAYMENT_EVENT_STRUCT_NAME,
    is_resource=False,
    ty_args=(),
    fields=(_U64, _ADDRESS, _BYTES),
)

RECEIVED_PAYMENT_EVENT_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=RECEIVED_PAYMENT_EVENT_STRUCT_NAME,
    is_resource=False,
    ty_args=(),
    fields=(_U64, _ADDRESS, _BYTES),
)


def event_handle_layout(event_type: MoveTypeLayout) -> StructLayout:
    return StructLayout(
        address=CORE_CODE_ADDRESS,
        module=EVENT_MODULE_NAME,
        name=EVENT_HANDLE_STRUCT_NAME,
        is_resource=True,
        ty_args=(event_type,),
        fields=(_U64, _BYTES),
    )


RECEIVED_EVENTS_HANDLE_LAYOUT = event_handle_layout(
    MoveTypeLayout.struct_(RECEIVED_PAYMENT_EVENT_LAYOUT)
)
SENT_EVENTS_HANDLE_LAYOUT = event_handle_layout(MoveTypeLayout.struct_(SENT_PAYMENT_EVENT_LAYOUT))

ACCOUNT_LAYOUT = StructLayout(
    address=CORE_CODE_ADDRESS,
    module=ACCOUNT_MODULE_NAME,
    name=ACCOUNT_STRUCT_NAME,
    is_resource=True,
    ty_args=(),
    fields=(
        # authentication_key
        _BYTES,
        # withdrawal_capability: Option<WithdrawCapability>
        MoveTypeLayout.vector(MoveTypeLayout.struct_(WITHDRAW_CAPABILITY_LAYOUT)),
        # key_rotation_capability: Option<KeyRotationCapability>
        MoveTypeLayout.vector(MoveTypeLayout.struct_(KEY_ROTATION_CAPABILITY_LAYOUT)),
        MoveTypeLayout.struct_(RECEIVED_EVENTS_HANDLE_LAYOUT),
        MoveTypeLayout.struct_(SENT_EVENTS_HANDLE_LAYOUT),
        # sequence_number, is_frozen, role_id
        _U64,
        _BOOL,
        _U64,
    ),
)


def account_struct_tag() -> StructTag:
    return ACCOUNT_LAYOUT.struct_tag()


def event_handle_generator_struct_tag() -> StructTag:
    return EVENT_HANDLE_GENERATOR_LAYOUT.struct_tag()


def balance_struct_tag(code: str) -> StructTag:
    """Struct tag of ``Balance<code>``; the currency is a type parameter."""
    return StructTag(
        address=CORE_CODE_ADDRESS,
        module=ACCOUNT_MODULE_NAME,
        name=BALANCE_STRUCT_NAME,
        type_params=(type_tag_for_currency_code(code),),
    )


# --- Resources ---


@dataclass
class Balance:
    """Account balance in one currency."""

    coin: int

    def to_value(self) -> MoveValue:
        return MoveValue.struct_([MoveValue.u64(self.coin)], True)

    @staticmethod
    def layout() -> StructLayout:
        return BALANCE_LAYOUT


@dataclass
class EventHandleGenerator:
    addr: bytes
    counter: int = 0

    def to_value(self) -> MoveValue:
        return MoveValue.struct_([MoveValue.u64(self.counter), MoveValue.address(self.addr)], True)

    @staticmethod
    def layout() -> StructLayout:
        return EVENT_HANDLE_GENERATOR_LAYOUT


def event_key(address: bytes, salt: int) -> bytes:
    """[salt:8 LE][address:16]"""
    return salt.to_bytes(EVENT_KEY_SALT_LENGTH, "little") + check_address(address)


@dataclass
class EventHandle:
    count: int
    key: bytes

    @classmethod
    def new_from_address(cls, address: bytes, salt: int, count: int = 0) -> "EventHandle":
        return cls(count=count, key=event_key(address, salt))

    def to_value(self) -> MoveValue:
        return MoveValue.struct_([MoveValue.u64(self.count), MoveValue.vector_u8(self.key)], True)

    @staticmethod
    def layout(event_layout: StructLayout) -> StructLayout:
        return event_handle_layout(MoveTypeLayout.struct_(event_layout))


def _optional_resource(value: Optional[MoveValue]) -> MoveValue:
    # Move's Option<R> is a vector holding zero or one element.
    return MoveValue.vector([] if value is None else [value])


@dataclass
class WithdrawCapability:
    account_address: bytes

    def to_value(self) -> MoveValue:
        return MoveValue.struct_([MoveValue.address(self.account_address)], True)

    @staticmethod
    def layout() -> StructLayout:
        return WITHDRAW_CAPABILITY_LAYOUT

    @staticmethod
    def optional_value(cap: Optional["WithdrawCapability"]) -> MoveValue:
        return _optional_resource(cap.to_value() if cap is not None else None)


@dataclass
class KeyRotationCapability:
    account_address: bytes

    def to_value(self) -> MoveValue:
        return MoveValue.struct_([MoveValue.address(self.account_address)], True)

    @staticmethod
    def layout() -> StructLayout:
        return KEY_ROTATION_CAPABILITY_LAYOUT

    @staticmethod
    def optional_value(cap: Optional["KeyRotationCapability"]) -> MoveValue:
        return _optional_resource(cap.to_value() if cap is not None else None)


@dataclass
class AccountRole:
    self_address: bytes
    account_specifier: AccountRoleSpecifier
