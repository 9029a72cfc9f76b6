"""Core types for the account fixture builders.

Addresses are plain ``bytes`` (16 bytes). Everything here is data only; the
LCS codec lives in ``encoding`` and the value/layout engine in ``values``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional, Tuple, Union

from .config import ADDRESS_LENGTH
from .errors import ErrorCode, FixtureError


class AccountRoleSpecifier(IntEnum):
    ASSOC_ROOT = 0
    TREASURY_COMPLIANCE = 1
    DESIGNATED_DEALER = 2
    VALIDATOR = 3
    VALIDATOR_OPERATOR = 4
    PARENT_VASP = 5
    CHILD_VASP = 6
    UNHOSTED = 7

    @property
    def id(self) -> int:
        return int(self)

    @classmethod
    def default(cls) -> "AccountRoleSpecifier":
        return cls.PARENT_VASP

    @classmethod
    def from_str(cls, value: str) -> "AccountRoleSpecifier":
        specifier = _ROLE_ALIASES.get(value)
        if specifier is None:
            specifier = _ROLE_NAMES.get(value)
        if specifier is None:
            raise FixtureError(
                ErrorCode.UNKNOWN_ROLE_SPECIFIER,
                f"Unrecognized account type specifier {value} found.",
            )
        return specifier


# Legacy names used by existing test suites.
_ROLE_ALIASES = {
    "empty": AccountRoleSpecifier.ASSOC_ROOT,
    "unhosted": AccountRoleSpecifier.UNHOSTED,
    "vasp": AccountRoleSpecifier.PARENT_VASP,
}
_ROLE_NAMES = {spec.name.lower(): spec for spec in AccountRoleSpecifier}


def check_address(value: bytes, name: str = "address") -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise FixtureError(ErrorCode.INVALID_ADDRESS, f"{name} must be bytes")
    if len(value) != ADDRESS_LENGTH:
        raise FixtureError(
            ErrorCode.INVALID_ADDRESS, f"{name} must be {ADDRESS_LENGTH} bytes, got {len(value)}"
        )
    return bytes(value)


# --- Type tags ---


class TypeTagKind(IntEnum):
    BOOL = 0
    U8 = 1
    U64 = 2
    U128 = 3
    ADDRESS = 4
    SIGNER = 5
    VECTOR = 6
    STRUCT = 7


@dataclass(frozen=True)
class StructTag:
    address: bytes
    module: str
    name: str
    type_params: Tuple["TypeTag", ...] = ()


@dataclass(frozen=True)
class TypeTag:
    kind: TypeTagKind
    element: Optional["TypeTag"] = None
    struct: Optional[StructTag] = None

    @classmethod
    def bool_(cls) -> "TypeTag":
        return cls(TypeTagKind.BOOL)

    @classmethod
    def u8(cls) -> "TypeTag":
        return cls(TypeTagKind.U8)

    @classmethod
    def u64(cls) -> "TypeTag":
        return cls(TypeTagKind.U64)

    @classmethod
    def u128(cls) -> "TypeTag":
        return cls(TypeTagKind.U128)

    @classmethod
    def address(cls) -> "TypeTag":
        return cls(TypeTagKind.ADDRESS)

    @classmethod
    def signer(cls) -> "TypeTag":
        return cls(TypeTagKind.SIGNER)

    @classmethod
    def vector(cls, element: "TypeTag") -> "TypeTag":
        return cls(TypeTagKind.VECTOR, element=element)

    @classmethod
    def struct_(cls, tag: StructTag) -> "TypeTag":
        return cls(TypeTagKind.STRUCT, struct=tag)


# --- Transaction arguments / payloads ---


class TransactionArgumentKind(IntEnum):
    U8 = 0
    U64 = 1
    U128 = 2
    ADDRESS = 3
    U8_VECTOR = 4
    BOOL = 5


@dataclass(frozen=True)
class TransactionArgument:
    kind: TransactionArgumentKind
    value: Union[int, bool, bytes]

    @classmethod
    def u8(cls, value: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U8, value)

    @classmethod
    def u64(cls, value: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U64, value)

    @classmethod
    def u128(cls, value: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U128, value)

    @classmethod
    def address(cls, value: bytes) -> "TransactionArgument":
        return cls(TransactionArgumentKind.ADDRESS, check_address(value))

    @classmethod
    def u8_vector(cls, value: bytes) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U8_VECTOR, bytes(value))

    @classmethod
    def bool_(cls, value: bool) -> "TransactionArgument":
        return cls(TransactionArgumentKind.BOOL, bool(value))


@dataclass(frozen=True)
class Script:
    code: bytes
    ty_args: Tuple[TypeTag, ...] = ()
    args: Tuple[TransactionArgument, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers; keep the stored form hashable.
        object.__setattr__(self, "code", bytes(self.code))
        object.__setattr__(self, "ty_args", tuple(self.ty_args))
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class Module:
    code: bytes


# --- Write sets ---


@dataclass(frozen=True)
class AccessPath:
    address: bytes
    path: bytes


class WriteOpKind(IntEnum):
    DELETION = 0
    VALUE = 1


@dataclass(frozen=True)
class WriteOp:
    kind: WriteOpKind
    value: Optional[bytes] = None

    @classmethod
    def deletion(cls) -> "WriteOp":
        return cls(WriteOpKind.DELETION)

    @classmethod
    def of_value(cls, value: bytes) -> "WriteOp":
        return cls(WriteOpKind.VALUE, bytes(value))


@dataclass(frozen=True)
class WriteSet:
    """Ordered, immutable list of full-value overwrites."""

    ops: Tuple[Tuple[AccessPath, WriteOp], ...] = field(default_factory=tuple)

    @classmethod
    def new(cls, ops) -> "WriteSet":
        seen: set[AccessPath] = set()
        frozen = []
        for path, op in ops:
            if path in seen:
                raise FixtureError(
                    ErrorCode.DUPLICATE_ACCESS_PATH,
                    f"duplicate access path {path.address.hex()}/{path.path.hex()}",
                )
            seen.add(path)
            frozen.append((path, op))
        return cls(tuple(frozen))

    def __iter__(self) -> Iterator[Tuple[AccessPath, WriteOp]]:
        return iter(self.ops)

    def __len__(self) -> int:
        return len(self.ops)

    def get(self, path: AccessPath) -> Optional[WriteOp]:
        for p, op in self.ops:
            if p == path:
                return op
        return None


@dataclass(frozen=True)
class WriteSetPayload:
    write_set: WriteSet


TransactionPayload = Union[Script, Module, WriteSetPayload]


class TransactionPayloadKind(IntEnum):
    WRITE_SET = 0
    SCRIPT = 1
    MODULE = 2


@dataclass(frozen=True)
class RawTransaction:
    sender: bytes
    sequence_number: int
    payload: TransactionPayload
    max_gas_amount: int
    gas_unit_price: int
    gas_currency_code: str
    expiration_time: int
