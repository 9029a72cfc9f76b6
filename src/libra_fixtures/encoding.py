"""LCS (Libra Canonical Serialization) wire encoding.

Integers are little-endian, sequence lengths and enum variant indices are
ULEB128, byte strings and UTF-8 strings are length-prefixed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, TypeVar

from .config import ADDRESS_LENGTH, U64_MAX, U128_MAX
from .errors import ErrorCode, FixtureError
from .types import (
    AccessPath,
    Module,
    RawTransaction,
    Script,
    StructTag,
    TransactionArgument,
    TransactionArgumentKind,
    TransactionPayload,
    TransactionPayloadKind,
    TypeTag,
    TypeTagKind,
    WriteOp,
    WriteOpKind,
    WriteSet,
    WriteSetPayload,
)

T = TypeVar("T")

MAX_ULEB128 = (1 << 32) - 1


@dataclass
class Writer:
    buf: bytearray

    def write_u8(self, v: int) -> None:
        self.buf.extend(int(v).to_bytes(1, "little", signed=False))

    def write_u64(self, v: int) -> None:
        self.buf.extend(int(v).to_bytes(8, "little", signed=False))

    def write_u128(self, v: int) -> None:
        self.buf.extend(int(v).to_bytes(16, "little", signed=False))

    def write_bool(self, v: bool) -> None:
        self.write_u8(1 if v else 0)

    def write_uleb128(self, v: int) -> None:
        if v < 0 or v > MAX_ULEB128:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "uleb128 value out of range")
        while True:
            byte = v & 0x7F
            v >>= 7
            if v:
                self.buf.append(byte | 0x80)
            else:
                self.buf.append(byte)
                return

    def write_bytes(self, b: bytes) -> None:
        self.buf.extend(b)

    def write_var_bytes(self, b: bytes) -> None:
        self.write_uleb128(len(b))
        self.buf.extend(b)

    def write_str(self, s: str) -> None:
        self.write_var_bytes(s.encode("utf-8"))

    def write_address(self, address: bytes) -> None:
        _expect_len("address", address, ADDRESS_LENGTH)
        self.buf.extend(address)


@dataclass
class Reader:
    data: bytes
    pos: int = 0

    def _take(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise FixtureError(
                ErrorCode.UNEXPECTED_EOF,
                f"need {n} bytes at offset {self.pos}, have {len(self.data) - self.pos}",
            )
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u64(self) -> int:
        return int.from_bytes(self._take(8), "little")

    def read_u128(self) -> int:
        return int.from_bytes(self._take(16), "little")

    def read_bool(self) -> bool:
        value = self.read_u8()
        if value not in (0, 1):
            raise FixtureError(ErrorCode.INVALID_ENCODING, f"invalid bool byte {value}")
        return value == 1

    def read_uleb128(self) -> int:
        value = 0
        shift = 0
        while True:
            byte = self.read_u8()
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
            if shift > 28:
                raise FixtureError(ErrorCode.INVALID_ENCODING, "uleb128 overflow")
        if value > MAX_ULEB128:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "uleb128 value out of range")
        return value

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_var_bytes(self) -> bytes:
        return self._take(self.read_uleb128())

    def read_str(self) -> str:
        raw = self.read_var_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "string is not utf-8") from exc

    def read_address(self) -> bytes:
        return self._take(ADDRESS_LENGTH)

    def finish(self) -> None:
        if self.pos != len(self.data):
            raise FixtureError(
                ErrorCode.TRAILING_BYTES, f"{len(self.data) - self.pos} trailing bytes"
            )


def _expect_len(name: str, value: bytes, size: int) -> None:
    if len(value) != size:
        raise FixtureError(ErrorCode.INVALID_ENCODING, f"{name} must be {size} bytes")


def write_vec(w: Writer, items, write_item: Callable[[Writer, T], None]) -> None:
    w.write_uleb128(len(items))
    for item in items:
        write_item(w, item)


def read_vec(r: Reader, read_item: Callable[[Reader], T]) -> List[T]:
    return [read_item(r) for _ in range(r.read_uleb128())]


# --- Type tags ---


def write_struct_tag(w: Writer, tag: StructTag) -> None:
    w.write_address(tag.address)
    w.write_str(tag.module)
    w.write_str(tag.name)
    write_vec(w, tag.type_params, write_type_tag)


def write_type_tag(w: Writer, tag: TypeTag) -> None:
    w.write_uleb128(tag.kind)
    if tag.kind == TypeTagKind.VECTOR:
        if tag.element is None:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "vector type tag without element")
        write_type_tag(w, tag.element)
    elif tag.kind == TypeTagKind.STRUCT:
        if tag.struct is None:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "struct type tag without struct")
        write_struct_tag(w, tag.struct)


def read_struct_tag(r: Reader) -> StructTag:
    address = r.read_address()
    module = r.read_str()
    name = r.read_str()
    type_params = tuple(read_vec(r, read_type_tag))
    return StructTag(address=address, module=module, name=name, type_params=type_params)


def read_type_tag(r: Reader) -> TypeTag:
    variant = r.read_uleb128()
    try:
        kind = TypeTagKind(variant)
    except ValueError as exc:
        raise FixtureError(ErrorCode.INVALID_ENCODING, f"unknown type tag {variant}") from exc
    if kind == TypeTagKind.VECTOR:
        return TypeTag.vector(read_type_tag(r))
    if kind == TypeTagKind.STRUCT:
        return TypeTag.struct_(read_struct_tag(r))
    return TypeTag(kind)


def encode_struct_tag(tag: StructTag) -> bytes:
    w = Writer(bytearray())
    write_struct_tag(w, tag)
    return bytes(w.buf)


# --- Transaction arguments ---


def write_transaction_argument(w: Writer, arg: TransactionArgument) -> None:
    w.write_uleb128(arg.kind)
    value = arg.value
    if arg.kind == TransactionArgumentKind.U8:
        if not 0 <= int(value) <= 0xFF:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "u8 argument out of range")
        w.write_u8(value)
    elif arg.kind == TransactionArgumentKind.U64:
        if not 0 <= int(value) <= U64_MAX:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "u64 argument out of range")
        w.write_u64(value)
    elif arg.kind == TransactionArgumentKind.U128:
        if not 0 <= int(value) <= U128_MAX:
            raise FixtureError(ErrorCode.INVALID_ENCODING, "u128 argument out of range")
        w.write_u128(value)
    elif arg.kind == TransactionArgumentKind.ADDRESS:
        w.write_address(value)
    elif arg.kind == TransactionArgumentKind.U8_VECTOR:
        w.write_var_bytes(value)
    elif arg.kind == TransactionArgumentKind.BOOL:
        w.write_bool(bool(value))
    else:
        raise FixtureError(ErrorCode.INVALID_ENCODING, "unknown transaction argument")


def read_transaction_argument(r: Reader) -> TransactionArgument:
    variant = r.read_uleb128()
    if variant == TransactionArgumentKind.U8:
        return TransactionArgument.u8(r.read_u8())
    if variant == TransactionArgumentKind.U64:
        return TransactionArgument.u64(r.read_u64())
    if variant == TransactionArgumentKind.U128:
        return TransactionArgument.u128(r.read_u128())
    if variant == TransactionArgumentKind.ADDRESS:
        return TransactionArgument.address(r.read_address())
    if variant == TransactionArgumentKind.U8_VECTOR:
        return TransactionArgument.u8_vector(r.read_var_bytes())
    if variant == TransactionArgumentKind.BOOL:
        return TransactionArgument.bool_(r.read_bool())
    raise FixtureError(ErrorCode.INVALID_ENCODING, f"unknown transaction argument {variant}")


# --- Write sets ---


def write_access_path(w: Writer, path: AccessPath) -> None:
    w.write_address(path.address)
    w.write_var_bytes(path.path)


def write_write_op(w: Writer, op: WriteOp) -> None:
    w.write_uleb128(op.kind)
    if op.kind == WriteOpKind.VALUE:
        w.write_var_bytes(op.value or b"")


def write_write_set(w: Writer, write_set: WriteSet) -> None:
    w.write_uleb128(len(write_set))
    for path, op in write_set:
        write_access_path(w, path)
        write_write_op(w, op)


def read_write_set(r: Reader) -> WriteSet:
    ops = []
    for _ in range(r.read_uleb128()):
        path = AccessPath(address=r.read_address(), path=r.read_var_bytes())
        variant = r.read_uleb128()
        if variant == WriteOpKind.DELETION:
            op = WriteOp.deletion()
        elif variant == WriteOpKind.VALUE:
            op = WriteOp.of_value(r.read_var_bytes())
        else:
            raise FixtureError(ErrorCode.INVALID_ENCODING, f"unknown write op {variant}")
        ops.append((path, op))
    return WriteSet.new(ops)


def encode_write_set(write_set: WriteSet) -> bytes:
    w = Writer(bytearray())
    write_write_set(w, write_set)
    return bytes(w.buf)


def decode_write_set(data: bytes) -> WriteSet:
    r = Reader(data)
    write_set = read_write_set(r)
    r.finish()
    return write_set


# --- Payloads / raw transactions ---


def write_payload(w: Writer, payload: TransactionPayload) -> None:
    if isinstance(payload, WriteSetPayload):
        w.write_uleb128(TransactionPayloadKind.WRITE_SET)
        write_write_set(w, payload.write_set)
        # ChangeSet events: fixtures never carry any.
        w.write_uleb128(0)
    elif isinstance(payload, Script):
        w.write_uleb128(TransactionPayloadKind.SCRIPT)
        w.write_var_bytes(payload.code)
        write_vec(w, payload.ty_args, write_type_tag)
        write_vec(w, payload.args, write_transaction_argument)
    elif isinstance(payload, Module):
        w.write_uleb128(TransactionPayloadKind.MODULE)
        w.write_var_bytes(payload.code)
    else:
        raise FixtureError(ErrorCode.INVALID_ENCODING, f"unknown payload {type(payload).__name__}")


def read_payload(r: Reader) -> TransactionPayload:
    variant = r.read_uleb128()
    if variant == TransactionPayloadKind.WRITE_SET:
        write_set = read_write_set(r)
        if r.read_uleb128() != 0:
            raise FixtureError(ErrorCode.NOT_IMPLEMENTED, "change set events are not supported")
        return WriteSetPayload(write_set)
    if variant == TransactionPayloadKind.SCRIPT:
        code = r.read_var_bytes()
        ty_args = tuple(read_vec(r, read_type_tag))
        args = tuple(read_vec(r, read_transaction_argument))
        return Script(code=code, ty_args=ty_args, args=args)
    if variant == TransactionPayloadKind.MODULE:
        return Module(code=r.read_var_bytes())
    raise FixtureError(ErrorCode.INVALID_ENCODING, f"unknown payload variant {variant}")


def write_raw_transaction(w: Writer, txn: RawTransaction) -> None:
    w.write_address(txn.sender)
    w.write_u64(txn.sequence_number)
    write_payload(w, txn.payload)
    w.write_u64(txn.max_gas_amount)
    w.write_u64(txn.gas_unit_price)
    w.write_str(txn.gas_currency_code)
    w.write_u64(txn.expiration_time)


def read_raw_transaction(r: Reader) -> RawTransaction:
    return RawTransaction(
        sender=r.read_address(),
        sequence_number=r.read_u64(),
        payload=read_payload(r),
        max_gas_amount=r.read_u64(),
        gas_unit_price=r.read_u64(),
        gas_currency_code=r.read_str(),
        expiration_time=r.read_u64(),
    )


def encode_raw_transaction(txn: RawTransaction) -> bytes:
    """Encode a raw transaction.

    Field order: [sender:16][sequence_number:8][payload:var][max_gas_amount:8]
    [gas_unit_price:8][gas_currency_code:var][expiration_time:8]
    """
    w = Writer(bytearray())
    write_raw_transaction(w, txn)
    return bytes(w.buf)


def decode_raw_transaction(data: bytes) -> RawTransaction:
    r = Reader(data)
    txn = read_raw_transaction(r)
    r.finish()
    return txn
