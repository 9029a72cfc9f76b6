"""Typed Move values and their layout descriptors.

A layout (``MoveTypeLayout`` / ``StructLayout``) is a schema constant that
describes how a value is laid out in storage. ``simple_serialize`` checks the
value against the layout while encoding it with LCS, so a fixture whose value
drifts from its schema fails instead of producing corrupt bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .config import ADDRESS_LENGTH, U64_MAX, U128_MAX
from .encoding import Reader, Writer
from .errors import ErrorCode, FixtureError
from .types import StructTag, TypeTag, TypeTagKind


class LayoutKind(Enum):
    BOOL = "bool"
    U8 = "u8"
    U64 = "u64"
    U128 = "u128"
    ADDRESS = "address"
    VECTOR = "vector"
    STRUCT = "struct"


@dataclass(frozen=True)
class MoveTypeLayout:
    kind: LayoutKind
    element: Optional["MoveTypeLayout"] = None
    struct: Optional["StructLayout"] = None

    @classmethod
    def bool_(cls) -> "MoveTypeLayout":
        return cls(LayoutKind.BOOL)

    @classmethod
    def u8(cls) -> "MoveTypeLayout":
        return cls(LayoutKind.U8)

    @classmethod
    def u64(cls) -> "MoveTypeLayout":
        return cls(LayoutKind.U64)

    @classmethod
    def u128(cls) -> "MoveTypeLayout":
        return cls(LayoutKind.U128)

    @classmethod
    def address(cls) -> "MoveTypeLayout":
        return cls(LayoutKind.ADDRESS)

    @classmethod
    def vector(cls, element: "MoveTypeLayout") -> "MoveTypeLayout":
        return cls(LayoutKind.VECTOR, element=element)

    @classmethod
    def struct_(cls, layout: "StructLayout") -> "MoveTypeLayout":
        return cls(LayoutKind.STRUCT, struct=layout)

    def type_tag(self) -> TypeTag:
        if self.kind == LayoutKind.VECTOR:
            return TypeTag.vector(self.element.type_tag())
        if self.kind == LayoutKind.STRUCT:
            return TypeTag.struct_(self.struct.struct_tag())
        return TypeTag(_PRIMITIVE_TAGS[self.kind])

    def __str__(self) -> str:
        if self.kind == LayoutKind.VECTOR:
            return f"vector<{self.element}>"
        if self.kind == LayoutKind.STRUCT:
            return str(self.struct)
        return self.kind.value


_PRIMITIVE_TAGS = {
    LayoutKind.BOOL: TypeTagKind.BOOL,
    LayoutKind.U8: TypeTagKind.U8,
    LayoutKind.U64: TypeTagKind.U64,
    LayoutKind.U128: TypeTagKind.U128,
    LayoutKind.ADDRESS: TypeTagKind.ADDRESS,
}


@dataclass(frozen=True)
class StructLayout:
    address: bytes
    module: str
    name: str
    is_resource: bool
    ty_args: Tuple[MoveTypeLayout, ...]
    fields: Tuple[MoveTypeLayout, ...]

    def struct_tag(self) -> StructTag:
        return StructTag(
            address=self.address,
            module=self.module,
            name=self.name,
            type_params=tuple(t.type_tag() for t in self.ty_args),
        )

    def __str__(self) -> str:
        args = f"<{', '.join(str(t) for t in self.ty_args)}>" if self.ty_args else ""
        return f"0x{self.address.hex()}::{self.module}::{self.name}{args}"


# --- Values ---


@dataclass(frozen=True)
class MoveStruct:
    fields: Tuple["MoveValue", ...]
    is_resource: bool


@dataclass(frozen=True)
class MoveValue:
    kind: LayoutKind
    value: Union[bool, int, bytes, Tuple["MoveValue", ...], MoveStruct]

    @classmethod
    def bool_(cls, value: bool) -> "MoveValue":
        return cls(LayoutKind.BOOL, bool(value))

    @classmethod
    def u8(cls, value: int) -> "MoveValue":
        return cls(LayoutKind.U8, value)

    @classmethod
    def u64(cls, value: int) -> "MoveValue":
        return cls(LayoutKind.U64, value)

    @classmethod
    def u128(cls, value: int) -> "MoveValue":
        return cls(LayoutKind.U128, value)

    @classmethod
    def address(cls, value: bytes) -> "MoveValue":
        return cls(LayoutKind.ADDRESS, bytes(value))

    @classmethod
    def vector_u8(cls, value: bytes) -> "MoveValue":
        return cls(LayoutKind.VECTOR, tuple(cls.u8(b) for b in bytes(value)))

    @classmethod
    def vector(cls, items) -> "MoveValue":
        return cls(LayoutKind.VECTOR, tuple(items))

    @classmethod
    def struct_(cls, fields, is_resource: bool) -> "MoveValue":
        return cls(LayoutKind.STRUCT, MoveStruct(tuple(fields), is_resource))

    def as_struct(self) -> MoveStruct:
        if self.kind != LayoutKind.STRUCT:
            raise FixtureError(ErrorCode.LAYOUT_MISMATCH, f"expected struct, got {self.kind.value}")
        return self.value

    def as_bytes(self) -> bytes:
        """Contents of a ``vector<u8>`` value."""
        if self.kind != LayoutKind.VECTOR or any(v.kind != LayoutKind.U8 for v in self.value):
            raise FixtureError(ErrorCode.LAYOUT_MISMATCH, "expected vector<u8>")
        return bytes(v.value for v in self.value)


def _mismatch(path: str, message: str) -> FixtureError:
    return FixtureError(ErrorCode.LAYOUT_MISMATCH, f"{path}: {message}")


def _check_int(path: str, value: object, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _mismatch(path, f"expected integer, got {type(value).__name__}")
    if not 0 <= value <= upper:
        raise _mismatch(path, f"integer {value} out of range")
    return value


def _write_value(w: Writer, value: MoveValue, layout: MoveTypeLayout, path: str) -> None:
    if value.kind != layout.kind:
        raise _mismatch(path, f"value is {value.kind.value}, layout is {layout}")

    if layout.kind == LayoutKind.BOOL:
        if not isinstance(value.value, bool):
            raise _mismatch(path, "expected bool")
        w.write_bool(value.value)
    elif layout.kind == LayoutKind.U8:
        w.write_u8(_check_int(path, value.value, 0xFF))
    elif layout.kind == LayoutKind.U64:
        w.write_u64(_check_int(path, value.value, U64_MAX))
    elif layout.kind == LayoutKind.U128:
        w.write_u128(_check_int(path, value.value, U128_MAX))
    elif layout.kind == LayoutKind.ADDRESS:
        if not isinstance(value.value, bytes) or len(value.value) != ADDRESS_LENGTH:
            raise _mismatch(path, f"address must be {ADDRESS_LENGTH} bytes")
        w.write_bytes(value.value)
    elif layout.kind == LayoutKind.VECTOR:
        w.write_uleb128(len(value.value))
        for i, item in enumerate(value.value):
            _write_value(w, item, layout.element, f"{path}[{i}]")
    elif layout.kind == LayoutKind.STRUCT:
        _write_struct(w, value.value, layout.struct, path)
    else:
        raise _mismatch(path, f"unsupported layout {layout.kind}")


def _write_struct(w: Writer, struct: MoveStruct, layout: StructLayout, path: str) -> None:
    path = f"{path}/{layout.name}" if path else layout.name
    if struct.is_resource != layout.is_resource:
        raise _mismatch(path, "resource flag differs from layout")
    if len(struct.fields) != len(layout.fields):
        raise _mismatch(
            path, f"value has {len(struct.fields)} fields, layout has {len(layout.fields)}"
        )
    for i, (field_value, field_layout) in enumerate(zip(struct.fields, layout.fields)):
        _write_value(w, field_value, field_layout, f"{path}.{i}")


def simple_serialize(value: MoveValue, layout: StructLayout) -> bytes:
    """Serialize a struct value against its layout.

    Raises ``FixtureError(LAYOUT_MISMATCH)`` when the value does not match the
    layout field-for-field.
    """
    w = Writer(bytearray())
    _write_struct(w, value.as_struct(), layout, "")
    return bytes(w.buf)


def _read_value(r: Reader, layout: MoveTypeLayout) -> MoveValue:
    if layout.kind == LayoutKind.BOOL:
        return MoveValue.bool_(r.read_bool())
    if layout.kind == LayoutKind.U8:
        return MoveValue.u8(r.read_u8())
    if layout.kind == LayoutKind.U64:
        return MoveValue.u64(r.read_u64())
    if layout.kind == LayoutKind.U128:
        return MoveValue.u128(r.read_u128())
    if layout.kind == LayoutKind.ADDRESS:
        return MoveValue.address(r.read_address())
    if layout.kind == LayoutKind.VECTOR:
        count = r.read_uleb128()
        return MoveValue.vector(_read_value(r, layout.element) for _ in range(count))
    return _read_struct(r, layout.struct)


def _read_struct(r: Reader, layout: StructLayout) -> MoveValue:
    fields = [_read_value(r, f) for f in layout.fields]
    return MoveValue.struct_(fields, layout.is_resource)


def simple_deserialize(data: bytes, layout: StructLayout) -> MoveValue:
    r = Reader(bytes(data))
    value = _read_struct(r, layout)
    r.finish()
    return value
