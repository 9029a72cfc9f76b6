"""Value/layout engine: serialization against layouts and mismatch detection."""

from __future__ import annotations

import pytest

from libra_fixtures.config import CORE_CODE_ADDRESS
from libra_fixtures.errors import ErrorCategory, ErrorCode, FixtureError
from libra_fixtures.values import (
    LayoutKind,
    MoveTypeLayout,
    MoveValue,
    StructLayout,
    simple_deserialize,
    simple_serialize,
)


def _layout(*fields: MoveTypeLayout, is_resource: bool = True) -> StructLayout:
    return StructLayout(
        address=CORE_CODE_ADDRESS,
        module="M",
        name="S",
        is_resource=is_resource,
        ty_args=(),
        fields=tuple(fields),
    )


def test_serialize_primitives() -> None:
    layout = _layout(
        MoveTypeLayout.bool_(),
        MoveTypeLayout.u8(),
        MoveTypeLayout.u64(),
        MoveTypeLayout.u128(),
        MoveTypeLayout.address(),
    )
    value = MoveValue.struct_(
        [
            MoveValue.bool_(True),
            MoveValue.u8(0xAB),
            MoveValue.u64(1),
            MoveValue.u128(2),
            MoveValue.address(bytes(range(16))),
        ],
        True,
    )
    encoded = simple_serialize(value, layout)
    assert encoded == (
        b"\x01\xab" + (1).to_bytes(8, "little") + (2).to_bytes(16, "little") + bytes(range(16))
    )
    assert simple_deserialize(encoded, layout) == value


def test_vector_u8_is_length_prefixed() -> None:
    layout = _layout(MoveTypeLayout.vector(MoveTypeLayout.u8()))
    value = MoveValue.struct_([MoveValue.vector_u8(b"abc")], True)
    assert simple_serialize(value, layout) == b"\x03abc"
    decoded = simple_deserialize(b"\x03abc", layout)
    assert decoded.as_struct().fields[0].as_bytes() == b"abc"


def test_empty_optional_vector() -> None:
    inner = _layout(MoveTypeLayout.address())
    layout = _layout(MoveTypeLayout.vector(MoveTypeLayout.struct_(inner)))
    value = MoveValue.struct_([MoveValue.vector([])], True)
    assert simple_serialize(value, layout) == b"\x00"


def test_nested_struct() -> None:
    inner = _layout(MoveTypeLayout.u64(), is_resource=False)
    layout = _layout(MoveTypeLayout.struct_(inner), MoveTypeLayout.bool_())
    value = MoveValue.struct_(
        [MoveValue.struct_([MoveValue.u64(9)], False), MoveValue.bool_(False)], True
    )
    assert simple_serialize(value, layout) == (9).to_bytes(8, "little") + b"\x00"


@pytest.mark.parametrize(
    "value",
    [
        # wrong kind
        MoveValue.struct_([MoveValue.u8(1)], True),
        # out of range
        MoveValue.struct_([MoveValue.u64(1 << 64)], True),
        # negative
        MoveValue.struct_([MoveValue.u64(-1)], True),
        # too many fields
        MoveValue.struct_([MoveValue.u64(1), MoveValue.u64(2)], True),
        # too few fields
        MoveValue.struct_([], True),
        # resource flag differs
        MoveValue.struct_([MoveValue.u64(1)], False),
        # bool is not an integer
        MoveValue.struct_([MoveValue(LayoutKind.U64, True)], True),
    ],
)
def test_layout_mismatch(value: MoveValue) -> None:
    layout = _layout(MoveTypeLayout.u64())
    with pytest.raises(FixtureError) as exc:
        simple_serialize(value, layout)
    assert exc.value.code == ErrorCode.LAYOUT_MISMATCH
    assert exc.value.category == ErrorCategory.STRUCTURAL


def test_short_address_rejected() -> None:
    layout = _layout(MoveTypeLayout.address())
    value = MoveValue.struct_([MoveValue.address(b"\x01" * 15)], True)
    with pytest.raises(FixtureError) as exc:
        simple_serialize(value, layout)
    assert exc.value.code == ErrorCode.LAYOUT_MISMATCH


def test_deserialize_trailing_bytes() -> None:
    layout = _layout(MoveTypeLayout.u8())
    with pytest.raises(FixtureError) as exc:
        simple_deserialize(b"\x01\x02", layout)
    assert exc.value.code == ErrorCode.TRAILING_BYTES


def test_layout_str() -> None:
    layout = _layout(MoveTypeLayout.vector(MoveTypeLayout.u8()))
    assert str(layout.fields[0]) == "vector<u8>"
    assert str(layout) == "0x" + "00" * 15 + "01::M::S"
