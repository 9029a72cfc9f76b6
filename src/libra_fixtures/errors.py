"""Fixture builder error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    CONFIGURATION = 0x01
    NOT_FOUND = 0x02
    STRUCTURAL = 0x03
    CRYPTO = 0x04
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Configuration
    UNKNOWN_ROLE_SPECIFIER = 0x0100
    DUPLICATE_CURRENCY = 0x0101
    INVALID_CURRENCY_CODE = 0x0102
    INVALID_ADDRESS = 0x0103
    INVALID_KEY = 0x0104
    INVALID_ARGUMENT = 0x0105

    # Lookups
    CURRENCY_NOT_FOUND = 0x0200

    # Structural (value vs layout, codec)
    LAYOUT_MISMATCH = 0x0300
    TRAILING_BYTES = 0x0301
    UNEXPECTED_EOF = 0x0302
    INVALID_ENCODING = 0x0303
    DUPLICATE_ACCESS_PATH = 0x0304
    TYPE_NOT_ALLOWED = 0x0305

    # Crypto
    SIGNING_FAILED = 0x0400
    INVALID_SIGNATURE = 0x0401

    # Internal
    NOT_IMPLEMENTED = 0xFF01


@dataclass(frozen=True)
class FixtureError(Exception):
    code: ErrorCode
    message: str

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.code >> 8)

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(
    ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
)
_frozen_setattr = FixtureError.__setattr__


def _fixture_error_setattr(self: FixtureError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


FixtureError.__setattr__ = _fixture_error_setattr  # type: ignore[method-assign]


def err(code: ErrorCode, message: str) -> FixtureError:
    return FixtureError(code=code, message=message)
