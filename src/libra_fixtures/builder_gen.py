"""Generate Python ``encode_<name>_script`` builders from script ABIs."""

from __future__ import annotations

import io
import logging
import textwrap
from typing import Iterable, List, TextIO

from .abi import ArgumentABI, ScriptABI, TypeArgumentABI
from .errors import ErrorCode, FixtureError
from .types import TypeTag, TypeTagKind

logger = logging.getLogger(__name__)

DOC_WIDTH = 86

_PREAMBLE = '''"""Transaction script builders. Generated code, do not edit."""

from libra_fixtures.types import Script, TransactionArgument, TypeTag
'''

_PRIMITIVES = {
    TypeTagKind.BOOL: ("bool", "bool_"),
    TypeTagKind.U8: ("int", "u8"),
    TypeTagKind.U64: ("int", "u64"),
    TypeTagKind.U128: ("int", "u128"),
    TypeTagKind.ADDRESS: ("bytes", "address"),
}


def type_not_allowed(type_tag: TypeTag) -> FixtureError:
    return FixtureError(
        ErrorCode.TYPE_NOT_ALLOWED,
        f"Transaction scripts cannot take arguments of type {type_tag.kind.name.lower()}.",
    )


def _argument_kind(type_tag: TypeTag) -> tuple[str, str]:
    """(Python annotation, TransactionArgument constructor) for ``type_tag``."""
    if type_tag.kind in _PRIMITIVES:
        return _PRIMITIVES[type_tag.kind]
    if type_tag.kind == TypeTagKind.VECTOR:
        if type_tag.element is not None and type_tag.element.kind == TypeTagKind.U8:
            return "bytes", "u8_vector"
        raise type_not_allowed(type_tag.element or type_tag)
    raise type_not_allowed(type_tag)


def quote_doc(doc: str) -> List[str]:
    text = textwrap.fill(doc, DOC_WIDTH).replace("\\", "\\\\").replace('"', '\\"')
    lines = text.splitlines()
    if not lines:
        return []
    if len(lines) == 1:
        return [f'    """{lines[0]}"""']
    return [f'    """{lines[0]}'] + [f"    {line}" for line in lines[1:]] + ['    """']


def quote_parameters(ty_args: Iterable[TypeArgumentABI], args: Iterable[ArgumentABI]) -> str:
    params = [f"{ty_arg.name}: TypeTag" for ty_arg in ty_args]
    params += [f"{arg.name}: {_argument_kind(arg.type_tag)[0]}" for arg in args]
    return ", ".join(params)


def quote_arguments(args: Iterable[ArgumentABI]) -> str:
    quoted = [
        f"TransactionArgument.{_argument_kind(arg.type_tag)[1]}({arg.name})" for arg in args
    ]
    return _tuple_literal(quoted)


def _tuple_literal(items: List[str]) -> str:
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def output_builder(out: TextIO, abi: ScriptABI) -> None:
    out.write("\n\n")
    out.write(f"def encode_{abi.name}_script({quote_parameters(abi.ty_args, abi.args)}) -> Script:\n")
    for line in quote_doc(abi.doc):
        out.write(line + "\n")
    out.write("    return Script(\n")
    out.write(f'        code=bytes.fromhex("{abi.code.hex()}"),\n')
    out.write(f"        ty_args={_tuple_literal([t.name for t in abi.ty_args])},\n")
    out.write(f"        args={quote_arguments(abi.args)},\n")
    out.write("    )\n")


def output(out: TextIO, abis: Iterable[ScriptABI]) -> None:
    out.write(_PREAMBLE)
    count = 0
    for abi in abis:
        output_builder(out, abi)
        count += 1
    logger.debug("generated %d script builders", count)


def generate(abis: Iterable[ScriptABI]) -> str:
    """Python module source with one builder per ABI.

    Raises ``FixtureError(TYPE_NOT_ALLOWED)`` if any script takes an argument
    that cannot be passed as a ``TransactionArgument``.
    """
    buf = io.StringIO()
    output(buf, abis)
    return buf.getvalue()
