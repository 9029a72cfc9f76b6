"""Script ABIs: the signature and bytecode of a transaction script."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from .encoding import (
    Reader,
    Writer,
    read_type_tag,
    read_vec,
    write_type_tag,
    write_vec,
)
from .types import TypeTag

ABI_FILE_SUFFIX = ".abi"


@dataclass(frozen=True)
class TypeArgumentABI:
    name: str


@dataclass(frozen=True)
class ArgumentABI:
    name: str
    type_tag: TypeTag


@dataclass(frozen=True)
class ScriptABI:
    name: str
    doc: str
    code: bytes
    ty_args: Tuple[TypeArgumentABI, ...] = ()
    args: Tuple[ArgumentABI, ...] = ()


def _write_type_argument(w: Writer, ty_arg: TypeArgumentABI) -> None:
    w.write_str(ty_arg.name)


def _write_argument(w: Writer, arg: ArgumentABI) -> None:
    w.write_str(arg.name)
    write_type_tag(w, arg.type_tag)


def encode_script_abi(abi: ScriptABI) -> bytes:
    """[name:str][doc:str][code:var][ty_args:vec<str>][args:vec<(str, type_tag)>]"""
    w = Writer(bytearray())
    w.write_str(abi.name)
    w.write_str(abi.doc)
    w.write_var_bytes(abi.code)
    write_vec(w, abi.ty_args, _write_type_argument)
    write_vec(w, abi.args, _write_argument)
    return bytes(w.buf)


def decode_script_abi(data: bytes) -> ScriptABI:
    r = Reader(data)
    name = r.read_str()
    doc = r.read_str()
    code = r.read_var_bytes()
    ty_args = read_vec(r, lambda rd: TypeArgumentABI(rd.read_str()))
    args = read_vec(r, lambda rd: ArgumentABI(rd.read_str(), read_type_tag(rd)))
    r.finish()
    return ScriptABI(name=name, doc=doc, code=code, ty_args=tuple(ty_args), args=tuple(args))


def read_abis(directory: Path) -> List[ScriptABI]:
    """Every ``*.abi`` file under ``directory``, sorted by script name."""
    abis = [
        decode_script_abi(path.read_bytes())
        for path in sorted(Path(directory).glob(f"*{ABI_FILE_SUFFIX}"))
    ]
    abis.sort(key=lambda abi: abi.name)
    return abis
