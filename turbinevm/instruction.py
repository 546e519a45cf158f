"""Opcodes and the 32-bit instruction word encoding."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Opcode(enum.IntEnum):
    """Virtual machine opcodes, numbered in table order."""

    # program control
    NOP = 0
    HALT = enum.auto()
    SAFEPOINTPOLL = enum.auto()
    # load, store, move
    MOVE = enum.auto()
    LOADGLOBAL = enum.auto()
    STOREGLOBAL = enum.auto()
    LOADVEC = enum.auto()
    STOREVEC = enum.auto()
    LOADMAP = enum.auto()
    STOREMAP = enum.auto()
    LOADSTRUCT = enum.auto()
    STORESTRUCT = enum.auto()
    LOADENUM = enum.auto()
    # vec, map, set, stack, queue, struct
    NEWVEC = enum.auto()
    NEWMAP = enum.auto()
    NEWSET = enum.auto()
    NEWSTACK = enum.auto()
    NEWQUEUE = enum.auto()
    NEWSTRUCT = enum.auto()
    # arithmetic
    ADDINT = enum.auto()
    ADDFLOAT = enum.auto()
    SUBINT = enum.auto()
    SUBFLOAT = enum.auto()
    MULINT = enum.auto()
    MULFLOAT = enum.auto()
    DIVINT = enum.auto()
    DIVFLOAT = enum.auto()
    REMINT = enum.auto()
    REMFLOAT = enum.auto()
    EQINT = enum.auto()
    EQFLOAT = enum.auto()
    NEQINT = enum.auto()
    NEQFLOAT = enum.auto()
    LTINT = enum.auto()
    LTFLOAT = enum.auto()
    LTEINT = enum.auto()
    LTEFLOAT = enum.auto()
    GTINT = enum.auto()
    GTFLOAT = enum.auto()
    GTEINT = enum.auto()
    GTEFLOAT = enum.auto()
    BITWISEAND = enum.auto()
    BITWISEOR = enum.auto()
    BITWISEXOR = enum.auto()
    BITWISENOT = enum.auto()
    SHL = enum.auto()
    SHR = enum.auto()
    NEGINT = enum.auto()
    NEGFLOAT = enum.auto()
    SETIFZERO = enum.auto()
    SETIFNOTZ = enum.auto()
    # string
    CATSTRING = enum.auto()
    EQSTRING = enum.auto()
    NEQSTRING = enum.auto()
    # function call
    CALL = enum.auto()
    CALLPOINTER = enum.auto()
    CALLNATIVE = enum.auto()
    RETURN = enum.auto()
    # jump
    JUMP = enum.auto()
    JUMPIFZERO = enum.auto()
    JUMPIFNOTZ = enum.auto()
    # loop
    FORNUMBEGIN = enum.auto()
    FORNUMEND = enum.auto()
    FORVECBEGIN = enum.auto()
    FORVECEND = enum.auto()
    FORMAPBEGIN = enum.auto()
    FORMAPEND = enum.auto()
    FORSETBEGIN = enum.auto()
    FORSETEND = enum.auto()
    FORSTACKBEGIN = enum.auto()
    FORSTACKEND = enum.auto()
    FORQUEUEBEGIN = enum.auto()
    FORQUEUEEND = enum.auto()
    FORENUMBEGIN = enum.auto()
    FORENUMEND = enum.auto()
    # conversion
    BOOLTOINT = enum.auto()
    BOOLTOFLOAT = enum.auto()
    INTTOBOOL = enum.auto()
    INTTOFLOAT = enum.auto()
    FLOATTOBOOL = enum.auto()
    FLOATTOINT = enum.auto()


class OperandFormat(enum.Enum):
    """Which operand fields an instruction word carries."""

    NONE = "___"
    A = "A__"
    AB = "AB_"
    ABC = "ABC"
    ABB = "ABB"


@dataclass(frozen=True)
class OpcodeInfo:
    """Mnemonic and operand layout of one opcode."""

    mnemonic: str
    operand: OperandFormat


@dataclass
class Instruction:
    """A decoded instruction; fields absent from the format stay zero."""

    op: Opcode
    a: int = 0
    b: int = 0
    c: int = 0
    bb: int = 0


_F = OperandFormat

_FORMATS: dict[Opcode, OperandFormat] = {
    Opcode.NOP: _F.NONE,
    Opcode.HALT: _F.NONE,
    Opcode.SAFEPOINTPOLL: _F.NONE,
    Opcode.MOVE: _F.AB,
    Opcode.LOADGLOBAL: _F.AB,
    Opcode.STOREGLOBAL: _F.AB,
    Opcode.LOADVEC: _F.ABC,
    Opcode.STOREVEC: _F.ABC,
    Opcode.LOADMAP: _F.ABC,
    Opcode.STOREMAP: _F.ABC,
    Opcode.LOADSTRUCT: _F.ABC,
    Opcode.STORESTRUCT: _F.ABC,
    Opcode.LOADENUM: _F.ABC,
    Opcode.NEWVEC: _F.ABC,
    Opcode.NEWMAP: _F.ABC,
    Opcode.NEWSET: _F.ABC,
    Opcode.NEWSTACK: _F.ABC,
    Opcode.NEWQUEUE: _F.ABC,
    Opcode.NEWSTRUCT: _F.ABB,
    Opcode.ADDINT: _F.ABC,
    Opcode.ADDFLOAT: _F.ABC,
    Opcode.SUBINT: _F.ABC,
    Opcode.SUBFLOAT: _F.ABC,
    Opcode.MULINT: _F.ABC,
    Opcode.MULFLOAT: _F.ABC,
    Opcode.DIVINT: _F.ABC,
    Opcode.DIVFLOAT: _F.ABC,
    Opcode.REMINT: _F.ABC,
    Opcode.REMFLOAT: _F.ABC,
    Opcode.EQINT: _F.ABC,
    Opcode.EQFLOAT: _F.ABC,
    Opcode.NEQINT: _F.ABC,
    Opcode.NEQFLOAT: _F.ABC,
    Opcode.LTINT: _F.ABC,
    Opcode.LTFLOAT: _F.ABC,
    Opcode.LTEINT: _F.ABC,
    Opcode.LTEFLOAT: _F.ABC,
    Opcode.GTINT: _F.ABC,
    Opcode.GTFLOAT: _F.ABC,
    Opcode.GTEINT: _F.ABC,
    Opcode.GTEFLOAT: _F.ABC,
    Opcode.BITWISEAND: _F.ABC,
    Opcode.BITWISEOR: _F.ABC,
    Opcode.BITWISEXOR: _F.ABC,
    Opcode.BITWISENOT: _F.AB,
    Opcode.SHL: _F.ABC,
    Opcode.SHR: _F.ABC,
    Opcode.NEGINT: _F.AB,
    Opcode.NEGFLOAT: _F.AB,
    Opcode.SETIFZERO: _F.AB,
    Opcode.SETIFNOTZ: _F.AB,
    Opcode.CATSTRING: _F.ABC,
    Opcode.EQSTRING: _F.ABC,
    Opcode.NEQSTRING: _F.ABC,
    Opcode.CALL: _F.ABB,
    Opcode.CALLPOINTER: _F.AB,
    Opcode.CALLNATIVE: _F.ABB,
    Opcode.RETURN: _F.A,
    Opcode.JUMP: _F.ABB,
    Opcode.JUMPIFZERO: _F.ABB,
    Opcode.JUMPIFNOTZ: _F.ABB,
    Opcode.FORNUMBEGIN: _F.ABB,
    Opcode.FORNUMEND: _F.ABB,
    Opcode.FORVECBEGIN: _F.ABB,
    Opcode.FORVECEND: _F.ABB,
    Opcode.FORMAPBEGIN: _F.ABB,
    Opcode.FORMAPEND: _F.ABB,
    Opcode.FORSETBEGIN: _F.ABB,
    Opcode.FORSETEND: _F.ABB,
    Opcode.FORSTACKBEGIN: _F.ABB,
    Opcode.FORSTACKEND: _F.ABB,
    Opcode.FORQUEUEBEGIN: _F.ABB,
    Opcode.FORQUEUEEND: _F.ABB,
    Opcode.FORENUMBEGIN: _F.ABB,
    Opcode.FORENUMEND: _F.ABB,
    Opcode.BOOLTOINT: _F.AB,
    Opcode.BOOLTOFLOAT: _F.AB,
    Opcode.INTTOBOOL: _F.AB,
    Opcode.INTTOFLOAT: _F.AB,
    Opcode.FLOATTOBOOL: _F.AB,
    Opcode.FLOATTOINT: _F.AB,
}

_INFO: dict[Opcode, OpcodeInfo] = {
    op: OpcodeInfo(op.name.lower(), fmt) for op, fmt in _FORMATS.items()
}


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def lookup_opcode_info(op: int) -> OpcodeInfo:
    """Return the mnemonic and operand format of an opcode."""
    try:
        opcode = Opcode(op)
    except ValueError:
        raise ValueError(f"invalid opcode: {op}") from None
    return _INFO[opcode]


def encode_op(op: int) -> int:
    """Encode an instruction without operands."""
    return _to_int32((op & 0xFF) << 24)


def encode_a(op: int, a: int) -> int:
    """Encode an instruction with operand A."""
    return _to_int32(((op & 0xFF) << 24) | ((a & 0xFF) << 16))


def encode_ab(op: int, a: int, b: int) -> int:
    """Encode an instruction with operands A and B."""
    return _to_int32(((op & 0xFF) << 24) | ((a & 0xFF) << 16) | ((b & 0xFF) << 8))


def encode_abc(op: int, a: int, b: int, c: int) -> int:
    """Encode an instruction with operands A, B and C."""
    return _to_int32(
        ((op & 0xFF) << 24) | ((a & 0xFF) << 16) | ((b & 0xFF) << 8) | (c & 0xFF)
    )


def encode_abb(op: int, a: int, bb: int) -> int:
    """Encode an instruction with operand A and the 16-bit operand BB."""
    return _to_int32(((op & 0xFF) << 24) | ((a & 0xFF) << 16) | (bb & 0xFFFF))


def decode_instruction(word: int) -> Instruction:
    """Split an instruction word into opcode and operands."""
    word = _to_int32(word)
    op = word >> 24
    info = lookup_opcode_info(op)
    inst = Instruction(Opcode(op))

    fmt = info.operand
    if fmt in (OperandFormat.A, OperandFormat.AB, OperandFormat.ABC, OperandFormat.ABB):
        inst.a = (word >> 16) & 0xFF
    if fmt in (OperandFormat.AB, OperandFormat.ABC):
        inst.b = (word >> 8) & 0xFF
    if fmt is OperandFormat.ABC:
        inst.c = word & 0xFF
    if fmt is OperandFormat.ABB:
        inst.bb = word & 0xFFFF
    return inst