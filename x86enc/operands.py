"""Instruction operands: sizes, immediates, memory references and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from x86enc.registers import REGISTER_NONE, Register


class Size(IntEnum):
    """Operand size codes."""

    NONE = 0
    BITS_8 = 1
    BITS_16 = 2
    BITS_32 = 3
    BITS_64 = 4
    BITS_128 = 5
    BITS_256 = 6
    BITS_80 = 7
    ANY = 15


class ArgType(IntEnum):
    """Operand kinds."""

    NONE = 0
    REG = 1
    MEM = 2
    IMM = 3
    MEMREG = 4
    ANY = 15


SCALE_1 = 0b00
SCALE_2 = 0b01
SCALE_4 = 0b10
SCALE_8 = 0b11

_SCALE_FACTORS = {SCALE_1: 1, SCALE_2: 2, SCALE_4: 4, SCALE_8: 8}

_BITS = {Size.BITS_8: 8, Size.BITS_16: 16, Size.BITS_32: 32, Size.BITS_64: 64}

_MASK_64 = (1 << 64) - 1


def _format_value(value: int, bits: int) -> str:
    unsigned = value & ((1 << bits) - 1)
    signed = unsigned - (1 << bits) if unsigned >> (bits - 1) else unsigned
    return f"{signed} / {unsigned} / 0x{unsigned:0{bits // 4}x}"


@dataclass(frozen=True)
class Immediate:
    """An immediate value of a given size."""

    data: int
    size: Size

    def __str__(self) -> str:
        bits = _BITS.get(self.size)
        if bits is None:
            return "imm(BAD)"
        return f"imm_{bits}({_format_value(self.data, bits)})"


@dataclass(frozen=True)
class Memory:
    """A memory reference: base + scale * index + displacement."""

    base: Register
    index: Register
    scale: int
    disp: int
    disp_size: Size
    size: Size

    def has_disp(self) -> bool:
        return self.disp_size != Size.NONE

    def __str__(self) -> str:
        if self.size not in _BITS:
            return "mem(BAD)"
        parts = ["mem(", str(self.base)]
        if not self.index.is_none():
            factor = _SCALE_FACTORS.get(self.scale)
            if factor is None:
                parts.append(" + BAD")
            else:
                parts.append(f" + {factor} * {self.index}")
        bits = _BITS.get(self.disp_size)
        if bits is not None:
            parts.append(f" + ({_format_value(self.disp, bits)}))")
        parts.append(")")
        return "".join(parts)


def imm(data: int, size) -> Immediate:
    """Build an immediate, truncating ``data`` to ``size``."""
    size = Size(size)
    bits = _BITS.get(size)
    if bits is None:
        raise ValueError(f"immediate size must be 8, 16, 32 or 64 bits, got {size.name}")
    return Immediate(data & ((1 << bits) - 1), size)


def mem(base, index, scale: int, disp: int, disp_size, size) -> Memory:
    """Build a memory reference; base and index must be registers."""
    if not isinstance(base, Register) or not isinstance(index, Register):
        raise TypeError("memory base and index must be registers")
    return Memory(
        base=base,
        index=index,
        scale=scale,
        disp=disp & _MASK_64,
        disp_size=Size(disp_size),
        size=Size(size),
    )


def mem_base(base, size) -> Memory:
    """Memory addressed by a base register alone."""
    return mem(base, REGISTER_NONE, 0, 0, Size.NONE, size)


def mem_disp(disp: int, disp_size, size) -> Memory:
    """Memory addressed by an absolute displacement."""
    return mem(REGISTER_NONE, REGISTER_NONE, 0, disp, disp_size, size)


def arg_type(arg) -> ArgType:
    """Kind of an operand; ``None`` stands for no operand."""
    if arg is None:
        return ArgType.NONE
    if isinstance(arg, Register):
        return ArgType.REG
    if isinstance(arg, Memory):
        return ArgType.MEM
    if isinstance(arg, Immediate):
        return ArgType.IMM
    raise TypeError(f"not an operand: {arg!r}")


def arg_size(arg) -> Size:
    """Size of an operand, NONE for no operand."""
    if isinstance(arg, Register):
        return arg.size()
    if isinstance(arg, (Memory, Immediate)):
        return arg.size
    return Size.NONE


def format_arg(arg) -> str:
    """Printable form of an operand."""
    if isinstance(arg, (Register, Memory, Immediate)):
        return str(arg)
    return "ARG_BAD"