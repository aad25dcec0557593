"""Operand patterns for each instruction form and matching against them."""

from __future__ import annotations

from dataclasses import dataclass

from x86enc.instance import InstantiationError, Instruction, Opcode
from x86enc.operands import ArgType, Size, arg_size, arg_type


@dataclass(frozen=True)
class ArgInfo:
    """Pattern for one operand: its kind, size and, for registers, a fixed id."""

    type: ArgType
    size: Size
    id: int | None = None

    def matches(self, arg) -> bool:
        """Whether ``arg`` fits this pattern."""
        kind = arg_type(arg)
        if self.type is ArgType.MEMREG:
            if kind not in (ArgType.MEM, ArgType.REG):
                return False
        elif self.type is not ArgType.ANY and self.type is not kind:
            return False
        if self.type is ArgType.REG and self.id is not None and self.id != arg.id:
            return False
        if self.size is not Size.ANY and self.size != arg_size(arg):
            return False
        return True


def reg_type(size, reg_id=None) -> ArgInfo:
    """A register of ``size``; if ``reg_id`` is given, only that register."""
    return ArgInfo(ArgType.REG, Size(size), reg_id)


def mem_type(size) -> ArgInfo:
    return ArgInfo(ArgType.MEM, Size(size))


def memreg_type(size) -> ArgInfo:
    """A memory reference or a register of ``size``."""
    return ArgInfo(ArgType.MEMREG, Size(size))


def imm_type(size) -> ArgInfo:
    return ArgInfo(ArgType.IMM, Size(size))


@dataclass(frozen=True)
class Schema:
    """One encodable form of an instruction."""

    opcode: Opcode
    args_info: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "args_info", tuple(self.args_info))

    def matches(self, instr: Instruction) -> bool:
        """Whether every operand of ``instr`` fits this form."""
        return len(self.args_info) == len(instr.args) and all(
            info.matches(arg) for info, arg in zip(self.args_info, instr.args)
        )


def match_schema(schemata, instr: Instruction) -> Schema:
    """The first schema that ``instr`` fits."""
    for schema in schemata:
        if schema.matches(instr):
            return schema
    raise InstantiationError(f"no encoding matches {instr}")


NOP_SCHEMATA = (
    Schema(Opcode(0x90, 1), (imm_type(Size.BITS_8),)),
    Schema(Opcode(0x90, 1), (imm_type(Size.BITS_8),)),
    Schema(Opcode(0x0F1F, 2), (imm_type(Size.BITS_8),)),
)

ADD_SCHEMATA = (
    Schema(Opcode(0x04, 1), (reg_type(Size.BITS_8, 0), imm_type(Size.BITS_8))),
    Schema(Opcode(0x05, 1), (reg_type(Size.BITS_16, 0), imm_type(Size.BITS_16))),
    Schema(Opcode(0x05, 1), (reg_type(Size.BITS_32, 0), imm_type(Size.BITS_32))),
    Schema(Opcode(0x05, 1), (reg_type(Size.BITS_64, 0), imm_type(Size.BITS_32))),
    Schema(Opcode(0x80, 1), (memreg_type(Size.BITS_8), imm_type(Size.BITS_8))),
    Schema(Opcode(0x81, 1), (memreg_type(Size.BITS_16), imm_type(Size.BITS_16))),
    Schema(Opcode(0x81, 1), (memreg_type(Size.BITS_32), imm_type(Size.BITS_32))),
    Schema(Opcode(0x81, 1), (memreg_type(Size.BITS_64), imm_type(Size.BITS_32))),
    Schema(Opcode(0x83, 1), (memreg_type(Size.BITS_16), imm_type(Size.BITS_8))),
    Schema(Opcode(0x83, 1), (memreg_type(Size.BITS_32), imm_type(Size.BITS_8))),
    Schema(Opcode(0x83, 1), (memreg_type(Size.BITS_64), imm_type(Size.BITS_8))),
    Schema(Opcode(0x00, 1), (memreg_type(Size.BITS_8), reg_type(Size.BITS_8))),
    Schema(Opcode(0x01, 1), (memreg_type(Size.BITS_16), reg_type(Size.BITS_16))),
    Schema(Opcode(0x01, 1), (memreg_type(Size.BITS_32), reg_type(Size.BITS_32))),
    Schema(Opcode(0x01, 1), (memreg_type(Size.BITS_64), reg_type(Size.BITS_64))),
    Schema(Opcode(0x02, 1), (reg_type(Size.BITS_8), memreg_type(Size.BITS_8))),
    Schema(Opcode(0x03, 1), (reg_type(Size.BITS_16), memreg_type(Size.BITS_16))),
    Schema(Opcode(0x03, 1), (reg_type(Size.BITS_32), memreg_type(Size.BITS_32))),
    Schema(Opcode(0x03, 1), (reg_type(Size.BITS_64), memreg_type(Size.BITS_64))),
)