"""Instructions as written by the user, and their encodable instances."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from x86enc.operands import Size, format_arg


class InstantiationError(ValueError):
    """An instruction has no valid encoding."""


class Op(Enum):
    """Supported mnemonics."""

    ADD = "add"
    NOP = "nop"


@dataclass(frozen=True)
class Instruction:
    """An operation together with its operands."""

    op: Op
    args: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def __str__(self) -> str:
        return f"{self.op.value}({', '.join(format_arg(arg) for arg in self.args)})"


class InstanceType(IntEnum):
    """Encoding families."""

    NONE = 0
    LEGACY = 1
    VEX = 2
    THREEDNOW = 3
    NOP = 4


PREFIX_LOCK = 1
PREFIX_REPNZ = 2
PREFIX_REPZ = 3

PREFIX_OVERRIDE_CS = 1
PREFIX_OVERRIDE_SS = 2
PREFIX_OVERRIDE_DS = 3
PREFIX_OVERRIDE_ES = 4
PREFIX_OVERRIDE_FS = 5
PREFIX_OVERRIDE_GS = 6

PREFIX_VEX_IMPLICIT_66 = 1
PREFIX_VEX_IMPLICIT_F3 = 2
PREFIX_VEX_IMPLICIT_F2 = 3

MOD_0 = 0b00
MOD_1 = 0b01
MOD_2 = 0b10
MOD_3 = 0b11
MOD_DIRECT = MOD_3


@dataclass(frozen=True)
class Opcode:
    """Opcode value of up to three bytes and its length in bytes."""

    val: int
    len: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "val", self.val & 0xFFFFFF)
        object.__setattr__(self, "len", self.len & 0xFF)


@dataclass(frozen=True)
class ModRM:
    """The ModRM byte: 2-bit mod, 3-bit reg, 3-bit rm."""

    mod: int = 0
    reg: int = 0
    rm: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "mod", self.mod & 0b11)
        object.__setattr__(self, "reg", self.reg & 0b111)
        object.__setattr__(self, "rm", self.rm & 0b111)

    def to_byte(self) -> int:
        return (self.mod << 6) | (self.reg << 3) | self.rm


@dataclass(frozen=True)
class SIB:
    """The SIB byte: 2-bit scale, 3-bit index, 3-bit base."""

    scale: int = 0
    index: int = 0
    base: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", self.scale & 0b11)
        object.__setattr__(self, "index", self.index & 0b111)
        object.__setattr__(self, "base", self.base & 0b111)

    def to_byte(self) -> int:
        return (self.scale << 6) | (self.index << 3) | self.base


@dataclass
class Instance:
    """Everything needed to write the bytes of one instruction."""

    type: InstanceType
    opcode: Opcode
    disp: int = 0
    imm: int = 0
    disp_size: Size = Size.NONE
    imm_size: Size = Size.NONE
    has_modrm: bool = False
    modrm: ModRM = field(default_factory=ModRM)
    sib: SIB = field(default_factory=SIB)
    prefix_group_1: int = 0
    prefix_group_2: int = 0
    opsize_override: bool = False
    addrsize_override: bool = False
    has_rex: bool = False
    flag_w: bool = False
    flag_r: bool = False
    flag_x: bool = False
    flag_b: bool = False
    vex_256: bool = False
    vex_map_select: int = 0
    vex_implicit: int = 0
    vex_op_2: int = 0
    vexsize_override: bool = False
    nop_length: int = 0

    def has_sib(self) -> bool:
        """Whether the ModRM byte calls for a following SIB byte."""
        return self.modrm.mod != MOD_DIRECT and self.modrm.rm == 0b100

    def has_disp(self) -> bool:
        return self.disp_size != Size.NONE

    def has_imm(self) -> bool:
        return self.imm_size != Size.NONE