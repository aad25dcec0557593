"""x86 register descriptions and the named register constants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RegisterType(IntEnum):
    """Register families, numbered as in the encoding tables."""

    NONE = 0
    BIT_8 = 1
    BIT_16 = 2
    BIT_32 = 3
    BIT_64 = 4
    BIT_8_REX = 5
    BIT_32_IP = 6
    BIT_64_IP = 7
    X87 = 8
    MMX = 9
    XMM = 10
    YMM = 11
    SEGMENT = 12
    CONTROL = 13
    DEBUG = 14

    @property
    def label(self) -> str:
        """Name used when printing a register of this family."""
        return _LABELS[self]


_LABELS = {
    RegisterType.NONE: "NONE",
    RegisterType.BIT_8: "8_BIT",
    RegisterType.BIT_16: "16_BIT",
    RegisterType.BIT_32: "32_BIT",
    RegisterType.BIT_64: "64_BIT",
    RegisterType.BIT_8_REX: "8_BIT_REX",
    RegisterType.BIT_32_IP: "32_BIT_IP",
    RegisterType.BIT_64_IP: "64_BIT_IP",
    RegisterType.X87: "X87",
    RegisterType.MMX: "MMX",
    RegisterType.XMM: "XMM",
    RegisterType.YMM: "YMM",
    RegisterType.SEGMENT: "SEGMENT",
    RegisterType.CONTROL: "CONTROL",
    RegisterType.DEBUG: "DEBUG",
}

_GENERAL_TYPES = frozenset(
    {
        RegisterType.BIT_8,
        RegisterType.BIT_16,
        RegisterType.BIT_32,
        RegisterType.BIT_64,
        RegisterType.BIT_8_REX,
    }
)

_IP_TYPES = frozenset({RegisterType.BIT_32_IP, RegisterType.BIT_64_IP})


@dataclass(frozen=True)
class Register:
    """A register: its family and its 4-bit number."""

    type: RegisterType
    id: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", RegisterType(self.type))
        if not 0 <= self.id <= 0xF:
            raise ValueError(f"register id must fit in 4 bits, got {self.id}")

    def id_low(self) -> int:
        """The three bits of the id that go into ModRM or SIB."""
        return self.id & 0b0111

    def id_high(self) -> bool:
        """Whether the id needs the REX extension bit."""
        return bool(self.id & 0b1000)

    def is_none(self) -> bool:
        return self.type is RegisterType.NONE

    def is_general(self) -> bool:
        return self.type in _GENERAL_TYPES

    def is_ip(self) -> bool:
        return self.type in _IP_TYPES

    def is_8_rex(self) -> bool:
        return self.type is RegisterType.BIT_8_REX

    def is_8_no_rex(self) -> bool:
        """True for AH, CH, DH and BH, which cannot be used with a REX prefix."""
        return self.type is RegisterType.BIT_8 and 4 <= self.id < 8

    def size(self):
        """Operand size of the register, as a ``Size``."""
        from x86enc.operands import Size  # operands depends on this module

        sizes = {
            RegisterType.BIT_8: Size.BITS_8,
            RegisterType.BIT_8_REX: Size.BITS_8,
            RegisterType.BIT_16: Size.BITS_16,
            RegisterType.SEGMENT: Size.BITS_16,
            RegisterType.BIT_32: Size.BITS_32,
            RegisterType.BIT_32_IP: Size.BITS_32,
            RegisterType.CONTROL: Size.BITS_32,
            RegisterType.DEBUG: Size.BITS_32,
            RegisterType.BIT_64: Size.BITS_64,
            RegisterType.BIT_64_IP: Size.BITS_64,
            RegisterType.MMX: Size.BITS_64,
            RegisterType.XMM: Size.BITS_128,
            RegisterType.YMM: Size.BITS_256,
        }
        return sizes.get(self.type, Size.NONE)

    def general_size(self):
        """Size of a general-purpose or instruction-pointer register, else NONE."""
        from x86enc.operands import Size  # operands depends on this module

        sizes = {
            RegisterType.BIT_8: Size.BITS_8,
            RegisterType.BIT_8_REX: Size.BITS_8,
            RegisterType.BIT_16: Size.BITS_16,
            RegisterType.BIT_32: Size.BITS_32,
            RegisterType.BIT_32_IP: Size.BITS_32,
            RegisterType.BIT_64: Size.BITS_64,
            RegisterType.BIT_64_IP: Size.BITS_64,
        }
        return sizes.get(self.type, Size.NONE)

    def __str__(self) -> str:
        if self.is_none():
            return "reg(NONE)"
        return f"reg({self.type.label}, {self.id})"


def _family(reg_type: RegisterType, start: int = 0):
    return (Register(reg_type, reg_id) for reg_id in range(start, 16))


REGISTER_NONE = Register(RegisterType.NONE, 0)

(AL, CL, DL, BL, AH, CH, DH, BH,
 R8L, R9L, R10L, R11L, R12L, R13L, R14L, R15L) = _family(RegisterType.BIT_8)

(AX, CX, DX, BX, SP, BP, SI, DI,
 R8W, R9W, R10W, R11W, R12W, R13W, R14W, R15W) = _family(RegisterType.BIT_16)

(EAX, ECX, EDX, EBX, ESP, EBP, ESI, EDI,
 R8D, R9D, R10D, R11D, R12D, R13D, R14D, R15D) = _family(RegisterType.BIT_32)

(RAX, RCX, RDX, RBX, RSP, RBP, RSI, RDI,
 R8, R9, R10, R11, R12, R13, R14, R15) = _family(RegisterType.BIT_64)

ST0, ST1, ST2, ST3, ST4, ST5, ST6, ST7 = (
    Register(RegisterType.X87, reg_id) for reg_id in range(8)
)

(MM0, MM1, MM2, MM3, MM4, MM5, MM6, MM7,
 MM0_ALT, MM1_ALT, MM2_ALT, MM3_ALT,
 MM4_ALT, MM5_ALT, MM6_ALT, MM7_ALT) = _family(RegisterType.MMX)

(XMM0, XMM1, XMM2, XMM3, XMM4, XMM5, XMM6, XMM7,
 XMM8, XMM9, XMM10, XMM11, XMM12, XMM13, XMM14, XMM15) = _family(RegisterType.XMM)

(YMM0, YMM1, YMM2, YMM3, YMM4, YMM5, YMM6, YMM7,
 YMM8, YMM9, YMM10, YMM11, YMM12, YMM13, YMM14, YMM15) = _family(RegisterType.YMM)

ES, CS, SS, DS, FS, GS = (
    Register(RegisterType.SEGMENT, reg_id) for reg_id in range(6)
)
ES_ALT, CS_ALT, SS_ALT, DS_ALT, FS_ALT, GS_ALT = (
    Register(RegisterType.SEGMENT, reg_id) for reg_id in range(8, 14)
)

(CR0, CR1, CR2, CR3, CR4, CR5, CR6, CR7,
 CR8, CR9, CR10, CR11, CR12, CR13, CR14, CR15) = _family(RegisterType.CONTROL)

(DR0, DR1, DR2, DR3, DR4, DR5, DR6, DR7,
 DR8, DR9, DR10, DR11, DR12, DR13, DR14, DR15) = _family(RegisterType.DEBUG)

SPL, BPL, SIL, DIL = (
    Register(RegisterType.BIT_8_REX, reg_id) for reg_id in range(4, 8)
)

EIP = Register(RegisterType.BIT_32_IP, 0)
RIP = Register(RegisterType.BIT_64_IP, 0)

R0L, R1L, R2L, R3L, R4L, R5L, R6L, R7L = AL, CL, DL, BL, AH, CH, DH, BH
R0W, R1W, R2W, R3W, R4W, R5W, R6W, R7W = AX, CX, DX, BX, SP, BP, SI, DI
R0D, R1D, R2D, R3D, R4D, R5D, R6D, R7D = EAX, ECX, EDX, EBX, ESP, EBP, ESI, EDI
R0, R1, R2, R3, R4, R5, R6, R7 = RAX, RCX, RDX, RBX, RSP, RBP, RSI, RDI