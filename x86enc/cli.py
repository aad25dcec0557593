"""Command that encodes a fixed set of sample instructions and dumps the bytes."""

from __future__ import annotations

import argparse
import sys

from x86enc.buffer import Buffer
from x86enc.encoding import instantiate
from x86enc.instance import InstantiationError, Instruction, Op
from x86enc.operands import Size, imm, mem, mem_base
from x86enc.registers import (
    AL,
    AX,
    DL,
    EAX,
    EIP,
    R8L,
    RAX,
    RDX,
    REGISTER_NONE,
    RIP,
    SPL,
)
from x86enc.writer import write_instance

_BUFFER_SIZE = 4096
_SLOT = 256


def emit(buf: Buffer, instr: Instruction, out=None) -> None:
    """Encode ``instr`` into ``buf``, report it, then move to the next slot."""
    out = sys.stdout if out is None else out
    try:
        instance = instantiate(instr)
    except InstantiationError as exc:
        print(f"bad instruction returned: {exc}: {instr}", file=out)
    else:
        print(f"good instr: {instr}", file=out)
        write_instance(buf, instance)
    buf.align(_SLOT)


def _samples():
    imm8 = imm(0xFF, Size.BITS_8)
    imm16 = imm(0xFFFF, Size.BITS_16)
    imm32 = imm(0xFFFFFFFF, Size.BITS_32)
    return [
        Instruction(Op.ADD, (AL, imm8)),
        Instruction(Op.ADD, (AX, imm16)),
        Instruction(Op.ADD, (EAX, imm32)),
        Instruction(Op.ADD, (RAX, imm32)),
        Instruction(Op.ADD, (DL, imm8)),
        Instruction(Op.ADD, (R8L, imm8)),
        Instruction(Op.ADD, (SPL, imm8)),
        Instruction(Op.ADD, (mem_base(RAX, Size.BITS_64), imm32)),
        Instruction(
            Op.ADD,
            (mem(RIP, REGISTER_NONE, 0, 0, Size.BITS_32, Size.BITS_64), imm32),
        ),
        Instruction(
            Op.ADD,
            (mem(EIP, REGISTER_NONE, 0, 0, Size.BITS_32, Size.BITS_32), imm32),
        ),
        Instruction(
            Op.ADD,
            (mem(RAX, REGISTER_NONE, 0, 0, Size.BITS_32, Size.BITS_64), RDX),
        ),
    ]


def main(argv=None) -> int:
    """Encode the sample instructions and print a hexdump of the result."""
    parser = argparse.ArgumentParser(
        prog="x86enc",
        description="Encode a set of sample x86-64 instructions and print a hexdump.",
    )
    parser.parse_args(argv)

    buf = Buffer(_BUFFER_SIZE)
    for length in (1, 2, 3):
        emit(buf, Instruction(Op.NOP, (imm(length, Size.BITS_8),)))

    buf.write_64(0)
    buf.write_64(0)

    for instr in _samples():
        emit(buf, instr)

    sys.stdout.write(buf.hexdump())
    return 0


if __name__ == "__main__":
    sys.exit(main())