import pytest

from x86enc.instance import InstantiationError, Instruction, Op, Opcode
from x86enc.operands import Size, imm, mem, mem_base
from x86enc.registers import AL, AX, DL, EAX, R8L, RAX, RDX, REGISTER_NONE, RIP, SPL
from x86enc.schemata import (
    ADD_SCHEMATA,
    NOP_SCHEMATA,
    ArgInfo,
    Schema,
    imm_type,
    match_schema,
    mem_type,
    memreg_type,
    reg_type,
)
from x86enc.operands import ArgType


def add(*args):
    return Instruction(Op.ADD, args)


@pytest.mark.parametrize(
    "instr, opcode",
    [
        (add(AL, imm(0xFF, Size.BITS_8)), Opcode(0x04, 1)),
        (add(AX, imm(0xFFFF, Size.BITS_16)), Opcode(0x05, 1)),
        (add(EAX, imm(0xFFFFFFFF, Size.BITS_32)), Opcode(0x05, 1)),
        (add(RAX, imm(0xFFFFFFFF, Size.BITS_32)), Opcode(0x05, 1)),
        (add(DL, imm(0xFF, Size.BITS_8)), Opcode(0x80, 1)),
        (add(R8L, imm(0xFF, Size.BITS_8)), Opcode(0x80, 1)),
        (add(SPL, imm(0xFF, Size.BITS_8)), Opcode(0x80, 1)),
        (add(mem_base(RAX, Size.BITS_64), imm(0xFFFFFFFF, Size.BITS_32)), Opcode(0x81, 1)),
        (
            add(mem(RIP, REGISTER_NONE, 0, 0, Size.BITS_32, Size.BITS_64), imm(1, Size.BITS_32)),
            Opcode(0x81, 1),
        ),
        (add(mem(RAX, REGISTER_NONE, 0, 0, Size.BITS_32, Size.BITS_64), RDX), Opcode(0x01, 1)),
        (add(RDX, mem_base(RAX, Size.BITS_64)), Opcode(0x03, 1)),
        (add(RAX, imm(1, Size.BITS_8)), Opcode(0x83, 1)),
    ],
)
def test_add_matches_expected_opcode(instr, opcode):
    assert match_schema(ADD_SCHEMATA, instr).opcode == opcode


def test_first_matching_schema_wins():
    instr = add(EAX, imm(5, Size.BITS_32))
    assert match_schema(ADD_SCHEMATA, instr) is ADD_SCHEMATA[2]


def test_register_register_uses_memreg_form():
    assert match_schema(ADD_SCHEMATA, add(RAX, RDX)) is ADD_SCHEMATA[14]


def test_nop_matches_first_schema():
    instr = Instruction(Op.NOP, (imm(3, Size.BITS_8),))
    assert match_schema(NOP_SCHEMATA, instr) is NOP_SCHEMATA[0]


@pytest.mark.parametrize(
    "instr",
    [
        add(RAX, imm(1, Size.BITS_64)),
        add(AL),
        add(AL, RDX),
        add(imm(1, Size.BITS_8), AL),
    ],
)
def test_no_match_raises(instr):
    with pytest.raises(InstantiationError):
        match_schema(ADD_SCHEMATA, instr)


def test_fixed_register_id_rejects_other_registers():
    info = reg_type(Size.BITS_8, 0)
    assert info.matches(AL)
    assert not info.matches(DL)


def test_register_without_id_accepts_any_of_size():
    info = reg_type(Size.BITS_64)
    assert info.matches(RAX) and info.matches(RDX)
    assert not info.matches(EAX)


def test_memreg_accepts_memory_and_register_but_not_immediate():
    info = memreg_type(Size.BITS_64)
    assert info.matches(RAX)
    assert info.matches(mem_base(RAX, Size.BITS_64))
    assert not info.matches(imm(1, Size.BITS_64))


def test_mem_type_rejects_register():
    info = mem_type(Size.BITS_32)
    assert info.matches(mem_base(RAX, Size.BITS_32))
    assert not info.matches(EAX)


def test_any_type_and_size_accept_everything():
    info = ArgInfo(ArgType.ANY, Size.ANY)
    assert all(info.matches(arg) for arg in (AL, RAX, imm(1, Size.BITS_16), None))


def test_imm_type_checks_size():
    assert imm_type(Size.BITS_8).matches(imm(1, Size.BITS_8))
    assert not imm_type(Size.BITS_8).matches(imm(1, Size.BITS_16))


def test_schema_requires_same_operand_count():
    schema = Schema(Opcode(0x04, 1), [reg_type(Size.BITS_8, 0)])
    assert schema.args_info == (reg_type(Size.BITS_8, 0),)
    assert schema.matches(add(AL))
    assert not schema.matches(add(AL, imm(1, Size.BITS_8)))