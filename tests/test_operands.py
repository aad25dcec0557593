import pytest

from x86enc import registers as r
from x86enc.operands import (
    SCALE_4,
    ArgType,
    Immediate,
    Memory,
    Size,
    arg_size,
    arg_type,
    format_arg,
    imm,
    mem,
    mem_base,
    mem_disp,
)


@pytest.mark.parametrize(
    "size, mask",
    [
        (Size.BITS_8, 0xFF),
        (Size.BITS_16, 0xFFFF),
        (Size.BITS_32, 0xFFFFFFFF),
    ],
)
def test_imm_truncates(size, mask):
    value = imm(-1, size)
    assert value.data == mask
    assert value.size == size


def test_imm_64_keeps_value():
    assert imm(0xFFFFFFFF, Size.BITS_64).data == 0xFFFFFFFF


@pytest.mark.parametrize("size", [Size.NONE, Size.BITS_128, Size.BITS_80, Size.ANY])
def test_imm_bad_size(size):
    with pytest.raises(ValueError):
        imm(1, size)


def test_imm_str():
    assert str(imm(0xFF, Size.BITS_8)) == "imm_8(-1 / 255 / 0xff)"
    assert str(Immediate(5, Size.BITS_128)) == "imm(BAD)"


@pytest.mark.parametrize("size", [Size.BITS_8, Size.BITS_16, Size.BITS_32, Size.BITS_64])
def test_imm_str_round_trip(size):
    value = imm(7, size)
    assert str(value).startswith("imm_")
    assert "7 / 7 / 0x" in str(value)


def test_mem_base_equals_full_form():
    assert mem_base(r.RAX, Size.BITS_64) == mem(
        r.RAX, r.REGISTER_NONE, 0, 0, Size.NONE, Size.BITS_64
    )


def test_mem_disp_has_no_registers():
    m = mem_disp(0x10, Size.BITS_32, Size.BITS_32)
    assert m.base.is_none()
    assert m.index.is_none()
    assert m.has_disp()
    assert m.disp == 0x10


def test_mem_base_has_no_disp():
    assert not mem_base(r.RBX, Size.BITS_64).has_disp()


def test_mem_requires_registers():
    with pytest.raises(TypeError):
        mem(imm(1, Size.BITS_8), r.REGISTER_NONE, 0, 0, Size.NONE, Size.BITS_64)
    with pytest.raises(TypeError):
        mem(r.RAX, None, 0, 0, Size.NONE, Size.BITS_64)


def test_mem_str_bad_size():
    m = Memory(r.RAX, r.REGISTER_NONE, 0, 0, Size.NONE, Size.BITS_128)
    assert str(m) == "mem(BAD)"


def test_mem_str_parts():
    m = mem(r.RAX, r.RCX, SCALE_4, 1, Size.BITS_8, Size.BITS_64)
    text = str(m)
    assert text.startswith("mem(" + str(r.RAX))
    assert " + 4 * " + str(r.RCX) in text
    assert text.endswith(")")


def test_mem_str_bad_scale():
    m = mem(r.RAX, r.RCX, 9, 0, Size.NONE, Size.BITS_64)
    assert " + BAD" in str(m)


def test_mem_str_base_only():
    text = str(mem_base(r.RAX, Size.BITS_64))
    assert text == "mem(" + str(r.RAX) + ")"


@pytest.mark.parametrize(
    "arg, kind",
    [
        (None, ArgType.NONE),
        (r.RAX, ArgType.REG),
        (mem_base(r.RAX, Size.BITS_64), ArgType.MEM),
        (imm(1, Size.BITS_8), ArgType.IMM),
    ],
)
def test_arg_type(arg, kind):
    assert arg_type(arg) == kind


def test_arg_type_rejects_other():
    with pytest.raises(TypeError):
        arg_type("rax")


@pytest.mark.parametrize(
    "arg, size",
    [
        (None, Size.NONE),
        (r.AL, Size.BITS_8),
        (r.XMM1, Size.BITS_128),
        (mem_base(r.EAX, Size.BITS_32), Size.BITS_32),
        (imm(1, Size.BITS_16), Size.BITS_16),
    ],
)
def test_arg_size(arg, size):
    assert arg_size(arg) == size


def test_format_arg():
    assert format_arg(None) == "ARG_BAD"
    assert format_arg(r.RDX) == str(r.RDX)
    value = imm(3, Size.BITS_32)
    assert format_arg(value) == str(value)
    m = mem_base(r.RAX, Size.BITS_64)
    assert format_arg(m) == str(m)