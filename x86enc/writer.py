"""Writing encodable instances out as machine-code bytes."""

from __future__ import annotations

from typing import Iterator

from x86enc.instance import (
    PREFIX_LOCK,
    PREFIX_OVERRIDE_CS,
    PREFIX_OVERRIDE_DS,
    PREFIX_OVERRIDE_ES,
    PREFIX_OVERRIDE_FS,
    PREFIX_OVERRIDE_GS,
    PREFIX_OVERRIDE_SS,
    PREFIX_REPNZ,
    PREFIX_REPZ,
    Instance,
    InstanceType,
    Opcode,
)
from x86enc.operands import Size

_GROUP_1_BYTES = {
    PREFIX_LOCK: 0xF0,
    PREFIX_REPNZ: 0xF2,
    PREFIX_REPZ: 0xF3,
}

_GROUP_2_BYTES = {
    PREFIX_OVERRIDE_CS: 0x2E,
    PREFIX_OVERRIDE_SS: 0x36,
    PREFIX_OVERRIDE_DS: 0x3E,
    PREFIX_OVERRIDE_ES: 0x26,
    PREFIX_OVERRIDE_FS: 0x64,
    PREFIX_OVERRIDE_GS: 0x65,
}

_SIZE_BYTES = {
    Size.BITS_8: 1,
    Size.BITS_16: 2,
    Size.BITS_32: 4,
    Size.BITS_64: 8,
}

_MAX_NOP_LENGTH = 15


def _opcode(opcode: Opcode) -> bytes:
    if opcode.len not in (1, 2, 3):
        raise ValueError(f"weird opcode length: {opcode.len}")
    mask = (1 << (8 * opcode.len)) - 1
    return (opcode.val & mask).to_bytes(opcode.len, "big")


def _sized(value: int, size: Size) -> bytes:
    width = _SIZE_BYTES.get(size)
    if width is None:
        return b""
    return (value & ((1 << (8 * width)) - 1)).to_bytes(width, "little")


def _modrm_sib(instance: Instance) -> Iterator[int]:
    if not instance.has_modrm:
        return
    yield instance.modrm.to_byte()
    if instance.has_sib():
        yield instance.sib.to_byte()


def _operand_tail(instance: Instance) -> bytes:
    return (
        bytes(_modrm_sib(instance))
        + _sized(instance.disp, instance.disp_size)
        + _sized(instance.imm, instance.imm_size)
    )


def _legacy(instance: Instance) -> bytes:
    out = bytearray()
    if instance.prefix_group_1 in _GROUP_1_BYTES:
        out.append(_GROUP_1_BYTES[instance.prefix_group_1])
    if instance.prefix_group_2 in _GROUP_2_BYTES:
        out.append(_GROUP_2_BYTES[instance.prefix_group_2])
    if instance.opsize_override:
        out.append(0x66)
    if instance.addrsize_override:
        out.append(0x67)
    if instance.has_rex:
        out.append(
            0x40
            | (int(instance.flag_w) << 3)
            | (int(instance.flag_r) << 2)
            | (int(instance.flag_x) << 1)
            | int(instance.flag_b)
        )
    out += _opcode(instance.opcode)
    out += _operand_tail(instance)
    return bytes(out)


def _vex(instance: Instance) -> bytes:
    short = (
        not instance.flag_x
        and not instance.flag_b
        and not instance.flag_w
        and instance.vex_map_select == 1
    )
    out = bytearray()
    if short or instance.vexsize_override:
        byte_1 = int(instance.flag_r) << 7
        byte_1 ^= instance.vex_op_2 << 3
        byte_1 |= int(instance.vex_256) << 2
        byte_1 |= instance.vex_implicit
        out += bytes([0xC5, byte_1 & 0xFF])
    else:
        byte_1 = int(instance.flag_r) << 7
        byte_1 ^= int(instance.flag_x) << 6
        byte_1 ^= int(instance.flag_b) << 5
        byte_1 |= instance.vex_map_select
        byte_2 = int(instance.flag_w) << 7
        byte_2 ^= instance.vex_op_2 << 3
        byte_2 |= int(instance.vex_256) << 2
        byte_2 |= instance.vex_implicit
        out += bytes([0xC4, byte_1 & 0xFF, byte_2 & 0xFF])
    out += _opcode(instance.opcode)
    out += _operand_tail(instance)
    return bytes(out)


def _3dnow(instance: Instance) -> bytes:
    return (
        b"\x0f\x0f"
        + bytes(_modrm_sib(instance))
        + _sized(instance.disp, instance.disp_size)
        + _opcode(instance.opcode)
    )


def _nop(instance: Instance) -> bytes:
    opcode = _opcode(instance.opcode)
    full, rest = divmod(instance.nop_length, _MAX_NOP_LENGTH)
    chunk = b"\x66" * (_MAX_NOP_LENGTH - 1) + opcode
    out = chunk * full
    if rest:
        out += b"\x66" * (rest - 1) + opcode
    return out


_WRITERS = {
    InstanceType.LEGACY: _legacy,
    InstanceType.VEX: _vex,
    InstanceType.THREEDNOW: _3dnow,
    InstanceType.NOP: _nop,
}


def encode(instance: Instance) -> bytes:
    """The machine-code bytes of ``instance``; empty for an invalid instance."""
    if instance.opcode.len == 0:
        return b""
    writer = _WRITERS.get(instance.type)
    if writer is None:
        return b""
    return writer(instance)


def write_instance(buf, instance: Instance) -> None:
    """Write the bytes of ``instance`` into ``buf`` at its cursor."""
    for byte in encode(instance):
        buf.write_8(byte)