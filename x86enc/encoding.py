"""Turning instructions into encodable instances."""

from __future__ import annotations

from x86enc.instance import (
    MOD_0,
    MOD_DIRECT,
    InstanceType,
    Instance,
    InstantiationError,
    Instruction,
    ModRM,
    Op,
    Opcode,
    SIB,
)
from x86enc.operands import Immediate, Memory, Size
from x86enc.registers import Register
from x86enc.schemata import ADD_SCHEMATA, match_schema

_SIB_ID = 0b100  # rm/index value that selects a SIB byte (sp)
_IP_ID = 0b101  # rm/base value for rip-relative or absolute addressing (bp)

_NOP_OPCODE = Opcode(0x90, 1)


def instantiate(instr: Instruction) -> Instance:
    """Encode ``instr``; raise ``InstantiationError`` when it has no encoding."""
    if instr.op is Op.NOP:
        return instantiate_nop(instr)
    if instr.op is Op.ADD:
        return instantiate_legacy(instr, ADD_SCHEMATA)
    raise InstantiationError(f"unsupported operation: {instr.op}")


def instantiate_legacy(instr: Instruction, schemata) -> Instance:
    """Encode ``instr`` with legacy prefixes, using the first schema it fits."""
    return _instantiate(instr, schemata)


def instantiate_vex(instr: Instruction, schemata) -> Instance:
    """Encode ``instr`` for the VEX family; operands are laid out as for legacy."""
    return _instantiate(instr, schemata)


def instantiate_nop(instr: Instruction) -> Instance:
    """A run of padding whose length is the first, immediate, operand."""
    if not instr.args or not isinstance(instr.args[0], Immediate):
        raise InstantiationError(f"nop needs an immediate length: {instr}")
    return Instance(
        type=InstanceType.NOP,
        opcode=_NOP_OPCODE,
        nop_length=instr.args[0].data,
    )


def _instantiate(instr: Instruction, schemata) -> Instance:
    match = match_schema(schemata, instr)
    instance = Instance(type=InstanceType.LEGACY, opcode=match.opcode)
    _apply_sizes(instance, instr.args)

    args = instr.args
    count = len(args)
    if count > 3:
        raise InstantiationError(f"too many operands: {instr}")

    dest = None
    src = None
    if count == 3:
        if not isinstance(args[2], Immediate):
            raise InstantiationError(f"third operand must be an immediate: {instr}")
        # The immediate is read from the still-empty source operand.
        instance.imm_size = Size.NONE
        instance.imm = 0
    if count >= 2 and match.args_info[1].id is None:
        src = args[1]
    if count >= 1 and match.args_info[0].id is None:
        dest = args[0]

    _add_args(instance, dest, src)
    return instance


def _apply_sizes(instance: Instance, args) -> None:
    op_size = Size.NONE
    addr_size = Size.NONE
    for arg in args:
        if isinstance(arg, Memory):
            if addr_size != Size.NONE:
                raise InstantiationError("more than one memory operand")
            addr_size = arg.size
        if isinstance(arg, Register):
            if op_size != Size.NONE:
                raise InstantiationError("more than one register operand")
            op_size = arg.size()

    if addr_size in (Size.BITS_8, Size.BITS_16):
        raise InstantiationError(f"unsupported address size: {addr_size.name}")
    if addr_size == Size.BITS_32:
        instance.addrsize_override = True

    if op_size == Size.BITS_16:
        instance.opsize_override = True
    elif op_size == Size.BITS_64:
        instance.flag_w = True
        instance.has_rex = True


def _set_imm(instance: Instance, immediate: Immediate) -> None:
    instance.imm_size = immediate.size
    instance.imm = immediate.data


def _add_args(instance: Instance, dest, src) -> None:
    if isinstance(dest, Memory):
        _add_memory(instance, dest, src)
        return
    if isinstance(src, Memory):
        _add_memory(instance, src, dest)
        return

    if isinstance(src, Immediate):
        _set_imm(instance, src)
        if dest is None:
            return

    if dest is None:
        dest = src

    if not isinstance(dest, Register):
        raise InstantiationError(f"destination must be a register, got {dest}")

    instance.has_modrm = True
    if dest.id_high():
        instance.flag_r = True
        instance.has_rex = True
    if dest.is_8_rex():
        instance.has_rex = True

    if isinstance(src, Immediate):
        instance.modrm = ModRM(MOD_DIRECT, 0, dest.id_low())
        return
    if not isinstance(src, Register):
        raise InstantiationError(f"source must be a register or immediate, got {src}")

    if src.id_high():
        instance.flag_b = True
        instance.has_rex = True
    if src.is_8_rex():
        instance.has_rex = True

    instance.modrm = ModRM(MOD_DIRECT, src.id_low(), dest.id_low())


def _add_memory(instance: Instance, memory: Memory, arg) -> None:
    if isinstance(arg, Memory):
        raise InstantiationError("two memory operands")

    instance.has_modrm = True
    reg_id = 0

    if isinstance(arg, Register):
        reg_id = arg.id_low()
        if arg.id_high():
            instance.flag_r = True
            instance.has_rex = True
        if arg.is_8_rex():
            instance.has_rex = True
    elif isinstance(arg, Immediate):
        _set_imm(instance, arg)
    elif arg is not None:
        raise InstantiationError(f"unsupported operand: {arg}")

    base = memory.base
    index = memory.index
    base_id = base.id_low()
    index_id = index.id_low()
    scale = memory.scale
    disp_size = memory.disp_size

    if disp_size not in (Size.NONE, Size.BITS_8, Size.BITS_32):
        raise InstantiationError(f"unsupported displacement size: {disp_size.name}")
    instance.disp_size = disp_size
    instance.disp = memory.disp

    if base.is_ip():
        if disp_size != Size.BITS_32 or not index.is_none():
            raise InstantiationError(
                "instruction-pointer addressing needs a 32-bit displacement and no index"
            )
        instance.modrm = ModRM(MOD_0, reg_id, _IP_ID)
        return

    if base.is_none():
        if disp_size != Size.BITS_32:
            raise InstantiationError("addressing without a base needs a 32-bit displacement")
        instance.modrm = ModRM(MOD_0, reg_id, _SIB_ID)
        if index.is_none():
            instance.sib = SIB(0, _SIB_ID, _IP_ID)
        else:
            if index_id == _SIB_ID:
                raise InstantiationError("this register cannot be used as an index")
            instance.sib = SIB(scale, _SIB_ID, _IP_ID)
        return

    if index.is_none():
        if base_id == _IP_ID and not memory.has_disp():
            raise InstantiationError("this base register needs a displacement")
        instance.modrm = ModRM(int(disp_size), reg_id, base_id)
        if base_id == _SIB_ID:
            instance.sib = SIB(0, _SIB_ID, base_id)
        return

    instance.modrm = ModRM(int(disp_size), reg_id, _SIB_ID)
    if index.id_high():
        instance.flag_x = True
        instance.has_rex = True
    if base.id_high():
        instance.flag_b = True
        instance.has_rex = True
    instance.sib = SIB(scale, index_id, base_id)