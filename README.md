# x86enc

x86enc turns x86-64 instructions, given as Python objects, into machine code.
It models registers, memory operands and immediates. It matches each
instruction against a table of operand schemata, then builds an encoded
instance from the first schema that fits. The instance holds the prefixes, the
REX byte, ModRM, SIB, displacement and immediate. The instance is then written
out as bytes.

Two operations are supported:

- `add`, in its register, memory and immediate forms.
- `nop`, whose length is given as an 8-bit immediate. A `nop` longer than one
  byte is padded with `0x66` prefixes, and it is split into 15-byte pieces
  when it is longer than that.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
x86enc
```

The command takes no options apart from `--help`. It encodes a fixed series of
sample instructions into a 4096-byte buffer:

1. three `nop`s, of lengths 1, 2 and 3;
2. sixteen zero bytes;
3. a set of `add` instructions.

Each instruction starts in its own 256-byte slot. For every instruction the
command prints either `good instr: ...` or `bad instruction returned: ...`.
It then prints a hexdump that shows only the 16-byte rows of the buffer that
hold a non-zero byte.

## Using the library

```python
from x86enc.encoding import instantiate
from x86enc.instance import Instruction, Op
from x86enc.operands import Size, imm
from x86enc.registers import AL
from x86enc.writer import encode

instance = instantiate(Instruction(Op.ADD, (AL, imm(0xFF, Size.BITS_8))))
assert encode(instance) == b"\x04\xff"
```

`instantiate` raises `x86enc.instance.InstantiationError` when an instruction
has no encoding.

### Modules

- `x86enc.registers` defines `RegisterType` and the frozen dataclass
  `Register`. A register has methods such as `id_low`, `id_high`, `is_ip`,
  `is_8_rex` and `size`. The module also defines the named registers:
  - general: `AL` through `R15`, and `R0` through `R7L`;
  - `SPL`, `BPL`, `SIL` and `DIL`;
  - `EIP` and `RIP`;
  - x87, MMX, XMM and YMM;
  - segment, control and debug;
  - `REGISTER_NONE`.
- `x86enc.operands` defines `Size`, `ArgType`, `Immediate` and `Memory`, and
  these helpers:
  - `imm` truncates the value to its size, and raises `ValueError` for a size
    other than 8, 16, 32 or 64 bits.
  - `mem`, `mem_base` and `mem_disp` build memory operands. `mem` raises
    `TypeError` when the base or the index is not a `Register`.
  - `arg_type`, `arg_size` and `format_arg` describe an operand. In these
    helpers `None` stands for "no operand".
- `x86enc.instance` defines `Op`, `Instruction`, `InstanceType`, `Opcode`,
  `ModRM`, `SIB`, the mutable `Instance`, and `InstantiationError`. The last
  is a subclass of `ValueError`.
- `x86enc.schemata` defines `ArgInfo` and `Schema`, the builders `reg_type`,
  `mem_type`, `memreg_type` and `imm_type`, and the tables `ADD_SCHEMATA` and
  `NOP_SCHEMATA`. `match_schema` returns the first schema that an instruction
  fits.
- `x86enc.encoding` provides these functions:
  - `instantiate` dispatches on the operation.
  - `instantiate_legacy` encodes against a given schema table.
  - `instantiate_vex` lays out operands in the same way.
  - `instantiate_nop` builds a padding instance.
- `x86enc.writer` provides `encode`, which returns the bytes of an instance,
  and `write_instance`, which writes them into a buffer. The writer handles
  legacy, VEX, 3DNow! and nop instances. `encode` returns empty bytes for an
  instance with a zero-length opcode.
- `x86enc.buffer` provides `Buffer`, a zero-filled fixed-size byte buffer with
  a cursor. It offers:
  - `write_8`, `write_16`, `write_32` and `write_64`, which write
    little-endian and raise `IndexError` when the buffer is full;
  - `align`, which always advances to the next multiple of the boundary;
  - `hexdump`, which returns the dump as a string.

## What it does not do

- It does not read assembly text. Instructions are built only as Python
  objects.
- It has no encodings beyond `add` and `nop`.
- Nothing in the package produces VEX or 3DNow! instances, although the
  writer can write them.
- The command only runs its built-in samples and prints them. It does not
  write object or binary files.