"""Encode x86-64 add and nop instructions, built as Python objects, into machine code."""

__version__ = "0.1.0"
__all__ = ["buffer", "cli", "encoding", "instance", "operands", "registers", "schemata", "writer"]