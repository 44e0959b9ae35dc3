from __future__ import annotations

# Public surface for the vm package
from .opcodes import Op, OP_TABLE, BYTE_TABLE
from .vm import VM, run_ops
from .asm import assemble, disassemble, assemble_int, assemble_value, parse_op_names

__all__ = [
    "Op",
    "OP_TABLE",
    "BYTE_TABLE",
    "VM",
    "run_ops",
    "assemble",
    "disassemble",
    "assemble_int",
    "assemble_value",
    "parse_op_names",
]
