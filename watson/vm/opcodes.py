from __future__ import annotations

from enum import IntEnum


class Op(IntEnum):
    # Integers
    Inew = 0x00
    Iinc = 0x01
    Ishl = 0x02
    Iadd = 0x03
    Ineg = 0x04
    Isht = 0x05  # arg1: shift amount, arg2: value
    Itof = 0x06  # bit cast
    Itou = 0x07  # bit cast

    # Floats
    Finf = 0x10
    Fnan = 0x11
    Fneg = 0x12

    # Strings
    Snew = 0x20
    Sadd = 0x21  # arg1: byte, arg2: string

    # Objects
    Onew = 0x30
    Oadd = 0x31  # arg1: value, arg2: key, arg3: object

    # Arrays
    Anew = 0x40
    Aadd = 0x41  # arg1: value, arg2: array

    # Bools
    Bnew = 0x50
    Bneg = 0x51

    # Nil
    Nnew = 0x60

    # Generic stack manipulation
    Gdup = 0x70
    Gpop = 0x71
    Gswp = 0x72


# Byte -> op table of the Watson grammar. Fixed; do not reorder or extend.
# Y, u, m and y are the bytes of the early Watson lexer. The other 19 are the
# "A" mode column of the instruction table in the upstream genkami/watson
# doc/spec.md, where Inew, Ishl and Iadd moved to B, b and a.
OP_TABLE: dict[int, Op] = {
    ord('Y'): Op.Inew,
    ord('u'): Op.Iinc,
    ord('m'): Op.Ishl,
    ord('y'): Op.Iadd,
    ord('A'): Op.Ineg,
    ord('e'): Op.Isht,
    ord('i'): Op.Itof,
    ord("'"): Op.Itou,
    ord('q'): Op.Finf,
    ord('t'): Op.Fnan,
    ord('p'): Op.Fneg,
    ord('?'): Op.Snew,
    ord('!'): Op.Sadd,
    ord('~'): Op.Onew,
    ord('M'): Op.Oadd,
    ord('@'): Op.Anew,
    ord('s'): Op.Aadd,
    ord('z'): Op.Bnew,
    ord('o'): Op.Bneg,
    ord('.'): Op.Nnew,
    ord('E'): Op.Gdup,
    ord('#'): Op.Gpop,
    ord('%'): Op.Gswp,
}

# Op -> byte, the inverse used by the assembler
BYTE_TABLE: dict[Op, int] = {op: b for b, op in OP_TABLE.items()}
