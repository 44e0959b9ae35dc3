from __future__ import annotations

from typing import Iterable, List

from watson.errors import WatsonSyntaxError
from watson.types.bits import INT64_MIN, float_to_int64_bits, uint64_to_int64, wrap_int64
from watson.types.value import Kind, Value

from .opcodes import BYTE_TABLE, Op


def assemble(ops: Iterable[Op]) -> bytes:
    return bytes(BYTE_TABLE[Op(op)] for op in ops)


def disassemble(ops: Iterable[Op]) -> str:
    out = []
    for i, op in enumerate(ops):
        out.append(f"{i:04d}: {Op(op).name}")
    return "\n".join(out)


def parse_op_names(source: str) -> List[Op]:
    """Whitespace separated op names (``Inew Iinc ...``) to ops; ``;`` starts a comment."""
    ops: List[Op] = []
    for lineno, line in enumerate(source.splitlines(), 1):
        line = line.split(';', 1)[0]
        for name in line.split():
            try:
                ops.append(Op[name])
            except KeyError:
                raise WatsonSyntaxError(f"line {lineno}: unknown op {name!r}") from None
    return ops


# --- Value builders ---
def assemble_int(n: int) -> List[Op]:
    """Ops that push Int(n): binary expansion with Ishl/Iinc, Ineg for negatives."""
    n = wrap_int64(n)
    if n == INT64_MIN:
        # -2**63 has no positive counterpart; 1 << 63 wraps onto it
        return [Op.Inew, Op.Iinc] + [Op.Ishl] * 63
    if n < 0:
        return assemble_int(-n) + [Op.Ineg]
    ops = [Op.Inew]
    if n == 0:
        return ops
    bits = bin(n)[2:]
    ops.append(Op.Iinc)
    for bit in bits[1:]:
        ops.append(Op.Ishl)
        if bit == '1':
            ops.append(Op.Iinc)
    return ops


def assemble_value(v: Value) -> List[Op]:
    """Ops that rebuild v on top of the stack, leaving everything below untouched."""
    kind = v.kind
    if kind is Kind.NIL:
        return [Op.Nnew]
    if kind is Kind.BOOL:
        return [Op.Bnew, Op.Bneg] if v.data else [Op.Bnew]
    if kind is Kind.INT:
        return assemble_int(v.data)
    if kind is Kind.UINT:
        return assemble_int(uint64_to_int64(v.data)) + [Op.Itou]
    if kind is Kind.FLOAT:
        return assemble_int(float_to_int64_bits(v.data)) + [Op.Itof]
    if kind is Kind.STRING:
        return _assemble_bytes(v.data)
    if kind is Kind.ARRAY:
        ops = [Op.Anew]
        for item in v.data:
            ops += assemble_value(item)
            ops.append(Op.Aadd)
        return ops
    if kind is Kind.OBJECT:
        ops = [Op.Onew]
        for key, item in v.data.items():
            ops += _assemble_bytes(key)
            ops += assemble_value(item)
            ops.append(Op.Oadd)
        return ops
    raise ValueError(f"unknown kind: {kind!r}")


def _assemble_bytes(data: bytes) -> List[Op]:
    ops = [Op.Snew]
    for b in data:
        ops += assemble_int(b)
        ops.append(Op.Sadd)
    return ops
