from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, List

from watson.config import trace_enabled
from watson.errors import WatsonError, WatsonStackEmpty, WatsonTypeMismatch
from watson.types.bits import int64_bits_to_float, int64_to_uint64, shift_int64
from watson.types.value import (
    Kind,
    Value,
    new_array_value,
    new_bool_value,
    new_float_value,
    new_int_value,
    new_nil_value,
    new_object_value,
    new_string_value,
    new_uint_value,
)

from .opcodes import Op

logger = logging.getLogger(__name__)

# Operand kind wildcard for ops that accept any Value
ANY = None


class VM:
    """Operand stack machine for Watson ops.

    Every handler is all-or-nothing: operands are counted, then kind-checked
    (arg1 is the top of the stack), and only then popped. A failing op leaves
    the stack exactly as it found it.
    """

    def __init__(self, trace: bool | None = None):
        self.stack: List[Value] = []
        self.trace = trace_enabled() if trace is None else trace
        # Opcode dispatch table
        self._dispatch: dict[Op, Callable[[], None]] = {}
        self._init_dispatch()

    def _init_dispatch(self) -> None:
        d = self._dispatch
        # Integers
        d[Op.Inew] = self.op_inew
        d[Op.Iinc] = self.op_iinc
        d[Op.Ishl] = self.op_ishl
        d[Op.Iadd] = self.op_iadd
        d[Op.Ineg] = self.op_ineg
        d[Op.Isht] = self.op_isht
        d[Op.Itof] = self.op_itof
        d[Op.Itou] = self.op_itou
        # Floats
        d[Op.Finf] = self.op_finf
        d[Op.Fnan] = self.op_fnan
        d[Op.Fneg] = self.op_fneg
        # Strings
        d[Op.Snew] = self.op_snew
        d[Op.Sadd] = self.op_sadd
        # Objects
        d[Op.Onew] = self.op_onew
        d[Op.Oadd] = self.op_oadd
        # Arrays
        d[Op.Anew] = self.op_anew
        d[Op.Aadd] = self.op_aadd
        # Bools
        d[Op.Bnew] = self.op_bnew
        d[Op.Bneg] = self.op_bneg
        # Nil
        d[Op.Nnew] = self.op_nnew
        # Generic
        d[Op.Gdup] = self.op_gdup
        d[Op.Gpop] = self.op_gpop
        d[Op.Gswp] = self.op_gswp

        missing = [op.name for op in Op if op not in d]
        if missing:
            raise RuntimeError(f"No handler for ops: {', '.join(missing)}")

    # --- Public surface ---
    @property
    def sp(self) -> int:
        return len(self.stack) - 1

    def feed(self, op: Op) -> None:
        handler = self._dispatch.get(op)
        if handler is None:
            raise ValueError(f"Unknown op: {op!r}")
        try:
            handler()
        except WatsonError as err:
            err.at(Op(op), None)
            raise
        if self.trace:
            logger.debug("%s -> sp=%d", Op(op).name, self.sp)

    def feed_multi(self, ops: Iterable[Op]) -> None:
        for op in ops:
            self.feed(op)

    def top(self) -> Value:
        if not self.stack:
            raise WatsonStackEmpty("stack is empty")
        return self.stack[-1]

    # --- Stack helpers ---
    def push(self, v: Value) -> None:
        self.stack.append(v)

    def pop(self) -> Value:
        if not self.stack:
            raise WatsonStackEmpty("stack is empty")
        return self.stack.pop()

    def peek(self, n: int = 0) -> Value:
        return self.stack[-1 - n]

    def _args(self, *kinds: Kind | None) -> tuple[Value, ...]:
        """Check then pop len(kinds) operands, returned as (arg1, arg2, ...)."""
        n = len(kinds)
        if len(self.stack) < n:
            raise WatsonStackEmpty(f"need {n} operand(s), stack has {len(self.stack)}")
        for i, kind in enumerate(kinds):
            if kind is ANY:
                continue
            actual = self.peek(i).kind
            if actual is not kind:
                raise WatsonTypeMismatch(
                    f"arg{i + 1}: expected {kind}, got {actual}",
                    position=i + 1,
                    expected=kind,
                    actual=actual,
                )
        args = tuple(reversed(self.stack[-n:])) if n else ()
        del self.stack[len(self.stack) - n:]
        return args

    # --- Per-op handlers ---
    # Integers
    def op_inew(self) -> None:
        self.push(new_int_value(0))

    def op_iinc(self) -> None:
        (a,) = self._args(Kind.INT)
        self.push(new_int_value(a.data + 1))

    def op_ishl(self) -> None:
        (a,) = self._args(Kind.INT)
        self.push(new_int_value(a.data << 1))

    def op_iadd(self) -> None:
        a, b = self._args(Kind.INT, Kind.INT)
        self.push(new_int_value(a.data + b.data))

    def op_ineg(self) -> None:
        (a,) = self._args(Kind.INT)
        self.push(new_int_value(-a.data))

    def op_isht(self) -> None:
        amount, value = self._args(Kind.INT, Kind.INT)
        self.push(new_int_value(shift_int64(value.data, amount.data)))

    def op_itof(self) -> None:
        (a,) = self._args(Kind.INT)
        self.push(new_float_value(int64_bits_to_float(a.data)))

    def op_itou(self) -> None:
        (a,) = self._args(Kind.INT)
        self.push(new_uint_value(int64_to_uint64(a.data)))

    # Floats
    def op_finf(self) -> None:
        self.push(new_float_value(math.inf))

    def op_fnan(self) -> None:
        self.push(new_float_value(math.nan))

    def op_fneg(self) -> None:
        (a,) = self._args(Kind.FLOAT)
        self.push(new_float_value(-a.data))

    # Strings
    def op_snew(self) -> None:
        self.push(new_string_value(b""))

    def op_sadd(self) -> None:
        c, s = self._args(Kind.INT, Kind.STRING)
        self.push(new_string_value(s.data + bytes((c.data & 0xFF,))))

    # Objects
    def op_onew(self) -> None:
        self.push(new_object_value())

    def op_oadd(self) -> None:
        v, k, obj = self._args(ANY, Kind.STRING, Kind.OBJECT)
        obj.data[k.data] = v.clone()
        self.push(obj)

    # Arrays
    def op_anew(self) -> None:
        self.push(new_array_value())

    def op_aadd(self) -> None:
        v, arr = self._args(ANY, Kind.ARRAY)
        arr.data.append(v.clone())
        self.push(arr)

    # Bools
    def op_bnew(self) -> None:
        self.push(new_bool_value(False))

    def op_bneg(self) -> None:
        (a,) = self._args(Kind.BOOL)
        self.push(new_bool_value(not a.data))

    # Nil
    def op_nnew(self) -> None:
        self.push(new_nil_value())

    # Generic
    def op_gdup(self) -> None:
        (a,) = self._args(ANY)
        self.push(a)
        self.push(a.clone())

    def op_gpop(self) -> None:
        self._args(ANY)

    def op_gswp(self) -> None:
        a, b = self._args(ANY, ANY)
        self.push(a)
        self.push(b)


def run_ops(ops: Iterable[Op], trace: bool | None = None) -> Value:
    vm = VM(trace=trace)
    vm.feed_multi(ops)
    return vm.top()
