"""Watson's value model.

A Value is a kind tag plus a payload:

    - NIL    -> Nil
    - BOOL   -> bool
    - INT    -> int, signed 64-bit range
    - UINT   -> int, unsigned 64-bit range
    - FLOAT  -> float (inf and nan allowed)
    - STRING -> bytes
    - ARRAY  -> list[Value]
    - OBJECT -> dict[bytes, Value]

Containers own their elements. Anything stored into a container, or
duplicated on the stack, must be a clone() of the source so that no two live
Values share mutable sub-structure.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from watson.types.bits import wrap_int64, wrap_uint64
from watson.types.nil import Nil


class Kind(Enum):
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"

    def __str__(self):
        return self.value


class Value:
    __slots__ = ("kind", "data")

    def __init__(self, kind: Kind, data: Any):
        self.kind = kind
        self.data = data

    # --- predicates ---
    def is_nan(self) -> bool:
        return self.kind is Kind.FLOAT and math.isnan(self.data)

    def is_nil(self) -> bool:
        return self.kind is Kind.NIL

    # --- ownership ---
    def clone(self) -> Value:
        """Deep copy. Scalars carry immutable payloads; containers recurse."""
        if self.kind is Kind.ARRAY:
            return Value(Kind.ARRAY, [v.clone() for v in self.data])
        if self.kind is Kind.OBJECT:
            return Value(Kind.OBJECT, {k: v.clone() for k, v in self.data.items()})
        return Value(self.kind, self.data)

    __copy__ = clone

    def __deepcopy__(self, memo):
        return self.clone()

    # --- equality ---
    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is Kind.BOOL:
            return self.data is other.data
        return self.data == other.data

    __hash__ = None  # mutable

    def __repr__(self):
        if self.kind is Kind.NIL:
            return "new_nil_value()"
        return f"new_{self.kind.value}_value({self.data!r})"


def new_nil_value() -> Value:
    return Value(Kind.NIL, Nil)


def new_bool_value(b: bool) -> Value:
    return Value(Kind.BOOL, bool(b))


def new_int_value(n: int) -> Value:
    return Value(Kind.INT, wrap_int64(n))


def new_uint_value(n: int) -> Value:
    return Value(Kind.UINT, wrap_uint64(n))


def new_float_value(f: float) -> Value:
    return Value(Kind.FLOAT, float(f))


def new_string_value(s: bytes | bytearray) -> Value:
    return Value(Kind.STRING, bytes(s))


def new_array_value(items: list[Value] | None = None) -> Value:
    return Value(Kind.ARRAY, [] if items is None else items)


def new_object_value(entries: dict[bytes, Value] | None = None) -> Value:
    return Value(Kind.OBJECT, {} if entries is None else entries)
