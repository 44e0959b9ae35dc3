"""Fixed-width 64-bit helpers.

Python ints are unbounded, so every Int result is folded back into the
signed 64-bit range here. Bit reinterpretation goes through numpy's
fixed-width dtypes, which share one buffer between views.
"""

from __future__ import annotations

import numpy as np

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1
WORD_BITS = 64

_MASK = UINT64_MAX


def wrap_int64(n: int) -> int:
    """Two's-complement wrap of an arbitrary int into [-2**63, 2**63)."""
    n &= _MASK
    return n - (1 << 64) if n & (1 << 63) else n


def wrap_uint64(n: int) -> int:
    return n & _MASK


def shift_int64(value: int, amount: int) -> int:
    """Shift left by a non-negative amount, right (arithmetic) by a negative one."""
    if amount >= 0:
        if amount >= WORD_BITS:
            return 0
        return wrap_int64(value << amount)
    amount = -amount
    if amount >= WORD_BITS:
        return -1 if value < 0 else 0
    return value >> amount


def int64_bits_to_float(n: int) -> float:
    return float(np.array([n], dtype=np.int64).view(np.float64)[0])


def float_to_int64_bits(f: float) -> int:
    return int(np.array([f], dtype=np.float64).view(np.int64)[0])


def int64_to_uint64(n: int) -> int:
    return int(np.array([n], dtype=np.int64).view(np.uint64)[0])


def uint64_to_int64(n: int) -> int:
    return int(np.array([n], dtype=np.uint64).view(np.int64)[0])
