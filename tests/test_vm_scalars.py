import math
import struct

import pytest
from hypothesis import given, strategies as st

from watson.errors import WatsonStackEmpty, WatsonTypeMismatch
from watson.types.value import (
    Kind,
    new_bool_value,
    new_float_value,
    new_int_value,
    new_nil_value,
    new_string_value,
    new_uint_value,
)
from watson.vm.opcodes import Op
from watson.vm.vm import VM

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

int64s = st.integers(min_value=INT64_MIN, max_value=INT64_MAX)


def push_ints(vm: VM, *ns: int) -> None:
    for n in ns:
        vm.push(new_int_value(n))


# --- Integers ---
def test_inew_pushes_zero(vm):
    vm.feed(Op.Inew)
    assert vm.sp == 0
    assert vm.top() == new_int_value(0)


def test_iinc_increments_the_value(vm):
    vm.feed_multi([Op.Inew, Op.Iinc])
    assert vm.sp == 0
    assert vm.top() == new_int_value(1)


def test_iinc_wraps_around(vm):
    push_ints(vm, INT64_MAX)
    vm.feed(Op.Iinc)
    assert vm.top() == new_int_value(INT64_MIN)


def test_ishl_shifts_the_top_by_1(vm):
    push_ints(vm, 123)
    vm.feed(Op.Ishl)
    assert vm.sp == 0
    assert vm.top() == new_int_value(246)


def test_ishl_wraps_on_overflow(vm):
    push_ints(vm, 1 << 62)
    vm.feed(Op.Ishl)
    assert vm.top() == new_int_value(INT64_MIN)


def test_iadd_adds_two_integers(vm):
    push_ints(vm, 1, 2)
    vm.feed(Op.Iadd)
    assert vm.sp == 0
    assert vm.top() == new_int_value(3)


def test_iadd_wraps_on_overflow(vm):
    push_ints(vm, INT64_MAX, 2)
    vm.feed(Op.Iadd)
    assert vm.top() == new_int_value(INT64_MIN + 1)


def test_ineg_negates_the_top(vm):
    push_ints(vm, 123)
    vm.feed(Op.Ineg)
    assert vm.sp == 0
    assert vm.top() == new_int_value(-123)


def test_ineg_of_min_int_is_min_int(vm):
    push_ints(vm, INT64_MIN)
    vm.feed(Op.Ineg)
    assert vm.top() == new_int_value(INT64_MIN)


def test_isht_shifts_arg2_to_left_by_arg1_when_arg1_is_positive(vm):
    push_ints(vm, 0xabcd0, 4)
    vm.feed(Op.Isht)
    assert vm.sp == 0
    assert vm.top() == new_int_value(0xabcd00)


def test_isht_shifts_arg2_to_right_by_arg1_when_arg1_is_negative(vm):
    push_ints(vm, 0xabcd0, -4)
    vm.feed(Op.Isht)
    assert vm.sp == 0
    assert vm.top() == new_int_value(0xabcd)


@pytest.mark.parametrize(
    "value,amount,expected",
    [
        (5, 0, 5),
        (-16, -2, -4),  # arithmetic right shift
        (-1, -63, -1),
        (1, 63, INT64_MIN),
        (1, 64, 0),
        (123, 1000, 0),
        (123, -64, 0),
        (-123, -1000, -1),
        (INT64_MIN, -63, -1),
        (3, INT64_MIN, 0),
    ]
)
def test_isht_edge_cases(vm, value, amount, expected):
    push_ints(vm, value, amount)
    vm.feed(Op.Isht)
    assert vm.top() == new_int_value(expected)


def test_itof_converts_arg1_to_float(vm):
    bits = struct.unpack("<q", struct.pack("<d", 1.234e-56))[0]
    push_ints(vm, bits)
    vm.feed(Op.Itof)
    assert vm.sp == 0
    assert vm.top() == new_float_value(1.234e-56)


def test_itou_converts_arg1_to_uint(vm):
    push_ints(vm, -1)
    vm.feed(Op.Itou)
    assert vm.sp == 0
    assert vm.top() == new_uint_value(0xFFFFFFFFFFFFFFFF)
    assert vm.top().kind is Kind.UINT


def test_itou_keeps_non_negative_values(vm):
    push_ints(vm, 42)
    vm.feed(Op.Itou)
    assert vm.top() == new_uint_value(42)
    assert vm.top() != new_int_value(42)


# --- Floats ---
def test_finf_pushes_positive_inf(vm):
    vm.feed(Op.Finf)
    assert vm.sp == 0
    assert vm.top() == new_float_value(math.inf)


def test_fnan_pushes_nan(vm):
    vm.feed(Op.Fnan)
    assert vm.sp == 0
    assert vm.top().is_nan()


def test_fneg_negates_arg1(vm):
    vm.push(new_float_value(9.87456e78))
    vm.feed(Op.Fneg)
    assert vm.sp == 0
    assert vm.top() == new_float_value(-9.87456e78)


def test_fneg_can_negate_inf(vm):
    vm.feed_multi([Op.Finf, Op.Fneg])
    assert vm.top() == new_float_value(-math.inf)


# --- Strings ---
def test_snew_pushes_empty_string(vm):
    vm.feed(Op.Snew)
    assert vm.sp == 0
    assert vm.top() == new_string_value(b"")


def test_sadd_adds_a_char_to_string(vm):
    vm.push(new_string_value(b"hello"))
    push_ints(vm, 0x21)  # '!'
    vm.feed(Op.Sadd)
    assert vm.sp == 0
    assert vm.top() == new_string_value(b"hello!")


def test_sadd_keeps_the_low_byte_only(vm):
    vm.push(new_string_value(b""))
    push_ints(vm, 0x1FF)
    vm.feed(Op.Sadd)
    assert vm.top() == new_string_value(b"\xff")


def test_sadd_accepts_arbitrary_bytes(vm):
    vm.push(new_string_value(b"\x00"))
    push_ints(vm, 0x80)
    vm.feed(Op.Sadd)
    assert vm.top() == new_string_value(b"\x00\x80")


# --- Bools and nil ---
def test_bnew_pushes_false(vm):
    vm.feed(Op.Bnew)
    assert vm.sp == 0
    assert vm.top() == new_bool_value(False)


def test_bneg_negates_the_top(vm):
    vm.feed_multi([Op.Bnew, Op.Bneg])
    assert vm.top() == new_bool_value(True)
    vm.feed(Op.Bneg)
    assert vm.top() == new_bool_value(False)
    assert vm.sp == 0


def test_nnew_pushes_nil(vm):
    vm.feed(Op.Nnew)
    assert vm.sp == 0
    assert vm.top() == new_nil_value()


# --- feed_multi ---
def test_feed_multi_does_nothing_when_ops_is_empty(vm):
    vm.feed_multi([])
    assert vm.sp == -1


def test_feed_multi_executes_ops_sequentially(vm):
    vm.feed_multi([Op.Inew, Op.Iinc, Op.Iinc, Op.Iinc])
    assert vm.top() == new_int_value(3)


def test_feed_multi_stops_at_the_first_failure(vm):
    with pytest.raises(WatsonTypeMismatch) as excinfo:
        vm.feed_multi([Op.Inew, Op.Iinc, Op.Bneg, Op.Iinc])
    assert excinfo.value.op is Op.Bneg
    assert vm.sp == 0
    assert vm.top() == new_int_value(1)


def test_top_fails_when_stack_is_empty(vm):
    with pytest.raises(WatsonStackEmpty):
        vm.top()


def test_top_does_not_pop(vm):
    vm.feed(Op.Inew)
    vm.top()
    assert vm.sp == 0


def test_feed_rejects_values_outside_the_op_set(vm):
    with pytest.raises(ValueError):
        vm.feed(0xEE)
    assert vm.sp == -1


def test_trace_logs_each_op(caplog):
    machine = VM(trace=True)
    with caplog.at_level("DEBUG", logger="watson"):
        machine.feed_multi([Op.Inew, Op.Iinc])
    assert "Inew -> sp=0" in caplog.text
    assert "Iinc -> sp=0" in caplog.text


def test_trace_follows_the_environment(monkeypatch):
    monkeypatch.setenv("WATSON_TRACE", "1")
    assert VM().trace is True
    monkeypatch.setenv("WATSON_TRACE", "0")
    assert VM().trace is False


# -------------------------------
# Hypothesis tests
# -------------------------------
@given(int64s)
def test_itof_reinterprets_the_bits_exactly(n):
    vm = VM(trace=False)
    vm.push(new_int_value(n))
    vm.feed(Op.Itof)
    got = vm.top()
    assert got.kind is Kind.FLOAT
    assert struct.pack("<d", got.data) == struct.pack("<q", n)


@given(st.integers(min_value=-(1 << 40), max_value=1 << 40), st.integers(min_value=0, max_value=20))
def test_isht_there_and_back(value, amount):
    vm = VM(trace=False)
    push_ints(vm, value, amount)
    vm.feed(Op.Isht)
    push_ints(vm, -amount)
    vm.feed(Op.Isht)
    assert vm.top() == new_int_value(value)
    assert vm.sp == 0


@given(int64s)
def test_itou_matches_twos_complement(n):
    vm = VM(trace=False)
    push_ints(vm, n)
    vm.feed(Op.Itou)
    assert vm.top() == new_uint_value(n % (1 << 64))
