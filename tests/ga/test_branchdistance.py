#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
import math

import hypothesis.strategies as st
import pytest

from hypothesis import assume
from hypothesis import given

from covsearch.ga.branchdistance import MAX_DISTANCE
from covsearch.ga.branchdistance import SUPPORTED_OPCODES
from covsearch.ga.branchdistance import normalise
from covsearch.ga.branchdistance import numeric_distance
from covsearch.ga.branchdistance import raw_distance
from covsearch.utils.exceptions import InvariantViolationException
from covsearch.utils.exceptions import TraceLengthMismatchException
from covsearch.utils.exceptions import UnsupportedOpcodeException


values = st.one_of(st.integers(), st.sampled_from([2**60, -(2**60), 2**256 - 1, 2**1100]))


@pytest.mark.parametrize(
    "opcode,left,right,target,result",
    [
        pytest.param("GT", [3], [5], True, 0.75),
        pytest.param("GT", [3], [5], False, 0.0),
        pytest.param("GT", [5], [3], True, 0.0),
        pytest.param("GT", [5], [5], True, 0.5),
        pytest.param("GE", [5], [5], True, 0.0),
        pytest.param("GE", [4], [5], True, 0.5),
        pytest.param("LT", [3], [5], True, 0.0),
        pytest.param("LT", [5], [5], True, 0.5),
        pytest.param("LE", [7], [5], True, 2 / 3),
        pytest.param("EQ", [2], [5], True, 0.75),
        pytest.param("EQ", [5], [5], False, 0.5),
        pytest.param("NEQ", [5], [5], True, 0.5),
        pytest.param("NEQ", [1], [5], False, 0.8),
        pytest.param("SGT", [-3], [-1], True, 0.75),
        pytest.param("SLE", [-1], [-3], False, 0.0),
    ],
)
def test_numeric_distance(opcode, left, right, target, result):
    assert numeric_distance(opcode, left, right, target) == pytest.approx(result)


def test_minimum_over_samples():
    assert raw_distance("EQ", [10, 4, 7], [5, 5, 5], True) == 1


def test_signed_opcodes_behave_like_unsigned():
    for signed, unsigned in (("SGT", "GT"), ("SLT", "LT"), ("SGE", "GE"), ("SLE", "LE")):
        assert raw_distance(signed, [-4], [2], True) == raw_distance(unsigned, [-4], [2], True)


@given(opcode=st.sampled_from(sorted(SUPPORTED_OPCODES)), left=values, right=values)
def test_distance_range(opcode, left, right):
    for target in (True, False):
        distance = numeric_distance(opcode, [left], [right], target)
        assert 0.0 <= distance < 1.0


@given(opcode=st.sampled_from(sorted(SUPPORTED_OPCODES)), left=values, right=values)
def test_exactly_one_side_is_covered(opcode, left, right):
    holds = numeric_distance(opcode, [left], [right], True) == 0.0
    fails = numeric_distance(opcode, [left], [right], False) == 0.0
    assert holds != fails


@given(
    a=st.integers(min_value=0, max_value=1_000_000),
    b=st.integers(min_value=0, max_value=1_000_000),
)
def test_normalise_is_strictly_monotonic(a, b):
    assume(a != b)
    low, high = sorted((a, b))
    assert normalise(low) < normalise(high)


@pytest.mark.parametrize(
    "opcode,left,right",
    [
        pytest.param("GT", [0], [2**60]),
        pytest.param("EQ", [0], [2**1100]),
        pytest.param("LT", [2**1100], [-(2**1100)]),
        pytest.param("EQ", [0.5], [2**1100]),
        pytest.param("GE", [-1e308], [1e308]),
        pytest.param("EQ", [0.0], [math.inf]),
    ],
)
def test_huge_gaps_stay_below_one(opcode, left, right):
    assert numeric_distance(opcode, left, right, True) == MAX_DISTANCE


def test_huge_integers_keep_exact_raw_distance():
    assert raw_distance("GT", [0], [2**1100], True) == 2**1100 + 1


def test_normalise_huge_integer():
    assert normalise(2**1100) == 1.0


def test_normalise_infinity():
    assert normalise(math.inf) == 1.0


@pytest.mark.parametrize("value", [-1.0, math.nan])
def test_normalise_rejects_invalid(value):
    with pytest.raises(InvariantViolationException):
        normalise(value)


def test_unsupported_opcode():
    with pytest.raises(UnsupportedOpcodeException) as error:
        numeric_distance("FOO", [1], [1], True)
    assert error.value.opcode == "FOO"


def test_unsupported_opcode_is_invariant_violation():
    with pytest.raises(InvariantViolationException):
        numeric_distance("FOO", [1], [1], True)


def test_trace_length_mismatch():
    with pytest.raises(TraceLengthMismatchException):
        numeric_distance("EQ", [1, 2], [1], True)


def test_empty_traces():
    with pytest.raises(TraceLengthMismatchException):
        numeric_distance("EQ", [], [], True)


def test_nan_operand():
    with pytest.raises(InvariantViolationException):
        numeric_distance("LT", [math.nan], [1], True)
