#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the numeric branch distance heuristic.

The branch distance measures how close a comparison was to evaluating to the
required truth value.  A comparison site may be executed several times, thus
the operands are given as parallel traces and the closest near-miss counts.
"""

from __future__ import annotations

import math

from typing import TYPE_CHECKING

from covsearch.utils.exceptions import InvariantViolationException
from covsearch.utils.exceptions import TraceLengthMismatchException
from covsearch.utils.exceptions import UnsupportedOpcodeException


if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Sequence


# The largest float below 1.0, the cap of a numeric branch distance.
MAX_DISTANCE = math.nextafter(1.0, 0.0)


def _is_nan(value: float) -> bool:
    # Integers may exceed the float range, so only floats are checked.
    return isinstance(value, float) and math.isnan(value)


def normalise(value: float) -> float:
    """Normalise a value.

    Integer values are divided exactly, thus arbitrarily large integers do not
    overflow.

    Args:
        value: The value to normalise

    Returns:
        The normalised value

    Raises:
        InvariantViolationException: if the value is negative or NaN
    """
    if _is_nan(value) or value < 0:
        raise InvariantViolationException(f"Cannot normalise distance {value}")
    if value == math.inf:
        return 1.0
    return value / (value + 1)


def _equal(left: float, right: float) -> float:
    return abs(left - right)


def _not_equal(left: float, right: float) -> float:
    if left != right:
        return 0
    return 1


def _greater(left: float, right: float) -> float:
    if left > right:
        return 0
    return right - left + 1


def _greater_equal(left: float, right: float) -> float:
    if left >= right:
        return 0
    return right - left


def _smaller(left: float, right: float) -> float:
    if left < right:
        return 0
    return left - right + 1


def _smaller_equal(left: float, right: float) -> float:
    if left <= right:
        return 0
    return left - right


# Opcode -> (distance if the comparison shall hold, distance if it shall not).
# The signed variants only differ in how the runner interprets the operands.
_DISTANCES: dict[str, tuple[Callable[[float, float], float], Callable[[float, float], float]]] = {
    "EQ": (_equal, _not_equal),
    "NEQ": (_not_equal, _equal),
    "GT": (_greater, _smaller_equal),
    "SGT": (_greater, _smaller_equal),
    "LT": (_smaller, _greater_equal),
    "SLT": (_smaller, _greater_equal),
    "GE": (_greater_equal, _smaller),
    "SGE": (_greater_equal, _smaller),
    "LE": (_smaller_equal, _greater),
    "SLE": (_smaller_equal, _greater),
}

SUPPORTED_OPCODES = frozenset(_DISTANCES)


def raw_distance(
    opcode: str,
    left: Sequence[float],
    right: Sequence[float],
    target: bool,  # noqa: FBT001
) -> float:
    """Compute the unnormalised branch distance.

    Args:
        opcode: The comparison operator
        left: The left operand values, one per execution of the comparison
        right: The right operand values, paired with `left`
        target: The truth value the comparison shall evaluate to

    Returns:
        The minimal distance over all paired samples

    Raises:
        UnsupportedOpcodeException: if the opcode is unknown
        TraceLengthMismatchException: if the traces cannot be paired
        InvariantViolationException: if an operand is NaN
    """
    if opcode not in _DISTANCES:
        raise UnsupportedOpcodeException(opcode)
    if len(left) != len(right):
        raise TraceLengthMismatchException(
            f"Cannot pair {len(left)} left with {len(right)} right values for {opcode}"
        )
    if len(left) == 0:
        raise TraceLengthMismatchException(f"No values traced for {opcode}")

    holds, fails = _DISTANCES[opcode]
    distance_function = holds if target else fails
    minimum = math.inf
    for left_value, right_value in zip(left, right, strict=True):
        if _is_nan(left_value) or _is_nan(right_value):
            raise InvariantViolationException(f"NaN operand traced for {opcode}")
        try:
            distance = distance_function(left_value, right_value)
        except OverflowError:
            # A float and an integer beyond the float range.
            distance = math.inf
        minimum = min(minimum, distance)
        if minimum == 0.0:
            break
    return minimum


def numeric_distance(
    opcode: str,
    left: Sequence[float],
    right: Sequence[float],
    target: bool,  # noqa: FBT001
) -> float:
    """Calculate the normalised branch distance of a numeric comparison.

    >>> numeric_distance("GT", [3], [5], True)
    0.75
    >>> numeric_distance("GT", [3], [5], False)
    0.0

    Gaps too large to be told apart from 1.0 are capped at `MAX_DISTANCE`.

    Args:
        opcode: The comparison operator
        left: The left operand values, one per execution of the comparison
        right: The right operand values, paired with `left`
        target: The side of the branch that shall be covered

    Returns:
        A distance in [0, 1), which is 0 iff the comparison already evaluated to
        `target` for one of the samples
    """
    return min(normalise(raw_distance(opcode, left, right, target)), MAX_DISTANCE)
