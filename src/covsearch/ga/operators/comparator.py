#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides comparators for the environmental selection."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from ordered_set import OrderedSet

from covsearch.ga.encoding import Encoding


if TYPE_CHECKING:
    from collections.abc import Iterable

    from covsearch.ga.objectivefunction import ObjectiveFunction


E = TypeVar("E", bound=Encoding)


class DominanceComparator(Generic[E]):
    """Compares encodings by Pareto dominance on a set of objectives.

    An encoding dominates another iff it is no worse on every objective and
    strictly better on at least one of them.
    """

    def __init__(self, objectives: Iterable[ObjectiveFunction[E]]) -> None:
        """Instantiates the comparator.

        Args:
            objectives: The objectives to compare on
        """
        self._objectives: OrderedSet[ObjectiveFunction[E]] = OrderedSet(objectives)

    def compare(self, encoding_1: E | None, encoding_2: E | None) -> int:
        """Compares two encodings regarding their dominance.

        Args:
            encoding_1: The first encoding
            encoding_2: The second encoding

        Returns:
            -1 if encoding_1 dominates encoding_2; 1 if encoding_1 is dominated by
            encoding_2; 0 otherwise
        """
        if encoding_1 is None:
            return 1
        if encoding_2 is None:
            return -1

        dominate_1 = False
        dominate_2 = False

        for objective in self._objectives:
            value_1 = encoding_1.get_distance(objective)
            value_2 = encoding_2.get_distance(objective)
            if value_1 < value_2:
                dominate_1 = True
                if dominate_2:
                    return 0
            elif value_1 > value_2:
                dominate_2 = True
                if dominate_1:
                    return 0

        if dominate_1 == dominate_2:
            return 0  # no one dominates the other
        if dominate_1:
            return -1
        return 1


class PreferenceSortingComparator(Generic[E]):
    """Compares encodings on a single objective, preferring shorter ones on ties."""

    def __init__(self, objective: ObjectiveFunction[E]) -> None:
        """Initializes the comparator.

        Args:
            objective: The objective to respect for the comparison
        """
        self._objective = objective

    def compare(self, encoding_1: E | None, encoding_2: E | None) -> int:
        """Compare the distances of two encodings focusing only on one objective.

        Args:
            encoding_1: An encoding
            encoding_2: An encoding

        Returns:
            -1 if encoding_1 is closer to the objective than encoding_2, or equally
            close but shorter; 0 if both are equal in both respects; 1 otherwise
        """
        if encoding_1 is None:
            return 1
        if encoding_2 is None:
            return -1

        value_1 = encoding_1.get_distance(self._objective)
        value_2 = encoding_2.get_distance(self._objective)
        if value_1 < value_2:
            return -1
        if value_1 > value_2:
            return 1
        if encoding_1.length() < encoding_2.length():
            return -1
        if encoding_1.length() > encoding_2.length():
            return 1
        return 0
