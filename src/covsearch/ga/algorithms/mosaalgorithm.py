#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the MOSA test-generation strategy."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import TypeVar

from covsearch.ga.algorithms.nsgaiialgorithm import NSGAIIAlgorithm
from covsearch.ga.encoding import Encoding
from covsearch.ga.operators.ranking import RankBasedPreferenceSorting
from covsearch.ga.operators.ranking import fast_epsilon_dominance_assignment


if TYPE_CHECKING:
    from collections.abc import Callable

    from ordered_set import OrderedSet

    from covsearch.ga.objectivefunction import ObjectiveFunction
    from covsearch.ga.operators.ranking import RankingFunction

E = TypeVar("E", bound=Encoding)


class MOSAAlgorithm(NSGAIIAlgorithm[E]):
    """Implements the Many-Objective Sorting Algorithm MOSA.

    The first front holds the best encoding for every current objective, the
    remaining fronts follow by non-dominated sorting.  Crowding is measured by
    the epsilon-dominance assignment, which scales to many objectives.

    Combined with a structural coverage policy, which only activates objectives
    whose structural parents are covered, this is DynaMOSA.
    """

    def _ranking_function(self) -> RankingFunction[E]:
        return RankBasedPreferenceSorting(self._population_size)

    def _distance_assignment(
        self,
    ) -> Callable[[list[E], OrderedSet[ObjectiveFunction[E]]], None]:
        return fast_epsilon_dominance_assignment
