#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the NSGA-II algorithm."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import TypeVar

from covsearch.ga.algorithms.searchalgorithm import EvolutionaryAlgorithm
from covsearch.ga.encoding import Encoding
from covsearch.ga.operators.ranking import FastNonDominatedSorting
from covsearch.ga.operators.ranking import crowding_distance_assignment


if TYPE_CHECKING:
    from collections.abc import Callable

    from ordered_set import OrderedSet

    from covsearch.ga.budget import BudgetManager
    from covsearch.ga.objectivefunction import ObjectiveFunction
    from covsearch.ga.operators.ranking import RankingFunction

E = TypeVar("E", bound=Encoding)


class NSGAIIAlgorithm(EvolutionaryAlgorithm[E]):
    """The non-dominated sorting genetic algorithm by Deb et al.

    Parents and offspring compete for the next population.  They are ranked by
    non-dominated sorting on the current objectives and the last admitted front
    is truncated by crowding distance.
    """

    def _ranking_function(self) -> RankingFunction[E]:
        return FastNonDominatedSorting()

    def _distance_assignment(
        self,
    ) -> Callable[[list[E], OrderedSet[ObjectiveFunction[E]]], None]:
        return crowding_distance_assignment

    def _iterate(self, budget_manager: BudgetManager) -> None:
        offspring_population = self._breed_and_evaluate(self._population, budget_manager)

        # Parents first, so ties keep the parents.
        union: list[E] = []
        union.extend(self._population)
        union.extend(offspring_population)

        objectives = self._objective_manager.current_objectives
        self._logger.debug("Union Size = %d", len(union))
        fronts = self._ranking_function().compute_ranking_assignment(union, objectives)
        self._population = self._select_from_fronts(
            fronts, objectives, self._distance_assignment()
        )
