#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides implementations of ranking functions and distance assignments."""

from __future__ import annotations

import logging
import math
import sys

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from ordered_set import OrderedSet

import covsearch.configuration as config

from covsearch.ga.encoding import Encoding
from covsearch.ga.operators.comparator import DominanceComparator
from covsearch.ga.operators.comparator import PreferenceSortingComparator


if TYPE_CHECKING:
    from collections.abc import Iterable

    from covsearch.ga.objectivefunction import ObjectiveFunction

E = TypeVar("E", bound=Encoding)


@dataclass
class RankedFronts(Generic[E]):
    """Contains the ranked fronts."""

    fronts: list[list[E]] | None = None

    def get_sub_front(self, rank: int) -> list[E]:
        """Returns the sub-front of encodings of the given rank.

        Sub-fronts are ordered starting from 0 in ascending order, i.e., the first
        non-dominated front has rank 0, the next sub-front rank 1 etc.

        Args:
            rank: The sub-front to retrieve

        Returns:
            A list of encodings of a given rank
        """
        if self.fronts is None or rank >= len(self.fronts):
            return []
        return self.fronts[rank]

    def get_number_of_sub_fronts(self) -> int:
        """Returns the total number of sub-fronts found.

        Returns:
            The total number of sub-fronts found
        """
        if self.fronts is None:
            return 0
        return len(self.fronts)


class RankingFunction(ABC, Generic[E]):
    """Interface for ranking algorithms."""

    @abstractmethod
    def compute_ranking_assignment(
        self, solutions: list[E], objectives: OrderedSet[ObjectiveFunction[E]]
    ) -> RankedFronts[E]:
        """Computes the ranking assignment for the given population of encodings.

        Every encoding is assigned to a dominance front with respect to the given
        objectives; its `rank` is set to the index of that front.

        Args:
            solutions: The population to rank
            objectives: The objectives to consider for the ranking assignment

        Returns:
            The ranked fronts  # noqa: DAR202
        """


class FastNonDominatedSorting(RankingFunction[E]):
    """Deb's fast non-dominated sorting.

    Fronts keep the order in which their members appear in `solutions`.
    """

    def compute_ranking_assignment(  # noqa: D102
        self, solutions: list[E], objectives: OrderedSet[ObjectiveFunction[E]]
    ) -> RankedFronts[E]:
        if not solutions:
            return RankedFronts()
        comparator: DominanceComparator[E] = DominanceComparator(objectives)

        dominated: list[list[int]] = [[] for _ in solutions]
        domination_count = [0] * len(solutions)
        for i, solution_i in enumerate(solutions):
            for j in range(i + 1, len(solutions)):
                flag = comparator.compare(solution_i, solutions[j])
                if flag < 0:
                    dominated[i].append(j)
                    domination_count[j] += 1
                elif flag > 0:
                    dominated[j].append(i)
                    domination_count[i] += 1

        fronts: list[list[E]] = []
        current = [i for i, count in enumerate(domination_count) if count == 0]
        while current:
            for index in current:
                solutions[index].rank = len(fronts)
            fronts.append([solutions[index] for index in current])
            following: list[int] = []
            for index in current:
                for dominated_index in dominated[index]:
                    domination_count[dominated_index] -= 1
                    if domination_count[dominated_index] == 0:
                        following.append(dominated_index)
            current = sorted(following)
        return RankedFronts(fronts)


class RankBasedPreferenceSorting(RankingFunction[E]):
    """Ranks the encodings according to the preference criterion defined for MOSA.

    The first front consists of the best encoding for each objective.  The
    remaining encodings are ranked by non-dominated sorting until enough
    encodings are ranked to fill a population.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self, population_size: int | None = None) -> None:
        """Initializes the ranking.

        Args:
            population_size: The number of encodings to rank at least, taken from
                the configuration if not given
        """
        if population_size is None:
            population_size = config.configuration.search_algorithm.population
        self._population_size = population_size

    def compute_ranking_assignment(  # noqa: D102
        self, solutions: list[E], objectives: OrderedSet[ObjectiveFunction[E]]
    ) -> RankedFronts[E]:
        if not solutions:
            self._logger.debug("Solution is empty")
            return RankedFronts()

        fronts = []

        # Preference sorting applies to the first front only, the other ranks are
        # computed by non-dominated sorting.
        zero_front: list[E] = self._get_zero_front(solutions, objectives)
        fronts.append(zero_front)
        front_index = 1

        zero_ids = {id(element) for element in zero_front}
        remaining: list[E] = [element for element in solutions if id(element) not in zero_ids]

        population_size = self._population_size
        if len(zero_front) < population_size:
            ranked_solutions = len(zero_front)
            comparator: DominanceComparator[E] = DominanceComparator(objectives)
            while ranked_solutions < population_size and len(remaining) > 0:
                new_front: list[E] = self._get_non_dominated_solutions(
                    remaining, comparator, front_index
                )
                fronts.append(new_front)
                new_ids = {id(element) for element in new_front}
                remaining = [element for element in remaining if id(element) not in new_ids]
                ranked_solutions += len(new_front)
                front_index += 1
        elif remaining:
            for element in remaining:
                element.rank = front_index
            fronts.append(remaining)

        return RankedFronts(fronts)

    @staticmethod
    def _get_zero_front(
        solutions: list[E], objectives: OrderedSet[ObjectiveFunction[E]]
    ) -> list[E]:
        zero_front: OrderedSet[E] = OrderedSet()
        for objective in objectives:
            comparator: PreferenceSortingComparator[E] = PreferenceSortingComparator(objective)
            best: E | None = None
            for solution in solutions:
                # Ties keep the earlier encoding.
                if comparator.compare(solution, best) < 0:
                    best = solution
            assert best is not None

            best.rank = 0
            zero_front.add(best)
        return list(zero_front)

    @staticmethod
    def _get_non_dominated_solutions(
        solutions: list[E], comparator: DominanceComparator[E], front_index: int
    ) -> list[E]:
        front: list[E] = []
        for solution in solutions:
            is_dominated = False
            dominated_solutions: list[E] = []
            for best in front:
                flag = comparator.compare(solution, best)
                if flag < 0:
                    dominated_solutions.append(best)
                if flag > 0:
                    is_dominated = True
                    break
            if is_dominated:
                continue

            solution.rank = front_index
            front.append(solution)
            for dominated_solution in dominated_solutions:
                if dominated_solution in front:
                    front.remove(dominated_solution)
        return front


def crowding_distance_assignment(
    front: list[E], objectives: Iterable[ObjectiveFunction[E]]
) -> None:
    """Assigns the crowding distance of NSGA-II to the encodings of a front.

    Boundary encodings of every objective get an infinite distance, the others
    accumulate the normalised gap between their neighbours.

    Args:
        front: Front of non-dominated encodings
        objectives: The objectives to consider
    """
    for encoding in front:
        encoding.crowding_distance = 0.0
    if not front:
        return

    for objective in objectives:
        ordered = sorted(front, key=lambda encoding: encoding.get_distance(objective))
        minimum = ordered[0].get_distance(objective)
        maximum = ordered[-1].get_distance(objective)
        ordered[0].crowding_distance = math.inf
        ordered[-1].crowding_distance = math.inf
        if maximum == minimum:
            continue
        for index in range(1, len(ordered) - 1):
            gap = ordered[index + 1].get_distance(objective) - ordered[
                index - 1
            ].get_distance(objective)
            ordered[index].crowding_distance += gap / (maximum - minimum)


def fast_epsilon_dominance_assignment(
    front: list[E], objectives: Iterable[ObjectiveFunction[E]]
) -> None:
    """Implements a “fast” version of the variant of the crowding distance.

    It is named “epsilon-dominance-assignment” and was proposed by Köppen and Yoshida in
    M. Köppen and K. Yoshida, “Substitute Distance Assignments in NSGA-II for handling
    Many-objective Optimization Problems”, Evolutionary Multi-Criterion Optimization,
    LNCS vol. 4403, 2007, pp. 727-741.

    Args:
        front: Front of non-dominated encodings
        objectives: The objectives to consider
    """
    for encoding in front:
        encoding.crowding_distance = 0.0

    for objective in objectives:
        minimum = sys.float_info.max
        min_set: list[E] = []
        maximum = 0.0
        for encoding in front:
            value = encoding.get_distance(objective)
            if value < minimum:
                minimum = value
                min_set.clear()
                min_set.append(encoding)
            elif value == minimum:
                min_set.append(encoding)

            maximum = max(value, maximum)

        if maximum == minimum:
            continue

        for encoding in min_set:
            numerator = len(front) - len(min_set)
            denominator = len(front)
            encoding.crowding_distance = max(
                encoding.crowding_distance, numerator / denominator
            )
