#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the PESA-II algorithm."""

from __future__ import annotations

import logging
import math

from typing import TYPE_CHECKING
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.algorithms.searchalgorithm import EvolutionaryAlgorithm
from covsearch.ga.encoding import Encoding
from covsearch.ga.operators.procreation import DefaultProcreation
from covsearch.ga.operators.ranking import FastNonDominatedSorting
from covsearch.ga.operators.selection import SelectionFunction
from covsearch.utils import randomness
from covsearch.utils.exceptions import ConfigurationException


if TYPE_CHECKING:
    from collections.abc import Iterable

    from covsearch.ga.budget import BudgetManager
    from covsearch.ga.encoding import EncodingSampler
    from covsearch.ga.objectivefunction import ObjectiveFunction
    from covsearch.ga.objectivemanager import ObjectiveManager
    from covsearch.ga.operators.procreation import Procreation

E = TypeVar("E", bound=Encoding)

Region = tuple[int, ...]


def assign_regions(
    encodings: list[E], objectives: Iterable[ObjectiveFunction[E]], divisions: int
) -> dict[Region, list[E]]:
    """Place the encodings in the hyper-boxes of an adaptive grid.

    Along every objective the range spanned by the encodings is split into
    `divisions` boxes of equal width.

    Args:
        encodings: The encodings to place
        objectives: The objectives spanning the grid
        divisions: The number of boxes per objective

    Returns:
        The occupied regions with their members, in order of first occupation
    """
    objective_list = list(objectives)
    bounds: list[tuple[float, float]] = []
    for objective in objective_list:
        values = [encoding.get_distance(objective) for encoding in encodings]
        bounds.append((min(values, default=0.0), max(values, default=0.0)))

    regions: dict[Region, list[E]] = {}
    for encoding in encodings:
        coordinates = []
        for objective, (minimum, maximum) in zip(objective_list, bounds, strict=True):
            if maximum == minimum:
                coordinates.append(0)
                continue
            scaled = (encoding.get_distance(objective) - minimum) / (maximum - minimum)
            coordinates.append(min(math.floor(scaled * divisions), divisions - 1))
        regions.setdefault(tuple(coordinates), []).append(encoding)
    return regions


class RegionSelection(SelectionFunction[E]):
    """Region-based selection of PESA-II.

    A binary tournament between two occupied regions picks the one with fewer
    members, i.e., the lower squeeze factor; the parent is a random member of
    the winning region.
    """

    def __init__(self, objectives: Iterable[ObjectiveFunction[E]], divisions: int) -> None:
        """Initializes the selection.

        Args:
            objectives: The live collection of objectives spanning the grid
            divisions: The number of grid boxes per objective
        """
        self._objectives = objectives
        self._divisions = divisions

    @property
    def divisions(self) -> int:  # noqa: D102
        return self._divisions

    def get_index(self, population: list[E]) -> int:  # noqa: D102
        regions = list(assign_regions(population, self._objectives, self._divisions).values())
        region = randomness.choice(regions)
        contender = randomness.choice(regions)
        if len(contender) < len(region):
            region = contender
        winner = randomness.choice(region)
        return next(index for index, encoding in enumerate(population) if encoding is winner)


class PESAIIAlgorithm(EvolutionaryAlgorithm[E]):
    """The Pareto envelope-based selection algorithm PESA-II by Corne et al.

    The algorithm keeps two populations.  The internal population holds the
    offspring of the last iteration.  The external population is a bounded
    archive of non-dominated encodings from which the parents are selected by
    region.  When it overflows, members of the most crowded region are removed.
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        objective_manager: ObjectiveManager[E],
        sampler: EncodingSampler[E],
        procreation: Procreation[E],
        population_size: int | None = None,
        archive_size: int | None = None,
        divisions: int | None = None,
    ) -> None:
        """Initializes the algorithm.

        Args:
            objective_manager: The manager tracking the objectives
            sampler: The sampler for new random encodings
            procreation: Breeds the offspring, typically from region selection
            population_size: The size of the internal population
            archive_size: The maximum size of the external population
            divisions: The number of grid boxes per objective

        Raises:
            ConfigurationException: if the archive size or the number of divisions
                is not positive, or a region selection uses another grid
        """
        super().__init__(objective_manager, sampler, procreation, population_size)
        if archive_size is None:
            archive_size = config.configuration.search_algorithm.pesaii_archive_size
        if divisions is None:
            divisions = config.configuration.search_algorithm.pesaii_grid_divisions
        if archive_size <= 0 or divisions <= 0:
            raise ConfigurationException(
                f"Invalid PESA-II setup: archive size {archive_size}, divisions {divisions}"
            )
        if (
            isinstance(procreation, DefaultProcreation)
            and isinstance(procreation.selection_function, RegionSelection)
            and procreation.selection_function.divisions != divisions
        ):
            raise ConfigurationException(
                f"Region selection uses {procreation.selection_function.divisions} "
                f"divisions, the external population {divisions}"
            )
        self._archive_size = archive_size
        self._divisions = divisions
        self._external_population: list[E] = []

    @property
    def external_population(self) -> list[E]:
        """Provides a copy of the external population.

        Returns:
            The non-dominated encodings found so far
        """
        return list(self._external_population)

    def _initialize(self, budget_manager: BudgetManager) -> None:
        super()._initialize(budget_manager)
        self._external_population = []
        self._update_external_population(self._population)

    def _iterate(self, budget_manager: BudgetManager) -> None:
        self._population = self._breed_and_evaluate(self._external_population, budget_manager)
        self._update_external_population(self._population)

    def _update_external_population(self, candidates: list[E]) -> None:
        # Objectives change during the search, so the former members are ranked again.
        union: list[E] = []
        union.extend(self._external_population)
        union.extend(candidates)
        objectives = self._objective_manager.current_objectives
        fronts = FastNonDominatedSorting().compute_ranking_assignment(union, objectives)
        external = list(fronts.get_sub_front(0))

        while len(external) > self._archive_size:
            regions = assign_regions(external, objectives, self._divisions)
            crowded = max(regions.values(), key=len)
            external.remove(crowded[0])

        self._logger.debug("External population size = %d", len(external))
        self._external_population = external
