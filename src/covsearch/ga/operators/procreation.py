#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the reproduction of encodings, i.e., crossover and mutation."""

from __future__ import annotations

import logging

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.encoding import Encoding
from covsearch.utils import randomness
from covsearch.utils.exceptions import ConstructionFailedException


if TYPE_CHECKING:
    from covsearch.ga.encoding import EncodingSampler
    from covsearch.ga.operators.selection import SelectionFunction


E = TypeVar("E", bound=Encoding)


class Crossover(ABC, Generic[E]):
    """Recombines the genotypes of two encodings."""

    @abstractmethod
    def crossover(self, parent_1: E, parent_2: E) -> tuple[E, E]:
        """Create two offspring from two parents.

        The parents must not be modified.

        Args:
            parent_1: The first parent
            parent_2: The second parent

        Returns:
            The two offspring  # noqa: DAR202

        Raises:
            ConstructionFailedException: if no valid offspring could be built
        """


class Procreation(ABC, Generic[E]):
    """Breeds offspring from a population."""

    @abstractmethod
    def breed(self, population: list[E], number: int) -> list[E]:
        """Breed new encodings.

        Args:
            population: The parent population
            number: The number of offspring to create

        Returns:
            The offspring  # noqa: DAR202
        """


class DefaultProcreation(Procreation[E]):
    """Selects two parents, recombines them with some probability, and mutates the result.

    Offspring never share state with their parents.  An empty parent
    population is replaced by freshly sampled encodings.
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        selection_function: SelectionFunction[E],
        sampler: EncodingSampler[E],
        crossover: Crossover[E] | None = None,
    ) -> None:
        """Initializes the procreation.

        Args:
            selection_function: The selection function for parents
            sampler: The sampler providing new genetic material
            crossover: The crossover operator, no recombination if None
        """
        self._selection_function = selection_function
        self._sampler = sampler
        self._crossover = crossover

    @property
    def selection_function(self) -> SelectionFunction[E]:  # noqa: D102
        return self._selection_function

    def breed(self, population: list[E], number: int) -> list[E]:  # noqa: D102
        if not population:
            return [self._sampler.sample() for _ in range(number)]

        offspring_population: list[E] = []
        while len(offspring_population) < number:
            parent_1 = self._selection_function.select(population)[0]
            parent_2 = self._selection_function.select(population)[0]
            offspring_1: E = parent_1.copy()  # type: ignore[assignment]
            offspring_2: E = parent_2.copy()  # type: ignore[assignment]

            if (
                self._crossover is not None
                and randomness.next_float() <= config.configuration.search_algorithm.crossover_rate
            ):
                try:
                    offspring_1, offspring_2 = self._crossover.crossover(parent_1, parent_2)
                except ConstructionFailedException:
                    self._logger.debug("CrossOver failed.")

            offspring_population.append(self._mutate(offspring_1))
            if len(offspring_population) < number:
                offspring_population.append(self._mutate(offspring_2))

        self._logger.debug("Number of offsprings = %d", len(offspring_population))
        return offspring_population

    def _mutate(self, offspring: E) -> E:
        for _ in range(config.configuration.search_algorithm.number_of_mutations):
            offspring = offspring.mutate(self._sampler)  # type: ignore[assignment]
        return offspring
