#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provide selection functions for choosing parents."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Generic
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.encoding import Encoding
from covsearch.utils import randomness


E = TypeVar("E", bound=Encoding)


class SelectionFunction(ABC, Generic[E]):
    """Abstract base class for selection functions."""

    @abstractmethod
    def get_index(self, population: list[E]) -> int:
        """Provide an index within the population.

        Args:
            population: A list of encodings, the population

        Returns:
            The index within the population  # noqa: DAR202
        """

    def select(self, population: list[E], number: int = 1) -> list[E]:
        """Return N parents.

        Args:
            population: A list of encodings, the population
            number: The number of elements to select

        Returns:
            A list of encodings that was selected
        """
        return [population[self.get_index(population)] for _ in range(number)]


def crowded_compare(encoding_1: Encoding, encoding_2: Encoding) -> int:
    """The crowded comparison operator of NSGA-II.

    Args:
        encoding_1: An encoding
        encoding_2: An encoding

    Returns:
        -1 if encoding_1 has a lower rank, or the same rank and a larger crowding
        distance; 1 in the symmetric case; 0 otherwise
    """
    if encoding_1.rank != encoding_2.rank:
        return -1 if encoding_1.rank < encoding_2.rank else 1
    if encoding_1.crowding_distance != encoding_2.crowding_distance:
        return -1 if encoding_1.crowding_distance > encoding_2.crowding_distance else 1
    return 0


class TournamentSelection(SelectionFunction[E]):
    """Crowded tournament selection.

    The winner is the contestant with the lowest rank, ties prefer the larger
    crowding distance and then the earlier contestant.
    """

    def get_index(self, population: list[E]) -> int:  # noqa: D102
        new_num = randomness.next_int(lower_bound=0, upper_bound=len(population))
        winner = new_num

        tournament_round = 0

        while tournament_round < config.configuration.search_algorithm.tournament_size - 1:
            new_num = randomness.next_int(lower_bound=0, upper_bound=len(population))
            if crowded_compare(population[new_num], population[winner]) < 0:
                winner = new_num

            tournament_round += 1

        return winner
