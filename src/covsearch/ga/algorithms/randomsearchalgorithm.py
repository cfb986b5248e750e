#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides a random search."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import TypeVar

from covsearch.ga.algorithms.searchalgorithm import SearchAlgorithm
from covsearch.ga.encoding import Encoding


if TYPE_CHECKING:
    from covsearch.ga.budget import BudgetManager

E = TypeVar("E", bound=Encoding)


class RandomSearchAlgorithm(SearchAlgorithm[E]):
    """Samples and evaluates one random encoding per iteration.

    Everything worth keeping ends up in the archive, the population only
    holds the last sampled encoding.
    """

    def _initialize(self, budget_manager: BudgetManager) -> None:
        self._population = []

    def _iterate(self, budget_manager: BudgetManager) -> None:
        encoding = self._sampler.sample()
        if self._objective_manager.evaluate_many([encoding], budget_manager) > 0:
            self._population = [encoding]
