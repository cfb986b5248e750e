#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides a factory that sets up a search from the configuration."""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING
from typing import ClassVar
from typing import Generic
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.algorithms.mosaalgorithm import MOSAAlgorithm
from covsearch.ga.algorithms.nsgaiialgorithm import NSGAIIAlgorithm
from covsearch.ga.algorithms.pesaiialgorithm import PESAIIAlgorithm
from covsearch.ga.algorithms.pesaiialgorithm import RegionSelection
from covsearch.ga.algorithms.randomsearchalgorithm import RandomSearchAlgorithm
from covsearch.ga.budget import Budget
from covsearch.ga.budget import BudgetManager
from covsearch.ga.budget import EvaluationBudget
from covsearch.ga.budget import IterationBudget
from covsearch.ga.budget import MemoryBudget
from covsearch.ga.budget import SearchTimeBudget
from covsearch.ga.encoding import Encoding
from covsearch.ga.objectivemanager import ObjectiveManager
from covsearch.ga.objectivemanager import SimpleCoveragePolicy
from covsearch.ga.objectivemanager import StructuralCoveragePolicy
from covsearch.ga.operators.procreation import DefaultProcreation
from covsearch.ga.operators.selection import TournamentSelection
from covsearch.ga.searchobserver import LogSearchObserver
from covsearch.utils.exceptions import ConfigurationException


if TYPE_CHECKING:
    from collections.abc import Callable

    from covsearch.execution import EncodingRunner
    from covsearch.ga.algorithms.searchalgorithm import SearchAlgorithm
    from covsearch.ga.encoding import EncodingSampler
    from covsearch.ga.objectivemanager import CoveragePolicy
    from covsearch.ga.operators.procreation import Crossover
    from covsearch.ga.operators.selection import SelectionFunction

E = TypeVar("E", bound=Encoding)


class SearchAlgorithmFactory(Generic[E]):
    """Builds the search algorithm and its budgets as configured."""

    _logger = logging.getLogger(__name__)

    _DEFAULT_MAX_SEARCH_TIME = 600

    _selections: ClassVar[dict[config.Selection, Callable[[], SelectionFunction]]] = {
        config.Selection.TOURNAMENT_SELECTION: TournamentSelection,
    }

    def __init__(
        self,
        runner: EncodingRunner[E],
        sampler: EncodingSampler[E],
        crossover: Crossover[E] | None = None,
    ) -> None:
        """Initializes the factory.

        Args:
            runner: The runner executing encodings
            sampler: The sampler for new random encodings
            crossover: An optional crossover operator
        """
        self._runner = runner
        self._sampler = sampler
        self._crossover = crossover

    def get_budget_manager(self) -> BudgetManager:
        """Instantiates the budgets depending on the configuration settings.

        Returns:
            A budget manager tracking the configured budgets
        """
        stopping = config.configuration.stopping
        budgets: list[Budget] = []
        if (max_iter := stopping.maximum_iterations) >= 0:
            budgets.append(IterationBudget(max_iter))
        if (max_evaluations := stopping.maximum_evaluations) >= 0:
            budgets.append(EvaluationBudget(max_evaluations))
        if (max_search_time := stopping.maximum_search_time) >= 0:
            budgets.append(SearchTimeBudget(max_search_time))
        if len(budgets) == 0:
            self._logger.info("No stopping condition configured!")
            self._logger.info(
                "Using fallback timeout of %i seconds",
                SearchAlgorithmFactory._DEFAULT_MAX_SEARCH_TIME,
            )
            budgets.append(SearchTimeBudget(SearchAlgorithmFactory._DEFAULT_MAX_SEARCH_TIME))

        # The memory limit guards the environment, it is not a search budget.
        if (max_memory := stopping.maximum_memory) >= 0:
            budgets.append(MemoryBudget(max_memory))

        return BudgetManager(budgets)

    def get_coverage_policy(self) -> CoveragePolicy[E]:
        """Provides the coverage policy of the configured algorithm.

        Returns:
            A structural policy for DynaMOSA, a simple policy otherwise
        """
        if config.configuration.algorithm == config.Algorithm.DYNAMOSA:
            return StructuralCoveragePolicy()
        return SimpleCoveragePolicy()

    def get_search_algorithm(self) -> SearchAlgorithm[E]:
        """Initialises and sets up the search algorithm to use.

        Returns:
            A fully configured search algorithm

        Raises:
            ConfigurationException: if the algorithm or selection is unknown
        """
        algorithm = config.configuration.algorithm
        self._logger.info("Chosen search algorithm: %s", algorithm)
        objective_manager: ObjectiveManager[E] = ObjectiveManager(
            self._runner, self.get_coverage_policy()
        )

        strategy: SearchAlgorithm[E]
        if algorithm == config.Algorithm.RANDOM:
            strategy = RandomSearchAlgorithm(objective_manager, self._sampler)
        elif algorithm == config.Algorithm.NSGAII:
            strategy = NSGAIIAlgorithm(
                objective_manager, self._sampler, self._get_procreation(self._get_selection())
            )
        elif algorithm in {config.Algorithm.MOSA, config.Algorithm.DYNAMOSA}:
            strategy = MOSAAlgorithm(
                objective_manager, self._sampler, self._get_procreation(self._get_selection())
            )
        elif algorithm == config.Algorithm.PESAII:
            # Selection and truncation must share one grid.
            divisions = config.configuration.search_algorithm.pesaii_grid_divisions
            selection: RegionSelection[E] = RegionSelection(
                objective_manager.current_objectives, divisions
            )
            strategy = PESAIIAlgorithm(
                objective_manager,
                self._sampler,
                self._get_procreation(selection),
                divisions=divisions,
            )
        else:
            raise ConfigurationException(f"Unknown search algorithm requested: {algorithm}")

        strategy.add_search_observer(LogSearchObserver())
        return strategy

    def _get_selection(self) -> SelectionFunction[E]:
        selection = config.configuration.search_algorithm.selection
        if selection in self._selections:
            self._logger.info("Chosen selection function: %s", selection)
            return self._selections[selection]()
        raise ConfigurationException("No suitable selection function found.")

    def _get_procreation(self, selection: SelectionFunction[E]) -> DefaultProcreation[E]:
        return DefaultProcreation(selection, self._sampler, self._crossover)
