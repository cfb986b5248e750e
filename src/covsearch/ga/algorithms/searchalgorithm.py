#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the base classes of the budget-constrained search loop."""

from __future__ import annotations

import enum
import logging
import time

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.encoding import Encoding
from covsearch.ga.searchobserver import SearchProgress
from covsearch.utils.exceptions import ConfigurationException
from covsearch.utils.exceptions import InvariantViolationException


if TYPE_CHECKING:
    from collections.abc import Callable

    from ordered_set import OrderedSet

    from covsearch.ga.archive import Archive
    from covsearch.ga.budget import BudgetManager
    from covsearch.ga.encoding import EncodingSampler
    from covsearch.ga.objectivefunction import ObjectiveFunction
    from covsearch.ga.objectivemanager import ObjectiveManager
    from covsearch.ga.operators.procreation import Procreation
    from covsearch.ga.operators.ranking import RankedFronts
    from covsearch.ga.searchobserver import SearchObserver
    from covsearch.subject import SearchSubject

E = TypeVar("E", bound=Encoding)


class SearchState(enum.Enum):
    """The lifecycle of a search."""

    INITIALIZING = enum.auto()
    RUNNING = enum.auto()
    TERMINATED = enum.auto()


class TerminationReason(enum.Enum):
    """Why a search terminated."""

    BUDGET_EXHAUSTED = enum.auto()
    OBJECTIVES_COVERED = enum.auto()
    ERROR = enum.auto()


class SearchAlgorithm(ABC, Generic[E]):
    """Orchestrates the generations of a search.

    A search first initializes, then iterates as long as there is budget left and
    there are objectives left to cover.  The archive of the objective manager is
    the result of a search.
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        objective_manager: ObjectiveManager[E],
        sampler: EncodingSampler[E],
        population_size: int | None = None,
    ) -> None:
        """Initializes the search algorithm.

        Args:
            objective_manager: The manager tracking the objectives
            sampler: The sampler for new random encodings
            population_size: The fixed size of the population, taken from the
                configuration if not given

        Raises:
            ConfigurationException: if the population size is not positive
        """
        if population_size is None:
            population_size = config.configuration.search_algorithm.population
        if population_size <= 0:
            raise ConfigurationException(f"Population size must be positive, got {population_size}")
        self._objective_manager = objective_manager
        self._sampler = sampler
        self._population_size = population_size
        self._population: list[E] = []
        self._search_observers: list[SearchObserver] = []
        self._state = SearchState.INITIALIZING
        self._termination_reason: TerminationReason | None = None
        self._iteration = 0
        self._budget_manager: BudgetManager | None = None
        self._first_coverage: dict[ObjectiveFunction[E], int] = {}
        objective_manager.archive.add_on_target_covered(self._on_target_covered)

    @property
    def objective_manager(self) -> ObjectiveManager[E]:  # noqa: D102
        return self._objective_manager

    @property
    def population(self) -> list[E]:
        """Provides a copy of the current population.

        Returns:
            The current population
        """
        return list(self._population)

    @property
    def population_size(self) -> int:  # noqa: D102
        return self._population_size

    @property
    def state(self) -> SearchState:  # noqa: D102
        return self._state

    @property
    def termination_reason(self) -> TerminationReason | None:  # noqa: D102
        return self._termination_reason

    @property
    def iteration(self) -> int:  # noqa: D102
        return self._iteration

    @property
    def first_coverage(self) -> dict[ObjectiveFunction[E], int]:
        """Provides the iteration in which each archived objective was first covered.

        Iteration 0 is the initial population, iteration k the k-th offspring.
        Exception objectives are included.

        Returns:
            A mapping from objective to iteration
        """
        return dict(self._first_coverage)

    def add_search_observer(self, search_observer: SearchObserver) -> None:
        """Add a new search observer.

        Args:
            search_observer: the observer to add
        """
        self._search_observers.append(search_observer)

    def search(self, subject: SearchSubject[E], budget_manager: BudgetManager) -> Archive[E]:
        """Search encodings that cover the objectives of the subject.

        Args:
            subject: The subject under test
            budget_manager: The budgets limiting the search

        Returns:
            The archive of the best encodings per objective

        Raises:
            InvariantViolationException: if a distance computation is corrupt
            ConfigurationException: if the search was set up inconsistently
        """
        self._population = []
        self._iteration = 0
        self._termination_reason = None
        self._budget_manager = budget_manager
        self._first_coverage = {}
        self._objective_manager.load(subject)
        self._state = SearchState.RUNNING
        budget_manager.search_started()
        start_time_ns = time.time_ns()
        for observer in self._search_observers:
            observer.before_search_start(start_time_ns)

        try:
            self._initialize(budget_manager)
            self._notify(lambda observer, progress: observer.before_first_search_iteration(progress))
            while budget_manager.has_budget_left() and self._objective_manager.has_objectives():
                self._iteration += 1
                self._iterate(budget_manager)
                budget_manager.iteration(self._population)
                self._notify(lambda observer, progress: observer.after_search_iteration(progress))
        except (InvariantViolationException, ConfigurationException) as error:
            self._logger.error("Search aborted: %s", error)
            self._termination_reason = TerminationReason.ERROR
            raise
        finally:
            self._objective_manager.stop()
            budget_manager.search_stopped()
            self._state = SearchState.TERMINATED

        if not self._objective_manager.has_objectives():
            self._termination_reason = TerminationReason.OBJECTIVES_COVERED
        else:
            self._termination_reason = TerminationReason.BUDGET_EXHAUSTED
        self._notify(lambda observer, progress: observer.after_search_finish(progress))
        self._logger.info(
            "Search terminated after %d iterations: %s",
            self._iteration,
            self._termination_reason.name,
        )
        return self._objective_manager.archive

    def progress(self) -> SearchProgress:
        """Create a snapshot of the state of the search.

        Returns:
            The snapshot
        """
        return SearchProgress(
            iteration=self._iteration,
            archive_size=self._objective_manager.archive.size(),
            current_objectives=len(self._objective_manager.current_objectives),
            covered_objectives=len(self._objective_manager.covered_objectives),
            uncovered_objectives=len(self._objective_manager.uncovered_objectives),
            budget_progress=(
                self._budget_manager.progress() if self._budget_manager is not None else 0.0
            ),
        )

    def _on_target_covered(self, objective: ObjectiveFunction[E]) -> None:
        self._logger.debug("First covered %s in iteration %d", objective, self._iteration)
        self._first_coverage[objective] = self._iteration

    def _notify(self, event: Callable[[SearchObserver, SearchProgress], None]) -> None:
        if not self._search_observers:
            return
        progress = self.progress()
        for observer in self._search_observers:
            event(observer, progress)

    @abstractmethod
    def _initialize(self, budget_manager: BudgetManager) -> None:
        """Create and evaluate the initial population.

        Args:
            budget_manager: The budgets limiting the search
        """

    @abstractmethod
    def _iterate(self, budget_manager: BudgetManager) -> None:
        """Perform one iteration, i.e., form the next population.

        Args:
            budget_manager: The budgets limiting the search
        """


class EvolutionaryAlgorithm(SearchAlgorithm[E], ABC):
    """Base class of the population-based algorithms."""

    def __init__(
        self,
        objective_manager: ObjectiveManager[E],
        sampler: EncodingSampler[E],
        procreation: Procreation[E],
        population_size: int | None = None,
    ) -> None:
        """Initializes the algorithm.

        Args:
            objective_manager: The manager tracking the objectives
            sampler: The sampler for new random encodings
            procreation: Breeds the offspring of a population
            population_size: The fixed size of the population
        """
        super().__init__(objective_manager, sampler, population_size)
        self._procreation = procreation

    def _initialize(self, budget_manager: BudgetManager) -> None:
        encodings = [self._sampler.sample() for _ in range(self._population_size)]
        evaluated = self._objective_manager.evaluate_many(encodings, budget_manager)
        self._population = encodings[:evaluated]

    def _breed_and_evaluate(
        self, parents: list[E], budget_manager: BudgetManager
    ) -> list[E]:
        offspring = self._procreation.breed(parents, self._population_size)
        evaluated = self._objective_manager.evaluate_many(offspring, budget_manager)
        return offspring[:evaluated]

    def _select_from_fronts(
        self,
        fronts: RankedFronts[E],
        objectives: OrderedSet[ObjectiveFunction[E]],
        assignment: Callable[[list[E], OrderedSet[ObjectiveFunction[E]]], None],
    ) -> list[E]:
        """Fill a population front by front.

        The first front that does not fit entirely is truncated by crowding
        distance, larger distances first.  Equal distances keep the order of
        the front.

        Args:
            fronts: The ranked fronts
            objectives: The objectives to compute crowding distances on
            assignment: The crowding distance assignment

        Returns:
            The next population
        """
        remain = self._population_size
        population: list[E] = []
        index = 0
        front = fronts.get_sub_front(index)

        while remain > 0 and remain >= len(front) != 0:
            assignment(front, objectives)
            population.extend(front)
            remain -= len(front)
            index += 1
            front = fronts.get_sub_front(index)

        if remain > 0 and len(front) != 0:
            assignment(front, objectives)
            ordered = sorted(front, key=lambda encoding: encoding.crowding_distance, reverse=True)
            population.extend(ordered[:remain])

        return population
