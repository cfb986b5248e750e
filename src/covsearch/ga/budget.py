#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the consumable budgets that limit a search."""

from __future__ import annotations

import logging
import time

from abc import ABC
from abc import abstractmethod
from statistics import mean
from typing import TYPE_CHECKING

import psutil


if TYPE_CHECKING:
    from collections.abc import Sequence

    from covsearch.ga.encoding import Encoding


class Budget(ABC):
    """A single consumable resource with a fixed ceiling.

    Consumption never decreases during a run.  The budget manager notifies every
    budget about the search events; a budget only reacts to the events that
    consume its resource.
    """

    @abstractmethod
    def used(self) -> float:
        """Provide how much of the budget we have used.

        Returns:
            The consumed amount  # noqa: DAR202
        """

    @abstractmethod
    def limit(self) -> float:
        """Get upper limit of the resource.

        Returns:
            The limit  # noqa: DAR202
        """

    @abstractmethod
    def set_limit(self, limit: float) -> None:
        """Sets a new upper limit of the resource.

        Args:
            limit: The new upper limit
        """

    @abstractmethod
    def reset(self) -> None:
        """Reset the consumption."""

    def remaining(self) -> float:
        """Provides the amount of the resource that is left.

        Returns:
            The remaining amount, never negative
        """
        return max(self.limit() - self.used(), 0)

    def is_exhausted(self) -> bool:
        """Is the resource consumed?

        Returns:
            True, iff nothing is left
        """
        return self.used() >= self.limit()

    def search_started(self) -> None:
        """Called when the search starts."""

    def search_stopped(self) -> None:
        """Called when the search has stopped."""

    def iteration(self, population: Sequence[Encoding]) -> None:
        """Called after every iteration of the search algorithm.

        Args:
            population: The population after the iteration
        """

    def evaluation(self, encoding: Encoding) -> None:
        """Called after an encoding was executed.

        Args:
            encoding: The executed encoding
        """

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.used()}/{self.limit()}"


class EvaluationBudget(Budget):
    """Limits the number of evaluated encodings."""

    def __init__(self, max_evaluations: int) -> None:
        """Create new EvaluationBudget.

        Args:
            max_evaluations: the maximum number of allowed evaluations.
        """
        assert max_evaluations >= 0
        self._max_evaluations = max_evaluations
        self._evaluations = 0

    def used(self) -> int:  # noqa: D102
        return self._evaluations

    def limit(self) -> int:  # noqa: D102
        return self._max_evaluations

    def set_limit(self, limit: float) -> None:  # noqa: D102
        self._max_evaluations = int(limit)

    def reset(self) -> None:  # noqa: D102
        self._evaluations = 0

    def evaluation(self, encoding: Encoding) -> None:  # noqa: D102
        self._evaluations += 1

    def __str__(self) -> str:
        return f"Evaluated encodings: {self.used()}/{self.limit()}"


class IterationBudget(Budget):
    """Limits the number of algorithm iterations, i.e., generations."""

    def __init__(self, max_iterations: int) -> None:
        """Create new IterationBudget.

        Args:
            max_iterations: the maximum number of allowed iterations.
        """
        assert max_iterations >= 0
        self._max_iterations = max_iterations
        self._iterations = 0

    def used(self) -> int:  # noqa: D102
        return self._iterations

    def limit(self) -> int:  # noqa: D102
        return self._max_iterations

    def set_limit(self, limit: float) -> None:  # noqa: D102
        self._max_iterations = int(limit)

    def reset(self) -> None:  # noqa: D102
        self._iterations = 0

    def iteration(self, population: Sequence[Encoding]) -> None:  # noqa: D102
        self._iterations += 1

    def __str__(self) -> str:
        return f"Used iterations: {self.used()}/{self.limit()}"


class SearchTimeBudget(Budget):
    """Limits the wall time of the search.

    The clock runs from `search_started` until `search_stopped`.
    """

    def __init__(self, max_seconds: float) -> None:
        """Create new SearchTimeBudget.

        Args:
            max_seconds: the maximum time (in seconds) that can be used for the search.
        """
        assert max_seconds >= 0
        self._max_seconds = max_seconds
        self._start_time: int | None = None
        self._stop_time: int | None = None

    def used(self) -> float:  # noqa: D102
        if self._start_time is None:
            return 0.0
        end = self._stop_time if self._stop_time is not None else time.time_ns()
        return (end - self._start_time) / 1_000_000_000

    def limit(self) -> float:  # noqa: D102
        return self._max_seconds

    def set_limit(self, limit: float) -> None:  # noqa: D102
        self._max_seconds = limit

    def reset(self) -> None:  # noqa: D102
        self._start_time = None
        self._stop_time = None

    def search_started(self) -> None:  # noqa: D102
        if self._start_time is None:
            self._start_time = time.time_ns()

    def search_stopped(self) -> None:  # noqa: D102
        if self._start_time is not None and self._stop_time is None:
            self._stop_time = time.time_ns()

    def __str__(self) -> str:
        return f"Used search time: {self.used():.2f}/{self.limit()}"


class MemoryBudget(Budget):
    """Stops the search once the memory limit is exceeded.

    The memory usage is sampled after every iteration, so an iteration that
    allocates a lot may overshoot the limit.  Set the limit below the limit
    enforced by the environment.
    """

    MB_TO_BYTES = 1024 * 1024

    def __init__(self, memory_limit_mb: int) -> None:
        """Create new MemoryBudget.

        Args:
            memory_limit_mb: the memory limit in MB
        """
        self._memory_limit_bytes = memory_limit_mb * self.MB_TO_BYTES
        self._memory_usage = 0

    def used(self) -> int:  # noqa: D102
        return self._memory_usage

    def limit(self) -> int:  # noqa: D102
        return self._memory_limit_bytes

    def set_limit(self, limit: float) -> None:
        """Set the memory limit in MB.

        Args:
            limit: the memory limit in MB
        """
        self._memory_limit_bytes = int(limit * self.MB_TO_BYTES)

    def reset(self) -> None:  # noqa: D102
        self._memory_usage = 0

    def is_exhausted(self) -> bool:  # noqa: D102
        return self._memory_usage > self._memory_limit_bytes

    def iteration(self, population: Sequence[Encoding]) -> None:  # noqa: D102
        # Memory can be freed again, but consumption must not decrease.
        self._memory_usage = max(self._memory_usage, self._get_memory_usage())

    @staticmethod
    def _get_memory_usage() -> int:
        process = psutil.Process()
        return process.memory_info().rss

    def __str__(self) -> str:
        return (
            f"Used memory: {self.used() / self.MB_TO_BYTES:.1f}/"
            f"{self.limit() / self.MB_TO_BYTES:.1f} MB"
        )


class BudgetManager:
    """Tracks all budgets of a search run.

    Exhaustion is terminal: once any budget reported exhaustion, the manager
    keeps reporting that no budget is left until it is reset.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self, budgets: Sequence[Budget] | None = None) -> None:
        """Create a new budget manager.

        Args:
            budgets: The budgets to track
        """
        self._budgets: list[Budget] = list(budgets) if budgets is not None else []
        self._exhausted = False

    @property
    def budgets(self) -> list[Budget]:
        """Provides the tracked budgets.

        Returns:
            The tracked budgets
        """
        return self._budgets

    def add_budget(self, budget: Budget) -> None:
        """Track another budget.

        Args:
            budget: The budget to add
        """
        self._budgets.append(budget)

    def has_budget_left(self) -> bool:
        """Checks if there are still resources left.

        Returns:
            Whether there are resources left.
        """
        if not self._exhausted:
            for budget in self._budgets:
                if budget.is_exhausted():
                    self._logger.info("Budget exhausted: %s", budget)
                    self._exhausted = True
                    break
        return not self._exhausted

    def progress(self) -> float:
        """Provides the progress of the search.

        Averages the progress of all budgets.

        Returns:
            A value in [0,1].
        """
        if not self._budgets:
            return 0.0
        return mean(
            min(budget.used() / budget.limit(), 1.0) if budget.limit() > 0 else 1.0
            for budget in self._budgets
        )

    def search_started(self) -> None:
        """Notify all budgets that the search has started."""
        for budget in self._budgets:
            budget.search_started()

    def search_stopped(self) -> None:
        """Notify all budgets that the search has stopped."""
        for budget in self._budgets:
            budget.search_stopped()

    def iteration(self, population: Sequence[Encoding]) -> None:
        """Charge one iteration.

        Args:
            population: The population after the iteration
        """
        for budget in self._budgets:
            budget.iteration(population)

    def evaluation(self, encoding: Encoding) -> None:
        """Charge one evaluation.

        Args:
            encoding: The evaluated encoding
        """
        for budget in self._budgets:
            budget.evaluation(encoding)

    def reset(self) -> None:
        """Reset all budgets for a new run."""
        self._exhausted = False
        for budget in self._budgets:
            budget.reset()

    def __str__(self) -> str:
        return ", ".join(str(budget) for budget in self._budgets)
