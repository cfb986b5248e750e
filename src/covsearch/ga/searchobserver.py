#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides an observer to observe the search."""

from __future__ import annotations

import dataclasses
import logging

from abc import ABC
from abc import abstractmethod


@dataclasses.dataclass(frozen=True)
class SearchProgress:
    """A read-only snapshot of the state of a running search."""

    iteration: int
    """The number of completed iterations."""

    archive_size: int
    """The number of archived objectives, including exception objectives."""

    current_objectives: int
    """The number of objectives that currently guide the search."""

    covered_objectives: int
    """The number of covered objectives."""

    uncovered_objectives: int
    """The number of objectives that are not covered yet."""

    budget_progress: float
    """The consumed share of the budgets, in [0,1]."""

    @property
    def coverage(self) -> float:
        """Provides the share of covered objectives.

        Returns:
            A value in [0,1], 1.0 if the subject has no objectives
        """
        total = self.covered_objectives + self.uncovered_objectives
        if total == 0:
            return 1.0
        return self.covered_objectives / total


class SearchObserver(ABC):
    """Observes the execution of a search algorithm."""

    @abstractmethod
    def before_search_start(self, start_time_ns: int) -> None:
        """Called when the search starts.

        Args:
            start_time_ns: time since epoch in ns when the search started.
        """

    @abstractmethod
    def before_first_search_iteration(self, progress: SearchProgress) -> None:
        """Called once after the initial population was evaluated.

        Args:
            progress: The state after the initialization
        """

    @abstractmethod
    def after_search_iteration(self, progress: SearchProgress) -> None:
        """Called after every iteration of the search algorithm.

        Args:
            progress: The state after the iteration
        """

    @abstractmethod
    def after_search_finish(self, progress: SearchProgress) -> None:
        """Called when the search has finished.

        Args:
            progress: The final state
        """


class LogSearchObserver(SearchObserver):
    """Observes the search and creates some log output."""

    _logger = logging.getLogger(__name__)

    def before_search_start(self, start_time_ns: int) -> None:  # noqa: D102
        self._logger.debug("Search started at %d", start_time_ns)

    def before_first_search_iteration(  # noqa: D102
        self, progress: SearchProgress
    ) -> None:
        self._logger.info("Initial Population, Coverage: %5f", progress.coverage)

    def after_search_iteration(  # noqa: D102
        self, progress: SearchProgress
    ) -> None:
        self._logger.info(
            "Iteration: %7i, Coverage: %5f, Archive: %i",
            progress.iteration,
            progress.coverage,
            progress.archive_size,
        )

    def after_search_finish(self, progress: SearchProgress) -> None:  # noqa: D102
        self._logger.info(
            "Search finished after %i iterations, Coverage: %5f",
            progress.iteration,
            progress.coverage,
        )
