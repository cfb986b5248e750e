#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the manager that tracks which objectives are uncovered, current, or covered."""

from __future__ import annotations

import logging

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from ordered_set import OrderedSet

from covsearch.ga.archive import Archive
from covsearch.ga.objectivefunction import ExceptionObjectiveFunction
from covsearch.ga.objectivefunction import hash_exception


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Sequence

    from covsearch.execution import EncodingRunner
    from covsearch.ga.budget import BudgetManager
    from covsearch.ga.encoding import Encoding
    from covsearch.ga.objectivefunction import ObjectiveFunction
    from covsearch.subject import SearchSubject

E = TypeVar("E", bound="Encoding")


class CoveragePolicy(ABC, Generic[E]):
    """Decides which objectives guide the search."""

    def __init__(self) -> None:  # noqa: D107
        self._subject: SearchSubject[E] | None = None

    def load(self, subject: SearchSubject[E]) -> Iterable[ObjectiveFunction[E]]:
        """Bind the policy to a subject.

        Args:
            subject: The subject of the search

        Returns:
            The objectives that are active from the start
        """
        self._subject = subject
        return self._initial_objectives(subject)

    @abstractmethod
    def _initial_objectives(self, subject: SearchSubject[E]) -> Iterable[ObjectiveFunction[E]]:
        """Select the objectives that are active from the start.

        Args:
            subject: The subject of the search

        Returns:
            The initially active objectives  # noqa: DAR202
        """

    @abstractmethod
    def on_objective_evaluated(
        self, objective: ObjectiveFunction[E], encoding: E, distance: float
    ) -> OrderedSet[ObjectiveFunction[E]]:
        """Called once per evaluation for every current objective.

        Args:
            objective: The evaluated objective
            encoding: The evaluated encoding
            distance: The distance of the encoding to the objective

        Returns:
            The objectives to activate in consequence  # noqa: DAR202
        """


class SimpleCoveragePolicy(CoveragePolicy[E]):
    """Activates all objectives of the subject up front."""

    def _initial_objectives(  # noqa: D102
        self, subject: SearchSubject[E]
    ) -> Iterable[ObjectiveFunction[E]]:
        return subject.get_objectives()

    def on_objective_evaluated(  # noqa: D102
        self, objective: ObjectiveFunction[E], encoding: E, distance: float
    ) -> OrderedSet[ObjectiveFunction[E]]:
        return OrderedSet()


class StructuralCoveragePolicy(CoveragePolicy[E]):
    """Activates objectives along the structure exposed by the subject.

    The search starts with the root objectives, i.e., those whose identifier
    names an entry construct of the subject.  Once an objective is covered, its
    structural children become reachable and are activated.  The set of active
    objectives thereby stays small and focused.
    """

    _logger = logging.getLogger(__name__)

    def _initial_objectives(  # noqa: D102
        self, subject: SearchSubject[E]
    ) -> Iterable[ObjectiveFunction[E]]:
        root_identifiers = subject.get_root_identifiers()
        objectives = subject.get_objectives()
        roots: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        for identifier in root_identifiers:
            for objective in objectives:
                if objective.identifier == identifier:
                    self._logger.debug("adding root objective: %s", objective.identifier)
                    roots.add(objective)
        return roots

    def on_objective_evaluated(  # noqa: D102
        self, objective: ObjectiveFunction[E], encoding: E, distance: float
    ) -> OrderedSet[ObjectiveFunction[E]]:
        if distance != 0.0:
            return OrderedSet()
        assert self._subject is not None, "Policy was not loaded"
        return OrderedSet(self._subject.get_child_objectives(objective))


class ObjectiveManager(Generic[E]):
    """Keeps track of which objectives have been covered and are still to be searched.

    The objectives of a subject are partitioned into three sets: uncovered ones,
    current ones that guide the selection, and covered ones.  An objective never
    moves back, and current and covered objectives never overlap.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self, runner: EncodingRunner[E], policy: CoveragePolicy[E]) -> None:
        """Create a new objective manager.

        Args:
            runner: The runner executing encodings
            policy: The policy selecting the current objectives
        """
        self._runner = runner
        self._policy = policy
        self._archive: Archive[E] = Archive()
        self._uncovered_objectives: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        self._current_objectives: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        self._covered_objectives: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        self._subject: SearchSubject[E] | None = None
        self._stopped = False

    @property
    def policy(self) -> CoveragePolicy[E]:  # noqa: D102
        return self._policy

    @property
    def subject(self) -> SearchSubject[E] | None:  # noqa: D102
        return self._subject

    @property
    def uncovered_objectives(self) -> OrderedSet[ObjectiveFunction[E]]:
        """Provides the live set of uncovered objectives.

        Returns:
            The uncovered objectives
        """
        return self._uncovered_objectives

    @property
    def current_objectives(self) -> OrderedSet[ObjectiveFunction[E]]:
        """Provides the live set of objectives that currently guide the search.

        Returns:
            The current objectives
        """
        return self._current_objectives

    @property
    def covered_objectives(self) -> OrderedSet[ObjectiveFunction[E]]:
        """Provides the live set of covered objectives.

        Returns:
            The covered objectives
        """
        return self._covered_objectives

    @property
    def archive(self) -> Archive[E]:
        """Provides the live archive.

        Returns:
            The archive
        """
        return self._archive

    def has_objectives(self) -> bool:
        """Are there objectives left to cover?

        Returns:
            True, iff the set of current objectives is not empty
        """
        return len(self._current_objectives) > 0

    def load(self, subject: SearchSubject[E]) -> None:
        """Load the objectives from the subject into the manager.

        Args:
            subject: The subject to load in
        """
        self._subject = subject
        self._reset()
        for objective in subject.get_objectives():
            objective.shallow = False
            self._uncovered_objectives.add(objective)
        for objective in self._policy.load(subject):
            self._current_objectives.add(objective)
        self._logger.debug(
            "Loaded %d objectives, %d current",
            len(self._uncovered_objectives),
            len(self._current_objectives),
        )

    def stop(self) -> None:
        """Declare the search terminated.

        Evaluations after this point still record distances but no longer
        activate further objectives.
        """
        self._stopped = True

    def evaluate_many(self, encodings: Sequence[E], budget_manager: BudgetManager) -> int:
        """Evaluate the encodings in order until the budget is exhausted.

        Args:
            encodings: The encodings to evaluate
            budget_manager: The budget manager to track the remaining budget

        Returns:
            The number of evaluated encodings
        """
        evaluated = 0
        for encoding in encodings:
            if not budget_manager.has_budget_left():
                self._logger.debug(
                    "Budget exhausted, skipping %d encodings", len(encodings) - evaluated
                )
                break
            self.evaluate_one(encoding, budget_manager)
            evaluated += 1
        return evaluated

    def evaluate_one(self, encoding: E, budget_manager: BudgetManager) -> None:
        """Evaluate one encoding on the current objectives.

        Args:
            encoding: The encoding to evaluate
            budget_manager: The budget manager to track evaluation
        """
        result = self._runner.execute(encoding)
        budget_manager.evaluation(encoding)
        encoding.execution_result = result

        # Covered objectives stay in the archive race, a shorter encoding wins ties.
        for objective in self._covered_objectives:
            if objective.evaluate(encoding) == 0.0:
                encoding.set_distance(objective, 0.0)
                self._archive.update(objective, encoding)

        newly_covered: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        activated: OrderedSet[ObjectiveFunction[E]] = OrderedSet()
        # Iterate a snapshot, the sets are only changed after all objectives were seen.
        for objective in list(self._current_objectives):
            distance = objective.evaluate(encoding)
            encoding.set_distance(objective, distance)
            if distance == 0.0:
                self._archive.update(objective, encoding)
                newly_covered.add(objective)
            activated |= self._policy.on_objective_evaluated(objective, encoding, distance)

        for objective in newly_covered:
            self._cover(objective)
        if not self._stopped:
            for objective in activated:
                if (
                    objective not in self._covered_objectives
                    and objective not in self._current_objectives
                ):
                    self._logger.debug("adding new objective: %s", objective.identifier)
                    self._current_objectives.add(objective)

        if result.has_exceptions():
            self._archive_exceptions(encoding)

    def _cover(self, objective: ObjectiveFunction[E]) -> None:
        self._logger.debug("covered: %s", objective.identifier)
        self._uncovered_objectives.discard(objective)
        self._current_objectives.discard(objective)
        # The distance of a covered objective only matters as covered or not.
        objective.shallow = True
        self._covered_objectives.add(objective)

    def _archive_exceptions(self, encoding: E) -> None:
        result = encoding.execution_result
        assert result is not None
        known = {objective.identifier for objective in self._archive.exception_objectives}
        for signature in result.exception_signatures():
            identifier = hash_exception(signature)
            if identifier in known:
                continue
            self._logger.debug("new fault signature %s: %s", identifier, signature)
            objective = ExceptionObjectiveFunction(self._subject, identifier, signature)
            encoding.set_distance(objective, 0.0)
            self._archive.update(objective, encoding)
            known.add(identifier)

    def _reset(self) -> None:
        self._archive.reset()
        self._uncovered_objectives.clear()
        self._current_objectives.clear()
        self._covered_objectives.clear()
        self._stopped = False
