#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
import math

from unittest.mock import MagicMock

import pytest

from covsearch.ga.algorithms.randomsearchalgorithm import RandomSearchAlgorithm
from covsearch.ga.algorithms.searchalgorithm import SearchState
from covsearch.ga.algorithms.searchalgorithm import TerminationReason
from covsearch.ga.budget import BudgetManager
from covsearch.ga.budget import EvaluationBudget
from covsearch.ga.budget import IterationBudget
from covsearch.ga.encoding import EncodingSampler
from covsearch.ga.objectivemanager import ObjectiveManager
from covsearch.ga.objectivemanager import SimpleCoveragePolicy
from covsearch.ga.searchobserver import SearchObserver
from covsearch.ga.searchobserver import SearchProgress
from covsearch.utils.exceptions import ConfigurationException
from covsearch.utils.exceptions import InvariantViolationException
from tests.testutils import DummyEncoding
from tests.testutils import create_dummy_subject


def _sampler(*fitnesses):
    sampler = MagicMock(EncodingSampler)
    if len(fitnesses) == 1:
        sampler.sample.side_effect = lambda: DummyEncoding(fitnesses[0])
    else:
        sampler.sample.side_effect = [DummyEncoding(fitness) for fitness in fitnesses]
    return sampler


@pytest.fixture
def manager(dummy_runner):
    return ObjectiveManager(dummy_runner, SimpleCoveragePolicy())


def test_initial_state(manager):
    algorithm = RandomSearchAlgorithm(manager, _sampler({}))
    assert algorithm.state == SearchState.INITIALIZING
    assert algorithm.termination_reason is None
    assert algorithm.population == []


def test_invalid_population_size(manager):
    with pytest.raises(ConfigurationException):
        RandomSearchAlgorithm(manager, _sampler({}), population_size=0)


def test_population_size_from_configuration(manager):
    assert RandomSearchAlgorithm(manager, _sampler({})).population_size == 50


def test_objectives_covered(manager):
    subject, (first, second) = create_dummy_subject("a", "b")
    algorithm = RandomSearchAlgorithm(
        manager, _sampler({"a": 0.0, "b": 0.5}, {"a": 0.3, "b": 0.0})
    )
    archive = algorithm.search(subject, BudgetManager([EvaluationBudget(100)]))
    assert algorithm.state == SearchState.TERMINATED
    assert algorithm.termination_reason == TerminationReason.OBJECTIVES_COVERED
    assert algorithm.iteration == 2
    assert archive.has(first)
    assert archive.has(second)


def test_budget_exhausted(manager, dummy_runner):
    subject, _ = create_dummy_subject("a")
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.5}))
    algorithm.search(subject, BudgetManager([EvaluationBudget(7)]))
    assert algorithm.termination_reason == TerminationReason.BUDGET_EXHAUSTED
    assert len(dummy_runner.executed) == 7
    assert algorithm.state == SearchState.TERMINATED


def test_iteration_budget(manager):
    subject, _ = create_dummy_subject("a")
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.5}))
    algorithm.search(subject, BudgetManager([IterationBudget(3)]))
    assert algorithm.iteration == 3


def test_budget_events(manager):
    subject, _ = create_dummy_subject("a")
    budget_manager = MagicMock(BudgetManager)
    budget_manager.has_budget_left.side_effect = [True, True, False, False]
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.5}))
    algorithm.search(subject, budget_manager)
    budget_manager.search_started.assert_called_once()
    budget_manager.search_stopped.assert_called_once()
    assert budget_manager.iteration.call_count == 1


def test_invariant_violation_terminates(manager):
    subject, _ = create_dummy_subject("a")
    budget_manager = BudgetManager([EvaluationBudget(10)])
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": math.nan}))
    with pytest.raises(InvariantViolationException):
        algorithm.search(subject, budget_manager)
    assert algorithm.state == SearchState.TERMINATED
    assert algorithm.termination_reason == TerminationReason.ERROR


def test_no_expansion_after_termination(manager):
    subject, _ = create_dummy_subject("a")
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.5}))
    algorithm.search(subject, BudgetManager([EvaluationBudget(1)]))
    assert manager._stopped


def test_observers(manager):
    subject, _ = create_dummy_subject("a")
    observer = MagicMock(SearchObserver)
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.5}))
    algorithm.add_search_observer(observer)
    algorithm.search(subject, BudgetManager([EvaluationBudget(3)]))
    observer.before_search_start.assert_called_once()
    observer.before_first_search_iteration.assert_called_once()
    assert observer.after_search_iteration.call_count == 3
    observer.after_search_finish.assert_called_once()
    progress = observer.after_search_finish.call_args.args[0]
    assert progress == SearchProgress(
        iteration=3,
        archive_size=0,
        current_objectives=1,
        covered_objectives=0,
        uncovered_objectives=1,
        budget_progress=1.0,
    )


def test_progress_snapshot_is_frozen(manager):
    subject, _ = create_dummy_subject("a")
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.0}))
    algorithm.search(subject, BudgetManager([EvaluationBudget(3)]))
    progress = algorithm.progress()
    assert progress.coverage == 1.0
    with pytest.raises(AttributeError):
        progress.iteration = 5  # type: ignore[misc]


def test_first_coverage_iterations(manager):
    subject, (first, second) = create_dummy_subject("a", "b")
    algorithm = RandomSearchAlgorithm(
        manager,
        _sampler(
            {"a": 0.5, "b": 0.5},
            {"a": 0.0, "b": 0.5},
            {"a": 0.0, "b": 0.0},
        ),
    )
    algorithm.search(subject, BudgetManager([EvaluationBudget(100)]))
    assert algorithm.first_coverage == {first: 2, second: 3}


def test_first_coverage_reset_between_searches(manager):
    subject, _ = create_dummy_subject("a")
    algorithm = RandomSearchAlgorithm(manager, _sampler({"a": 0.0}))
    algorithm.search(subject, BudgetManager([EvaluationBudget(5)]))
    other_subject, (other,) = create_dummy_subject("a")
    algorithm.search(other_subject, BudgetManager([EvaluationBudget(5)]))
    assert algorithm.first_coverage == {other: 1}
