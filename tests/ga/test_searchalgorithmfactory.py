#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
from unittest.mock import MagicMock

import pytest

import covsearch.configuration as config
import covsearch.ga.searchalgorithmfactory as saf

from covsearch.execution import EncodingRunner
from covsearch.ga.algorithms.mosaalgorithm import MOSAAlgorithm
from covsearch.ga.algorithms.nsgaiialgorithm import NSGAIIAlgorithm
from covsearch.ga.algorithms.pesaiialgorithm import PESAIIAlgorithm
from covsearch.ga.algorithms.pesaiialgorithm import RegionSelection
from covsearch.ga.algorithms.randomsearchalgorithm import RandomSearchAlgorithm
from covsearch.ga.budget import EvaluationBudget
from covsearch.ga.budget import IterationBudget
from covsearch.ga.budget import MemoryBudget
from covsearch.ga.budget import SearchTimeBudget
from covsearch.ga.encoding import EncodingSampler
from covsearch.ga.objectivemanager import SimpleCoveragePolicy
from covsearch.ga.objectivemanager import StructuralCoveragePolicy
from covsearch.ga.operators.selection import TournamentSelection
from covsearch.ga.searchobserver import LogSearchObserver
from covsearch.utils.exceptions import ConfigurationException


@pytest.fixture
def algorithm_factory() -> saf.SearchAlgorithmFactory:
    return saf.SearchAlgorithmFactory(MagicMock(EncodingRunner), MagicMock(EncodingSampler))


@pytest.mark.parametrize(
    "algorithm, cls",
    [
        pytest.param(config.Algorithm.RANDOM, RandomSearchAlgorithm),
        pytest.param(config.Algorithm.NSGAII, NSGAIIAlgorithm),
        pytest.param(config.Algorithm.MOSA, MOSAAlgorithm),
        pytest.param(config.Algorithm.DYNAMOSA, MOSAAlgorithm),
        pytest.param(config.Algorithm.PESAII, PESAIIAlgorithm),
    ],
)
def test_instantiate_strategy(algorithm, cls, algorithm_factory):
    config.configuration.algorithm = algorithm
    instance = algorithm_factory.get_search_algorithm()
    assert isinstance(instance, cls)
    assert any(isinstance(observer, LogSearchObserver) for observer in instance._search_observers)


@pytest.mark.parametrize(
    "algorithm, cls",
    [
        pytest.param(config.Algorithm.DYNAMOSA, StructuralCoveragePolicy),
        pytest.param(config.Algorithm.MOSA, SimpleCoveragePolicy),
        pytest.param(config.Algorithm.NSGAII, SimpleCoveragePolicy),
        pytest.param(config.Algorithm.PESAII, SimpleCoveragePolicy),
        pytest.param(config.Algorithm.RANDOM, SimpleCoveragePolicy),
    ],
)
def test_coverage_policy(algorithm, cls, algorithm_factory):
    config.configuration.algorithm = algorithm
    strategy = algorithm_factory.get_search_algorithm()
    assert isinstance(strategy.objective_manager.policy, cls)


def test_tournament_selection(algorithm_factory):
    config.configuration.algorithm = config.Algorithm.NSGAII
    strategy = algorithm_factory.get_search_algorithm()
    assert isinstance(strategy._procreation._selection_function, TournamentSelection)


def test_region_selection_follows_objectives(algorithm_factory):
    config.configuration.algorithm = config.Algorithm.PESAII
    config.configuration.search_algorithm.pesaii_grid_divisions = 9
    strategy = algorithm_factory.get_search_algorithm()
    selection = strategy._procreation._selection_function
    assert isinstance(selection, RegionSelection)
    assert selection._objectives is strategy.objective_manager.current_objectives
    assert selection.divisions == strategy._divisions == 9


def test_unknown_strategy(algorithm_factory):
    config.configuration.algorithm = MagicMock()
    with pytest.raises(ConfigurationException):
        algorithm_factory.get_search_algorithm()


def test_unknown_selection(algorithm_factory):
    config.configuration.algorithm = config.Algorithm.MOSA
    config.configuration.search_algorithm.selection = MagicMock()
    with pytest.raises(ConfigurationException):
        algorithm_factory.get_search_algorithm()


@pytest.mark.parametrize(
    "budget, cls",
    [
        pytest.param("maximum_iterations", IterationBudget),
        pytest.param("maximum_evaluations", EvaluationBudget),
        pytest.param("maximum_search_time", SearchTimeBudget),
    ],
)
def test_budget(budget, cls, algorithm_factory):
    setattr(config.configuration.stopping, budget, 5)
    budgets = algorithm_factory.get_budget_manager().budgets
    assert len(budgets) == 1
    assert isinstance(budgets[0], cls)
    assert budgets[0].limit() == 5


def test_optional_memory_budget(algorithm_factory):
    config.configuration.stopping.maximum_iterations = 10
    config.configuration.stopping.maximum_memory = 1000
    budgets = algorithm_factory.get_budget_manager().budgets
    assert isinstance(budgets[0], IterationBudget)
    assert isinstance(budgets[1], MemoryBudget)


def test_budget_not_set(algorithm_factory):
    budgets = algorithm_factory.get_budget_manager().budgets
    assert len(budgets) == 1
    assert isinstance(budgets[0], SearchTimeBudget)
    assert budgets[0].limit() == saf.SearchAlgorithmFactory._DEFAULT_MAX_SEARCH_TIME
