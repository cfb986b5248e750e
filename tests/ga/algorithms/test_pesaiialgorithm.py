#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
from unittest import mock
from unittest.mock import MagicMock

import pytest

from covsearch.ga.algorithms.pesaiialgorithm import PESAIIAlgorithm
from covsearch.ga.algorithms.pesaiialgorithm import RegionSelection
from covsearch.ga.algorithms.pesaiialgorithm import assign_regions
from covsearch.ga.algorithms.searchalgorithm import TerminationReason
from covsearch.ga.budget import BudgetManager
from covsearch.ga.budget import EvaluationBudget
from covsearch.ga.encoding import EncodingSampler
from covsearch.ga.objectivemanager import ObjectiveManager
from covsearch.ga.objectivemanager import SimpleCoveragePolicy
from covsearch.ga.operators.procreation import DefaultProcreation
from covsearch.ga.operators.procreation import Procreation
from covsearch.utils.exceptions import ConfigurationException
from tests.testutils import AverageCrossover
from tests.testutils import DummyEncoding
from tests.testutils import IntSampler
from tests.testutils import create_dummy_subject
from tests.testutils import create_int_subject


@pytest.fixture
def objectives():
    _, objectives = create_dummy_subject("a", "b")
    return objectives


def test_assign_regions(objectives):
    first = DummyEncoding({"a": 0.0, "b": 1.0})
    second = DummyEncoding({"a": 0.5, "b": 0.5})
    third = DummyEncoding({"a": 1.0, "b": 0.0})
    fourth = DummyEncoding({"a": 0.1, "b": 0.9})
    regions = assign_regions([first, second, third, fourth], objectives, 2)
    assert regions == {
        (0, 1): [first, fourth],
        (1, 1): [second],
        (1, 0): [third],
    }


def test_assign_regions_flat_objective(objectives):
    encodings = [DummyEncoding({"a": 0.3, "b": value}) for value in (0.0, 0.2, 0.4)]
    regions = assign_regions(encodings, objectives, 2)
    assert list(regions) == [(0, 0), (0, 1)]


def test_region_selection_prefers_smaller_region(objectives):
    first = DummyEncoding({"a": 0.0, "b": 1.0})
    crowded = DummyEncoding({"a": 0.1, "b": 0.9})
    lonely = DummyEncoding({"a": 1.0, "b": 0.0})
    population = [first, crowded, lonely]
    selection = RegionSelection(objectives, 2)
    with mock.patch("covsearch.utils.randomness.choice") as choice_mock:
        choice_mock.side_effect = [[first, crowded], [lonely], lonely]
        assert selection.get_index(population) == 2


def test_region_selection_keeps_first_region_on_tie(objectives):
    first = DummyEncoding({"a": 0.0, "b": 1.0})
    second = DummyEncoding({"a": 1.0, "b": 0.0})
    selection = RegionSelection(objectives, 2)
    with mock.patch("covsearch.utils.randomness.choice") as choice_mock:
        choice_mock.side_effect = [[first], [second], first]
        assert selection.get_index([first, second]) == 0


@pytest.mark.parametrize("archive_size,divisions", [(0, 5), (10, 0), (-1, -1)])
def test_invalid_setup(dummy_runner, archive_size, divisions):
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    with pytest.raises(ConfigurationException):
        PESAIIAlgorithm(
            manager,
            MagicMock(EncodingSampler),
            MagicMock(Procreation),
            archive_size=archive_size,
            divisions=divisions,
        )


def test_external_population_bounded(dummy_runner):
    subject, _ = create_dummy_subject("a", "b")
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    manager.load(subject)
    algorithm = PESAIIAlgorithm(
        manager,
        MagicMock(EncodingSampler),
        MagicMock(Procreation),
        archive_size=3,
        divisions=2,
    )
    front = [DummyEncoding({"a": i / 4, "b": 1 - i / 4}) for i in range(5)]
    dominated = DummyEncoding({"a": 1.0, "b": 1.0})

    algorithm._update_external_population([*front, dominated])

    # The oldest members of the most crowded region go first.
    assert algorithm.external_population == front[2:]


def test_external_population_drops_dominated_members(dummy_runner):
    subject, _ = create_dummy_subject("a", "b")
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    manager.load(subject)
    algorithm = PESAIIAlgorithm(
        manager, MagicMock(EncodingSampler), MagicMock(Procreation), archive_size=10
    )
    old = DummyEncoding({"a": 0.5, "b": 0.5})
    algorithm._update_external_population([old])
    better = DummyEncoding({"a": 0.4, "b": 0.4})
    algorithm._update_external_population([better])
    assert algorithm.external_population == [better]


def test_covers_toy_subject(dummy_runner):
    subject, objectives = create_int_subject()
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    sampler = IntSampler(-50, 50)
    selection = RegionSelection(manager.current_objectives, 5)
    procreation = DefaultProcreation(selection, sampler, AverageCrossover())
    algorithm = PESAIIAlgorithm(manager, sampler, procreation, population_size=10)

    archive = algorithm.search(subject, BudgetManager([EvaluationBudget(5000)]))

    assert algorithm.termination_reason == TerminationReason.OBJECTIVES_COVERED
    assert archive.get_encoding(objectives["eq_42"]).value == 42


def test_region_selection_on_other_grid_rejected(dummy_runner):
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    sampler = IntSampler()
    procreation = DefaultProcreation(
        RegionSelection(manager.current_objectives, 3), sampler, AverageCrossover()
    )
    with pytest.raises(ConfigurationException):
        PESAIIAlgorithm(manager, sampler, procreation, divisions=7)


def test_region_selection_on_same_grid(dummy_runner):
    manager = ObjectiveManager(dummy_runner, SimpleCoveragePolicy())
    sampler = IntSampler()
    procreation = DefaultProcreation(
        RegionSelection(manager.current_objectives, 7), sampler, AverageCrossover()
    )
    algorithm = PESAIIAlgorithm(manager, sampler, procreation, divisions=7)
    assert algorithm._divisions == procreation.selection_function.divisions
