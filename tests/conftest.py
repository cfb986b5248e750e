#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
from unittest.mock import MagicMock

import pytest

import covsearch.configuration as config

from covsearch.execution import EncodingRunner
from covsearch.ga.budget import BudgetManager
from covsearch.ga.budget import EvaluationBudget
from covsearch.utils import randomness
from tests.testutils import DummyRunner
from tests.testutils import IntSampler


@pytest.fixture(autouse=True)
def reset_configuration():
    """Automatically reset the configuration singleton and seed the RNG."""
    config.configuration = config.Configuration(
        algorithm=config.Algorithm.RANDOM,
        seeding=config.SeedingConfiguration(seed=42),
    )
    randomness.RNG.seed(42)


@pytest.fixture
def runner_mock():
    return MagicMock(EncodingRunner)


@pytest.fixture
def dummy_runner():
    return DummyRunner()


@pytest.fixture
def int_sampler():
    return IntSampler()


@pytest.fixture
def unlimited_budget():
    return BudgetManager([EvaluationBudget(1_000_000)])
