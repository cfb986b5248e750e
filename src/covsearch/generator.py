#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""covsearch is a search-based engine that evolves encodings to cover objectives.

This module is the main entry location for the search.  A run needs a subject,
which provides the objectives, a runner that executes encodings, and a sampler
that creates random encodings.  The result of a run is the archive of the best
encoding found for each objective.

The search is steered by the configuration singleton; use `set_configuration`
to replace it before calling `generate`.
"""

from __future__ import annotations

import dataclasses
import enum
import logging

from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

import covsearch.configuration as config

from covsearch.ga.encoding import Encoding
from covsearch.ga.searchalgorithmfactory import SearchAlgorithmFactory
from covsearch.utils import randomness


if TYPE_CHECKING:
    from covsearch.execution import EncodingRunner
    from covsearch.ga.algorithms.searchalgorithm import TerminationReason
    from covsearch.ga.archive import Archive
    from covsearch.ga.encoding import EncodingSampler
    from covsearch.ga.operators.procreation import Crossover
    from covsearch.subject import SearchSubject

E = TypeVar("E", bound=Encoding)


@enum.unique
class ReturnCode(enum.IntEnum):
    """Return codes for covsearch to signal result."""

    OK = 0
    """Symbolises that the search ended as expected."""

    NO_ENCODINGS_FOUND = 1
    """Symbolises that the search did not archive any encoding."""


@dataclasses.dataclass(frozen=True)
class SearchResult(Generic[E]):
    """The outcome of a search run."""

    archive: Archive[E]
    """The best encoding per covered objective."""

    return_code: ReturnCode
    """Signals whether anything was found."""

    termination_reason: TerminationReason | None
    """Why the search stopped."""


_LOGGER = logging.getLogger(__name__)


def set_configuration(configuration: config.Configuration) -> None:
    """Initialises the search with the given configuration.

    Args:
        configuration: The configuration to use.
    """
    config.configuration = configuration


def generate(
    subject: SearchSubject[E],
    runner: EncodingRunner[E],
    sampler: EncodingSampler[E],
    crossover: Crossover[E] | None = None,
) -> SearchResult[E]:
    """Run the search on the subject.

    Args:
        subject: The subject providing the objectives
        runner: The runner executing encodings
        sampler: The sampler for new random encodings
        crossover: An optional crossover operator

    Returns:
        The result of the search
    """
    _setup_random_number_generator()
    factory: SearchAlgorithmFactory[E] = SearchAlgorithmFactory(runner, sampler, crossover)
    budget_manager = factory.get_budget_manager()
    algorithm = factory.get_search_algorithm()

    archive = algorithm.search(subject, budget_manager)
    _LOGGER.info("Stop search: %s", budget_manager)

    objective_manager = algorithm.objective_manager
    covered = len(objective_manager.covered_objectives)
    total = covered + len(objective_manager.uncovered_objectives)
    _LOGGER.info("Covered %d of %d objectives of %s", covered, total, subject.name)
    _LOGGER.info("Found %d distinct faults", len(archive.exception_objectives))

    if archive.size() == 0:
        _LOGGER.info("No encodings have been archived")
        return_code = ReturnCode.NO_ENCODINGS_FOUND
    else:
        return_code = ReturnCode.OK
    return SearchResult(archive, return_code, algorithm.termination_reason)


def _setup_random_number_generator() -> None:
    """Setup RNG."""
    _LOGGER.info("Using seed %d", config.configuration.seeding.seed)
    randomness.RNG.seed(config.configuration.seeding.seed)
