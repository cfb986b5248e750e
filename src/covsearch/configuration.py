#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides a configuration interface for the search."""

import dataclasses
import enum
import time


class Algorithm(str, enum.Enum):
    """Different search algorithms supported by covsearch."""

    DYNAMOSA = "DYNAMOSA"
    """The dynamic many-objective sorting algorithm (cf. Panichella et al. Automated
    test case generation as a many-objective optimisation problem with dynamic selection
    of the targets.  TSE vol. 44 issue 2).  Objectives are activated along the
    structural dependencies exposed by the subject."""

    MOSA = "MOSA"
    """The many-objective sorting algorithm (cf. Panichella et al. Reformulating Branch
    Coverage as a Many-Objective Optimization Problem.  Proc. ICST 2015)."""

    NSGAII = "NSGAII"
    """The non-dominated sorting genetic algorithm (cf. Deb et al. A fast and elitist
    multiobjective genetic algorithm: NSGA-II.  IEEE TEVC vol. 6 issue 2)."""

    PESAII = "PESAII"
    """The Pareto envelope-based selection algorithm (cf. Corne et al. PESA-II:
    Region-based Selection in Evolutionary Multiobjective Optimization.
    Proc. GECCO 2001)."""

    RANDOM = "RANDOM"
    """Samples and evaluates one random encoding per iteration."""


class Selection(str, enum.Enum):
    """Different selection algorithms to select from."""

    TOURNAMENT_SELECTION = "TOURNAMENT_SELECTION"
    """Crowded tournament selection: lower rank wins, ties prefer the larger
    crowding distance."""


@dataclasses.dataclass
class SeedingConfiguration:
    """Configuration related to seeding."""

    seed: int = time.time_ns()
    """A predefined seed value for the random number generator that is used."""


@dataclasses.dataclass
class SearchAlgorithmConfiguration:
    """General configuration for search algorithms."""

    population: int = 50
    """Population size of genetic algorithm"""

    crossover_rate: float = 0.75
    """Probability of crossover"""

    number_of_mutations: int = 1
    """Number of mutations that should be applied in one breeding step."""

    tournament_size: int = 4
    """Number of individuals for tournament selection."""

    selection: Selection = Selection.TOURNAMENT_SELECTION
    """The selection operator for genetic algorithms."""

    pesaii_archive_size: int = 100
    """Maximum number of non-dominated encodings in the external population of
    PESA-II."""

    pesaii_grid_divisions: int = 5
    """Number of hyper-grid divisions per objective used by PESA-II."""


@dataclasses.dataclass
class StoppingConfiguration:
    """Configuration related to when the search should stop.

    Negative values disable a limit.  The evaluation budget is a hard limit, the
    others are checked at the start of every algorithm iteration.
    """

    maximum_search_time: int = -1
    """Time (in seconds) that can be used for the search."""

    maximum_evaluations: int = -1
    """Maximum number of encodings to be evaluated."""

    maximum_iterations: int = -1
    """Maximum number of algorithm iterations (generations)."""

    maximum_memory: int = -1
    """Maximum memory usage in MB after which the search shall stop."""


@dataclasses.dataclass
class Configuration:
    """General configuration for the search."""

    algorithm: Algorithm = Algorithm.DYNAMOSA
    """The algorithm that shall be used for the search."""

    search_algorithm: SearchAlgorithmConfiguration = dataclasses.field(
        default_factory=SearchAlgorithmConfiguration
    )
    """Search algorithm configuration."""

    stopping: StoppingConfiguration = dataclasses.field(default_factory=StoppingConfiguration)
    """Stopping configuration."""

    seeding: SeedingConfiguration = dataclasses.field(default_factory=SeedingConfiguration)
    """Seeding configuration."""


# Singleton instance of the configuration.
configuration = Configuration()
