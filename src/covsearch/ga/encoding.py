#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides an abstract base class for encodings, i.e., the evolved candidates."""

from __future__ import annotations

import math

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from covsearch.utils import randomness
from covsearch.utils.exceptions import ConfigurationException
from covsearch.utils.exceptions import InvariantViolationException


if TYPE_CHECKING:
    from collections.abc import Sequence

    from covsearch.execution import ExecutionResult
    from covsearch.ga.objectivefunction import ObjectiveFunction


class Encoding(ABC):
    """An abstract base class for encodings.

    Besides the genotype, which is defined by subclasses, an encoding keeps its
    fitness bookkeeping: the distances to the objectives it was evaluated on, its
    rank and crowding distance in the last environmental selection, and the
    result of its last execution.
    """

    def __init__(self) -> None:  # noqa: D107
        self._id = randomness.unique_id()
        self.crowding_distance: float = 0.0
        self.rank: int = 0
        # Keyed by objective handle.
        self._distances: dict[int, float] = {}
        self._execution_result: ExecutionResult | None = None
        self._assertions: dict[str, str] = {}
        self._meta_comments: list[str] = []

    @property
    def id(self) -> str:
        """Provides the unique identifier of this encoding.

        Returns:
            The identifier
        """
        return self._id

    @property
    def assertions(self) -> dict[str, str]:
        """Provides the assertions attached to this encoding.

        Returns:
            A mapping from asserted expression to expected value
        """
        return self._assertions

    @assertions.setter
    def assertions(self, assertions: dict[str, str]) -> None:
        self._assertions = assertions

    @property
    def meta_comments(self) -> list[str]:
        """Provides a copy of the meta comments.

        Returns:
            The meta comments in the order they were added
        """
        return list(self._meta_comments)

    def add_meta_comment(self, comment: str) -> None:
        """Append a meta comment.

        Args:
            comment: The comment to add
        """
        self._meta_comments.append(comment)

    @property
    def execution_result(self) -> ExecutionResult | None:
        """Provides the result of the last execution, if any.

        Returns:
            The last execution result
        """
        return self._execution_result

    @execution_result.setter
    def execution_result(self, result: ExecutionResult) -> None:
        self._execution_result = result

    def has_distance(self, objective: ObjectiveFunction) -> bool:
        """Is a distance for the objective cached?

        Args:
            objective: The objective

        Returns:
            True, iff a distance is cached
        """
        return objective.handle in self._distances

    def get_distance(self, objective: ObjectiveFunction) -> float:
        """Provides the distance to the given objective.

        An objective may have become part of the search after this encoding was
        evaluated.  In that case the distance is computed and cached now.

        Args:
            objective: The objective

        Returns:
            The distance to the objective

        Raises:
            InvariantViolationException: if the cached distance is NaN
        """
        distance = self._distances.get(objective.handle)
        if distance is None:
            distance = objective.evaluate(self)
            self.set_distance(objective, distance)
        elif math.isnan(distance):
            raise InvariantViolationException(f"NaN distance cached for {objective!r}")
        return distance

    def set_distance(self, objective: ObjectiveFunction, distance: float) -> None:
        """Store the distance to an objective.

        Args:
            objective: The objective
            distance: The distance

        Raises:
            InvariantViolationException: if the distance is NaN
        """
        if math.isnan(distance):
            raise InvariantViolationException(f"NaN distance for {objective!r}")
        self._distances[objective.handle] = distance

    def set_distances(
        self, objectives: Sequence[ObjectiveFunction], distances: Sequence[float]
    ) -> None:
        """Store the distances for several objectives at once.

        Args:
            objectives: The objectives
            distances: The distances, paired with `objectives`

        Raises:
            ConfigurationException: if both sequences differ in length
        """
        if len(objectives) != len(distances):
            raise ConfigurationException(
                f"Got {len(objectives)} objectives but {len(distances)} distances"
            )
        for objective, distance in zip(objectives, distances, strict=True):
            self.set_distance(objective, distance)

    @abstractmethod
    def mutate(self, sampler: EncodingSampler) -> Encoding:
        """Create a mutated offspring of this encoding.

        The offspring must not share mutable state with this encoding.

        Args:
            sampler: The sampler providing new genetic material

        Returns:
            The mutated offspring  # noqa: DAR202
        """

    @abstractmethod
    def copy(self) -> Encoding:
        """Create an independent copy of the genotype.

        Returns:
            The copy  # noqa: DAR202
        """

    @abstractmethod
    def length(self) -> int:
        """Provides the length of the encoding, used as secondary criterion.

        Returns:
            The length  # noqa: DAR202
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id})"


E = TypeVar("E", bound=Encoding)


class EncodingSampler(ABC, Generic[E]):
    """Samples new random encodings for a subject."""

    @abstractmethod
    def sample(self) -> E:
        """Sample a new random encoding.

        Returns:
            A new encoding  # noqa: DAR202
        """
