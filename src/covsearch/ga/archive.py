#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the archive that stores the best encoding per objective."""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from ordered_set import OrderedSet

from covsearch.ga.objectivefunction import ExceptionObjectiveFunction


if TYPE_CHECKING:
    from collections.abc import Callable

    from covsearch.ga.encoding import Encoding
    from covsearch.ga.objectivefunction import ObjectiveFunction

E = TypeVar("E", bound="Encoding")


class Archive(Generic[E]):
    """Stores the best encoding found so far for each objective.

    The archive is the canonical output of a search.  For a given objective the
    stored distance never increases: an encoding replaces the incumbent only if
    it is strictly closer, or equally close but shorter.  Entries are only
    removed by `reset`, so an objective that leaves the search keeps its best
    known encoding.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self) -> None:  # noqa: D107
        # Keyed by objective handle, insertion ordered.
        self._entries: dict[int, tuple[ObjectiveFunction[E], E]] = {}
        self._on_target_covered_callbacks: list[Callable[[ObjectiveFunction[E]], None]] = []

    def update(self, objective: ObjectiveFunction[E], encoding: E) -> bool:
        """Offer an encoding as solution for the given objective.

        Args:
            objective: The objective
            encoding: The candidate encoding

        Returns:
            True, iff the encoding was stored
        """
        entry = self._entries.get(objective.handle)
        if entry is None:
            self._entries[objective.handle] = (objective, encoding)
            self._on_target_covered(objective)
            return True

        _, incumbent = entry
        if incumbent is encoding:
            return False
        candidate_distance = encoding.get_distance(objective)
        incumbent_distance = incumbent.get_distance(objective)
        if candidate_distance < incumbent_distance or (
            candidate_distance == incumbent_distance and encoding.length() < incumbent.length()
        ):
            self._logger.debug("Replacing archived encoding for %s", objective)
            self._entries[objective.handle] = (objective, encoding)
            return True
        return False

    def has(self, objective: ObjectiveFunction[E]) -> bool:
        """Is there an encoding stored for the objective?

        Args:
            objective: The objective

        Returns:
            True, iff the objective is archived
        """
        return objective.handle in self._entries

    def get_encoding(self, objective: ObjectiveFunction[E]) -> E | None:
        """Provides the stored encoding for the objective.

        Args:
            objective: The objective

        Returns:
            The stored encoding, if any
        """
        entry = self._entries.get(objective.handle)
        return None if entry is None else entry[1]

    @property
    def objectives(self) -> list[ObjectiveFunction[E]]:
        """Provides the archived objectives in the order they were first archived.

        Returns:
            The archived objectives
        """
        return [objective for objective, _ in self._entries.values()]

    @property
    def exception_objectives(self) -> list[ExceptionObjectiveFunction[E]]:
        """Provides the archived objectives that were synthesized from faults.

        Returns:
            The archived exception objectives
        """
        return [
            objective
            for objective, _ in self._entries.values()
            if isinstance(objective, ExceptionObjectiveFunction)
        ]

    @property
    def encodings(self) -> OrderedSet[E]:
        """Provides the archived encodings without duplicates.

        Returns:
            The archived encodings
        """
        return OrderedSet(encoding for _, encoding in self._entries.values())

    def size(self) -> int:
        """Provides the number of archived objectives.

        Returns:
            The number of archived objectives
        """
        return len(self._entries)

    def reset(self) -> None:
        """Removes all entries."""
        self._entries.clear()

    def add_on_target_covered(self, callback: Callable[[ObjectiveFunction[E]], None]) -> None:
        """Register a callback for whenever an objective is archived for the first time.

        Args:
            callback: The call back to be registered.
        """
        self._on_target_covered_callbacks.append(callback)

    def _on_target_covered(self, target: ObjectiveFunction[E]) -> None:
        self._logger.debug("Target covered: %s", target)
        for callback in self._on_target_covered_callbacks:
            callback(target)
