#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the subject of a search, i.e., the targets of the program under test."""

from __future__ import annotations

import logging

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

import networkx as nx

from ordered_set import OrderedSet

from covsearch.utils.exceptions import ConfigurationException


if TYPE_CHECKING:
    from collections.abc import Iterable

    from covsearch.ga.encoding import Encoding
    from covsearch.ga.objectivefunction import ObjectiveFunction

E = TypeVar("E", bound="Encoding")


class SearchSubject(ABC, Generic[E]):
    """The program under test as seen by the search.

    The static analysis of a concrete target language provides the objectives and
    the structural relation between them.
    """

    def __init__(self, name: str) -> None:
        """Initializes the subject.

        Args:
            name: The name of the subject
        """
        self._name = name

    @property
    def name(self) -> str:  # noqa: D102
        return self._name

    @abstractmethod
    def get_objectives(self) -> list[ObjectiveFunction[E]]:
        """Provides all objectives of this subject.

        Returns:
            The objectives, with identifiers that are stable across a run  # noqa: DAR202
        """

    @abstractmethod
    def get_child_objectives(self, objective: ObjectiveFunction[E]) -> list[ObjectiveFunction[E]]:
        """Provides the objectives that become reachable once `objective` is covered.

        Args:
            objective: The covered objective

        Returns:
            The structural children of the objective  # noqa: DAR202
        """

    @abstractmethod
    def get_root_identifiers(self) -> list[str]:
        """Provides the identifiers of the entry constructs, e.g., function ids.

        Returns:
            The root identifiers  # noqa: DAR202
        """


class ObjectiveGraphSubject(SearchSubject[E]):
    """A subject whose objectives are arranged in a dependency graph.

    Each node is an objective.  A directed edge (u -> v) states that v should be
    considered only once u has been covered, e.g., because v is a branch that is
    control dependent on u.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self, name: str) -> None:  # noqa: D107
        super().__init__(name)
        self._graph: nx.DiGraph = nx.DiGraph()
        self._root_identifiers: OrderedSet[str] = OrderedSet()

    def add_objective(self, objective: ObjectiveFunction[E], *, root: bool = False) -> None:
        """Register an objective.

        Args:
            objective: The objective to add
            root: Whether the objective's identifier names an entry construct
        """
        self._graph.add_node(objective)
        if root:
            self._root_identifiers.add(objective.identifier)

    def add_dependency(self, parent: ObjectiveFunction[E], child: ObjectiveFunction[E]) -> None:
        """Make `child` reachable only after `parent` has been covered.

        Args:
            parent: The objective that must be covered first
            child: The dependent objective

        Raises:
            ConfigurationException: if one of the objectives was not added before
        """
        for objective in (parent, child):
            if objective not in self._graph:
                raise ConfigurationException(f"Unknown objective {objective!r}")
        self._graph.add_edge(parent, child)

    def get_objectives(self) -> list[ObjectiveFunction[E]]:  # noqa: D102
        return list(self._graph.nodes)

    def get_child_objectives(  # noqa: D102
        self, objective: ObjectiveFunction[E]
    ) -> list[ObjectiveFunction[E]]:
        if objective not in self._graph:
            return []
        return list(self._graph.successors(objective))

    def get_root_identifiers(self) -> list[str]:  # noqa: D102
        return list(self._root_identifiers)

    def unreachable_objectives(self) -> list[ObjectiveFunction[E]]:
        """Provides the objectives a structural search can never activate.

        Returns:
            Objectives that are neither roots nor reachable from a root
        """
        roots = [
            objective
            for objective in self._graph.nodes
            if objective.identifier in self._root_identifiers
        ]
        reachable: set[ObjectiveFunction[E]] = set(roots)
        for root in roots:
            reachable.update(nx.descendants(self._graph, root))
        unreachable = [objective for objective in self._graph.nodes if objective not in reachable]
        if unreachable:
            self._logger.debug("Unreachable objectives: %s", unreachable)
        return unreachable
