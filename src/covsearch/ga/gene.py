#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the gene tree encodings are built from."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING

from covsearch.ga.encoding import Encoding


if TYPE_CHECKING:
    from collections.abc import Iterator

    from covsearch.ga.encoding import EncodingSampler


class Gene(ABC):
    """A typed node, e.g., a statement or a value, of a gene tree.

    Genes are treated as immutable by the search: mutating a gene yields a new
    subtree, so every holder of an earlier tree keeps a valid tree.
    """

    def __init__(self, name: str, type_: str, unique_id: str) -> None:
        """Initializes the gene.

        Args:
            name: The name of the gene
            type_: The semantic type tag of the gene
            unique_id: A unique id of the gene
        """
        self._name = name
        self._type = type_
        self._id = unique_id
        self._var_name = type_ + unique_id

    @property
    def name(self) -> str:  # noqa: D102
        return self._name

    @property
    def type(self) -> str:  # noqa: D102
        return self._type

    @property
    def id(self) -> str:  # noqa: D102
        return self._id

    @property
    def var_name(self) -> str:
        """Provides the variable name used for code generation.

        Returns:
            The type tag concatenated with the id
        """
        return self._var_name

    @abstractmethod
    def mutate(self, sampler: EncodingSampler, depth: int) -> Gene:
        """Mutate the gene.

        Args:
            sampler: The sampler providing new genetic material
            depth: The depth of the gene in the gene tree

        Returns:
            The mutated copy of the gene  # noqa: DAR202
        """

    @abstractmethod
    def copy(self) -> Gene:
        """Create an exact, independent copy of this gene and its subtree.

        Returns:
            The copy  # noqa: DAR202
        """

    @abstractmethod
    def has_children(self) -> bool:
        """Does the gene have children?

        Returns:
            Whether the gene has children  # noqa: DAR202
        """

    @abstractmethod
    def get_children(self) -> list[Gene]:
        """Provides the children of the gene.

        Returns:
            The children of this gene  # noqa: DAR202
        """

    def walk(self) -> Iterator[Gene]:
        """Iterate the subtree rooted at this gene in pre-order.

        Yields:
            The genes of the subtree
        """
        stack: list[Gene] = [self]
        while stack:
            gene = stack.pop()
            yield gene
            if gene.has_children():
                stack.extend(reversed(gene.get_children()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._var_name!r})"


class GeneEncoding(Encoding):
    """An encoding whose genotype is a single gene tree."""

    def __init__(self, root: Gene) -> None:
        """Initializes the encoding.

        Args:
            root: The root gene
        """
        super().__init__()
        self._root = root

    @property
    def root(self) -> Gene:
        """Provides the root of the gene tree.

        Returns:
            The root gene
        """
        return self._root

    def mutate(self, sampler: EncodingSampler) -> GeneEncoding:  # noqa: D102
        return GeneEncoding(self._root.mutate(sampler, 0))

    def copy(self) -> GeneEncoding:  # noqa: D102
        return GeneEncoding(self._root.copy())

    def length(self) -> int:  # noqa: D102
        return sum(1 for _ in self._root.walk())
