#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides objective functions that measure the distance to a coverage target."""

from __future__ import annotations

import abc
import hashlib
import itertools
import math

from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar

from covsearch.utils.exceptions import InvariantViolationException


if TYPE_CHECKING:
    from covsearch.ga.encoding import Encoding
    from covsearch.subject import SearchSubject

E = TypeVar("E", bound="Encoding")

# Handles are never reused within a process, so maps keyed by them cannot
# confuse two objectives that happen to share an identifier.
_HANDLES = itertools.count()


class ObjectiveFunction(abc.ABC, Generic[E]):
    """The distance of an encoding to a single coverage target.

    Objectives compare by identity.  Two objectives with the same identifier that
    were created separately, e.g., for two different code sites, are distinct.
    """

    def __init__(self, subject: SearchSubject[E] | None, identifier: str) -> None:
        """Initializes the objective.

        Args:
            subject: The subject the target belongs to
            identifier: A stable identifier of the target, e.g., a branch id
        """
        self._subject = subject
        self._identifier = identifier
        self._handle = next(_HANDLES)
        self.shallow = False

    @property
    def identifier(self) -> str:
        """Provides the stable identifier of the target.

        Returns:
            The identifier
        """
        return self._identifier

    @property
    def handle(self) -> int:
        """Provides the unique index assigned at construction.

        Returns:
            The handle of this objective
        """
        return self._handle

    @property
    def subject(self) -> SearchSubject[E] | None:
        """Provides the subject the target belongs to.

        Returns:
            The subject
        """
        return self._subject

    @abstractmethod
    def calculate_distance(self, encoding: E) -> float:
        """Calculate the distance of the encoding to the target.

        Args:
            encoding: The evaluated encoding

        Returns:
            A non-negative distance, 0 iff the target is covered  # noqa: DAR202
        """

    def is_covered(self, encoding: E) -> bool:
        """Check whether the encoding covers the target.

        Subclasses may override this with a cheaper check than the full distance.

        Args:
            encoding: The evaluated encoding

        Returns:
            True, iff the target is covered

        Raises:
            InvariantViolationException: if the distance is NaN or negative
        """
        return self._checked_distance(encoding) == 0.0

    def evaluate(self, encoding: E) -> float:
        """Compute the distance, short-circuited for shallow objectives.

        Once an objective is shallow it is covered, thus only the coverage
        outcome is of interest.

        Args:
            encoding: The evaluated encoding

        Returns:
            The distance of the encoding to the target

        Raises:
            InvariantViolationException: if the distance is NaN or negative
        """
        if self.shallow:
            return 0.0 if self.is_covered(encoding) else 1.0
        return self._checked_distance(encoding)

    def _checked_distance(self, encoding: E) -> float:
        distance = self.calculate_distance(encoding)
        if math.isnan(distance) or distance < 0:
            raise InvariantViolationException(
                f"Invalid distance {distance} computed by {self!r}"
            )
        return distance

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._identifier!r}, handle={self._handle})"


def hash_exception(signature: str) -> str:
    """Compute the content hash that identifies a fault signature.

    Args:
        signature: The textual fault signature

    Returns:
        The hex digest of the signature
    """
    return hashlib.md5(signature.encode("utf-8"), usedforsecurity=False).hexdigest()


class ExceptionObjectiveFunction(ObjectiveFunction[E]):
    """Objective for reproducing a distinct fault of the subject.

    These objectives are synthesized during evaluation and archived directly.
    """

    def __init__(self, subject: SearchSubject[E] | None, identifier: str, signature: str) -> None:
        """Initializes the objective.

        Args:
            subject: The subject the fault was raised in
            identifier: The hash of the fault signature
            signature: The fault signature itself
        """
        super().__init__(subject, identifier)
        self._signature = signature

    @property
    def signature(self) -> str:
        """Provides the fault signature this objective reproduces.

        Returns:
            The fault signature
        """
        return self._signature

    def calculate_distance(self, encoding: E) -> float:  # noqa: D102
        result = encoding.execution_result
        if result is None or not result.has_exceptions():
            return 1.0
        for signature in result.exception_signatures():
            if hash_exception(signature) == self._identifier:
                return 0.0
        return 1.0
