#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides the contract between the search and the program-execution runner."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Any
from typing import Generic
from typing import TypeVar


if TYPE_CHECKING:
    from covsearch.ga.encoding import Encoding

E = TypeVar("E", bound="Encoding")


class ExecutionResult:
    """Stores the result of executing an encoding.

    Runners attach whatever coverage data their objective functions need to
    `trace`.  A runner that fails to execute an encoding (crash, timeout) still
    returns a well-formed result, typically an empty trace with `timeout` set.
    """

    def __init__(self, *, timeout: bool = False, trace: dict[str, Any] | None = None) -> None:
        """Initializes a new result.

        Args:
            timeout: Whether the execution timed out
            trace: Runner-specific coverage data
        """
        self._exceptions: list[str] = []
        self.timeout = timeout
        self.trace: dict[str, Any] = trace if trace is not None else {}

    def report_exception(self, signature: str) -> None:
        """Report a fault that was raised by the subject during execution.

        Args:
            signature: A stable textual signature of the fault, e.g., the
                exception type and the raising location.
        """
        self._exceptions.append(signature)

    def has_exceptions(self) -> bool:
        """Did the execution raise any faults?

        Returns:
            True, iff at least one fault was reported
        """
        return len(self._exceptions) > 0

    def get_exceptions(self) -> str:
        """Provides the textual fault signature of this execution.

        Returns:
            All reported signatures, one per line
        """
        return "\n".join(self._exceptions)

    def exception_signatures(self) -> list[str]:
        """Provides the distinct fault signatures in the order they were reported.

        Returns:
            The list of distinct signatures
        """
        return list(dict.fromkeys(self._exceptions))

    def __repr__(self) -> str:
        return (
            f"ExecutionResult(timeout={self.timeout}, "
            f"exceptions={self.exception_signatures()})"
        )


class EncodingRunner(ABC, Generic[E]):
    """Executes encodings against the subject under test."""

    @abstractmethod
    def execute(self, encoding: E) -> ExecutionResult:
        """Execute the given encoding.

        Implementations must not raise for faults of the subject; those are
        reported on the result instead.

        Args:
            encoding: The encoding to execute

        Returns:
            The result of the execution  # noqa: DAR202
        """
