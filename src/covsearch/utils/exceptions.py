#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
"""Provides custom exception types."""


class ConfigurationException(BaseException):
    """An exception type that's raised if the search has no proper configuration.

    This also covers helpers that are constructed with mismatching inputs, e.g.,
    objective and value sequences of different lengths.
    """


class InvariantViolationException(BaseException):
    """Raised when an internal invariant of the search does not hold.

    Such a violation indicates a bug in an objective function or runner, not a
    condition of the subject under test.  It must never be silently coerced.
    """


class UnsupportedOpcodeException(InvariantViolationException):
    """Raised if a branch distance is requested for an unknown comparison opcode."""

    def __init__(self, opcode: str) -> None:
        """Create a new unsupported opcode error.

        Args:
            opcode: The opcode that is not supported
        """
        super().__init__(f"Unsupported opcode '{opcode}' for branch distance.")
        self.opcode = opcode


class TraceLengthMismatchException(InvariantViolationException):
    """Raised if the operand traces of a comparison cannot be paired."""


class ConstructionFailedException(BaseException):
    """An exception used when an error occurs during construction of an encoding."""
