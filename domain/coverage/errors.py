"""Coverage Bounded Context - Error Hierarchy.

Custom exceptions for coverage estimation.
"""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage operations."""


class InvalidConfigurationError(CoverageError, ValueError):
    """Tower positions are not an (N, 2) array of finite coordinates.

    Attributes:
        shape: Shape of the offending array, when known
    """

    def __init__(self, message: str, shape: tuple[int, ...] | None = None) -> None:
        self.shape = shape
        super().__init__(message)
