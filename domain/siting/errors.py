"""Siting Bounded Context - Error Hierarchy.

Custom exceptions for tower placement search.
"""

from __future__ import annotations


class SitingError(Exception):
    """Base error for siting operations."""


class InvalidParametersError(SitingError, ValueError):
    """Optimizer parameters are outside their valid ranges.

    Attributes:
        name: Offending parameter name
        value: The rejected value
    """

    def __init__(self, name: str, value: object, expected: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be {expected}, got {value!r}")
