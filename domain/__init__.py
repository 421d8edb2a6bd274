"""Tower Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- coverage: Disk coverage geometry, pairwise overlap estimation
- siting: Tower placement search, experiment value objects
"""

# Imports alphabetized per project style (isort)
from domain import coverage, siting

__all__ = ["coverage", "siting"]
