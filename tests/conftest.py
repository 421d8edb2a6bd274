"""Root pytest configuration for all tests.

Provides the default planning region and seeded optimizer factories shared by
the coverage, siting and application tests. Domain tests build their inputs
directly (numpy arrays, value objects) and never touch the filesystem.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from domain.coverage.services import CoverageEstimator
from domain.coverage.value_objects import CoverageArea
from domain.siting.services import BatOptimizer


@pytest.fixture
def area() -> CoverageArea:
    """Default region: 100 x 100, 20 towers of radius 10."""
    return CoverageArea()


@pytest.fixture
def estimator(area: CoverageArea) -> CoverageEstimator:
    return CoverageEstimator.from_area(area)


@pytest.fixture
def make_optimizer(area: CoverageArea) -> Callable[..., BatOptimizer]:
    """Factory for optimizers over the default region with a fixed seed."""

    def _make(seed: int = 1234, **kwargs) -> BatOptimizer:
        kwargs.setdefault("area", area)
        return BatOptimizer(seed=seed, **kwargs)

    return _make
