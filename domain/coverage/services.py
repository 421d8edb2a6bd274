"""Coverage Bounded Context - Domain Services.

Pure domain logic for estimating the area covered by a set of towers.
NO I/O operations and NO randomness.

Overlap model:
    The estimate starts from the sum of all disk areas and subtracts, for
    every tower, its lens-shaped intersection with each lower-indexed tower.
    Only pairwise (first-order) corrections are applied. Where three or more
    disks overlap the same spot, that spot is subtracted more than once, so
    the estimate can fall below the true union area and even below zero.
    Callers comparing configurations rely on this exact model; do not
    replace it with a true union area.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.coverage.errors import InvalidConfigurationError
from domain.coverage.value_objects import DEFAULT_RADIUS, CoverageArea, Point2D

# (N, 2) float64 array: one row per tower, columns are x and y
Configuration = NDArray[np.float64]


# ---------------------------------------------------------------------------
# Helper: Configuration Normalization
# ---------------------------------------------------------------------------
def as_configuration(
    positions: ArrayLike | Iterable[Point2D] | Iterable[Sequence[float]],
) -> Configuration:
    """Return tower positions as an (N, 2) float64 array.

    Accepts an existing array, a sequence of Point2D, or (x, y) pairs.
    Arrays that are already float64 are returned without copying, so callers
    must treat the result as read-only.

    Raises:
        InvalidConfigurationError: If rows are ragged or non-numeric, the
            shape is not (N, 2), or any coordinate is not finite
    """
    try:
        if isinstance(positions, np.ndarray):
            array = np.asarray(positions, dtype=np.float64)
        else:
            rows = [p.as_tuple() if isinstance(p, Point2D) else p for p in positions]
            array = np.asarray(rows, dtype=np.float64)
    except (TypeError, ValueError) as e:
        # Ragged rows or non-numeric coordinates
        raise InvalidConfigurationError(
            f"Configuration is not a numeric (N, 2) array: {e}"
        ) from e

    if array.size == 0:
        return np.empty((0, 2), dtype=np.float64)

    if array.ndim != 2 or array.shape[1] != 2:
        raise InvalidConfigurationError(
            f"Configuration must have shape (N, 2), got {array.shape}",
            shape=array.shape,
        )
    if not np.isfinite(array).all():
        raise InvalidConfigurationError(
            "Configuration contains non-finite coordinates", shape=array.shape
        )
    return array


def to_points(configuration: Configuration) -> tuple[Point2D, ...]:
    """Convert an (N, 2) array into immutable Point2D values."""
    return tuple(Point2D(x=float(x), y=float(y)) for x, y in configuration)


# ---------------------------------------------------------------------------
# Lens Area (two equal circles)
# ---------------------------------------------------------------------------
def pairwise_intersection_area(
    a: Point2D | Sequence[float], b: Point2D | Sequence[float], radius: float
) -> float:
    """Area shared by two disks of equal ``radius`` centred at a and b.

    Args:
        a: First centre
        b: Second centre
        radius: Common disk radius

    Returns:
        0 when the disks are disjoint (d >= 2R), pi R^2 when the centres
        coincide, the closed-form lens area otherwise.
    """
    ax, ay = a.as_tuple() if isinstance(a, Point2D) else a
    bx, by = b.as_tuple() if isinstance(b, Point2D) else b
    d = math.hypot(ax - bx, ay - by)

    if d >= 2 * radius:
        return 0.0
    if d <= 0.0:
        return math.pi * radius * radius

    # Clamp to keep acos/sqrt inside their domains near d = 0 and d = 2R
    ratio = min(1.0, max(-1.0, d / (2 * radius)))
    radicand = max(0.0, (2 * radius - d) * d * d * (2 * radius + d))
    return 2 * radius * radius * math.acos(ratio) - 0.5 * math.sqrt(radicand)


def lens_areas(distances: ArrayLike, radius: float) -> NDArray[np.float64]:
    """Vectorized ``pairwise_intersection_area`` over centre distances."""
    d = np.asarray(distances, dtype=np.float64)
    two_r = 2.0 * radius

    ratio = np.clip(d / two_r, -1.0, 1.0)
    radicand = np.maximum((two_r - d) * d * d * (two_r + d), 0.0)
    lens = 2.0 * radius * radius * np.arccos(ratio) - 0.5 * np.sqrt(radicand)

    lens = np.where(d >= two_r, 0.0, lens)
    return np.where(d <= 0.0, math.pi * radius * radius, lens)


# ---------------------------------------------------------------------------
# Coverage Estimation
# ---------------------------------------------------------------------------
def overlap_corrections(
    positions: ArrayLike | Iterable[Point2D], radius: float
) -> NDArray[np.float64]:
    """Overlap subtracted on behalf of each tower.

    Entry i is the summed lens area between tower i and every tower j < i.
    Tower 0 never carries a correction; the last tower is charged for its
    overlap with all the others.
    """
    config = as_configuration(positions)
    n = len(config)
    corrections = np.zeros(n, dtype=np.float64)
    if n < 2:
        return corrections

    # Lower triangle in row-major order: (1, 0), (2, 0), (2, 1), ...
    rows, cols = np.tril_indices(n, k=-1)
    deltas = config[rows] - config[cols]
    lens = lens_areas(np.hypot(deltas[:, 0], deltas[:, 1]), radius)
    np.add.at(corrections, rows, lens)
    return corrections


def estimate_coverage(
    positions: ArrayLike | Iterable[Point2D], radius: float = DEFAULT_RADIUS
) -> float:
    """Approximate area covered by towers of common ``radius``.

    Returns:
        N * pi R^2 minus every pairwise lens area. Always finite for finite
        positions; may be negative for heavily stacked configurations.

    Example:
        >>> round(estimate_coverage([(0, 0), (50, 50)], radius=10), 2)  # disjoint
        628.32
    """
    config = as_configuration(positions)
    total = len(config) * math.pi * radius * radius
    return float(total - overlap_corrections(config, radius).sum())


class CoverageEstimator:
    """Objective function for tower placement.

    Wraps ``estimate_coverage`` with a fixed radius. Stateless apart from the
    radius, so one instance may be shared freely between optimizer runs.

    Parameters
    ----------
    radius: float
        Coverage radius shared by every tower.
    """

    def __init__(self, radius: float = DEFAULT_RADIUS) -> None:
        if not (math.isfinite(radius) and radius > 0):
            raise ValueError(f"radius must be positive and finite, got {radius}")
        self.radius = float(radius)

    @classmethod
    def from_area(cls, area: CoverageArea) -> "CoverageEstimator":
        return cls(radius=area.radius)

    @property
    def disk_area(self) -> float:
        return math.pi * self.radius * self.radius

    def estimate(self, configuration: ArrayLike | Iterable[Point2D]) -> float:
        """Estimated covered area of ``configuration`` (input is not mutated)."""
        return estimate_coverage(configuration, self.radius)

    def fitness(self, configuration: ArrayLike | Iterable[Point2D]) -> float:
        """Minimization-framed objective: the negated covered area."""
        return -self.estimate(configuration)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(radius={self.radius!r})"
