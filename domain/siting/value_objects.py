"""Siting Bounded Context - Value Objects.

Immutable data structures for optimizer parameters and run summaries.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math
from collections import Counter

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.coverage.value_objects import Point2D
from domain.siting.errors import InvalidParametersError


# ---------------------------------------------------------------------------
# Parameter Checks (shared by BatParameters and BatOptimizer.optimize)
# ---------------------------------------------------------------------------
def check_bat_parameters(alpha: float, gamma: float, iterations: int) -> None:
    """Fail fast on parameters outside their valid ranges.

    Raises:
        InvalidParametersError: alpha not in (0, 1), gamma not positive,
            or iterations not a non-negative integer
    """
    if not (math.isfinite(alpha) and 0.0 < alpha < 1.0):
        raise InvalidParametersError("alpha", alpha, "in the open interval (0, 1)")
    if not (math.isfinite(gamma) and gamma > 0.0):
        raise InvalidParametersError("gamma", gamma, "a positive finite number")
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
        raise InvalidParametersError("iterations", iterations, "an integer")
    if iterations < 0:
        raise InvalidParametersError("iterations", iterations, "non-negative")


# ---------------------------------------------------------------------------
# BatParameters
# ---------------------------------------------------------------------------
class BatParameters(BaseModel):
    """Tuning knobs of one bat-algorithm run (Value Object).

    Invariants:
        BP-1: 0 < alpha < 1 (per-tower refinement probability)
        BP-2: gamma > 0 (half-width of the refinement nudge)
        BP-3: iterations >= 0
    """

    alpha: float
    gamma: float
    iterations: int

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_parameters(self) -> "BatParameters":
        check_bat_parameters(self.alpha, self.gamma, self.iterations)
        return self


# ---------------------------------------------------------------------------
# SitingResult
# ---------------------------------------------------------------------------
class SitingResult(BaseModel):
    """Best placement found by a single optimizer run (Value Object)."""

    best_area: float  # Estimated covered area of the best configuration
    towers: tuple[Point2D, ...]  # Best configuration, in tower order
    parameters: BatParameters
    seed: int | None = None  # Seed the run was started from, if known

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_result(self) -> "SitingResult":
        if not math.isfinite(self.best_area):
            raise ValueError(f"best_area must be finite, got {self.best_area}")
        if not self.towers:
            raise ValueError("Result must contain at least one tower")
        return self

    @property
    def truncated_area(self) -> int:
        """Area truncated toward zero, the bucket used by trial tallies."""
        return int(self.best_area)

    def configuration(self) -> np.ndarray:
        """Return a fresh (N, 2) array of the tower positions."""
        return np.array([t.as_tuple() for t in self.towers], dtype=np.float64)


# ---------------------------------------------------------------------------
# TrialBatch
# ---------------------------------------------------------------------------
class TrialBatch(BaseModel):
    """Repeated independent runs at one parameter set (Value Object).

    Invariants:
        TB-1: at least one trial
        TB-2: elapsed_s >= 0
    """

    parameters: BatParameters
    areas: tuple[float, ...]  # best_area of each trial, in run order
    elapsed_s: float = Field(ge=0)  # Wall-clock time of the whole batch

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_batch(self) -> "TrialBatch":
        if len(self.areas) == 0:
            raise ValueError("Batch must contain at least one trial")
        return self

    @property
    def trials(self) -> int:
        return len(self.areas)

    def outcomes(self) -> dict[int, int]:
        """Frequency table: truncated area -> number of trials, sorted by area."""
        counts = Counter(int(a) for a in self.areas)
        return dict(sorted(counts.items()))

    @property
    def best_area(self) -> float:
        return max(self.areas)

    @property
    def mean_area(self) -> float:
        return float(np.mean(self.areas))

    @property
    def std_area(self) -> float:
        """Population standard deviation of the trial areas."""
        return float(np.std(self.areas))
