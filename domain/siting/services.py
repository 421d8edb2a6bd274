"""Siting Bounded Context - Domain Services.

Bat-inspired stochastic search for tower placements that maximize the
estimated coverage area. NO I/O operations.

Search outline (one working configuration, in place):
    1. Scatter all towers at random integer coordinates; that is the first best.
    2. Every iteration, move every tower by a coarse integer random walk,
       clamp it back into the region, then with probability ``alpha`` add a
       fine uniform nudge in [-gamma, gamma]. The nudge is not clamped, so a
       tower may sit up to ``gamma`` outside the region until its next move.
    3. Score the whole configuration once. A strictly better score replaces
       the stored best with a copy. The working configuration is never reset
       to the best, so the search is a random walk that remembers its best.
"""

from __future__ import annotations

import logging

import numpy as np

from domain.coverage.services import Configuration, CoverageEstimator, to_points
from domain.coverage.value_objects import CoverageArea
from domain.siting.value_objects import (
    BatParameters,
    SitingResult,
    check_bat_parameters,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


def _integer_bound(value: float) -> int:
    """Exclusive upper bound for integer draws in [0, value), at least 1."""
    return max(1, int(value))


class BatOptimizer:
    """Random-walk search over tower positions.

    Parameters
    ----------
    area: CoverageArea | None
        Region, radius and tower count. Defaults to the 100 x 100 region
        with 20 towers of radius 10.
    estimator: CoverageEstimator | None
        Objective function. Defaults to one built from ``area``.
    rng: numpy.random.Generator | None
        Source of randomness. Owned by this optimizer; never share one
        generator between optimizers that run concurrently.
    seed: int | None
        Seed for a fresh generator when ``rng`` is not given. None draws
        fresh OS entropy, so separate optimizers never repeat each other.
    """

    def __init__(
        self,
        area: CoverageArea | None = None,
        estimator: CoverageEstimator | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self.area = area if area is not None else CoverageArea()
        self.estimator = (
            estimator
            if estimator is not None
            else CoverageEstimator.from_area(self.area)
        )
        self.seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    # -----------------------------------------------------------------------
    # Search steps
    # -----------------------------------------------------------------------
    def initial_configuration(self) -> Configuration:
        """Place every tower at uniform random integer coordinates.

        x is drawn from [0, width) and y from [0, height).
        """
        bounds = (_integer_bound(self.area.width), _integer_bound(self.area.height))
        positions = self.rng.integers(0, bounds, size=(self.area.num_towers, 2))
        return positions.astype(np.float64)

    def move(self, configuration: Configuration, alpha: float, gamma: float) -> None:
        """Apply one iteration of tower moves to ``configuration`` in place."""
        n = len(configuration)

        # Coarse step: +/- k with k an integer in [0, floor(R))
        signs = self.rng.integers(0, 2, size=(n, 2)) * 2 - 1
        step_bound = _integer_bound(self.area.radius)
        magnitudes = self.rng.integers(0, step_bound, size=(n, 2))
        configuration += signs * magnitudes

        # Clamp to the region (boundary, not wrap-around)
        np.clip(
            configuration,
            0.0,
            (self.area.width, self.area.height),
            out=configuration,
        )

        # Fine refinement for a random subset of towers (left unclamped).
        # Nudges are drawn for every tower so each iteration consumes the
        # same number of draws regardless of which towers are refined.
        refine = self.rng.random(n) < alpha
        nudges = self.rng.uniform(-gamma, gamma, size=(n, 2))
        configuration[refine] += nudges[refine]

    # -----------------------------------------------------------------------
    # Main entry points
    # -----------------------------------------------------------------------
    def optimize(
        self, alpha: float, gamma: float, iterations: int
    ) -> tuple[float, Configuration]:
        """Search for the placement with the largest estimated coverage.

        Args:
            alpha: Probability in (0, 1) that a tower gets the fine nudge
            gamma: Half-width of the fine nudge, in region units
            iterations: Number of rounds; 0 returns the initial scatter

        Returns:
            Tuple of (best_area, best_configuration). The configuration is an
            (N, 2) array owned by the caller.

        Raises:
            InvalidParametersError: If any parameter is out of range
        """
        check_bat_parameters(alpha, gamma, iterations)

        working = self.initial_configuration()
        best = working.copy()
        best_area = self.estimator.estimate(best)

        logger.info(
            "Bat search: %d towers, alpha=%.2f, gamma=%.2f, %d iterations "
            "(initial coverage %.2f)",
            len(working),
            alpha,
            gamma,
            iterations,
            best_area,
        )

        for iteration in range(1, iterations + 1):
            self.move(working, alpha, gamma)
            area = self.estimator.estimate(working)
            if area > best_area:
                best_area = area
                best = working.copy()
                logger.debug(
                    "Iteration %d: coverage improved to %.4f", iteration, area
                )

        logger.info("Bat search finished: best coverage %.2f", best_area)
        return best_area, best

    def run(self, parameters: BatParameters) -> SitingResult:
        """Run ``optimize`` and wrap the outcome in a SitingResult."""
        best_area, best = self.optimize(
            parameters.alpha, parameters.gamma, parameters.iterations
        )
        return SitingResult(
            best_area=best_area,
            towers=to_points(best),
            parameters=parameters,
            seed=self.seed,
        )
