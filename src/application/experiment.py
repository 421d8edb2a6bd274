"""Experiment harness for the bat-algorithm tower planner.

Repeats independent optimizer runs at fixed parameters, tallies how often
each (truncated) coverage value comes out, and times each batch.

Lifecycle of one batch:
1) Spawn one child seed per trial from the harness SeedSequence
2) Run a fresh BatOptimizer per trial (no state shared between trials)
3) Collect best areas and elapsed wall-clock time
4) Build a TrialBatch and hand it to the report repository, if any
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

import numpy as np

from domain.coverage.value_objects import CoverageArea
from domain.siting.repositories import ExperimentReportRepository
from domain.siting.services import BatOptimizer
from domain.siting.value_objects import BatParameters, TrialBatch
from shared.experiment_grid import (
    DEFAULT_ALPHAS,
    DEFAULT_GAMMAS,
    DEFAULT_ITERATIONS,
    DEFAULT_TRIALS,
)

logger = logging.getLogger(__name__)


class ExperimentHarness:
    """Run trial batches and parameter sweeps.

    Parameters
    ----------
    area: CoverageArea | None
        Region shared by every trial.
    trials: int
        Independent optimizer runs per parameter set.
    seed: int | None
        Root seed. The same seed reproduces every batch of a sweep; None
        draws fresh OS entropy.
    repository: ExperimentReportRepository | None
        Optional sink receiving each finished batch.
    clock: Callable[[], float]
        Monotonic clock used to time batches (injectable for tests).
    """

    def __init__(
        self,
        area: CoverageArea | None = None,
        trials: int = DEFAULT_TRIALS,
        seed: int | None = None,
        repository: ExperimentReportRepository | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if trials < 1:
            raise ValueError(f"trials must be >= 1, got {trials}")
        self.area = area if area is not None else CoverageArea()
        self.trials = trials
        self.repository = repository
        self.clock = clock
        self._seed_sequence = np.random.SeedSequence(seed)

    def run_batch(self, parameters: BatParameters) -> TrialBatch:
        """Run ``trials`` independent searches at ``parameters``."""
        children = self._seed_sequence.spawn(self.trials)

        start = self.clock()
        areas: list[float] = []
        for child in children:
            rng = np.random.default_rng(child)
            optimizer = BatOptimizer(area=self.area, rng=rng)
            best_area, _ = optimizer.optimize(
                parameters.alpha, parameters.gamma, parameters.iterations
            )
            areas.append(best_area)
        elapsed = max(0.0, self.clock() - start)

        batch = TrialBatch(
            parameters=parameters, areas=tuple(areas), elapsed_s=elapsed
        )
        logger.info(
            "Batch alpha=%.2f gamma=%.2f iterations=%d: %d trials in %.2fs, "
            "mean %.2f, best %.2f",
            parameters.alpha,
            parameters.gamma,
            parameters.iterations,
            batch.trials,
            batch.elapsed_s,
            batch.mean_area,
            batch.best_area,
        )

        if self.repository is not None:
            self.repository.save_batch(batch)
        return batch

    @staticmethod
    def grid(
        alphas: Iterable[float] = DEFAULT_ALPHAS,
        gammas: Iterable[float] = DEFAULT_GAMMAS,
        iterations: Iterable[int] = DEFAULT_ITERATIONS,
    ) -> list[BatParameters]:
        """Validated parameter sets: iterations outer, then alpha, then gamma."""
        alphas, gammas, iterations = tuple(alphas), tuple(gammas), tuple(iterations)
        return [
            BatParameters(alpha=alpha, gamma=gamma, iterations=n)
            for n in iterations
            for alpha in alphas
            for gamma in gammas
        ]

    def sweep(
        self,
        alphas: Iterable[float] = DEFAULT_ALPHAS,
        gammas: Iterable[float] = DEFAULT_GAMMAS,
        iterations: Iterable[int] = DEFAULT_ITERATIONS,
    ) -> list[TrialBatch]:
        """Run one batch per grid point (see ``grid`` for the order).

        All parameter combinations are validated before the first batch runs.
        """
        grid = self.grid(alphas, gammas, iterations)
        return [self.run_batch(parameters) for parameters in grid]
