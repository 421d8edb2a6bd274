#!/usr/bin/env python3
"""Run the bat-algorithm coverage sweep and write a text report.

Each grid point (iterations x alpha x gamma) is repeated ``--trials`` times;
the distribution of best coverage values and the batch time are appended to
the report file.

Usage:
    python scripts/run_experiment.py
    python scripts/run_experiment.py --trials 10 --iterations 1000 --seed 7

Requirements:
    pip install -e .

Output:
    Resultados.txt (or --output)
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from application.experiment import ExperimentHarness
from domain.coverage.value_objects import (
    DEFAULT_AREA_X,
    DEFAULT_AREA_Y,
    DEFAULT_NUM_TOWERS,
    DEFAULT_RADIUS,
    CoverageArea,
)
from infrastructure.reports import TextReportWriter
from shared.experiment_grid import (
    DEFAULT_ALPHAS,
    DEFAULT_GAMMAS,
    DEFAULT_ITERATIONS,
    DEFAULT_REPORT_NAME,
    DEFAULT_TRIALS,
)

logger = logging.getLogger("run_experiment")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sweep bat-algorithm parameters for tower coverage."
    )
    parser.add_argument("--output", default=DEFAULT_REPORT_NAME, help="report file")
    parser.add_argument("--trials", type=int, default=DEFAULT_TRIALS)
    parser.add_argument("--seed", type=int, default=None, help="root random seed")
    parser.add_argument(
        "--alpha", type=float, action="append", help="repeatable; overrides grid"
    )
    parser.add_argument(
        "--gamma", type=float, action="append", help="repeatable; overrides grid"
    )
    parser.add_argument(
        "--iterations", type=int, action="append", help="repeatable; overrides grid"
    )
    parser.add_argument("--width", type=float, default=DEFAULT_AREA_X)
    parser.add_argument("--height", type=float, default=DEFAULT_AREA_Y)
    parser.add_argument("--radius", type=float, default=DEFAULT_RADIUS)
    parser.add_argument("--towers", type=int, default=DEFAULT_NUM_TOWERS)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the sweep.

    Returns:
        0 on success, 1 on invalid parameters or report I/O failure
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Validate everything before the report file is truncated
    try:
        area = CoverageArea(
            width=args.width,
            height=args.height,
            radius=args.radius,
            num_towers=args.towers,
        )
        harness = ExperimentHarness(area=area, trials=args.trials, seed=args.seed)
        grid = harness.grid(
            alphas=args.alpha or DEFAULT_ALPHAS,
            gammas=args.gamma or DEFAULT_GAMMAS,
            iterations=args.iterations or DEFAULT_ITERATIONS,
        )
    except ValueError as e:
        logger.error("Invalid parameters: %s", e)
        return 1

    try:
        harness.repository = TextReportWriter(args.output, truncate=True)
        batches = [harness.run_batch(parameters) for parameters in grid]
    except OSError as e:
        logger.error("Cannot write report: %s", e.strerror or e)
        return 1

    for batch in batches:
        p = batch.parameters
        print(
            f"iterations={p.iterations:<7} alpha={p.alpha:.2f} gamma={p.gamma:.2f} "
            f"mean={batch.mean_area:9.2f} std={batch.std_area:7.2f} "
            f"best={batch.best_area:9.2f} time={batch.elapsed_s:.2f}s"
        )
    print(f"\nReport written to {args.output} (max possible {area.max_coverage:.2f})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
