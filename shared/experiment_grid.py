"""Single source of truth for the default experiment sweep.

Used by:
- src/application/experiment.py (ExperimentHarness.sweep defaults)
- scripts/run_experiment.py (CLI defaults)
- tests/application/test_experiment.py

When changing the grid, update ONLY these constants.
"""

from __future__ import annotations

# Sweep order: iterations outer, then alpha, then gamma
DEFAULT_ALPHAS: tuple[float, ...] = (0.7, 0.8, 0.9)
DEFAULT_GAMMAS: tuple[float, ...] = (0.7,)
DEFAULT_ITERATIONS: tuple[int, ...] = (10_000, 50_000, 100_000)

# Independent trials per parameter combination
DEFAULT_TRIALS: int = 100

# Default report filename (written to the current directory)
DEFAULT_REPORT_NAME: str = "Resultados.txt"
