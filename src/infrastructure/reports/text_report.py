"""Plain-text adapter for ExperimentReportRepository.

Appends one block per trial batch:

    Execution time: 12.34 seconds
    iterations: 10000
    gamma: 0.70
    alpha: 0.80
    ==================================================
    <area> <count>        (one line per positive truncated area)
    ==================================================

Floating-point values use fixed-point notation with two decimals.
"""

from __future__ import annotations

import logging
from pathlib import Path

from domain.siting.value_objects import TrialBatch

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

RULE_WIDTH = 50
RULE = "=" * RULE_WIDTH


def format_batch(batch: TrialBatch) -> str:
    """Render one batch as report text (trailing newline included)."""
    params = batch.parameters
    lines = [
        f"Execution time: {batch.elapsed_s:.2f} seconds",
        f"iterations: {params.iterations}",
        f"gamma: {params.gamma:.2f}",
        f"alpha: {params.alpha:.2f}",
        RULE,
    ]
    # Non-positive outcomes only arise from degenerate stacking; not reported
    lines.extend(
        f"{area} {count}" for area, count in batch.outcomes().items() if area > 0
    )
    lines.append(RULE)
    return "\n".join(lines) + "\n"


class TextReportWriter:
    """Infrastructure adapter writing batch summaries to a text file.

    Parameters
    ----------
    path: Path | str
        Report file. Parent directory must exist.
    truncate: bool
        Empty the file on construction so a sweep starts a fresh report.
    """

    def __init__(self, path: Path | str, truncate: bool = False) -> None:
        self.path = Path(path)
        if truncate:
            self._write("", mode="w")

    def save_batch(self, batch: TrialBatch) -> None:
        self._write(format_batch(batch), mode="a")
        logger.info(
            "Saved batch (%d trials, %d distinct outcomes) to %s",
            batch.trials,
            len(batch.outcomes()),
            self.path.name,
        )

    def _write(self, text: str, mode: str) -> None:
        try:
            with self.path.open(mode, encoding="utf-8") as fh:
                fh.write(text)
        except OSError as e:
            # Log only filename, errno, and strerror to avoid leaking absolute paths
            logger.error(
                "Failed to write %s (errno=%s, strerror=%s)",
                self.path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise
