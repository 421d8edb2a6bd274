"""Domain Port(s) for Experiment Report I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from typing import Protocol

from .value_objects import TrialBatch


class ExperimentReportRepository(Protocol):
    """Port for persisting trial batch summaries.

    Implementations live in infrastructure (e.g., plain-text report writer).
    """

    def save_batch(self, batch: TrialBatch) -> None:
        """Persist one batch summary."""
        ...
