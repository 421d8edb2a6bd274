"""Infrastructure adapters for experiment reports.

This module provides the infrastructure layer implementation of the
ExperimentReportRepository port: a plain-text report writer.
"""

from .text_report import TextReportWriter

__all__ = ["TextReportWriter"]
