"""Application Layer.

Application services that orchestrate domain logic: repeated optimizer
trials, parameter sweeps and report persistence through domain ports.
"""

from .experiment import ExperimentHarness

__all__ = ["ExperimentHarness"]
