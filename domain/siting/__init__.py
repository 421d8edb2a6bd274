"""Siting Bounded Context.

Responsible for tower placement search:
- Value Objects: BatParameters, SitingResult, TrialBatch
- Services: BatOptimizer
- Ports: ExperimentReportRepository
"""
