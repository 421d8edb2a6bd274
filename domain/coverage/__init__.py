"""Coverage Bounded Context.

Responsible for the geometry of tower coverage disks:
- Value Objects: Point2D, CoverageArea
- Services: CoverageEstimator, lens-area helpers
"""
