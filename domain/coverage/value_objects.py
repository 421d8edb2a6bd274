"""Coverage Bounded Context - Value Objects.

Immutable data structures describing the planning region and tower positions.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Default Region Constants
# ---------------------------------------------------------------------------
DEFAULT_AREA_X = 100.0  # Region width
DEFAULT_AREA_Y = 100.0  # Region height
DEFAULT_RADIUS = 10.0  # Coverage radius shared by every tower
DEFAULT_NUM_TOWERS = 20


# ---------------------------------------------------------------------------
# Point2D
# ---------------------------------------------------------------------------
class Point2D(BaseModel):
    """Planar position of a tower (Value Object).

    Coordinates are in region units. No bounds are enforced here: the
    optimizer's refinement step may legitimately leave a tower slightly
    outside the region.

    Note on __eq__ and __hash__: Pydantic frozen models compare by value.
    """

    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_finite(self) -> "Point2D":
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Point coordinates must be finite: ({self.x}, {self.y})")
        return self

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# CoverageArea
# ---------------------------------------------------------------------------
class CoverageArea(BaseModel):
    """Rectangular planning region plus the tower fleet it hosts (Value Object).

    The region spans [0, width] x [0, height]. Every tower covers a disk of
    the same ``radius``; there are exactly ``num_towers`` of them.

    Invariants:
        CA-1: width > 0 and height > 0
        CA-2: radius > 0
        CA-3: num_towers >= 1
    """

    width: float = Field(default=DEFAULT_AREA_X, gt=0)
    height: float = Field(default=DEFAULT_AREA_Y, gt=0)
    radius: float = Field(default=DEFAULT_RADIUS, gt=0)
    num_towers: int = Field(default=DEFAULT_NUM_TOWERS, ge=1)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_area(self) -> "CoverageArea":
        for name in ("width", "height", "radius"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        return self

    @property
    def disk_area(self) -> float:
        """Area covered by a single tower (pi R^2)."""
        return math.pi * self.radius * self.radius

    @property
    def max_coverage(self) -> float:
        """Upper bound on any estimate: the sum of all disk areas."""
        return self.num_towers * self.disk_area

    def contains(self, point: Point2D) -> bool:
        """Check if point lies inside the region (inclusive)."""
        return 0.0 <= point.x <= self.width and 0.0 <= point.y <= self.height
