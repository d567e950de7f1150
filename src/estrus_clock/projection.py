from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from estrus_clock.preprocess.time import AngleOrigin, angle_of_minute, angles_of_minutes


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class RadialScale:
    """Linear map from activity in [0, max_activity] to pixels in [0, radius]."""

    max_activity: float
    radius: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius < 0.0:
            raise ValueError(f"radius must be finite and >= 0, got {self.radius!r}")

    @property
    def is_degenerate(self) -> bool:
        return not math.isfinite(self.max_activity) or self.max_activity <= 0.0

    def __call__(self, value: float) -> float:
        if self.is_degenerate:
            return 0.0
        return float(value) / self.max_activity * self.radius

    def scale_array(self, values: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=float)
        if self.is_degenerate:
            return np.zeros_like(values)
        return values / self.max_activity * self.radius

    def levels(self, count: int, include_zero: bool = False) -> list[float]:
        """Evenly spaced activity levels up to max_activity (grid circles, axis ticks)."""
        if count < 1:
            raise ValueError("count must be >= 1")
        top = 0.0 if self.is_degenerate else self.max_activity
        start = 0 if include_zero else 1
        return [step / count * top for step in range(start, count + 1)]


class PolarProjector:
    def __init__(self, scale: RadialScale, origin: AngleOrigin = "left") -> None:
        self.scale = scale
        self.origin = origin

    def angle(self, index: float) -> float:
        return angle_of_minute(index, origin=self.origin)

    def project(self, index: int, value: float) -> Point:
        angle = self.angle(index)
        r = self.scale(value)
        return Point(x=math.cos(angle) * r, y=math.sin(angle) * r)

    def project_series(self, values: np.ndarray) -> np.ndarray:
        """Project a full series (array index = minute) into an (n, 2) array of x/y."""
        values = np.asarray(values, dtype=float)
        angles = angles_of_minutes(np.arange(values.size), origin=self.origin)
        r = self.scale.scale_array(values)
        return np.column_stack([np.cos(angles) * r, np.sin(angles) * r])

    def polar_point(self, index: float, distance: float) -> Point:
        """Point at a fixed pixel distance from centre, e.g. for axis labels."""
        angle = self.angle(index)
        return Point(x=math.cos(angle) * distance, y=math.sin(angle) * distance)
