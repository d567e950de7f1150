from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from estrus_clock.features.series import MarkerPoint


@dataclass(frozen=True)
class BrushRect:
    x0: float
    y0: float
    x1: float
    y1: float

    def __post_init__(self) -> None:
        for name in ("x0", "y0", "x1", "y1"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"brush coordinate {name} must be finite, got {value!r}")

    @classmethod
    def from_extent(cls, extent: Sequence[Sequence[float]]) -> BrushRect:
        """Build from a brush extent ``[[x0, y0], [x1, y1]]``."""
        (x0, y0), (x1, y1) = extent
        return cls(float(x0), float(y0), float(x1), float(y1))

    def normalized(self) -> BrushRect:
        return BrushRect(
            x0=min(self.x0, self.x1),
            y0=min(self.y0, self.y1),
            x1=max(self.x0, self.x1),
            y1=max(self.y0, self.y1),
        )

    def contains(self, x: float, y: float) -> bool:
        # Edges count as inside.
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def translated(self, dx: float, dy: float) -> BrushRect:
        return BrushRect(self.x0 + dx, self.y0 + dy, self.x1 + dx, self.y1 + dy)


def canvas_to_chart(rect: BrushRect, width: float, height: float) -> BrushRect:
    """Shift a canvas-space rectangle into the chart-centred space of projected markers."""
    return rect.translated(-width / 2.0, -height / 2.0)


def select_markers(markers: Iterable[MarkerPoint], rect: BrushRect | None) -> list[MarkerPoint]:
    if rect is None:
        return []
    bounds = rect.normalized()
    return [marker for marker in markers if bounds.contains(marker.x, marker.y)]


@dataclass
class SelectionState:
    rect: BrushRect | None = None
    selected: list[MarkerPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.selected

    def records(self) -> list[dict[str, object]]:
        return [marker.to_record() for marker in self.selected]


class SelectionEngine:
    """Holds the current brush rectangle and the markers inside it."""

    def __init__(
        self,
        markers: Sequence[MarkerPoint],
        canvas_size: tuple[float, float] | None = None,
    ) -> None:
        self.markers = list(markers)
        self.canvas_size = canvas_size
        self.state = SelectionState()

    def to_chart(self, rect: BrushRect) -> BrushRect:
        if self.canvas_size is None:
            return rect
        width, height = self.canvas_size
        return canvas_to_chart(rect, width=width, height=height)

    def update(self, rect: BrushRect | None) -> list[MarkerPoint]:
        """Recompute the selection from scratch for the given brush rectangle."""
        if rect is None:
            return self.clear()
        chart_rect = self.to_chart(rect).normalized()
        self.state = SelectionState(
            rect=chart_rect,
            selected=select_markers(self.markers, chart_rect),
        )
        return list(self.state.selected)

    def clear(self) -> list[MarkerPoint]:
        self.state = SelectionState()
        return []

    def is_selected(self, marker: MarkerPoint) -> bool:
        return marker in self.state.selected
