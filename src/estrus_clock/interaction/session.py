from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from estrus_clock.features.series import MarkerPoint, Series
from estrus_clock.interaction.selection import BrushRect, SelectionEngine
from estrus_clock.interaction.visibility import (
    OpacityTarget,
    VisibilityState,
    apply_visibility,
    toggle,
)
from estrus_clock.selection_stats import StatRows, describe_selection

LOGGER = logging.getLogger(__name__)

StatsSink = Callable[[StatRows | str], None]
SelectionSink = Callable[[list[MarkerPoint]], None]


class ChartSession:
    """Event adapter for one rendered chart.

    Toggle and brush events are reduced to state changes on ``visibility`` and
    ``selection``; rendering side effects go through the optional opacity target
    and the statistics/selection sinks.
    """

    def __init__(
        self,
        markers: Sequence[MarkerPoint],
        *,
        canvas_size: tuple[float, float] | None = None,
        visibility: VisibilityState | None = None,
        target: OpacityTarget | None = None,
        render_stats: StatsSink | None = None,
        mark_selected: SelectionSink | None = None,
    ) -> None:
        self.visibility = visibility or VisibilityState()
        self.selection = SelectionEngine(markers, canvas_size=canvas_size)
        self.target = target
        self.render_stats = render_stats
        self.mark_selected = mark_selected

    def on_toggle(self, series: Series | str) -> bool:
        series = Series.parse(series)
        visible = toggle(self.visibility, series)
        if self.target is not None:
            apply_visibility(self.visibility, series, self.target)
        LOGGER.debug("Toggled %s -> visible=%s", series.value, visible)
        return visible

    def on_brush_change(
        self,
        rect: BrushRect | Sequence[Sequence[float]] | None,
    ) -> list[dict[str, Any]]:
        if rect is not None and not isinstance(rect, BrushRect):
            rect = BrushRect.from_extent(rect)
        selected = self.selection.update(rect)
        if self.mark_selected is not None:
            self.mark_selected(selected)
        summary = describe_selection(selected)
        if self.render_stats is not None:
            self.render_stats(summary)
        return [marker.to_record() for marker in selected]

    def on_brush_clear(self) -> list[dict[str, Any]]:
        return self.on_brush_change(None)

    def current_summary(self) -> StatRows | str:
        return describe_selection(self.selection.state.selected)
