from __future__ import annotations

import math

import pytest

from estrus_clock.features.series import MarkerPoint, Series, SeriesStore
from estrus_clock.interaction.selection import (
    BrushRect,
    SelectionEngine,
    canvas_to_chart,
    select_markers,
)
from estrus_clock.projection import PolarProjector, RadialScale


def _marker(x: float, y: float, index: int = 0, series: Series = Series.estrus) -> MarkerPoint:
    return MarkerPoint(index=index, value=1.0, series=series, x=x, y=y)


def _day_markers(radius: float = 430.0) -> list[MarkerPoint]:
    store = SeriesStore([float(i % 60) for i in range(1440)], [3.0] * 1440)
    projector = PolarProjector(RadialScale(max_activity=store.max_activity, radius=radius))
    return store.build_markers(projector)


def test_selection_is_boundary_inclusive_on_all_edges() -> None:
    markers = [
        _marker(0.0, 5.0, index=0),
        _marker(10.0, 5.0, index=10),
        _marker(5.0, 0.0, index=20),
        _marker(5.0, 10.0, index=30),
        _marker(10.0001, 5.0, index=40),
    ]

    selected = select_markers(markers, BrushRect(0.0, 0.0, 10.0, 10.0))

    assert [marker.index for marker in selected] == [0, 10, 20, 30]


def test_reversed_rectangle_is_normalized() -> None:
    markers = [_marker(3.0, 3.0)]
    assert select_markers(markers, BrushRect(10.0, 10.0, 0.0, 0.0)) == markers


def test_absent_rectangle_selects_nothing() -> None:
    assert select_markers([_marker(0.0, 0.0)], None) == []


def test_rectangle_covering_chart_selects_all_markers() -> None:
    markers = _day_markers()
    selected = select_markers(markers, BrushRect(-500.0, -500.0, 500.0, 500.0))
    assert len(selected) == 288


def test_canvas_to_chart_subtracts_canvas_midpoint() -> None:
    rect = canvas_to_chart(BrushRect(400.0, 450.0, 600.0, 550.0), width=1000, height=1000)
    assert rect == BrushRect(-100.0, -50.0, 100.0, 50.0)


def test_engine_converts_canvas_coordinates_before_hit_testing() -> None:
    centre_marker = _marker(0.0, 0.0)
    engine = SelectionEngine([centre_marker], canvas_size=(1000.0, 1000.0))

    assert engine.update(BrushRect(495.0, 495.0, 505.0, 505.0)) == [centre_marker]
    assert engine.state.rect == BrushRect(-5.0, -5.0, 5.0, 5.0)
    assert engine.update(BrushRect(0.0, 0.0, 10.0, 10.0)) == []


def test_engine_recomputes_from_scratch_and_clears() -> None:
    markers = [_marker(1.0, 1.0, index=0), _marker(8.0, 8.0, index=10)]
    engine = SelectionEngine(markers)

    assert len(engine.update(BrushRect(0.0, 0.0, 10.0, 10.0))) == 2
    assert engine.update(BrushRect(5.0, 5.0, 10.0, 10.0)) == [markers[1]]
    assert engine.is_selected(markers[1])
    assert not engine.is_selected(markers[0])

    assert engine.update(None) == []
    assert engine.state.rect is None
    assert engine.state.is_empty
    assert engine.state.records() == []


def test_brush_rect_from_extent_and_validation() -> None:
    assert BrushRect.from_extent([[1, 2], [3, 4]]) == BrushRect(1.0, 2.0, 3.0, 4.0)
    with pytest.raises(ValueError, match="must be finite"):
        BrushRect(0.0, math.nan, 1.0, 1.0)


def test_selection_records_carry_series_and_time() -> None:
    engine = SelectionEngine([_marker(1.0, 1.0, index=90, series=Series.non_estrus)])
    engine.update(BrushRect(0.0, 0.0, 2.0, 2.0))

    (record,) = engine.state.records()
    assert record["series"] == "Non-Estrus"
    assert record["time_label"] == "1:30 AM"
