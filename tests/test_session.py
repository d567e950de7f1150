from __future__ import annotations

from estrus_clock.features.series import MarkerPoint, Series
from estrus_clock.interaction.session import ChartSession
from estrus_clock.interaction.visibility import OpacityTarget
from estrus_clock.selection_stats import NO_SELECTION_MESSAGE


class RecordingTarget(OpacityTarget):
    def __init__(self) -> None:
        self.opacity: dict[tuple[str, Series], float] = {}

    def set_line_opacity(self, series: Series, opacity: float) -> None:
        self.opacity[("line", series)] = opacity

    def set_marker_opacity(self, series: Series, opacity: float) -> None:
        self.opacity[("markers", series)] = opacity


def _markers() -> list[MarkerPoint]:
    return [
        MarkerPoint(index=0, value=2.0, series=Series.estrus, x=-10.0, y=0.0),
        MarkerPoint(index=10, value=4.0, series=Series.estrus, x=-9.0, y=-1.0),
        MarkerPoint(index=0, value=6.0, series=Series.non_estrus, x=-5.0, y=0.0),
        MarkerPoint(index=720, value=9.0, series=Series.non_estrus, x=40.0, y=0.0),
    ]


def test_brush_change_marks_selection_and_renders_stats() -> None:
    rendered: list[object] = []
    marked: list[list[MarkerPoint]] = []
    session = ChartSession(_markers(), render_stats=rendered.append, mark_selected=marked.append)

    records = session.on_brush_change([[-20.0, -5.0], [0.0, 5.0]])

    assert [record["series"] for record in records] == ["Estrus", "Estrus", "Non-Estrus"]
    assert len(marked[-1]) == 3
    rows = dict(rendered[-1])
    assert rows["Count"] == 3
    assert rows["Mean Activity"] == "4.00"
    assert rows["Time Range"] == "12:00 AM - 12:10 AM"


def test_clearing_brush_reports_empty_selection() -> None:
    rendered: list[object] = []
    session = ChartSession(_markers(), render_stats=rendered.append)
    session.on_brush_change([[-20.0, -5.0], [0.0, 5.0]])

    assert session.on_brush_clear() == []
    assert rendered[-1] == NO_SELECTION_MESSAGE
    assert session.current_summary() == NO_SELECTION_MESSAGE


def test_toggle_applies_opacity_without_touching_selection() -> None:
    target = RecordingTarget()
    session = ChartSession(_markers(), target=target)
    session.on_brush_change([[-20.0, -5.0], [50.0, 5.0]])

    assert session.on_toggle("Non-Estrus") is False
    assert target.opacity[("line", Series.non_estrus)] == 0.0
    assert target.opacity[("markers", Series.non_estrus)] == 0.0
    assert ("line", Series.estrus) not in target.opacity
    assert dict(session.current_summary())["Count"] == 4

    assert session.on_toggle(Series.non_estrus) is True
    assert target.opacity[("markers", Series.non_estrus)] == 0.7


def test_canvas_space_brush_is_shifted_to_chart_space() -> None:
    session = ChartSession(_markers(), canvas_size=(100.0, 100.0))

    records = session.on_brush_change([[85.0, 45.0], [95.0, 55.0]])

    assert [(record["series"], record["index"]) for record in records] == [("Non-Estrus", 720)]
