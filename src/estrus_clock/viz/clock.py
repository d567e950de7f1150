from __future__ import annotations

from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PathCollection
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Circle, Patch, Wedge

from estrus_clock.features.geometry import ChartGeometry
from estrus_clock.features.series import MarkerPoint, Series
from estrus_clock.interaction.visibility import OpacityTarget, VisibilityState, apply_all
from estrus_clock.report.contracts import (
    GRID_COLOR,
    MARKER_RADIUS,
    PERIOD_COLORS,
    RADIAL_AXIS_LABEL,
    SELECTED_MARKER_COLOR,
    SERIES_COLORS,
    legend_entries,
)
from estrus_clock.viz.common import css_color, save_figure

FIGURE_DPI = 100


class ClockArtists(OpacityTarget):
    """Matplotlib handles for one clock chart; opacity and selection update in place."""

    def __init__(
        self,
        figure: Figure,
        lines: dict[Series, Line2D],
        markers: dict[Series, PathCollection],
        highlight: PathCollection,
    ) -> None:
        self.figure = figure
        self.lines = lines
        self.markers = markers
        self.highlight = highlight

    def set_line_opacity(self, series: Series, opacity: float) -> None:
        self.lines[series].set_alpha(opacity)

    def set_marker_opacity(self, series: Series, opacity: float) -> None:
        self.markers[series].set_alpha(opacity)

    def mark_selected(self, selected: Iterable[MarkerPoint]) -> None:
        offsets = [(marker.x, marker.y) for marker in selected]
        self.highlight.set_offsets(np.array(offsets, dtype=float).reshape(-1, 2))

    def save(self, output_path: Path) -> Path:
        return save_figure(output_path, figure=self.figure)


def _draw_furniture(axis: plt.Axes, geometry: ChartGeometry) -> None:
    radius = geometry.radius
    for wedge in geometry.periods:
        axis.add_patch(
            Wedge(
                (0.0, 0.0),
                radius,
                float(np.degrees(wedge.start_angle)),
                float(np.degrees(wedge.end_angle)),
                facecolor=css_color(PERIOD_COLORS[wedge.period]),
                edgecolor="none",
                zorder=0,
            )
        )
    for grid_radius in geometry.grid_radii:
        axis.add_patch(
            Circle(
                (0.0, 0.0),
                grid_radius,
                fill=False,
                edgecolor=GRID_COLOR,
                linestyle=(0, (4, 4)),
                linewidth=0.8,
                zorder=1,
            )
        )
    for label in geometry.time_labels:
        axis.text(label.x, label.y, label.text, ha="center", va="center", fontsize=11)

    # Energy axis runs from the centre straight down in screen space.
    axis.plot([0.0, 0.0], [0.0, radius], color="black", linewidth=1.0, zorder=4)
    for tick in geometry.radial_ticks:
        axis.plot([-5.0, 0.0], [tick.distance, tick.distance], color="black", linewidth=1.0)
        axis.text(-10.0, tick.distance, tick.text, ha="right", va="center", fontsize=10)
    axis.text(0.0, radius + 35.0, RADIAL_AXIS_LABEL, ha="center", va="center", fontsize=12)


def draw_activity_clock(
    geometry: ChartGeometry,
    visibility: VisibilityState | None = None,
    selected: Iterable[MarkerPoint] = (),
) -> ClockArtists:
    figure, axis = plt.subplots(
        figsize=(geometry.width / FIGURE_DPI, geometry.height / FIGURE_DPI),
        dpi=FIGURE_DPI,
    )
    half_width = geometry.width / 2.0
    half_height = geometry.height / 2.0
    axis.set_xlim(-half_width, half_width)
    axis.set_ylim(half_height, -half_height)
    axis.set_aspect("equal")
    axis.axis("off")

    _draw_furniture(axis, geometry)

    lines: dict[Series, Line2D] = {}
    markers: dict[Series, PathCollection] = {}
    for series, points in geometry.curves.items():
        (lines[series],) = axis.plot(
            points[:, 0],
            points[:, 1],
            color=SERIES_COLORS[series],
            linewidth=1.5,
            zorder=2,
        )
        series_markers = geometry.markers_for(series)
        markers[series] = axis.scatter(
            [marker.x for marker in series_markers],
            [marker.y for marker in series_markers],
            s=(2 * MARKER_RADIUS) ** 2,
            color=SERIES_COLORS[series],
            zorder=3,
        )

    highlight = axis.scatter(
        [],
        [],
        s=(4 * MARKER_RADIUS) ** 2,
        facecolors="none",
        edgecolors=SELECTED_MARKER_COLOR,
        linewidths=1.5,
        zorder=5,
    )
    axis.legend(
        handles=[
            Patch(facecolor=css_color(entry["color"]), label=entry["label"])
            for entry in legend_entries()
        ],
        loc="upper left",
        bbox_to_anchor=(0.0, 1.0),
        bbox_transform=figure.transFigure,
        frameon=False,
    )

    artists = ClockArtists(figure=figure, lines=lines, markers=markers, highlight=highlight)
    apply_all(visibility or VisibilityState(), artists)
    artists.mark_selected(selected)
    return artists


def plot_activity_clock(
    geometry: ChartGeometry,
    output_path: Path,
    visibility: VisibilityState | None = None,
    selected: Iterable[MarkerPoint] = (),
) -> Path:
    artists = draw_activity_clock(geometry, visibility=visibility, selected=selected)
    return artists.save(output_path)
