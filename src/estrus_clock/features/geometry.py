from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from estrus_clock.config import AppConfig
from estrus_clock.features.series import MarkerPoint, Series, SeriesStore
from estrus_clock.preprocess.time import label_minutes, period_spans, time_label
from estrus_clock.projection import PolarProjector, RadialScale


@dataclass(frozen=True)
class PeriodWedge:
    period: str
    start_minute: int
    end_minute: int
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class TimeLabel:
    minute: int
    text: str
    x: float
    y: float


@dataclass(frozen=True)
class RadialTick:
    level: float
    distance: float

    @property
    def text(self) -> str:
        return f"{self.level:.0f}"


@dataclass(frozen=True)
class ChartGeometry:
    width: int
    height: int
    scale: RadialScale
    projector: PolarProjector
    curves: dict[Series, np.ndarray]
    markers: list[MarkerPoint]
    periods: list[PeriodWedge]
    grid_radii: list[float]
    radial_ticks: list[RadialTick]
    time_labels: list[TimeLabel]

    @property
    def radius(self) -> float:
        return self.scale.radius

    @property
    def canvas_size(self) -> tuple[float, float]:
        return float(self.width), float(self.height)

    def markers_for(self, series: Series) -> list[MarkerPoint]:
        return [marker for marker in self.markers if marker.series is series]


def build_chart_geometry(store: SeriesStore, config: AppConfig) -> ChartGeometry:
    """Project both series and the chart furniture with one shared scale and angle origin."""
    chart = config.chart
    scale = RadialScale(max_activity=store.max_activity, radius=chart.radius)
    projector = PolarProjector(scale, origin=chart.angle_origin)

    periods = [
        PeriodWedge(
            period=period,
            start_minute=start,
            end_minute=end,
            start_angle=projector.angle(start),
            end_angle=projector.angle(end),
        )
        for period, (start, end) in period_spans(config.series.light_start_minute).items()
        if end > start
    ]

    label_distance = chart.radius + chart.label_offset
    time_labels = []
    for minute in label_minutes(chart.label_hours):
        point = projector.polar_point(minute, label_distance)
        time_labels.append(TimeLabel(minute=minute, text=time_label(minute), x=point.x, y=point.y))

    return ChartGeometry(
        width=chart.width,
        height=chart.height,
        scale=scale,
        projector=projector,
        curves={series: projector.project_series(store.values(series)) for series in store.series},
        markers=store.build_markers(projector),
        periods=periods,
        grid_radii=[scale(level) for level in scale.levels(chart.grid_circles)],
        radial_ticks=[
            RadialTick(level=level, distance=scale(level))
            for level in scale.levels(chart.radial_ticks, include_zero=True)
        ],
        time_labels=time_labels,
    )
