from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from estrus_clock.config import AppConfig
from estrus_clock.features.geometry import ChartGeometry, build_chart_geometry
from estrus_clock.features.series import Series, SeriesStore
from estrus_clock.interaction.visibility import VisibilityState
from estrus_clock.io.read import load_activity_pair
from estrus_clock.io.write import write_markers, write_summary
from estrus_clock.paths import build_output_paths
from estrus_clock.preprocess.time import period_of_minute
from estrus_clock.report.render import render_report
from estrus_clock.selection_stats import compute_selection_statistics
from estrus_clock.viz.clock import plot_activity_clock

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartBuild:
    store: SeriesStore
    geometry: ChartGeometry
    visibility: VisibilityState


@dataclass(frozen=True)
class RunOutputs:
    markers_path: Path
    summary_path: Path
    figure_path: Path | None
    report_path: Path | None


def build_chart(
    estrus_path: Path,
    non_estrus_path: Path,
    config: AppConfig,
    hidden: list[Series] | None = None,
) -> ChartBuild:
    estrus, non_estrus = load_activity_pair(estrus_path, non_estrus_path)
    store = SeriesStore(estrus, non_estrus, sample_rate=config.series.sample_rate)
    geometry = build_chart_geometry(store, config)
    if geometry.scale.is_degenerate:
        LOGGER.warning("Maximum activity is %s; every point maps to the centre", store.max_activity)
    visibility = VisibilityState.with_hidden(
        list(hidden) if hidden is not None else list(config.outputs.hidden_series)
    )
    return ChartBuild(store=store, geometry=geometry, visibility=visibility)


def period_means(store: SeriesStore, light_start: int) -> dict[str, dict[str, float | None]]:
    frame = store.to_frame()
    if frame.empty:
        return {}
    frame["period"] = frame["index"].map(lambda minute: period_of_minute(minute, light_start))
    grouped = frame.groupby(["series", "period"])["value"].mean()
    means: dict[str, dict[str, float | None]] = {}
    for (series_name, period), value in grouped.items():
        means.setdefault(str(series_name), {})[str(period)] = (
            None if pd.isna(value) else float(value)
        )
    return means


def chart_summary(build: ChartBuild, config: AppConfig) -> dict[str, Any]:
    store = build.store
    geometry = build.geometry
    series_summary: dict[str, Any] = {}
    for series in store.series:
        stats = compute_selection_statistics(store.samples(series))
        series_summary[series.value] = {
            "samples": int(store.values(series).size),
            "markers": len(geometry.markers_for(series)),
            "statistics": stats.to_dict() if stats is not None else None,
        }
    return {
        "max_activity": store.max_activity,
        "radius": geometry.radius,
        "angle_origin": geometry.projector.origin,
        "sample_rate": store.sample_rate,
        "light_start_minute": config.series.light_start_minute,
        "visibility": build.visibility.as_dict(),
        "series": series_summary,
        "period_means": period_means(store, config.series.light_start_minute),
    }


def run_all(
    estrus_path: Path,
    non_estrus_path: Path,
    out_dir: Path,
    config: AppConfig,
    *,
    hidden: list[Series] | None = None,
) -> RunOutputs:
    build = build_chart(estrus_path, non_estrus_path, config, hidden=hidden)
    paths = build_output_paths(out_dir)

    markers_path = write_markers(
        build.geometry.markers,
        paths.artifacts,
        fmt=config.outputs.tables_format,
    )
    summary = chart_summary(build, config)
    summary_path = write_summary(summary, paths.chart_summary)

    figure_path: Path | None = None
    try:
        figure_path = plot_activity_clock(
            build.geometry,
            paths.clock_figure(config.outputs.figures_format),
            visibility=build.visibility,
        )
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering the activity clock figure")

    report_path: Path | None = None
    if config.outputs.interactive_report:
        report_path = render_report(
            build.geometry,
            paths.root,
            visibility=build.visibility,
            summary=summary,
        )
    return RunOutputs(
        markers_path=markers_path,
        summary_path=summary_path,
        figure_path=figure_path,
        report_path=report_path,
    )
