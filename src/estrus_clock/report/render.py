from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import Any

import numpy as np
from jinja2 import Environment, FileSystemLoader, select_autoescape

from estrus_clock.features.geometry import ChartGeometry
from estrus_clock.interaction.visibility import VisibilityState
from estrus_clock.io.write import json_safe
from estrus_clock.paths import build_output_paths
from estrus_clock.preprocess.time import time_label
from estrus_clock.report.contracts import (
    GRID_COLOR,
    MARKER_HOVER_RADIUS,
    MARKER_RADIUS,
    PAYLOAD_SCHEMA_VERSION,
    PERIOD_COLORS,
    PERIOD_LABELS,
    RADIAL_AXIS_LABEL,
    SELECTED_MARKER_COLOR,
    SERIES_COLORS,
    legend_entries,
    opacity_contract,
    stats_contract,
    validate_chart_payload,
)

LOGGER = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.html.j2"
COORDINATE_DECIMALS = 2


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _round(value: float) -> float:
    # + 0.0 turns -0.0 into 0.0.
    return round(float(value), COORDINATE_DECIMALS) + 0.0


def _curve_points(points: np.ndarray) -> list[list[float]]:
    """Projected full-resolution points; the browser joins them with a cardinal spline."""
    return [[_round(x), _round(y)] for x, y in points]


def _wedge_path(start_angle: float, end_angle: float, radius: float) -> str:
    """Pie slice from the centre; angles increase clockwise in screen space."""
    x0, y0 = math.cos(start_angle) * radius, math.sin(start_angle) * radius
    x1, y1 = math.cos(end_angle) * radius, math.sin(end_angle) * radius
    large_arc = 1 if (end_angle - start_angle) > math.pi else 0
    return (
        f"M0,0L{_round(x0):g},{_round(y0):g}"
        f"A{_round(radius):g},{_round(radius):g} 0 {large_arc} 1 {_round(x1):g},{_round(y1):g}Z"
    )


def build_chart_payload(
    geometry: ChartGeometry,
    visibility: VisibilityState | None = None,
) -> dict[str, Any]:
    visibility = visibility or VisibilityState()
    radius = geometry.radius
    series_entries = []
    for series, points in geometry.curves.items():
        series_entries.append(
            {
                "name": series.value,
                "slug": series.slug,
                "color": SERIES_COLORS[series],
                "points": _curve_points(points),
                "markers": [
                    {
                        "index": marker.index,
                        "value": marker.value,
                        "x": marker.x,
                        "y": marker.y,
                        "time_label": time_label(marker.index),
                    }
                    for marker in geometry.markers_for(series)
                ],
            }
        )

    payload = {
        "schema_version": PAYLOAD_SCHEMA_VERSION,
        "canvas": {"width": geometry.width, "height": geometry.height},
        "scale": {
            "max_activity": geometry.scale.max_activity,
            "radius": radius,
            "angle_origin": geometry.projector.origin,
        },
        "periods": [
            {
                "period": wedge.period,
                "label": PERIOD_LABELS[wedge.period],
                "color": PERIOD_COLORS[wedge.period],
                "start_minute": wedge.start_minute,
                "end_minute": wedge.end_minute,
                "path": _wedge_path(wedge.start_angle, wedge.end_angle, radius),
            }
            for wedge in geometry.periods
        ],
        "grid": {"radii": [_round(value) for value in geometry.grid_radii], "color": GRID_COLOR},
        "radial_ticks": {
            "label": RADIAL_AXIS_LABEL,
            "ticks": [
                {"text": tick.text, "distance": _round(tick.distance)}
                for tick in geometry.radial_ticks
            ],
        },
        "time_labels": [
            {"minute": label.minute, "text": label.text, "x": _round(label.x), "y": _round(label.y)}
            for label in geometry.time_labels
        ],
        "series": series_entries,
        "legend": legend_entries(),
        "visibility": {series.slug: visibility.is_visible(series) for series in geometry.curves},
        "opacity": opacity_contract(),
        "markers_style": {
            "radius": MARKER_RADIUS,
            "hover_radius": MARKER_HOVER_RADIUS,
            "selected_color": SELECTED_MARKER_COLOR,
        },
        "stats": stats_contract(),
    }
    return validate_chart_payload(json_safe(payload))


def render_report(
    geometry: ChartGeometry,
    out_dir: Path,
    *,
    visibility: VisibilityState | None = None,
    summary: dict[str, Any] | None = None,
    title: str = "Estrus vs. Non-Estrus Activity",
) -> Path:
    report_started = perf_counter()
    generated_at = datetime.now(timezone.utc).isoformat()
    template = _template_env().get_template(REPORT_TEMPLATE)

    payload_started = perf_counter()
    chart_payload = build_chart_payload(geometry, visibility=visibility)
    payload_build_ms = round((perf_counter() - payload_started) * 1000.0, 3)

    rendered = template.render(
        title=title,
        generated_at=generated_at,
        summary=json_safe(summary or {}),
        chart_payload=chart_payload,
    )

    paths = build_output_paths(out_dir)
    report_path = paths.report
    report_path.write_text(rendered, encoding="utf-8")

    runtime_metrics = {
        "generated_at": generated_at,
        "chart_payload_build_ms": payload_build_ms,
        "report_total_ms": round((perf_counter() - report_started) * 1000.0, 3),
        "report_html_bytes": int(report_path.stat().st_size),
    }
    paths.report_runtime.write_text(
        json.dumps(json_safe(runtime_metrics), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    LOGGER.info(
        "Report written to %s (%d bytes)", report_path, runtime_metrics["report_html_bytes"]
    )
    return report_path
