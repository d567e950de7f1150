from __future__ import annotations

from typing import Any

from estrus_clock.features.series import Series
from estrus_clock.interaction.visibility import (
    HIDDEN_OPACITY,
    LINE_VISIBLE_OPACITY,
    MARKER_VISIBLE_OPACITY,
)
from estrus_clock.selection_stats import NO_SELECTION_MESSAGE, NOT_AVAILABLE

PAYLOAD_SCHEMA_VERSION = 1

SERIES_COLORS: dict[Series, str] = {
    Series.estrus: "red",
    Series.non_estrus: "blue",
}

PERIOD_COLORS: dict[str, str] = {
    "dark": "rgba(169, 169, 169, 0.3)",
    "light": "rgba(255, 213, 37, 0.3)",
}

PERIOD_LABELS: dict[str, str] = {
    "dark": "Dark Period",
    "light": "Light Period",
}

GRID_COLOR = "#ccc"
MARKER_RADIUS = 3
MARKER_HOVER_RADIUS = 6
SELECTED_MARKER_COLOR = "#f59e0b"
RADIAL_AXIS_LABEL = "Energy Level"

STAT_LABELS = (
    "Count",
    "Min Activity",
    "Max Activity",
    "Mean Activity",
    "Median Activity",
    "Std. Deviation",
    "Time Range",
)

REQUIRED_PAYLOAD_KEYS = frozenset(
    {
        "schema_version",
        "canvas",
        "scale",
        "periods",
        "grid",
        "radial_ticks",
        "time_labels",
        "series",
        "legend",
        "visibility",
        "opacity",
        "stats",
    }
)
REQUIRED_SERIES_KEYS = frozenset({"name", "slug", "color", "points", "markers"})


def legend_entries() -> list[dict[str, str]]:
    entries = [{"label": series.value, "color": SERIES_COLORS[series]} for series in Series]
    entries.extend(
        {"label": PERIOD_LABELS[period], "color": PERIOD_COLORS[period]}
        for period in ("dark", "light")
    )
    return entries


def opacity_contract() -> dict[str, float]:
    return {
        "line_visible": LINE_VISIBLE_OPACITY,
        "marker_visible": MARKER_VISIBLE_OPACITY,
        "hidden": HIDDEN_OPACITY,
    }


def stats_contract() -> dict[str, Any]:
    return {
        "labels": list(STAT_LABELS),
        "empty_message": NO_SELECTION_MESSAGE,
        "not_available": NOT_AVAILABLE,
    }


def validate_chart_payload(payload: dict[str, Any]) -> dict[str, Any]:
    missing = sorted(REQUIRED_PAYLOAD_KEYS - set(payload))
    if missing:
        raise ValueError(f"chart payload missing keys: {', '.join(missing)}")
    if payload["schema_version"] != PAYLOAD_SCHEMA_VERSION:
        raise ValueError(
            f"chart payload schema_version must be {PAYLOAD_SCHEMA_VERSION}, "
            f"got {payload['schema_version']!r}"
        )

    series_entries = payload["series"]
    names = [entry.get("name") for entry in series_entries]
    if sorted(names) != sorted(series.value for series in Series):
        raise ValueError(
            f"chart payload series must be exactly Estrus/Non-Estrus, got {names!r}"
        )
    for entry in series_entries:
        missing_series = sorted(REQUIRED_SERIES_KEYS - set(entry))
        if missing_series:
            raise ValueError(
                f"chart payload series '{entry.get('name')}' missing keys: "
                f"{', '.join(missing_series)}"
            )
        for marker in entry["markers"]:
            if not {"index", "value", "x", "y"}.issubset(marker):
                raise ValueError(f"chart payload marker malformed in '{entry['name']}'")

    radius = payload["scale"].get("radius")
    if not isinstance(radius, (int, float)) or radius <= 0:
        raise ValueError(f"chart payload scale.radius must be positive, got {radius!r}")
    return payload
