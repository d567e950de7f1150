from __future__ import annotations

import math

import numpy as np
import pytest

from estrus_clock.config import AppConfig
from estrus_clock.features.geometry import build_chart_geometry
from estrus_clock.features.series import Series, SeriesStore


def _store() -> SeriesStore:
    estrus = np.array([10.0 * math.sin(math.pi * i / 1440) for i in range(1440)])
    return SeriesStore(estrus, np.full(1440, 5.0))


def test_geometry_shares_one_scale_for_both_series() -> None:
    geometry = build_chart_geometry(_store(), AppConfig())

    assert geometry.radius == 430.0
    assert geometry.scale.max_activity == pytest.approx(10.0, rel=1e-5)
    assert set(geometry.curves) == {Series.estrus, Series.non_estrus}
    assert geometry.curves[Series.estrus].shape == (1440, 2)
    non_estrus_distances = np.hypot(*geometry.curves[Series.non_estrus].T)
    assert np.allclose(non_estrus_distances, 215.0, rtol=1e-5)
    assert len(geometry.markers) == 288
    assert len(geometry.markers_for(Series.non_estrus)) == 144


def test_periods_split_the_day_at_light_start() -> None:
    geometry = build_chart_geometry(_store(), AppConfig())

    dark, light = geometry.periods
    assert (dark.period, dark.start_minute, dark.end_minute) == ("dark", 0, 720)
    assert (light.period, light.start_minute, light.end_minute) == ("light", 720, 1440)
    assert dark.start_angle == pytest.approx(-math.pi)
    assert dark.end_angle == pytest.approx(0.0)
    assert light.end_angle == pytest.approx(math.pi)


def test_furniture_positions() -> None:
    geometry = build_chart_geometry(_store(), AppConfig())

    assert [label.text for label in geometry.time_labels] == [
        "12:00 AM",
        "4:00 AM",
        "8:00 AM",
        "12:00 PM",
        "4:00 PM",
        "8:00 PM",
    ]
    midnight = geometry.time_labels[0]
    assert midnight.x == pytest.approx(-455.0)
    assert midnight.y == pytest.approx(0.0, abs=1e-9)
    assert geometry.grid_radii == pytest.approx([86.0, 172.0, 258.0, 344.0, 430.0], rel=1e-5)
    assert [tick.text for tick in geometry.radial_ticks] == ["0", "2", "4", "6", "8", "10"]
    assert geometry.radial_ticks[0].distance == 0.0


def test_top_origin_rotates_everything_together() -> None:
    config = AppConfig.model_validate({"chart": {"angle_origin": "top"}})
    geometry = build_chart_geometry(_store(), config)

    midnight = geometry.time_labels[0]
    assert midnight.x == pytest.approx(0.0, abs=1e-9)
    assert midnight.y == pytest.approx(-455.0)
    first = geometry.markers_for(Series.non_estrus)[0]
    assert first.x == pytest.approx(0.0, abs=1e-9)
    assert first.y == pytest.approx(-215.0, rel=1e-5)
    assert geometry.periods[0].start_angle == pytest.approx(-math.pi / 2)


def test_all_zero_activity_collapses_to_centre() -> None:
    geometry = build_chart_geometry(SeriesStore(np.zeros(1440), np.zeros(1440)), AppConfig())

    assert geometry.scale.is_degenerate
    assert not np.isnan(geometry.curves[Series.estrus]).any()
    assert all((marker.x, marker.y) == (0.0, 0.0) for marker in geometry.markers)
