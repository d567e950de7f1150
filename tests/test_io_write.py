from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from estrus_clock.features.series import MarkerPoint, Series
from estrus_clock.io.write import json_safe, write_markers, write_summary


def test_json_safe_unwraps_numpy_and_nulls_non_finite() -> None:
    value = json_safe(
        {
            "count": np.int64(3),
            "mean": np.float64(2.5),
            "std": float("nan"),
            "levels": (np.float32(1.0), math.inf),
            1: "one",
        }
    )

    assert value == {"count": 3, "mean": 2.5, "std": None, "levels": [1.0, None], "1": "one"}
    assert type(value["count"]) is int


def test_write_summary_is_strict_json(tmp_path: Path) -> None:
    path = write_summary({"b": np.float64(math.nan), "a": 1}, tmp_path / "summary" / "chart.json")

    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"a": 1, "b": None}
    assert text.index('"a"') < text.index('"b"')


def test_write_markers_csv_and_bad_format(tmp_path: Path) -> None:
    markers = [MarkerPoint(index=10, value=2.0, series=Series.non_estrus, x=1.5, y=-2.5)]

    path = write_markers(markers, tmp_path)

    frame = pd.read_csv(path)
    assert path == tmp_path / "markers.csv"
    assert frame.loc[0, "series"] == "Non-Estrus"
    assert frame.loc[0, "time_label"] == "12:10 AM"
    with pytest.raises(ValueError, match="Unsupported table format"):
        write_markers(markers, tmp_path, fmt="xlsx")
