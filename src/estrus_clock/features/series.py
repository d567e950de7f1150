from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np
import pandas as pd

from estrus_clock.preprocess.time import MINUTES_PER_DAY, time_label

if TYPE_CHECKING:
    from estrus_clock.projection import PolarProjector

LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 10
MARKER_COLUMNS = ["series", "index", "value", "x", "y", "time_label"]


class Series(str, Enum):
    estrus = "Estrus"
    non_estrus = "Non-Estrus"

    @property
    def slug(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Any) -> Series:
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if normalized in {member.name, member.value.lower().replace("-", "_")}:
                return member
        raise ValueError(f"Unknown series: {value!r}")


@dataclass(frozen=True)
class ActivitySample:
    index: int
    value: float
    series: Series


@dataclass(frozen=True)
class MarkerPoint:
    index: int
    value: float
    series: Series
    x: float
    y: float

    @property
    def sample(self) -> ActivitySample:
        return ActivitySample(index=self.index, value=self.value, series=self.series)

    def to_record(self) -> dict[str, Any]:
        return {
            "series": self.series.value,
            "index": self.index,
            "value": self.value,
            "x": self.x,
            "y": self.y,
            "time_label": time_label(self.index),
        }


def _as_series_array(values: Sequence[float] | np.ndarray, series: Series) -> np.ndarray:
    array = np.array(values, dtype=float).reshape(-1)
    if array.size != MINUTES_PER_DAY:
        LOGGER.warning(
            "%s series has %d samples, expected %d", series.value, array.size, MINUTES_PER_DAY
        )
    array.setflags(write=False)
    return array


class SeriesStore:
    """Both activity series plus the down-sampled marker subset used for hit-testing."""

    def __init__(
        self,
        estrus: Sequence[float] | np.ndarray,
        non_estrus: Sequence[float] | np.ndarray,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        if sample_rate < 1:
            raise ValueError("sample_rate must be >= 1")
        self.sample_rate = int(sample_rate)
        self._values: dict[Series, np.ndarray] = {
            Series.estrus: _as_series_array(estrus, Series.estrus),
            Series.non_estrus: _as_series_array(non_estrus, Series.non_estrus),
        }
        if self._values[Series.estrus].size != self._values[Series.non_estrus].size:
            LOGGER.warning(
                "Series lengths differ: estrus=%d non_estrus=%d",
                self._values[Series.estrus].size,
                self._values[Series.non_estrus].size,
            )

    def values(self, series: Series) -> np.ndarray:
        return self._values[Series.parse(series)]

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._values)

    @property
    def max_activity(self) -> float:
        """Maximum across both full series; 0.0 when there is nothing finite to scan."""
        combined = np.concatenate(list(self._values.values()))
        finite = combined[np.isfinite(combined)]
        if finite.size == 0:
            return 0.0
        return max(float(finite.max()), 0.0)

    def _selected(self, series: Series | None) -> Iterable[Series]:
        return self.series if series is None else (Series.parse(series),)

    def samples(self, series: Series | None = None) -> list[ActivitySample]:
        return [
            ActivitySample(index=index, value=float(value), series=name)
            for name in self._selected(series)
            for index, value in enumerate(self._values[name])
        ]

    def marker_indices(self, series: Series) -> np.ndarray:
        size = self.values(series).size
        return np.arange(0, size, self.sample_rate)

    def marker_samples(self, series: Series | None = None) -> list[ActivitySample]:
        return [
            ActivitySample(index=int(index), value=float(self._values[name][index]), series=name)
            for name in self._selected(series)
            for index in self.marker_indices(name)
        ]

    def build_markers(self, projector: PolarProjector) -> list[MarkerPoint]:
        markers: list[MarkerPoint] = []
        for sample in self.marker_samples():
            point = projector.project(sample.index, sample.value)
            markers.append(
                MarkerPoint(
                    index=sample.index,
                    value=sample.value,
                    series=sample.series,
                    x=point.x,
                    y=point.y,
                )
            )
        return markers

    def to_frame(self) -> pd.DataFrame:
        frames = [
            pd.DataFrame(
                {
                    "series": name.value,
                    "index": np.arange(values.size, dtype=int),
                    "value": values,
                }
            )
            for name, values in self._values.items()
        ]
        return pd.concat(frames, ignore_index=True)


def markers_frame(markers: Iterable[MarkerPoint]) -> pd.DataFrame:
    rows = [marker.to_record() for marker in markers]
    if not rows:
        return pd.DataFrame(columns=MARKER_COLUMNS)
    return pd.DataFrame(rows, columns=MARKER_COLUMNS)
