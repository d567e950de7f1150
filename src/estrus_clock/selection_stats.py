from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np

from estrus_clock.preprocess.time import time_range_label

NO_SELECTION_MESSAGE = "No data points selected"
NOT_AVAILABLE = "N/A"

StatRows = list[tuple[str, int | str]]


@dataclass(frozen=True)
class SelectionStatistics:
    count: int
    min_value: float
    max_value: float
    mean: float
    median: float
    std: float | None
    start_minute: int
    end_minute: int

    @property
    def time_range(self) -> str:
        return time_range_label(self.start_minute, self.end_minute)

    def rows(self) -> StatRows:
        return [
            ("Count", self.count),
            ("Min Activity", f"{self.min_value:.2f}"),
            ("Max Activity", f"{self.max_value:.2f}"),
            ("Mean Activity", f"{self.mean:.2f}"),
            ("Median Activity", f"{self.median:.2f}"),
            ("Std. Deviation", NOT_AVAILABLE if self.std is None else f"{self.std:.2f}"),
            ("Time Range", self.time_range),
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "min": self.min_value,
            "max": self.max_value,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "start_minute": self.start_minute,
            "end_minute": self.end_minute,
            "time_range": self.time_range,
        }


def _index_and_value(record: Any) -> tuple[int, float]:
    if isinstance(record, Mapping):
        return int(record["index"]), float(record["value"])
    return int(record.index), float(record.value)


def compute_selection_statistics(records: Iterable[Any]) -> SelectionStatistics | None:
    """Descriptive statistics over selected records; None for an empty selection."""
    pairs = [_index_and_value(record) for record in records]
    if not pairs:
        return None

    indices = np.array([index for index, _ in pairs], dtype=int)
    values = np.array([value for _, value in pairs], dtype=float)
    # Sample deviation is undefined for a single point.
    std = float(np.std(values, ddof=1)) if values.size >= 2 else None
    return SelectionStatistics(
        count=int(values.size),
        min_value=float(values.min()),
        max_value=float(values.max()),
        mean=float(values.mean()),
        median=float(np.median(values)),
        std=std,
        start_minute=int(indices.min()),
        end_minute=int(indices.max()),
    )


def describe_selection(records: Iterable[Any]) -> StatRows | str:
    """Display rows for the statistics table, or the empty-selection message."""
    stats = compute_selection_statistics(records)
    if stats is None:
        return NO_SELECTION_MESSAGE
    return stats.rows()
