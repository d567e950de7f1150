from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from estrus_clock.preprocess.time import MINUTES_PER_DAY

LOGGER = logging.getLogger(__name__)

ACTIVITY_FIELD = "activity"


class ActivityDataError(ValueError):
    """Raised when an activity file cannot be turned into a series."""


def _coerce_activity(values: pd.Series, path: Path) -> np.ndarray:
    numeric = pd.to_numeric(values, errors="coerce")
    invalid = numeric.isna()
    if invalid.any():
        first_bad = int(np.flatnonzero(invalid.to_numpy())[0])
        raise ActivityDataError(
            f"{path}: non-numeric '{ACTIVITY_FIELD}' value at position {first_bad}"
        )
    array = numeric.to_numpy(dtype=float)
    non_finite = ~np.isfinite(array)
    if non_finite.any():
        first_bad = int(np.flatnonzero(non_finite)[0])
        raise ActivityDataError(
            f"{path}: non-finite '{ACTIVITY_FIELD}' value at position {first_bad}"
        )
    if np.any(array < 0.0):
        LOGGER.warning("%s: %d negative activity values", path, int(np.sum(array < 0.0)))
    if array.size != MINUTES_PER_DAY:
        LOGGER.warning("%s: %d samples, expected %d", path, array.size, MINUTES_PER_DAY)
    return array


def _read_json_records(path: Path) -> pd.Series:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ActivityDataError(f"{path}: invalid JSON ({exc.msg})") from exc

    if not isinstance(payload, list):
        raise ActivityDataError(f"{path}: expected a JSON array of records")
    values = []
    for position, record in enumerate(payload):
        if not isinstance(record, dict) or ACTIVITY_FIELD not in record:
            raise ActivityDataError(
                f"{path}: record {position} has no '{ACTIVITY_FIELD}' field"
            )
        values.append(record[ACTIVITY_FIELD])
    return pd.Series(values, dtype=object)


def _read_csv_column(path: Path) -> pd.Series:
    # utf-8-sig strips BOM-prefixed headers from spreadsheet exports.
    try:
        frame = pd.read_csv(path, encoding="utf-8-sig")
    except pd.errors.EmptyDataError as exc:
        raise ActivityDataError(f"{path}: empty CSV file") from exc
    if ACTIVITY_FIELD not in frame.columns:
        raise ActivityDataError(f"{path}: missing '{ACTIVITY_FIELD}' column")
    return frame[ACTIVITY_FIELD]


def load_activity_series(path: Path) -> np.ndarray:
    """Load one day of per-minute activity; array position is minute-of-day."""
    path = Path(path)
    if not path.is_file():
        raise ActivityDataError(f"Activity file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        raw = _read_json_records(path)
    elif suffix == ".csv":
        raw = _read_csv_column(path)
    else:
        raise ActivityDataError(f"Unsupported activity file type: {path.suffix}")
    return _coerce_activity(raw, path)


def load_activity_pair(estrus_path: Path, non_estrus_path: Path) -> tuple[np.ndarray, np.ndarray]:
    """Load both series; any failure aborts before anything is rendered."""
    try:
        estrus = load_activity_series(estrus_path)
        non_estrus = load_activity_series(non_estrus_path)
    except ActivityDataError:
        LOGGER.error("Error loading the activity data", exc_info=True)
        raise
    LOGGER.info(
        "Loaded activity series: estrus=%d samples, non_estrus=%d samples",
        estrus.size,
        non_estrus.size,
    )
    return estrus, non_estrus

