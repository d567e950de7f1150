from __future__ import annotations

import math
from typing import Literal

import numpy as np

MINUTES_PER_DAY = 1440
LIGHT_START_MINUTE = 720

AngleOrigin = Literal["left", "top"]

# Angle of minute 0 in screen coordinates (y grows downward, angles run clockwise).
ORIGIN_OFFSETS: dict[str, float] = {
    "left": -math.pi,
    "top": -math.pi / 2,
}


def _origin_offset(origin: AngleOrigin) -> float:
    try:
        return ORIGIN_OFFSETS[origin]
    except KeyError as exc:
        raise ValueError(f"Unknown angle origin: {origin!r}") from exc


def angle_of_minute(minute: float, origin: AngleOrigin = "left") -> float:
    """Clock angle in radians for a minute-of-day; one full turn per day."""
    return _origin_offset(origin) + (2.0 * math.pi * minute) / MINUTES_PER_DAY


def angles_of_minutes(minutes: np.ndarray, origin: AngleOrigin = "left") -> np.ndarray:
    values = np.asarray(minutes, dtype=float)
    return _origin_offset(origin) + (2.0 * np.pi * values) / MINUTES_PER_DAY


def time_label(minute_of_day: int) -> str:
    """Format a minute-of-day as ``H:MM AM/PM``."""
    hour_24, minute = divmod(int(minute_of_day), 60)
    suffix = "AM" if hour_24 < 12 else "PM"
    hour_12 = hour_24 % 12 or 12
    return f"{hour_12}:{minute:02d} {suffix}"


def time_range_label(start_minute: int, end_minute: int) -> str:
    return f"{time_label(start_minute)} - {time_label(end_minute)}"


def period_of_minute(minute: int, light_start: int = LIGHT_START_MINUTE) -> str:
    return "dark" if int(minute) < light_start else "light"


def period_spans(light_start: int = LIGHT_START_MINUTE) -> dict[str, tuple[int, int]]:
    """Minute span [start, end) of each lighting period."""
    return {
        "dark": (0, light_start),
        "light": (light_start, MINUTES_PER_DAY),
    }


def label_minutes(hours: list[int]) -> list[int]:
    return [int(hour) * 60 for hour in hours]
