from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Iterable

from estrus_clock.features.series import MarkerPoint, markers_frame

TABLE_SUFFIXES = {"csv": ".csv", "parquet": ".parquet"}


def json_safe(value: Any) -> Any:
    """Plain JSON types with numpy scalars unwrapped and non-finite floats as None."""
    if isinstance(value, dict):
        return {str(key): json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if hasattr(value, "item"):
        try:
            value = value.item()
        except (TypeError, ValueError):
            pass
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return value


def write_markers(markers: Iterable[MarkerPoint], out_dir: Path, fmt: str = "csv") -> Path:
    """Write every marker (series, minute, value, chart-local x/y) as one table."""
    suffix = TABLE_SUFFIXES.get(fmt)
    if suffix is None:
        raise ValueError(f"Unsupported table format: {fmt}")
    path = out_dir / f"markers{suffix}"
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = markers_frame(markers)
    if fmt == "parquet":
        frame.to_parquet(path, index=False)
    else:
        frame.to_csv(path, index=False)
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(json_safe(data), indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return path
