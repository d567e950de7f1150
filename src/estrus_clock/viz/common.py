from __future__ import annotations

import re
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

_CSS_RGBA = re.compile(
    r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9.]+)\s*)?\)$"
)


def css_color(value: str) -> str | tuple[float, float, float, float]:
    """Translate CSS ``rgb()``/``rgba()`` strings into matplotlib RGBA tuples."""
    match = _CSS_RGBA.match(value.strip())
    if match is None:
        return value
    red, green, blue, alpha = match.groups()
    return (
        int(red) / 255.0,
        int(green) / 255.0,
        int(blue) / 255.0,
        float(alpha) if alpha is not None else 1.0,
    )


def save_figure(path: Path, figure: Figure | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    figure = figure or plt.gcf()
    figure.tight_layout()
    figure.savefig(path)
    plt.close(figure)
    return path
