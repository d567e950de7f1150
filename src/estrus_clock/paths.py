from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    """Run output layout: report at the root, everything else in subdirectories."""

    root: Path
    figures: Path
    summary: Path
    artifacts: Path

    @property
    def report(self) -> Path:
        return self.root / "report.html"

    @property
    def chart_summary(self) -> Path:
        return self.summary / "chart.json"

    @property
    def report_runtime(self) -> Path:
        return self.artifacts / "report_runtime.json"

    def clock_figure(self, fmt: str) -> Path:
        return self.figures / f"activity_clock.{fmt.lstrip('.')}"


def build_output_paths(out_dir: Path) -> OutputPaths:
    out_dir = Path(out_dir)
    paths = OutputPaths(
        root=out_dir,
        figures=out_dir / "figures",
        summary=out_dir / "summary",
        artifacts=out_dir / "artifacts",
    )
    for directory in (paths.figures, paths.summary, paths.artifacts):
        directory.mkdir(parents=True, exist_ok=True)
    return paths
