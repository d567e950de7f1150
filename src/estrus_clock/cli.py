from __future__ import annotations

from pathlib import Path

import typer

from estrus_clock.config import DEFAULT_CONFIG_PATH, AppConfig, load_config, resolve_input_paths
from estrus_clock.features.series import Series
from estrus_clock.interaction.selection import BrushRect
from estrus_clock.interaction.session import ChartSession
from estrus_clock.io.read import ActivityDataError
from estrus_clock.logging import configure_logging
from estrus_clock.pipeline.run_all import build_chart, run_all

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        if DEFAULT_CONFIG_PATH.exists():
            return load_config(DEFAULT_CONFIG_PATH)
        return AppConfig()
    return load_config(config_path)


def _resolve_inputs(
    cfg: AppConfig,
    estrus: Path | None,
    non_estrus: Path | None,
) -> tuple[Path, Path]:
    try:
        return resolve_input_paths(cfg, estrus=estrus, non_estrus=non_estrus)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _parse_hidden(hide: list[str] | None) -> list[Series] | None:
    if not hide:
        return None
    try:
        return [Series.parse(name) for name in hide]
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--hide") from exc


@app.command()
def render(
    estrus: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    non_estrus: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    hide: list[str] | None = typer.Option(
        None,
        help="Series to start hidden (Estrus or Non-Estrus). Repeatable.",
    ),
    log_level: str = typer.Option("INFO"),
) -> None:
    """Render the activity clock figure, marker table, summary and HTML report."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    estrus_path, non_estrus_path = _resolve_inputs(cfg, estrus, non_estrus)
    hidden = _parse_hidden(hide)
    try:
        outputs = run_all(
            estrus_path=estrus_path,
            non_estrus_path=non_estrus_path,
            out_dir=out,
            config=cfg,
            hidden=hidden,
        )
    except ActivityDataError as exc:
        typer.echo(f"Error loading the data: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo("Render complete")
    typer.echo(f"- markers: {outputs.markers_path}")
    typer.echo(f"- summary: {outputs.summary_path}")
    if outputs.figure_path is not None:
        typer.echo(f"- figure: {outputs.figure_path}")
    if outputs.report_path is not None:
        typer.echo(f"- report: {outputs.report_path}")


@app.command()
def select(
    x0: float = typer.Option(...),
    y0: float = typer.Option(...),
    x1: float = typer.Option(...),
    y1: float = typer.Option(...),
    canvas: bool = typer.Option(
        False,
        help="Treat the rectangle as canvas coordinates instead of chart-centred ones.",
    ),
    estrus: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    non_estrus: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    log_level: str = typer.Option("WARNING"),
) -> None:
    """Apply a brush rectangle to the markers and print the selection statistics."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    estrus_path, non_estrus_path = _resolve_inputs(cfg, estrus, non_estrus)
    try:
        build = build_chart(estrus_path, non_estrus_path, cfg)
    except ActivityDataError as exc:
        typer.echo(f"Error loading the data: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    session = ChartSession(
        build.geometry.markers,
        canvas_size=build.geometry.canvas_size if canvas else None,
        visibility=build.visibility,
    )
    session.on_brush_change(BrushRect(x0, y0, x1, y1))
    summary = session.current_summary()
    if isinstance(summary, str):
        typer.echo(summary)
        return
    width = max(len(label) for label, _ in summary)
    for label, value in summary:
        typer.echo(f"{label:<{width}}  {value}")


if __name__ == "__main__":
    app()
