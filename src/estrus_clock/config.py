from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from estrus_clock.features.series import Series

DEFAULT_LABEL_HOURS = [0, 4, 8, 12, 16, 20]
DEFAULT_ESTRUS_FILENAME = "estrus_activity.json"
DEFAULT_NON_ESTRUS_FILENAME = "non_estrus_activity.json"
DATA_DIR_ENV = "ESTRUS_CLOCK_DATA_DIR"


class ChartConfig(BaseModel):
    width: int = Field(default=1000, ge=100)
    height: int = Field(default=1000, ge=100)
    margin: int = Field(default=70, ge=0)
    label_offset: int = Field(default=25, ge=0)
    grid_circles: int = Field(default=5, ge=1)
    radial_ticks: int = Field(default=5, ge=1)
    label_hours: list[int] = Field(default_factory=lambda: list(DEFAULT_LABEL_HOURS))
    angle_origin: Literal["left", "top"] = "left"

    @model_validator(mode="after")
    def _check_geometry(self) -> "ChartConfig":
        if self.radius <= 0:
            raise ValueError("chart margin leaves no room for a positive draw radius")
        for hour in self.label_hours:
            if hour < 0 or hour > 23:
                raise ValueError(f"label_hours entries must be in [0, 23], got {hour}")
        return self

    @property
    def radius(self) -> float:
        return min(self.width, self.height) / 2 - self.margin


class SeriesConfig(BaseModel):
    sample_rate: int = Field(default=10, ge=1)
    light_start_minute: int = Field(default=720, ge=0, le=1440)


class InputConfig(BaseModel):
    estrus_path: str | None = None
    non_estrus_path: str | None = None
    data_dir: str | None = None


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"
    interactive_report: bool = True
    hidden_series: list[Series] = Field(default_factory=list)

    @field_validator("hidden_series", mode="before")
    @classmethod
    def _parse_series_names(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return [Series.parse(item) for item in value]
        return value


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    chart: ChartConfig = Field(default_factory=ChartConfig)
    series: SeriesConfig = Field(default_factory=SeriesConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.input.data_dir = _resolve_optional_path(
        config.input.data_dir or os.getenv(DATA_DIR_ENV),
        base_dir,
    )
    config.input.estrus_path = _resolve_optional_path(config.input.estrus_path, base_dir)
    config.input.non_estrus_path = _resolve_optional_path(config.input.non_estrus_path, base_dir)
    return config


def resolve_input_paths(
    config: AppConfig,
    estrus: Path | None = None,
    non_estrus: Path | None = None,
) -> tuple[Path, Path]:
    """Pick the two activity files: explicit arguments, then config, then data_dir defaults."""
    data_dir_value = config.input.data_dir or os.getenv(DATA_DIR_ENV)
    data_dir = Path(data_dir_value) if data_dir_value else None

    def _pick(explicit: Path | None, configured: str | None, default_name: str) -> Path:
        if explicit is not None:
            return explicit
        if configured:
            return Path(configured)
        if data_dir is not None:
            return data_dir / default_name
        raise ValueError(
            f"No input file configured for {default_name}; "
            "pass it explicitly, set input paths in config, or set ESTRUS_CLOCK_DATA_DIR."
        )

    return (
        _pick(estrus, config.input.estrus_path, DEFAULT_ESTRUS_FILENAME),
        _pick(non_estrus, config.input.non_estrus_path, DEFAULT_NON_ESTRUS_FILENAME),
    )
