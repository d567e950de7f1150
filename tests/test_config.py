from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from estrus_clock.config import AppConfig, ChartConfig, load_config, resolve_input_paths
from estrus_clock.features.series import Series


def test_default_config_file_loads() -> None:
    config = load_config(Path(__file__).resolve().parents[1] / "configs" / "default.yaml")

    assert config.chart.width == 1000
    assert config.chart.radius == 430.0
    assert config.chart.angle_origin == "left"
    assert config.series.sample_rate == 10
    assert config.series.light_start_minute == 720
    assert config.outputs.hidden_series == []


def test_relative_input_paths_resolve_against_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "conf" / "chart.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        "input:\n  estrus_path: ../data/estrus.json\n  non_estrus_path: /abs/non.json\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.input.estrus_path == str((tmp_path / "data" / "estrus.json").resolve())
    assert config.input.non_estrus_path == "/abs/non.json"


def test_data_dir_falls_back_to_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ESTRUS_CLOCK_DATA_DIR", str(tmp_path))
    config_path = tmp_path / "config.yaml"
    config_path.write_text("{}", encoding="utf-8")

    config = load_config(config_path)
    estrus, non_estrus = resolve_input_paths(config)

    assert estrus == tmp_path / "estrus_activity.json"
    assert non_estrus == tmp_path / "non_estrus_activity.json"


def test_explicit_paths_win_and_missing_inputs_raise(monkeypatch) -> None:
    monkeypatch.delenv("ESTRUS_CLOCK_DATA_DIR", raising=False)
    config = AppConfig()

    assert resolve_input_paths(config, Path("a.json"), Path("b.json")) == (
        Path("a.json"),
        Path("b.json"),
    )
    with pytest.raises(ValueError, match="No input file configured"):
        resolve_input_paths(config, estrus=Path("a.json"))


def test_hidden_series_accepts_labels_and_slugs() -> None:
    config = AppConfig.model_validate({"outputs": {"hidden_series": ["Non-Estrus", "estrus"]}})
    assert config.outputs.hidden_series == [Series.non_estrus, Series.estrus]


def test_invalid_chart_settings_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ChartConfig(width=200, height=200, margin=100)
    with pytest.raises(ValidationError):
        ChartConfig(label_hours=[0, 24])
    with pytest.raises(ValidationError):
        ChartConfig(angle_origin="bottom")
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"unknown": {}})


def test_default_app_config_uses_environment_data_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ESTRUS_CLOCK_DATA_DIR", str(tmp_path))

    estrus, non_estrus = resolve_input_paths(AppConfig())

    assert estrus == tmp_path / "estrus_activity.json"
    assert non_estrus == tmp_path / "non_estrus_activity.json"
