from __future__ import annotations

from dataclasses import dataclass

from estrus_clock.features.series import Series

LINE_VISIBLE_OPACITY = 1.0
MARKER_VISIBLE_OPACITY = 0.7
HIDDEN_OPACITY = 0.0


@dataclass(frozen=True)
class SeriesOpacity:
    line: float
    markers: float


@dataclass
class VisibilityState:
    estrus_visible: bool = True
    non_estrus_visible: bool = True

    def is_visible(self, series: Series) -> bool:
        if Series.parse(series) is Series.estrus:
            return self.estrus_visible
        return self.non_estrus_visible

    def set_visible(self, series: Series, visible: bool) -> None:
        if Series.parse(series) is Series.estrus:
            self.estrus_visible = bool(visible)
        else:
            self.non_estrus_visible = bool(visible)

    def as_dict(self) -> dict[str, bool]:
        return {series.value: self.is_visible(series) for series in Series}

    @classmethod
    def with_hidden(cls, hidden: list[Series]) -> VisibilityState:
        state = cls()
        for series in hidden:
            state.set_visible(series, False)
        return state


class OpacityTarget:
    """Rendered elements of one chart whose opacity can be changed in place."""

    def set_line_opacity(self, series: Series, opacity: float) -> None:
        raise NotImplementedError

    def set_marker_opacity(self, series: Series, opacity: float) -> None:
        raise NotImplementedError


def series_opacity(state: VisibilityState, series: Series) -> SeriesOpacity:
    if state.is_visible(series):
        return SeriesOpacity(line=LINE_VISIBLE_OPACITY, markers=MARKER_VISIBLE_OPACITY)
    return SeriesOpacity(line=HIDDEN_OPACITY, markers=HIDDEN_OPACITY)


def toggle(state: VisibilityState, series: Series) -> bool:
    """Flip one series and return its new visibility."""
    series = Series.parse(series)
    state.set_visible(series, not state.is_visible(series))
    return state.is_visible(series)


def apply_visibility(
    state: VisibilityState,
    series: Series,
    target: OpacityTarget,
) -> SeriesOpacity:
    # Opacity only; elements stay in the scene and remain brush-selectable.
    opacity = series_opacity(state, series)
    target.set_line_opacity(Series.parse(series), opacity.line)
    target.set_marker_opacity(Series.parse(series), opacity.markers)
    return opacity


def apply_all(state: VisibilityState, target: OpacityTarget) -> dict[Series, SeriesOpacity]:
    return {series: apply_visibility(state, series, target) for series in Series}
