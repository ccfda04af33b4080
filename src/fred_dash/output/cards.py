"""Plain-text metric cards for terminal output."""

from collections.abc import Mapping, Sequence

from ..data.models import MetricResult, Observation, SeriesConfig
from .utils import (
    format_change,
    format_days_label,
    format_percent,
    format_value,
    is_favorable_change,
)


def _direction(result: MetricResult, invert: bool) -> str:
    if not result.is_complete:
        return "incomplete"
    return "favorable" if is_favorable_change(result.yoy_change, invert) else "unfavorable"


def _window_line(days: int, observations: Sequence[Observation], decimals: int) -> str:
    label = format_days_label(days)
    if not observations:
        return f"  {label:>9}: no data available"
    values = [obs.value for obs in observations]
    return (
        f"  {label:>9}: {len(observations):>3} pts  "
        f"low {format_value(min(values), decimals)}  "
        f"high {format_value(max(values), decimals)}  "
        f"last {format_value(values[-1], decimals)}"
    )


def render_card(
    config: SeriesConfig,
    result: MetricResult,
    windows: Mapping[int, Sequence[Observation]] | None = None,
) -> str:
    """Render a metric and its chart windows as a block of text."""
    decimals = config.decimals
    percent = format_percent(result.yoy_percent, config.percent_decimals)
    lines = [
        f"{config.name} [{config.series_id}]",
        f"  Data as of: {result.data_as_of}",
        f"  Current ({config.unit}): {format_value(result.current, decimals)}",
        f"  Prior Year: {format_value(result.prior_year, decimals)}",
        f"  YOY Change: {format_change(result.yoy_change, decimals)} "
        f"({percent}, {_direction(result, config.invert)})",
    ]
    if result.current_missing:
        lines.append("  Warning: no current observations; values defaulted to 0.")
    if result.prior_year_missing:
        lines.append("  Warning: no prior-year observations; values defaulted to 0.")
    for days in sorted(windows or {}):
        lines.append(_window_line(days, windows[days], decimals))
    lines.append(f"  Source: {config.source_name} | {config.fred_url}")
    return "\n".join(lines)


def render_error_card(config: SeriesConfig, error: str) -> str:
    """Render the inline error shown in place of a failed series."""
    return f"{config.name} [{config.series_id}]\n  Error: {error}"


__all__ = ["render_card", "render_error_card"]
