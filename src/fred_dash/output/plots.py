"""Plotting tools for metric chart windows."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import matplotlib.dates as mdates
import matplotlib.pyplot as plt

from ..data.models import Observation
from .utils import axis_padding, ensure_directory, format_days_label, to_numpy


@dataclass(frozen=True)
class WindowPlotConfig:
    """Styling options for a grid of trailing-window line charts."""

    title: str = "Series"
    ylabel: str = ""
    decimals: int = 2
    color: str = "#5a6b2c"
    fill_alpha: float = 0.08
    line_width: float = 2.0
    columns: int = 2
    dpi: int = 150


@dataclass(frozen=True)
class WindowPlotReport:
    """Metadata describing a saved chart grid."""

    path: Path
    windows: tuple[int, ...]
    points: int


def _marker_size(count: int) -> float:
    """Hide markers on dense series so the line stays readable."""
    if count > 60:
        return 0.0
    if count > 30:
        return 2.0
    return 3.0


def _draw_window(ax, days: int, observations: Sequence[Observation], config: WindowPlotConfig):
    """Render a single trailing window onto ``ax``."""
    ax.set_title(format_days_label(days))
    if not observations:
        ax.text(0.5, 0.5, "No data available", ha="center", va="center", transform=ax.transAxes)
        ax.set_xticks([])
        ax.set_yticks([])
        return
    dates = [obs.date for obs in observations]
    values = to_numpy(obs.value for obs in observations)
    ax.plot(
        dates,
        values,
        color=config.color,
        linewidth=config.line_width,
        marker="o",
        markersize=_marker_size(len(observations)),
    )
    ax.fill_between(dates, values, values.min(), color=config.color, alpha=config.fill_alpha)
    padding = axis_padding(values)
    if padding:
        ax.set_ylim(values.min() - padding, values.max() + padding)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %d"))
    ax.annotate(
        f"{values[-1]:.{config.decimals}f}",
        xy=(dates[-1], values[-1]),
        xytext=(4, 0),
        textcoords="offset points",
        color=config.color,
    )
    if config.ylabel:
        ax.set_ylabel(config.ylabel)
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.6)


def generate_window_plot(
    windows: Mapping[int, Sequence[Observation]],
    *,
    output_dir: str | Path = "out",
    filename: str = "windows.png",
    config: WindowPlotConfig | None = None,
) -> WindowPlotReport:
    """Render one line chart per trailing window into a single PNG."""
    config = config or WindowPlotConfig()
    out_dir = ensure_directory(output_dir)
    ordered = sorted(windows)
    if not ordered:
        raise ValueError("At least one window is required to render a plot.")

    columns = max(1, min(config.columns, len(ordered)))
    rows = -(-len(ordered) // columns)
    fig, axes = plt.subplots(rows, columns, figsize=(6 * columns, 3.5 * rows), squeeze=False)
    flat_axes = [ax for row in axes for ax in row]
    for ax, days in zip(flat_axes, ordered):
        _draw_window(ax, days, windows[days], config)
    for ax in flat_axes[len(ordered):]:
        ax.set_visible(False)

    fig.suptitle(config.title)
    fig.autofmt_xdate()
    fig.tight_layout()

    output_path = out_dir / filename
    fig.savefig(output_path, dpi=config.dpi)
    plt.close(fig)
    return WindowPlotReport(
        path=output_path,
        windows=tuple(ordered),
        points=sum(len(windows[days]) for days in ordered),
    )


__all__ = ["WindowPlotConfig", "WindowPlotReport", "generate_window_plot"]
