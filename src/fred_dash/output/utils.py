"""Shared helpers for metric cards and charts."""

import re
from collections.abc import Iterable
from pathlib import Path

import numpy as np

NOT_AVAILABLE = "N/A"


def to_numpy(values: Iterable[float]) -> np.ndarray:
    """Return the input values as a 1D NumPy float array."""
    if isinstance(values, np.ndarray):
        return values
    return np.asarray(list(values), dtype=float)


def ensure_directory(path: str | Path) -> Path:
    """Create the directory at ``path`` if needed and return its Path."""
    directory = Path(path)
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def format_value(value: float, decimals: int) -> str:
    """Format a metric value with fixed precision."""
    return f"{value:.{decimals}f}"


def format_change(value: float, decimals: int) -> str:
    """Format an absolute change with an explicit sign."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}"


def format_percent(value: float | None, decimals: int = 2) -> str:
    """Format a percent change with an explicit sign, or N/A when unavailable."""
    if value is None:
        return NOT_AVAILABLE
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_days_label(days: int) -> str:
    """Label a trailing window, switching to years from 365 days up."""
    if days < 365:
        return f"{days} Days"
    years = round(days / 365)
    return "1 Year" if years == 1 else f"{years} Years"


def is_favorable_change(change: float, invert: bool = False) -> bool:
    """Return True when ``change`` moves in the favorable direction."""
    return change <= 0 if invert else change >= 0


def export_filename(title: str, data_as_of: str | None, suffix: str = ".png") -> str:
    """Build a filesystem-safe export name such as ``CAD_-_USD_01-02-2024.png``."""
    stem = re.sub(r"\s+", "_", title.strip())
    stamp = data_as_of.replace("/", "-") if data_as_of else "export"
    return f"{stem}_{stamp}{suffix}"


def axis_padding(values: np.ndarray) -> float:
    """Return y-axis padding: 10% of the range, or 5% of the peak for flat series."""
    if values.size == 0:
        return 0.0
    span = float(values.max() - values.min())
    return span * 0.1 or abs(float(values.max())) * 0.05


__all__ = [
    "NOT_AVAILABLE",
    "axis_padding",
    "ensure_directory",
    "export_filename",
    "format_change",
    "format_days_label",
    "format_percent",
    "format_value",
    "is_favorable_change",
    "to_numpy",
]
