"""Series-level utilities for chart windows."""

from .windows import chart_windows, filter_window

__all__ = ["chart_windows", "filter_window"]
