"""Presentation helpers for metric cards and chart windows."""

from .cards import render_card, render_error_card
from .plots import WindowPlotConfig, WindowPlotReport, generate_window_plot

__all__ = [
    "WindowPlotConfig",
    "WindowPlotReport",
    "generate_window_plot",
    "render_card",
    "render_error_card",
]
