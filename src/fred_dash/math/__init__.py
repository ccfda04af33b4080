"""Year-over-year comparison helpers."""

from .yoy import derive_metric, yoy_change, yoy_percent

__all__ = ["derive_metric", "yoy_change", "yoy_percent"]
