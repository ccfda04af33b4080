"""Trailing-window slicing for chart ranges."""

from collections.abc import Iterable, Sequence
from datetime import date

from ..data.models import Observation
from ..dates import lookback_start


def filter_window(
    observations: Sequence[Observation],
    days: int,
    as_of: date | None = None,
) -> list[Observation]:
    """Return observations dated within ``[as_of - days, as_of]``, inclusive.

    ``as_of`` defaults to the date of the last observation, so the input is
    expected in ascending date order. Input order is preserved and the input
    sequence is never modified.
    """
    if days < 0:
        raise ValueError("days must be non-negative.")
    if not observations:
        return []
    anchor = as_of or observations[-1].date
    cutoff = lookback_start(anchor, days)
    return [obs for obs in observations if cutoff <= obs.date <= anchor]


def chart_windows(
    observations: Sequence[Observation],
    windows: Iterable[int],
    as_of: date | None = None,
) -> dict[int, list[Observation]]:
    """Slice a series into each trailing window, keyed by day count."""
    return {days: filter_window(observations, days, as_of) for days in windows}


__all__ = ["chart_windows", "filter_window"]
