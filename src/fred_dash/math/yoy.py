"""Year-over-year metric derivation from current and prior-year windows."""

from collections.abc import Iterable
from datetime import date

import structlog

from .. import dates
from ..data.models import MetricResult, RawObservation
from ..data.parser import clean_observations
from ..errors import NoDataError

logger = structlog.get_logger(__name__)


def yoy_change(current: float, prior_year: float) -> float:
    """Return the absolute change from the prior-year value."""
    return current - prior_year


def yoy_percent(current: float, prior_year: float) -> float | None:
    """Return the percent change, or None when the base is zero."""
    if prior_year == 0:
        return None
    return (current - prior_year) / prior_year * 100


def derive_metric(
    current_raw: Iterable[RawObservation],
    prior_year_raw: Iterable[RawObservation],
    *,
    series_id: str = "",
    strict: bool = True,
    today: date | None = None,
) -> MetricResult:
    """Compare the latest current observation against the closest prior-year one.

    Missing-value sentinels are dropped from both windows before selection.
    The prior-year value is the latest observation in its window, i.e. the
    nearest reporting day on or before the one-year-prior anchor.

    With ``strict`` (the default) an empty window raises :class:`NoDataError`.
    Otherwise the missing scalar defaults to ``0`` and the matching
    ``*_missing`` flag is set; when the current window is empty ``data_as_of``
    falls back to ``today``.
    """
    log = logger.bind(series_id=series_id, strict=strict)
    observations = clean_observations(current_raw)
    prior_observations = clean_observations(prior_year_raw)

    if strict and not observations:
        log.warning("metric.no_current_data")
        raise NoDataError("No observations in the current window", series_id=series_id)
    if strict and not prior_observations:
        log.warning("metric.no_prior_year_data")
        raise NoDataError("No observations in the prior-year window", series_id=series_id)

    if observations:
        latest = observations[-1]
        current = latest.value
        as_of = latest.date
    else:
        current = 0.0
        as_of = today or dates.today()
        log.warning("metric.current_defaulted", data_as_of=dates.format_date_for_api(as_of))

    if prior_observations:
        prior_year = prior_observations[-1].value
    else:
        prior_year = 0.0
        log.warning("metric.prior_year_defaulted")

    result = MetricResult(
        series_id=series_id,
        current=current,
        prior_year=prior_year,
        yoy_change=yoy_change(current, prior_year),
        yoy_percent=yoy_percent(current, prior_year),
        data_as_of=dates.format_display_date(as_of),
        observations=observations,
        current_missing=not observations,
        prior_year_missing=not prior_observations,
    )
    log.debug(
        "metric.derived",
        current=result.current,
        prior_year=result.prior_year,
        yoy_change=result.yoy_change,
        data_as_of=result.data_as_of,
    )
    return result


__all__ = ["derive_metric", "yoy_change", "yoy_percent"]
