"""Async orchestration of paired fetches, fan-out, and anchor resolution."""

import asyncio
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Generic, TypeVar

import structlog
from attrs import define, field

from .. import dates
from ..errors import FetchError, FredDashError, NoDataError
from ..math.yoy import derive_metric
from .catalog import FETCH_BUFFER_DAYS, LATEST_DATE_LOOKBACK_DAYS, PRIOR_YEAR_WINDOW_DAYS
from .client import FredHttpClient
from .models import MetricResult, RawObservation, SeriesConfig, SeriesOutcome
from .parser import clean_observations

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def current_window(anchor: date, lookback_days: int) -> tuple[date, date]:
    """Return the fetch range for the current period, including the holiday buffer."""
    return dates.lookback_start(anchor, lookback_days + FETCH_BUFFER_DAYS), anchor


def prior_year_window(
    anchor: date, days: int = PRIOR_YEAR_WINDOW_DAYS
) -> tuple[date, date]:
    """Return the short fetch range ending one year before ``anchor``."""
    end = dates.one_year_prior(anchor)
    return dates.lookback_start(end, days), end


async def fetch_series_async(
    client: FredHttpClient,
    series_id: str,
    start_date: date,
    end_date: date,
) -> list[RawObservation]:
    """Run a blocking ``fetch_series`` call on a worker thread."""
    return await asyncio.to_thread(client.fetch_series, series_id, start_date, end_date)


async def fetch_metric(
    client: FredHttpClient,
    series_id: str,
    *,
    lookback_days: int,
    anchor: date | None = None,
    prior_year_window_days: int = PRIOR_YEAR_WINDOW_DAYS,
    strict: bool = True,
) -> MetricResult:
    """Fetch the current and prior-year windows together and derive a metric.

    Both requests must succeed; the first failure propagates unchanged.
    """
    anchor = anchor or dates.today()
    start, end = current_window(anchor, lookback_days)
    prior_start, prior_end = prior_year_window(anchor, prior_year_window_days)
    pipe_log = logger.bind(
        operation="fetch_metric",
        series_id=series_id,
        anchor=dates.format_date_for_api(anchor),
    )
    pipe_log.info("pipeline.metric_start", lookback_days=lookback_days)
    current_raw, prior_raw = await asyncio.gather(
        fetch_series_async(client, series_id, start, end),
        fetch_series_async(client, series_id, prior_start, prior_end),
    )
    result = derive_metric(
        current_raw,
        prior_raw,
        series_id=series_id,
        strict=strict,
        today=dates.today(),
    )
    pipe_log.info(
        "pipeline.metric_complete",
        observations=len(result.observations),
        data_as_of=result.data_as_of,
    )
    return result


async def fetch_many(
    client: FredHttpClient,
    configs: Iterable[SeriesConfig],
    *,
    lookback_days: int,
    anchor: date | None = None,
    prior_year_window_days: int = PRIOR_YEAR_WINDOW_DAYS,
    strict: bool = True,
) -> dict[str, SeriesOutcome]:
    """Fetch metrics for several series concurrently; failures stay per series."""
    configs = list(configs)
    anchor = anchor or dates.today()
    pipe_log = logger.bind(operation="fetch_many", anchor=dates.format_date_for_api(anchor))
    pipe_log.info("pipeline.fanout_start", series=[config.series_id for config in configs])
    results = await asyncio.gather(
        *(
            fetch_metric(
                client,
                config.series_id,
                lookback_days=lookback_days,
                anchor=anchor,
                prior_year_window_days=prior_year_window_days,
                strict=strict,
            )
            for config in configs
        ),
        return_exceptions=True,
    )

    outcomes: dict[str, SeriesOutcome] = {}
    for config, result in zip(configs, results):
        if isinstance(result, MetricResult):
            outcomes[config.series_id] = SeriesOutcome(config.series_id, result=result)
        elif isinstance(result, FredDashError):
            pipe_log.warning(
                "pipeline.series_failed",
                series_id=config.series_id,
                error=str(result),
                error_type=type(result).__name__,
            )
            outcomes[config.series_id] = SeriesOutcome(config.series_id, error=str(result))
        else:
            raise result
    failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
    pipe_log.info("pipeline.fanout_complete", succeeded=len(outcomes) - failed, failed=failed)
    return outcomes


def resolve_latest_date(
    client: FredHttpClient,
    series_id: str,
    *,
    lookback_days: int = LATEST_DATE_LOOKBACK_DAYS,
    today: date | None = None,
) -> date:
    """Return the most recent date with a published value for ``series_id``."""
    end = today or dates.today()
    start = end - timedelta(days=lookback_days)
    raw = client.fetch_series(series_id, start, end)
    observations = clean_observations(raw)
    if not observations:
        logger.warning("pipeline.latest_date_missing", series_id=series_id)
        raise NoDataError("No data available", series_id=series_id)
    latest = observations[-1].date
    logger.debug(
        "pipeline.latest_date_resolved",
        series_id=series_id,
        latest=dates.format_date_for_api(latest),
    )
    return latest


def resolve_default_anchor(
    client: FredHttpClient,
    series_id: str,
    *,
    today: date | None = None,
) -> date:
    """Resolve the latest available date, falling back to today on failure."""
    fallback = today or dates.today()
    try:
        return resolve_latest_date(client, series_id, today=fallback)
    except (NoDataError, FetchError) as exc:
        logger.warning(
            "pipeline.latest_date_fallback",
            series_id=series_id,
            error=str(exc),
            fallback=dates.format_date_for_api(fallback),
        )
        return fallback


@define(slots=True)
class SelectionTracker(Generic[T]):
    """Track the latest anchor selection so stale results can be discarded.

    Each call to :meth:`begin` issues a new token; only results carrying the
    most recent token are accepted.
    """

    _generation: int = field(default=0, init=False)
    anchor: date | None = field(default=None, init=False)
    value: T | None = field(default=None, init=False)

    def begin(self, anchor: date) -> int:
        """Record a new selection and return its token."""
        self._generation += 1
        self.anchor = anchor
        return self._generation

    def is_current(self, token: int) -> bool:
        """Return True when ``token`` belongs to the latest selection."""
        return token == self._generation

    def accept(self, token: int, value: T) -> bool:
        """Store ``value`` if its request is still current; report whether it was kept."""
        if not self.is_current(token):
            logger.debug("selection.stale_discarded", token=token, current=self._generation)
            return False
        self.value = value
        return True


__all__ = [
    "SelectionTracker",
    "current_window",
    "fetch_many",
    "fetch_metric",
    "fetch_series_async",
    "prior_year_window",
    "resolve_default_anchor",
    "resolve_latest_date",
]
