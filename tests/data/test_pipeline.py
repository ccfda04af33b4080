"""Unit tests for the async fetch/derive pipeline."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from fred_dash.data.catalog import CAD_USD, EUR_USD, RV_INDICATORS
from fred_dash.data.pipeline import (
    SelectionTracker,
    current_window,
    fetch_many,
    fetch_metric,
    prior_year_window,
    resolve_default_anchor,
    resolve_latest_date,
)
from fred_dash.errors import FetchError, NoDataError
from tests.conftest import daily_series, raw

ANCHOR = date(2024, 3, 15)


@pytest.fixture
def primed_client(stub_client):
    """Stub client holding roughly fifteen months of daily CAD and EUR data."""
    stub_client.series[CAD_USD.series_id] = daily_series(date(2023, 1, 1), 450, base=1.30)
    stub_client.series[EUR_USD.series_id] = daily_series(date(2023, 1, 1), 450, base=1.05)
    return stub_client


def test_window_helpers():
    """Current windows carry the holiday buffer; prior-year windows end a year back."""
    assert current_window(ANCHOR, 150) == (date(2023, 9, 17), ANCHOR)
    assert prior_year_window(ANCHOR) == (date(2023, 3, 1), date(2023, 3, 15))
    assert prior_year_window(ANCHOR, 45) == (date(2023, 1, 29), date(2023, 3, 15))


@pytest.mark.asyncio
async def test_fetch_metric_requests_both_windows(primed_client):
    """The metric compares the anchor date against its one-year-prior value."""
    result = await fetch_metric(primed_client, CAD_USD.series_id, lookback_days=150, anchor=ANCHOR)

    assert sorted(primed_client.calls) == [
        (CAD_USD.series_id, date(2023, 3, 1), date(2023, 3, 15)),
        (CAD_USD.series_id, date(2023, 9, 17), ANCHOR),
    ]
    # Daily steps of 0.01 from 2023-01-01: day 439 is the anchor, day 73 a year earlier.
    assert result.current == pytest.approx(1.30 + 439 * 0.01)
    assert result.prior_year == pytest.approx(1.30 + 73 * 0.01)
    assert result.yoy_change == pytest.approx(366 * 0.01)
    assert result.data_as_of == "03/15/2024"
    assert result.observations[0].date == date(2023, 9, 17)
    assert result.observations[-1].date == ANCHOR


@pytest.mark.asyncio
async def test_fetch_metric_uses_nearest_earlier_prior_year_value(stub_client):
    """A missing anniversary falls back to the closest earlier reporting day."""
    stub_client.series["DEXCAUS"] = [
        raw("2023-03-10", "1.35"),
        raw("2023-03-13", "1.36"),
        raw("2023-03-15", "."),
        raw("2024-03-14", "1.40"),
        raw("2024-03-15", "1.41"),
    ]
    result = await fetch_metric(stub_client, "DEXCAUS", lookback_days=30, anchor=ANCHOR)
    assert result.prior_year == pytest.approx(1.36)
    assert result.current == pytest.approx(1.41)


@pytest.mark.asyncio
async def test_fetch_metric_is_all_or_nothing(mocker):
    """A failed prior-year fetch fails the metric instead of defaulting to zero."""

    def fetch_series(series_id, start_date, end_date):
        if end_date.year == 2023:
            raise FetchError("Internal Server Error", status=500, series_id=series_id)
        return [raw("2024-03-15", "1.41")]

    client = MagicMock()
    client.fetch_series.side_effect = fetch_series

    with pytest.raises(FetchError) as excinfo:
        await fetch_metric(client, "DEXCAUS", lookback_days=30, anchor=ANCHOR, strict=False)
    assert excinfo.value.status == 500
    assert client.fetch_series.call_count == 2


@pytest.mark.asyncio
async def test_fetch_metric_defaults_anchor_to_today(primed_client, pinned_today):
    """Without an anchor the pipeline uses today's date."""
    primed_client.series[CAD_USD.series_id] = daily_series(date(2023, 1, 1), 600)
    result = await fetch_metric(primed_client, CAD_USD.series_id, lookback_days=14)
    assert result.observations[-1].date == pinned_today


@pytest.mark.asyncio
async def test_fetch_many_isolates_failures(primed_client):
    """One failing series never blocks or invalidates its siblings."""
    primed_client.errors[EUR_USD.series_id] = FetchError(
        "Service Unavailable", status=503, series_id=EUR_USD.series_id
    )

    outcomes = await fetch_many(
        primed_client, [CAD_USD, EUR_USD], lookback_days=150, anchor=ANCHOR
    )

    assert list(outcomes) == [CAD_USD.series_id, EUR_USD.series_id]
    assert outcomes[CAD_USD.series_id].ok
    assert outcomes[CAD_USD.series_id].result.data_as_of == "03/15/2024"
    assert not outcomes[EUR_USD.series_id].ok
    assert outcomes[EUR_USD.series_id].error == "FRED API error (503): Service Unavailable"


@pytest.mark.asyncio
async def test_fetch_many_records_no_data_per_series(stub_client):
    """Empty series become per-series errors in strict mode."""
    configs = RV_INDICATORS[:2]
    stub_client.series[configs[0].series_id] = [
        raw("2023-02-01", "66.9"),
        raw("2024-03-01", "79.4"),
    ]

    outcomes = await fetch_many(
        stub_client, configs, lookback_days=365, anchor=ANCHOR, prior_year_window_days=45
    )

    assert outcomes[configs[0].series_id].result.prior_year == pytest.approx(66.9)
    assert "No observations" in outcomes[configs[1].series_id].error


@pytest.mark.asyncio
async def test_fetch_many_permissive_mode_flags_missing(stub_client, pinned_today):
    """Permissive mode returns zero-valued metrics flagged as missing."""
    outcomes = await fetch_many(
        stub_client, [CAD_USD], lookback_days=30, anchor=ANCHOR, strict=False
    )
    result = outcomes[CAD_USD.series_id].result
    assert result.current_missing and result.prior_year_missing
    assert result.data_as_of == "06/14/2024"


@pytest.mark.asyncio
async def test_fetch_many_propagates_programming_errors(stub_client):
    """Only domain errors are captured per series."""
    stub_client.errors[CAD_USD.series_id] = RuntimeError("bug")
    with pytest.raises(RuntimeError, match="bug"):
        await fetch_many(stub_client, [CAD_USD], lookback_days=30, anchor=ANCHOR)


def test_resolve_latest_date(stub_client, pinned_today):
    """The most recent non-missing observation wins."""
    stub_client.series["DEXCAUS"] = [
        raw("2024-06-11", "1.37"),
        raw("2024-06-12", "1.38"),
        raw("2024-06-13", "."),
    ]
    assert resolve_latest_date(stub_client, "DEXCAUS") == date(2024, 6, 12)
    assert stub_client.calls == [("DEXCAUS", date(2024, 5, 15), pinned_today)]


def test_resolve_latest_date_no_data(stub_client, pinned_today):
    """A window with nothing but missing markers raises NoDataError."""
    stub_client.series["DEXCAUS"] = [raw("2024-06-13", ".")]
    with pytest.raises(NoDataError, match="No data available"):
        resolve_latest_date(stub_client, "DEXCAUS")


@pytest.mark.parametrize(
    "error",
    [FetchError("boom", status=500), None],
)
def test_resolve_default_anchor_falls_back_to_today(stub_client, pinned_today, error):
    """Fetch failures and empty windows both fall back to today's date."""
    if error is not None:
        stub_client.errors["DEXCAUS"] = error
    assert resolve_default_anchor(stub_client, "DEXCAUS") == pinned_today


def test_resolve_default_anchor_success(stub_client):
    """With data available the resolved date is returned."""
    stub_client.series["DEXCAUS"] = [raw("2024-06-07", "1.37")]
    assert resolve_default_anchor(stub_client, "DEXCAUS", today=date(2024, 6, 10)) == date(
        2024, 6, 7
    )


def test_selection_tracker_discards_stale_results():
    """Only the result for the latest selection is kept."""
    tracker: SelectionTracker[str] = SelectionTracker()
    first = tracker.begin(date(2024, 3, 1))
    second = tracker.begin(date(2024, 3, 15))

    assert not tracker.is_current(first)
    assert tracker.accept(second, "fresh")
    assert not tracker.accept(first, "stale")
    assert tracker.value == "fresh"
    assert tracker.anchor == date(2024, 3, 15)
