"""Global test configuration and fixtures."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
import requests

from fred_dash import dates
from fred_dash.data.models import RawObservation

PINNED_TODAY = date(2024, 6, 14)


def raw(date_str: str, value: str) -> RawObservation:
    """Shorthand for building upstream observations."""
    return RawObservation(date=date_str, value=value)


def daily_series(
    start: date, days: int, *, base: float = 1.0, step: float = 0.01
) -> list[RawObservation]:
    """Build a contiguous daily series starting at ``start``."""
    return [
        raw(
            dates.format_date_for_api(start + timedelta(days=offset)),
            f"{base + offset * step:.4f}",
        )
        for offset in range(days)
    ]


@dataclass
class StubClient:
    """In-memory stand-in for FredHttpClient that honors the requested date range."""

    series: dict[str, list[RawObservation]] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, date, date]] = field(default_factory=list)

    def fetch_series(
        self, series_id: str, start_date: date, end_date: date
    ) -> list[RawObservation]:
        self.calls.append((series_id, start_date, end_date))
        if series_id in self.errors:
            raise self.errors[series_id]
        start = dates.format_date_for_api(start_date)
        end = dates.format_date_for_api(end_date)
        return [obs for obs in self.series.get(series_id, []) if start <= obs.date <= end]

    def close(self) -> None:
        pass


@pytest.fixture
def pinned_today(monkeypatch):
    """Freeze ``fred_dash.dates.today`` so fallbacks are deterministic."""
    monkeypatch.setattr(dates, "today", lambda: PINNED_TODAY)
    return PINNED_TODAY


@pytest.fixture
def stub_client():
    """Return an empty StubClient that tests can prime with series data."""
    return StubClient()


@pytest.fixture
def mock_response():
    """Build a MagicMock shaped like a ``requests.Response``."""

    def build(status_code=200, payload=None, *, reason="OK", json_error=False):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.ok = status_code < 400
        response.reason = reason
        response.content = b"{}"
        if json_error:
            response.json.side_effect = ValueError("Expecting value")
        else:
            response.json.return_value = payload
        return response

    return build
