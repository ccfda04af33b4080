"""HTTP client for retrieving FRED series observations."""

from datetime import date
from typing import Any
from urllib.parse import urljoin

import requests
import structlog
from attrs import define, field
from requests.adapters import HTTPAdapter

from ..dates import format_date_for_api
from ..errors import FetchError, ParseError
from .catalog import BASE_URL, OBSERVATIONS_PATH
from .models import RawObservation
from .parser import parse_observations_payload

logger = structlog.get_logger(__name__)

# One fan-out over the indicator catalog issues two requests per series at once.
DEFAULT_POOL_SIZE = 20


def _ensure_trailing_slash(value: str) -> str:
    """Normalize base URLs so ``urljoin`` appends instead of replacing."""
    return value if value.endswith("/") else f"{value}/"


def _error_message(response: requests.Response) -> str:
    """Extract the most useful error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        # The proxy wraps transport failures as {"error": ...}; FRED itself
        # reports {"error_code": ..., "error_message": ...}.
        for key in ("error_message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason or f"HTTP {response.status_code}"


@define(slots=True)
class FredHttpClient:
    """Thin HTTP wrapper around the FRED observations endpoint.

    ``base_url`` may point at the real FRED host or at any proxy that forwards
    ``{base}series/observations`` verbatim. When a proxy injects credentials,
    leave ``api_key`` unset and it is omitted from the query string.
    """

    base_url: str = field(default=BASE_URL, converter=_ensure_trailing_slash)
    api_key: str | None = field(default=None, repr=False)
    timeout: float = 30.0
    pool_size: int = DEFAULT_POOL_SIZE
    session: requests.Session = field(factory=requests.Session)
    headers: dict[str, str] = field(
        factory=lambda: {
            "User-Agent": "fred-dash/0.1",
            "Accept": "application/json",
        },
    )

    def __attrs_post_init__(self) -> None:
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=self.pool_size)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def build_params(self, series_id: str, start_date: date, end_date: date) -> dict[str, str]:
        """Return the query parameters for an observations request."""
        params = {
            "series_id": series_id,
            "file_type": "json",
            "observation_start": format_date_for_api(start_date),
            "observation_end": format_date_for_api(end_date),
        }
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    def fetch_series(
        self,
        series_id: str,
        start_date: date,
        end_date: date,
    ) -> list[RawObservation]:
        """Fetch raw observations for ``series_id`` within an inclusive date range."""
        if start_date > end_date:
            raise ValueError(
                f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}."
            )
        url = urljoin(self.base_url, OBSERVATIONS_PATH)
        log = logger.bind(
            series_id=series_id,
            url=url,
            start=format_date_for_api(start_date),
            end=format_date_for_api(end_date),
        )
        log.debug("http.fetch_start", timeout=self.timeout)
        try:
            response = self.session.get(
                url,
                params=self.build_params(series_id, start_date, end_date),
                timeout=self.timeout,
                headers=self.headers,
            )
        except requests.RequestException as exc:
            log.error("http.fetch_failed", status=None, exc_info=True)
            raise FetchError(str(exc) or type(exc).__name__, series_id=series_id) from exc
        if not response.ok:
            message = _error_message(response)
            log.error("http.fetch_failed", status=response.status_code, message=message)
            raise FetchError(message, status=response.status_code, series_id=series_id)

        payload = self._decode(response, series_id)
        observations = parse_observations_payload(payload)
        log.debug("http.fetch_success", bytes=len(response.content), count=len(observations))
        return observations

    def _decode(self, response: requests.Response, series_id: str) -> Any:
        """Decode a JSON body, mapping decoder failures to :class:`ParseError`."""
        try:
            return response.json()
        except ValueError as exc:
            logger.error("http.decode_failed", series_id=series_id)
            raise ParseError(f"Response for {series_id} was not valid JSON.") from exc

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
        logger.debug("http.session_closed")


__all__ = ["FredHttpClient"]
