"""Top-level data module for FRED series retrieval."""

from .catalog import EXCHANGE_RATE_SERIES, RV_INDICATORS, find_series
from .client import FredHttpClient
from .models import (
    MetricResult,
    Observation,
    RawObservation,
    SeriesConfig,
    SeriesOutcome,
)
from .parser import clean_observations, parse_observations_payload

__all__ = [
    "EXCHANGE_RATE_SERIES",
    "RV_INDICATORS",
    "FredHttpClient",
    "MetricResult",
    "Observation",
    "RawObservation",
    "SeriesConfig",
    "SeriesOutcome",
    "clean_observations",
    "find_series",
    "parse_observations_payload",
]
