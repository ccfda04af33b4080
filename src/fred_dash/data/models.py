"""Domain models for FRED series observations and derived metrics."""

from collections.abc import Sequence
from datetime import date
from typing import Any

import marshmallow as ma
from attrs import asdict as attrs_asdict, define, field

from ..dates import format_date_for_api

MISSING_VALUE = "."


def _strip(value: str) -> str:
    """Trim surrounding whitespace from a field."""
    return value.strip()


@define(slots=True, frozen=True)
class RawObservation:
    """Date/value pair exactly as published by FRED."""

    date: str = field(converter=_strip)
    value: str = field(converter=_strip)

    def is_missing(self) -> bool:
        """Return True when FRED reported no value for this date."""
        return self.value in {MISSING_VALUE, ""}


class RawObservationSchema(ma.Schema):
    """Marshmallow schema for a single upstream observation record."""

    class Meta:
        unknown = ma.EXCLUDE

    date = ma.fields.Str(required=True)
    value = ma.fields.Str(required=True)

    @ma.post_load
    def make_observation(self, data: dict[str, str], **kwargs: object) -> RawObservation:
        """Convert validated payloads into :class:`RawObservation` objects."""
        return RawObservation(**data)


class ObservationsResponseSchema(ma.Schema):
    """Envelope returned by ``series/observations``; extra keys are ignored."""

    class Meta:
        unknown = ma.EXCLUDE

    observations = ma.fields.List(ma.fields.Nested(RawObservationSchema), required=True)


@define(slots=True, frozen=True, order=True)
class Observation:
    """Cleaned observation with a calendar date and numeric value."""

    date: date
    value: float = field(converter=float)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {"date": format_date_for_api(self.date), "value": self.value}


@define(slots=True, frozen=True, kw_only=True)
class SeriesConfig:
    """Static descriptor for a tracked FRED series."""

    series_id: str = field(converter=_strip)
    name: str
    unit: str
    decimals: int = field(default=2, converter=int)
    percent_decimals: int = field(default=2, converter=int)
    short_name: str = ""
    description: str = ""
    source_name: str = "Federal Reserve Economic Data (FRED)"
    source_url: str = ""
    invert: bool = False

    @property
    def label(self) -> str:
        """Short display label, falling back to the full name."""
        return self.short_name or self.name

    @property
    def fred_url(self) -> str:
        """Link to the series page on the FRED website."""
        return self.source_url or f"https://fred.stlouisfed.org/series/{self.series_id}"


class SeriesConfigSchema(ma.Schema):
    """Marshmallow schema for :class:`SeriesConfig`."""

    series_id = ma.fields.Str(required=True)
    name = ma.fields.Str(required=True)
    unit = ma.fields.Str(required=True)
    decimals = ma.fields.Int(load_default=2)
    percent_decimals = ma.fields.Int(load_default=2)
    short_name = ma.fields.Str(load_default="")
    description = ma.fields.Str(load_default="")
    source_name = ma.fields.Str(load_default="Federal Reserve Economic Data (FRED)")
    source_url = ma.fields.Str(load_default="")
    invert = ma.fields.Bool(load_default=False)

    @ma.post_load
    def make_config(self, data: dict[str, Any], **kwargs: object) -> SeriesConfig:
        """Instantiate :class:`SeriesConfig` from validated payloads."""
        return SeriesConfig(**data)


def _observation_list(value: Sequence[Observation]) -> list[Observation]:
    """Copy observations so callers never share the list with a result."""
    return list(value)


@define(slots=True, frozen=True, kw_only=True)
class MetricResult:
    """Point-in-time comparison of a series against the prior year."""

    series_id: str = ""
    current: float
    prior_year: float
    yoy_change: float
    yoy_percent: float | None
    data_as_of: str
    observations: list[Observation] = field(factory=list, converter=_observation_list)
    current_missing: bool = False
    prior_year_missing: bool = False

    @property
    def is_complete(self) -> bool:
        """Return True when both the current and prior-year values were observed."""
        return not (self.current_missing or self.prior_year_missing)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the metric."""
        payload = attrs_asdict(self, recurse=False)
        payload["observations"] = [obs.to_dict() for obs in self.observations]
        return payload


@define(slots=True, frozen=True)
class SeriesOutcome:
    """Independent success or failure of one series in a fan-out."""

    series_id: str
    result: MetricResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when the series produced a metric."""
        return self.result is not None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the outcome."""
        return {
            "series_id": self.series_id,
            "result": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
        }


__all__ = [
    "MISSING_VALUE",
    "MetricResult",
    "Observation",
    "ObservationsResponseSchema",
    "RawObservation",
    "RawObservationSchema",
    "SeriesConfig",
    "SeriesConfigSchema",
    "SeriesOutcome",
]
