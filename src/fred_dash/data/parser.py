"""Parsers for FRED ``series/observations`` payloads."""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

import marshmallow as ma

from ..dates import parse_local_date
from ..errors import ParseError
from .models import Observation, ObservationsResponseSchema, RawObservation

_RESPONSE_SCHEMA = ObservationsResponseSchema()
# Plain decimals only; float() would also take "inf", "nan" and "1_000".
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_observations_payload(payload: Mapping[str, Any]) -> list[RawObservation]:
    """Validate a decoded JSON response and return its raw observations."""
    if not isinstance(payload, Mapping):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}.")
    try:
        data = _RESPONSE_SCHEMA.load(payload)
    except ma.ValidationError as exc:
        raise ParseError(f"Malformed observations payload: {exc.messages}") from exc
    return data["observations"]


def _parse_value(raw: RawObservation) -> float:
    """Convert a non-sentinel value string into a float."""
    if not _DECIMAL_PATTERN.fullmatch(raw.value.strip()):
        raise ParseError(f"Non-numeric value {raw.value!r} on {raw.date}.")
    value = float(raw.value)
    if not math.isfinite(value):
        raise ParseError(f"Value {raw.value!r} on {raw.date} is out of range.")
    return value


def clean_observations(raw: Iterable[RawObservation]) -> list[Observation]:
    """Drop missing-value sentinels and parse the rest, sorted ascending by date."""
    cleaned = [
        Observation(date=parse_local_date(obs.date), value=_parse_value(obs))
        for obs in raw
        if not obs.is_missing()
    ]
    cleaned.sort(key=lambda obs: obs.date)
    return cleaned


__all__ = ["clean_observations", "parse_observations_payload"]
