"""Unit tests for the observations parser."""

from datetime import date

import pytest

from fred_dash.data.parser import clean_observations, parse_observations_payload
from fred_dash.errors import ParseError
from tests.conftest import raw


def test_parse_observations_payload():
    """Observations are extracted and unknown keys are ignored."""
    payload = {
        "units": "lin",
        "count": 2,
        "observations": [
            {"realtime_start": "2024-01-05", "date": "2024-01-02", "value": "1.31"},
            {"date": "2024-01-03", "value": "."},
        ],
    }
    observations = parse_observations_payload(payload)
    assert [(obs.date, obs.value) for obs in observations] == [
        ("2024-01-02", "1.31"),
        ("2024-01-03", "."),
    ]
    assert observations[1].is_missing()


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"observations": "nope"},
        {"observations": [{"date": "2024-01-02"}]},
        [],
    ],
)
def test_parse_observations_payload_rejects_malformed(payload):
    """Payloads without a usable observations list raise ParseError."""
    with pytest.raises(ParseError):
        parse_observations_payload(payload)


def test_clean_observations_drops_sentinels_and_sorts():
    """Missing markers are removed and the result is ascending by date."""
    cleaned = clean_observations(
        [
            raw("2024-01-03", "1.32"),
            raw("2024-01-01", "."),
            raw("2024-01-02", "1.31"),
            raw("2024-01-04", ""),
        ]
    )
    assert [(obs.date, obs.value) for obs in cleaned] == [
        (date(2024, 1, 2), 1.31),
        (date(2024, 1, 3), 1.32),
    ]


def test_clean_observations_empty():
    """An empty input yields an empty list."""
    assert clean_observations([]) == []


@pytest.mark.parametrize(
    "observation",
    [
        raw("2024-01-02", "abc"),
        raw("2024-01-02", "nan"),
        raw("2024-01-02", "inf"),
        raw("2024-01-02", "-Infinity"),
        raw("2024-01-02", "1_0"),
        raw("2024-01-02", "1e3"),
        raw("2024-01-02", "9" * 400),
        raw("01/02/2024", "1.0"),
    ],
)
def test_clean_observations_rejects_malformed(observation):
    """Non-sentinel values that are not plain finite decimals, or bad dates, raise ParseError."""
    with pytest.raises(ParseError):
        clean_observations([observation])


def test_clean_observations_accepts_plain_decimals():
    """Signed and unpadded decimals parse as floats."""
    cleaned = clean_observations(
        [
            raw("2024-01-01", "-0.5"),
            raw("2024-01-02", "+4"),
            raw("2024-01-03", ".25"),
            raw("2024-01-04", "3."),
        ]
    )
    assert [obs.value for obs in cleaned] == [-0.5, 4.0, 0.25, 3.0]
