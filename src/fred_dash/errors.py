"""Exception hierarchy for FRED fetch, parse, and derivation failures."""

from __future__ import annotations


class FredDashError(Exception):
    """Base class for all errors raised by fred-dash."""


class FetchError(FredDashError):
    """Transport failure or non-success status from the FRED endpoint."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        series_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.series_id = series_id

    def __str__(self) -> str:
        prefix = f"FRED API error ({self.status})" if self.status else "FRED API error"
        return f"{prefix}: {self.message}"


class NoDataError(FredDashError):
    """A fetch succeeded but left no usable observations after filtering."""

    def __init__(self, message: str = "No data available", *, series_id: str | None = None):
        super().__init__(message)
        self.series_id = series_id


class ParseError(FredDashError, ValueError):
    """Malformed date or numeric value in a non-sentinel observation."""


__all__ = ["FredDashError", "FetchError", "NoDataError", "ParseError"]
