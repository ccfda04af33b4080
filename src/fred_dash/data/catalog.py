"""Static FRED series catalog and window constants."""

from .models import SeriesConfig

BASE_URL = "https://api.stlouisfed.org/fred/"
OBSERVATIONS_PATH = "series/observations"

# Extra days fetched ahead of the lookback so weekends and holidays never
# starve the oldest chart window.
FETCH_BUFFER_DAYS = 30
PRIOR_YEAR_WINDOW_DAYS = 14
# Monthly series publish on the first of the month; two weeks can miss them.
INDICATOR_PRIOR_YEAR_WINDOW_DAYS = 45
LATEST_DATE_LOOKBACK_DAYS = 30

EXCHANGE_RATE_LOOKBACK_DAYS = 150
INDICATOR_LOOKBACK_DAYS = 365

EXCHANGE_RATE_WINDOWS = (14, 30, 60, 90, 120)
INDICATOR_WINDOWS = (90, 180)

CAD_USD = SeriesConfig(
    series_id="DEXCAUS",
    name="CAD - USD Exchange Rates",
    short_name="CAD-USD",
    description="Canadian dollars to one U.S. dollar, noon buying rates in New York.",
    unit="CAD per USD",
    decimals=4,
    source_name="Exchange Rates.org",
    source_url="https://exchange-rates.org",
)

EUR_USD = SeriesConfig(
    series_id="DEXUSEU",
    name="EUR - USD Exchange Rate",
    short_name="EUR-USD",
    description="U.S. dollars to one euro, noon buying rates in New York.",
    unit="USD per EUR",
    decimals=4,
    source_name="European Central Bank (ECB)",
    source_url=(
        "https://data.ecb.europa.eu/main-figures/"
        "ecb-interest-rates-and-exchange-rates/exchange-rates"
    ),
)

EXCHANGE_RATE_SERIES = (CAD_USD, EUR_USD)

# Order matters: cards are rendered in catalog order.
RV_INDICATORS = (
    SeriesConfig(
        series_id="UMCSENT",
        name="Consumer Sentiment",
        short_name="Sentiment",
        description="University of Michigan survey of consumer confidence.",
        unit="Index 1966:Q1=100",
        decimals=1,
        percent_decimals=1,
        source_name="University of Michigan",
    ),
    SeriesConfig(
        series_id="MORTGAGE30US",
        name="30-Year Fixed Mortgage Rate",
        short_name="Mortgage Rate",
        description="Average 30-year fixed rate; a proxy for RV loan financing costs.",
        unit="Percent",
        decimals=2,
        percent_decimals=1,
        source_name="Freddie Mac",
        invert=True,
    ),
    SeriesConfig(
        series_id="GASREGW",
        name="Regular Gasoline Price",
        short_name="Gas Price",
        description="U.S. regular all formulations retail gas price.",
        unit="USD per Gallon",
        decimals=3,
        percent_decimals=1,
        source_name="U.S. Energy Information Administration",
        invert=True,
    ),
    SeriesConfig(
        series_id="UNRATE",
        name="Unemployment Rate",
        short_name="Unemployment",
        description="Civilian unemployment rate, seasonally adjusted.",
        unit="Percent",
        decimals=1,
        percent_decimals=1,
        source_name="U.S. Bureau of Labor Statistics",
        invert=True,
    ),
    SeriesConfig(
        series_id="PSAVERT",
        name="Personal Saving Rate",
        short_name="Saving Rate",
        description="Personal saving as a share of disposable personal income.",
        unit="Percent",
        decimals=1,
        percent_decimals=1,
        source_name="U.S. Bureau of Economic Analysis",
    ),
    SeriesConfig(
        series_id="DPRIME",
        name="Bank Prime Loan Rate",
        short_name="Prime Rate",
        description="Base rate banks use to price short-term consumer loans.",
        unit="Percent",
        decimals=2,
        percent_decimals=1,
        source_name="Board of Governors of the Federal Reserve System",
        invert=True,
    ),
    SeriesConfig(
        series_id="DSPIC96",
        name="Real Disposable Personal Income",
        short_name="Disposable Income",
        description="Income after taxes, adjusted for inflation.",
        unit="Billions of Chained 2017 Dollars",
        decimals=1,
        percent_decimals=1,
        source_name="U.S. Bureau of Economic Analysis",
    ),
)


def find_series(series_id: str) -> SeriesConfig | None:
    """Return the catalog entry for ``series_id`` if one exists."""
    key = series_id.strip().upper()
    for config in (*EXCHANGE_RATE_SERIES, *RV_INDICATORS):
        if config.series_id == key:
            return config
    return None


def prior_year_window_for(series_id: str) -> int:
    """Days searched before the one-year-prior date when looking up ``series_id``."""
    key = series_id.strip().upper()
    if any(config.series_id == key for config in RV_INDICATORS):
        return INDICATOR_PRIOR_YEAR_WINDOW_DAYS
    return PRIOR_YEAR_WINDOW_DAYS


__all__ = [
    "BASE_URL",
    "CAD_USD",
    "EUR_USD",
    "EXCHANGE_RATE_LOOKBACK_DAYS",
    "EXCHANGE_RATE_SERIES",
    "EXCHANGE_RATE_WINDOWS",
    "FETCH_BUFFER_DAYS",
    "INDICATOR_LOOKBACK_DAYS",
    "INDICATOR_PRIOR_YEAR_WINDOW_DAYS",
    "INDICATOR_WINDOWS",
    "LATEST_DATE_LOOKBACK_DAYS",
    "OBSERVATIONS_PATH",
    "PRIOR_YEAR_WINDOW_DAYS",
    "RV_INDICATORS",
    "find_series",
    "prior_year_window_for",
]
