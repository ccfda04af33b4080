"""Command line entry point for the fred-dash application."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import click
import structlog
from attrs import evolve

from fred_dash import dates
from fred_dash.data import FredHttpClient, MetricResult, SeriesConfig, find_series
from fred_dash.data.catalog import (
    BASE_URL,
    CAD_USD,
    EXCHANGE_RATE_LOOKBACK_DAYS,
    EXCHANGE_RATE_SERIES,
    EXCHANGE_RATE_WINDOWS,
    INDICATOR_LOOKBACK_DAYS,
    INDICATOR_PRIOR_YEAR_WINDOW_DAYS,
    INDICATOR_WINDOWS,
    PRIOR_YEAR_WINDOW_DAYS,
    RV_INDICATORS,
    prior_year_window_for,
)
from fred_dash.data.pipeline import (
    fetch_many,
    fetch_metric,
    resolve_default_anchor,
    resolve_latest_date,
)
from fred_dash.errors import FredDashError, ParseError
from fred_dash.logging import bind_command_context, configure_logging
from fred_dash.output import WindowPlotConfig, generate_window_plot, render_card, render_error_card
from fred_dash.output.utils import export_filename
from fred_dash.series import chart_windows

API_KEY_HELP = "FRED API key. May also be set via FRED_DASH_API_KEY; omit when using a proxy."
BASE_URL_HELP = "FRED API base URL or proxy base. May also be set via FRED_DASH_BASE_URL."
AS_OF_HELP = "Point-in-time anchor (YYYY-MM-DD). Defaults to the latest available date."
PERMISSIVE_HELP = "Default missing current/prior-year values to 0 instead of failing the series."

LOG_FORMAT_CHOICES = ("console", "json")
LOG_LEVEL_CHOICES = ("critical", "error", "warning", "info", "debug")

logger = structlog.get_logger(__name__)


def _get_client(ctx: click.Context) -> FredHttpClient:
    """Return the HTTP client configured by the command group."""
    ctx.ensure_object(dict)
    client = ctx.obj.get("client")
    if client is None:
        raise click.UsageError("The FRED client was not configured.")
    return client


def _parse_as_of(value: str | None) -> date | None:
    """Validate the ``--as-of`` option."""
    if value is None:
        return None
    try:
        parsed = dates.parse_local_date(value)
    except ParseError as exc:
        raise click.BadParameter(str(exc), param_hint="--as-of") from exc
    if parsed > dates.today():
        raise click.BadParameter("The anchor date cannot be in the future.", param_hint="--as-of")
    return parsed


def _resolve_anchor(client: FredHttpClient, as_of: str | None, series_id: str) -> date:
    """Use the explicit anchor or the latest date the source has published."""
    parsed = _parse_as_of(as_of)
    if parsed is not None:
        return parsed
    return resolve_default_anchor(client, series_id)


def _window_payload(windows: dict[int, list]) -> dict[str, list[dict[str, object]]]:
    """Serialize chart windows keyed by day count."""
    return {
        str(days): [obs.to_dict() for obs in observations]
        for days, observations in windows.items()
    }


def _render_plot(
    plot_dir: Path,
    config: SeriesConfig,
    result: MetricResult,
    windows: dict[int, list],
) -> Path:
    """Write the chart grid for one series and return its path."""
    report = generate_window_plot(
        windows,
        output_dir=plot_dir,
        filename=export_filename(config.name, result.data_as_of),
        config=WindowPlotConfig(
            title=f"{config.name} (as of {result.data_as_of})",
            ylabel=config.unit,
            decimals=config.decimals,
        ),
    )
    logger.debug("plot.written", series_id=config.series_id, output=str(report.path))
    return report.path


def _run_dashboard(
    client: FredHttpClient,
    configs: Sequence[SeriesConfig],
    *,
    anchor: date,
    lookback_days: int,
    windows: Sequence[int],
    prior_year_window_days: int,
    strict: bool,
    as_json: bool,
    plot_dir: Path | None,
) -> None:
    """Fetch every series, then print cards (or JSON) and optional plots."""
    outcomes = asyncio.run(
        fetch_many(
            client,
            configs,
            lookback_days=lookback_days,
            anchor=anchor,
            prior_year_window_days=prior_year_window_days,
            strict=strict,
        )
    )
    payload: list[dict[str, object]] = []
    cards: list[str] = []
    for config in configs:
        outcome = outcomes[config.series_id]
        entry = outcome.to_dict()
        if outcome.result is None:
            cards.append(render_error_card(config, outcome.error or "Failed to fetch data"))
            payload.append(entry)
            continue
        series_windows = chart_windows(outcome.result.observations, windows, anchor)
        entry["windows"] = _window_payload(series_windows)
        if plot_dir is not None:
            entry["plot"] = str(_render_plot(plot_dir, config, outcome.result, series_windows))
        cards.append(render_card(config, outcome.result, series_windows))
        payload.append(entry)

    if as_json:
        click.echo(
            json.dumps(
                {"anchor": dates.format_date_for_api(anchor), "series": payload},
                indent=2,
            )
        )
    else:
        click.echo(f"Point in time: {dates.format_display_date(anchor)}\n")
        click.echo("\n\n".join(cards))

    if not any(outcome.ok for outcome in outcomes.values()):
        raise click.ClickException("No series could be loaded.")


@click.group()
@click.option(
    "--api-key",
    envvar=["FRED_DASH_API_KEY", "FRED_API_KEY"],
    default=None,
    help=API_KEY_HELP,
)
@click.option(
    "--base-url",
    envvar="FRED_DASH_BASE_URL",
    default=BASE_URL,
    show_default=True,
    help=BASE_URL_HELP,
)
@click.option(
    "--timeout",
    type=float,
    envvar="FRED_DASH_TIMEOUT",
    default=30.0,
    show_default=True,
    help="HTTP timeout in seconds.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="FRED_DASH_LOG_LEVEL",
    default="warning",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="FRED_DASH_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    api_key: str | None,
    base_url: str,
    timeout: float,
    log_level: str,
    log_format: str,
) -> None:
    """Point-in-time FRED metrics for exchange rates and RV industry indicators."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    ctx.ensure_object(dict)
    if ctx.obj.get("client") is None:
        client = FredHttpClient(base_url=base_url, api_key=api_key, timeout=timeout)
        ctx.obj["client"] = client
        ctx.call_on_close(client.close)
    logger.bind(command_group="fred-dash").debug(
        "cli.initialized",
        api_key=bool(api_key),
        base_url=base_url,
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("latest-date")
@click.option(
    "--series",
    "series_id",
    default=CAD_USD.series_id,
    show_default=True,
    help="Series checked for the most recent published observation.",
)
@click.option(
    "--fallback/--no-fallback",
    default=True,
    show_default=True,
    help="Fall back to today's date when no recent data is available.",
)
@click.pass_context
def latest_date(ctx: click.Context, *, series_id: str, fallback: bool) -> None:
    """Print the most recent date with published data."""
    bind_command_context(command="latest-date", series_id=series_id)
    client = _get_client(ctx)
    if fallback:
        resolved = resolve_default_anchor(client, series_id)
    else:
        try:
            resolved = resolve_latest_date(client, series_id)
        except FredDashError as exc:
            raise click.ClickException(str(exc)) from exc
    click.echo(dates.format_date_for_api(resolved))


@cli.command("exchange-rates")
@click.option("--as-of", default=None, help=AS_OF_HELP)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON instead of cards.")
@click.option(
    "--plot-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write one PNG chart grid per series into this directory.",
)
@click.option("--permissive", is_flag=True, default=False, help=PERMISSIVE_HELP)
@click.pass_context
def exchange_rates(
    ctx: click.Context,
    *,
    as_of: str | None,
    as_json: bool,
    plot_dir: Path | None,
    permissive: bool,
) -> None:
    """Show CAD/USD and EUR/USD cards with 14 to 120 day windows."""
    bind_command_context(command="exchange-rates")
    client = _get_client(ctx)
    anchor = _resolve_anchor(client, as_of, CAD_USD.series_id)
    logger.info("command.start", anchor=dates.format_date_for_api(anchor))
    _run_dashboard(
        client,
        EXCHANGE_RATE_SERIES,
        anchor=anchor,
        lookback_days=EXCHANGE_RATE_LOOKBACK_DAYS,
        windows=EXCHANGE_RATE_WINDOWS,
        prior_year_window_days=PRIOR_YEAR_WINDOW_DAYS,
        strict=not permissive,
        as_json=as_json,
        plot_dir=plot_dir,
    )


@cli.command("indicators")
@click.option("--as-of", default=None, help=AS_OF_HELP)
@click.option(
    "--series",
    "series_ids",
    multiple=True,
    help="Restrict output to these RV indicator series IDs.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON instead of cards.")
@click.option(
    "--plot-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write one PNG chart grid per series into this directory.",
)
@click.option("--permissive", is_flag=True, default=False, help=PERMISSIVE_HELP)
@click.pass_context
def indicators(
    ctx: click.Context,
    *,
    as_of: str | None,
    series_ids: tuple[str, ...],
    as_json: bool,
    plot_dir: Path | None,
    permissive: bool,
) -> None:
    """Show RV industry indicator cards with 90 and 180 day windows."""
    bind_command_context(command="indicators")
    configs = list(RV_INDICATORS)
    if series_ids:
        wanted = {series_id.strip().upper() for series_id in series_ids}
        unknown = wanted - {config.series_id for config in configs}
        if unknown:
            raise click.BadParameter(
                f"Unknown indicator(s): {', '.join(sorted(unknown))}", param_hint="--series"
            )
        configs = [config for config in configs if config.series_id in wanted]
    client = _get_client(ctx)
    anchor = _resolve_anchor(client, as_of, CAD_USD.series_id)
    logger.info("command.start", anchor=dates.format_date_for_api(anchor), series=len(configs))
    _run_dashboard(
        client,
        configs,
        anchor=anchor,
        lookback_days=INDICATOR_LOOKBACK_DAYS,
        windows=INDICATOR_WINDOWS,
        prior_year_window_days=INDICATOR_PRIOR_YEAR_WINDOW_DAYS,
        strict=not permissive,
        as_json=as_json,
        plot_dir=plot_dir,
    )


@cli.command("metric")
@click.argument("series_id")
@click.option("--as-of", default=None, help=AS_OF_HELP)
@click.option(
    "--lookback-days",
    type=click.IntRange(min=1),
    default=EXCHANGE_RATE_LOOKBACK_DAYS,
    show_default=True,
    help="Days of history fetched before the anchor.",
)
@click.option(
    "--window",
    "window_days",
    type=click.IntRange(min=0),
    multiple=True,
    help="Trailing chart window in days; repeat for several. Defaults to 14/30/60/90/120.",
)
@click.option(
    "--prior-year-window-days",
    type=click.IntRange(min=0),
    default=None,
    help="Days searched before the one-year-prior date. Defaults to 45 for RV "
    "indicators and 14 otherwise.",
)
@click.option(
    "--decimals",
    type=click.IntRange(min=0, max=10),
    default=None,
    help="Display precision for series outside the catalog.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON instead of a card.")
@click.option("--permissive", is_flag=True, default=False, help=PERMISSIVE_HELP)
@click.pass_context
def metric(
    ctx: click.Context,
    *,
    series_id: str,
    as_of: str | None,
    lookback_days: int,
    window_days: tuple[int, ...],
    prior_year_window_days: int | None,
    decimals: int | None,
    as_json: bool,
    permissive: bool,
) -> None:
    """Compute the point-in-time metric for any FRED series."""
    series_id = series_id.strip().upper()
    bind_command_context(command="metric", series_id=series_id)
    config = find_series(series_id) or SeriesConfig(series_id=series_id, name=series_id, unit="value")
    if decimals is not None:
        config = evolve(config, decimals=decimals)
    windows = window_days or EXCHANGE_RATE_WINDOWS
    if prior_year_window_days is None:
        prior_year_window_days = prior_year_window_for(series_id)
    client = _get_client(ctx)
    anchor = _resolve_anchor(client, as_of, series_id)
    try:
        result = asyncio.run(
            fetch_metric(
                client,
                series_id,
                lookback_days=lookback_days,
                anchor=anchor,
                prior_year_window_days=prior_year_window_days,
                strict=not permissive,
            )
        )
    except FredDashError as exc:
        logger.error("command.failed", error=str(exc), error_type=type(exc).__name__)
        raise click.ClickException(str(exc)) from exc

    series_windows = chart_windows(result.observations, windows, anchor)
    if as_json:
        payload = result.to_dict()
        payload["windows"] = _window_payload(series_windows)
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(render_card(config, result, series_windows))


__all__ = ["cli"]
