"""CLI helpers for date range resolution."""

from datetime import date

import click

from zenledger.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(command):
    """Attach --start-date/--end-date and one flag per named period."""
    for period in reversed(PERIODS):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(command)
    command = click.option("--end-date", help="End date (inclusive)")(command)
    command = click.option("--start-date", help="Start date (inclusive)")(command)
    return command


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove period flags from click kwargs, keyed by period name."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIODS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    chosen = [period for period, is_set in period_flags.items() if is_set]
    flags = ", ".join(f"--{period}" for period in PERIODS)

    if len(chosen) > 1:
        click.echo(
            f"Error: Only one period option ({flags}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if chosen and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if chosen:
        return get_date_range(chosen[0])

    start = None
    end = None
    for label, raw in (("start", start_date), ("end", end_date)):
        if not raw:
            continue
        try:
            parsed = parse_date(raw)
        except ValueError as e:
            click.echo(f"Error: Invalid {label} date: {e}", err=True)
            ctx.exit(1)
        if label == "start":
            start = parsed
        else:
            end = parsed

    if start and end and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end
