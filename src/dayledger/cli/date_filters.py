"""CLI helpers for date range resolution."""

from datetime import date

import click

from dayledger.utils.date_parser import get_date_range, month_range, parse_date, parse_month


def resolve_cli_date_range(
    ctx,
    *,
    month: str | None,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_period: str = "this-month",
) -> tuple[date, date]:
    """Resolve a reporting range from --month, period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)
    explicit = bool(start_date or end_date)

    if period_count + bool(month) + explicit > 1:
        click.echo(
            "Error: Use only one of --month, a period flag (--this-month, --last-month, "
            "--last-7-days, --last-30-days) or --start-date/--end-date.",
            err=True,
        )
        ctx.exit(1)

    if month:
        try:
            return month_range(*parse_month(month))
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    for period, is_set in period_flags.items():
        if is_set:
            return get_date_range(period)

    if not explicit:
        return get_date_range(default_period)

    if not (start_date and end_date):
        click.echo("Error: --start-date and --end-date must be given together.", err=True)
        ctx.exit(1)

    try:
        start = parse_date(start_date)
    except ValueError as e:
        click.echo(f"Error: Invalid start date: {e}", err=True)
        ctx.exit(1)
    try:
        end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid end date: {e}", err=True)
        ctx.exit(1)

    if start > end:
        click.echo("Error: --start-date must not be after --end-date.", err=True)
        ctx.exit(1)
    return start, end
