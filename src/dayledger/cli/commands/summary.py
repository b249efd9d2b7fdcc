"""Period summary commands."""

from datetime import date, timedelta
from decimal import Decimal

import click
from dayledger.cli.context import build_summary_service
from dayledger.cli.date_filters import resolve_cli_date_range
from dayledger.cli.error_handling import handle_domain_error
from dayledger.cli.formatting import format_amount, print_summary
from dayledger.domain.errors import DomainError
from dayledger.domain.summary import average_sales, detect_sales_drop
from dayledger.utils.date_parser import last_n_days


@click.command("summary")
@click.option("--month", help="Calendar month as YYYY-MM")
@click.option("--start-date", help="Start date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--this-month", is_flag=True, help="Current month (default)")
@click.option("--last-month", is_flag=True, help="Previous month")
@click.option("--last-7-days", "last_7_days", is_flag=True, help="Last 7 days including today")
@click.option("--last-30-days", "last_30_days", is_flag=True, help="Last 30 days including today")
@click.pass_context
def summary(
    ctx,
    month: str,
    start_date: str,
    end_date: str,
    this_month: bool,
    last_month: bool,
    last_7_days: bool,
    last_30_days: bool,
):
    """Show totals for a period, rebuilt from each day's items."""
    start, end = resolve_cli_date_range(
        ctx,
        month=month,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "last-7-days": last_7_days,
            "last-30-days": last_30_days,
        },
    )
    service = build_summary_service(ctx)
    try:
        records = service.records_between(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Summary {start.isoformat()} to {end.isoformat()}")
    print_summary(service.aggregate_period(records))
    average = average_sales(records)
    if average.day_count:
        click.echo(f"  {'Average daily sales':<20} {format_amount(average.average):>14}")


@click.command("trend")
@click.option("--threshold", type=float, default=0.2, help="Drop that triggers a warning (default: 0.2)")
@click.pass_context
def trend(ctx, threshold: float):
    """Compare average sales of the last 7 days with the 7 days before."""
    today = date.today()
    recent_start, recent_end = last_n_days(7, today)
    previous_start, previous_end = last_n_days(7, recent_start - timedelta(days=1))

    service = build_summary_service(ctx)
    try:
        recent = service.records_between(recent_start, recent_end)
        previous = service.records_between(previous_start, previous_end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Last 7 days average:     {format_amount(average_sales(recent).average)}")
    click.echo(f"Previous 7 days average: {format_amount(average_sales(previous).average)}")
    drop = detect_sales_drop(recent, previous, threshold=Decimal(str(threshold)))
    if drop is not None:
        click.echo(f"Warning: sales dropped {drop * 100:.0f}% compared to the previous 7 days")
    else:
        click.echo("No significant drop in sales.")


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary)
    cli.add_command(trend)
