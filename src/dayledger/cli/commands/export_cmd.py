"""CSV export command for a single day or a whole month."""

import asyncio
from typing import Optional

import click
from dayledger.cli.context import build_coordinator, build_summary_service
from dayledger.cli.error_handling import handle_domain_error
from dayledger.domain.errors import DomainError, NotFoundError, record_not_found
from dayledger.domain.export import export_daily_csv, export_monthly_csv
from dayledger.utils.date_parser import parse_date, parse_month


def _write_csv(output: str, write) -> None:
    # utf-8-sig so spreadsheet apps pick up the encoding of item names
    with open(output, "w", newline="", encoding="utf-8-sig") as f:
        write(f)


def _export_day(ctx, day: str, output: Optional[str]) -> None:
    try:
        inventory_date = parse_date(day)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    coordinator = build_coordinator(ctx)

    async def run():
        try:
            return await coordinator.load(inventory_date)
        finally:
            await coordinator.close()

    record = asyncio.run(run())
    if record is None:
        handle_domain_error(ctx, NotFoundError(record_not_found(inventory_date)))
        return

    if output is None:
        output = f"inventory_{inventory_date.isoformat()}.csv"
    _write_csv(output, lambda f: export_daily_csv(record, coordinator.aggregator, f))
    click.echo(f"Exported {inventory_date.isoformat()} to {output}")


def _export_month(ctx, month: str, output: Optional[str]) -> None:
    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    service = build_summary_service(ctx)
    try:
        report = service.monthly_report(year, month_number)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if output is None:
        output = f"monthly_inventory_{year:04d}-{month_number:02d}.csv"
    _write_csv(output, lambda f: export_monthly_csv(report, f))
    click.echo(f"Exported {report.summary.day_count} day(s) to {output}")


@click.command("export")
@click.option("--month", help="Calendar month as YYYY-MM")
@click.option("--date", "day", help="Single day (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--output", type=click.Path(dir_okay=False, writable=True), help="Output file (default: inventory_DATE.csv or monthly_inventory_YYYY-MM.csv)")
@click.pass_context
def export(ctx, month: Optional[str], day: Optional[str], output: Optional[str]):
    """Export a day or a month of records as CSV."""
    if (month is None) == (day is None):
        click.echo("Error: Use exactly one of --month or --date", err=True)
        ctx.exit(1)
        return

    if day is not None:
        _export_day(ctx, day, output)
    else:
        _export_month(ctx, month, output)


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export)
