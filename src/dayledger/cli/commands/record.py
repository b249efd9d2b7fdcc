"""Daily record commands."""

import asyncio
from datetime import date

import click
from dayledger.cli.context import build_coordinator
from dayledger.cli.entries import parse_item_options
from dayledger.cli.error_handling import handle_domain_error
from dayledger.cli.formatting import format_amount, print_totals
from dayledger.domain.entities import SyncState
from dayledger.domain.errors import DomainError, record_not_found
from dayledger.utils.date_parser import parse_date


def _parse_date_argument(ctx, param, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


@click.group()
def record_group():
    """Save, show and delete daily records."""
    pass


@record_group.command("save")
@click.argument("inventory_date", callback=_parse_date_argument)
@click.option("--sales", default="", help="Total sales for the day")
@click.option("--item", "entries", multiple=True, callback=parse_item_options, help="Item amount as NAME=AMOUNT (repeatable)")
@click.option("--notes", default="", help="Free-form notes")
@click.option("--user", "created_by", help="User saving the record")
@click.option("--offline", is_flag=True, help="Save locally only; sync later with 'sync'")
@click.pass_context
def save_record(ctx, inventory_date: date, sales: str, entries, notes: str, created_by: str, offline: bool):
    """Save a day's sales and item amounts."""
    coordinator = build_coordinator(ctx, online=not offline)

    async def run():
        try:
            return await coordinator.save_entries(
                inventory_date, sales, entries, notes=notes, created_by=created_by
            )
        finally:
            await coordinator.close()

    try:
        record = asyncio.run(run())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Saved {record.inventory_date.isoformat()}")
    print_totals(record.total_sales, record.totals)
    if record.sync_state == SyncState.SYNCED:
        click.echo("Status: synced")
    else:
        click.echo("Status: saved locally, pending sync")


@record_group.command("show")
@click.argument("inventory_date", callback=_parse_date_argument)
@click.option("--offline", is_flag=True, help="Read the local cache only")
@click.pass_context
def show_record(ctx, inventory_date: date, offline: bool):
    """Show a day's record with totals under the current categories."""
    coordinator = build_coordinator(ctx, online=not offline)

    async def run():
        try:
            return await coordinator.load(inventory_date)
        finally:
            await coordinator.close()

    record = asyncio.run(run())
    if record is None:
        click.echo(record_not_found(inventory_date.isoformat()))
        return

    click.echo(f"Inventory for {record.inventory_date.isoformat()} ({record.sync_state.value})")
    if record.line_entries:
        click.echo("Items:")
        for name, amount in record.line_entries.items():
            click.echo(f"  {name:<30} {format_amount(amount):>12}")
    totals = coordinator.aggregator.aggregate_items(record.total_sales, record.line_entries)
    click.echo("Totals:")
    print_totals(record.total_sales, totals)
    if record.notes:
        click.echo(f"Notes: {record.notes}")


@record_group.command("delete")
@click.argument("inventory_date", callback=_parse_date_argument)
@click.confirmation_option(prompt="Delete this day's record?")
@click.pass_context
def delete_record(ctx, inventory_date: date):
    """Delete a day's record remotely and locally."""
    coordinator = build_coordinator(ctx)

    async def run():
        try:
            return await coordinator.delete(inventory_date)
        finally:
            await coordinator.close()

    try:
        removed = asyncio.run(run())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if removed:
        click.echo(f"Deleted record for {inventory_date.isoformat()}")
    else:
        click.echo(record_not_found(inventory_date.isoformat()))


@record_group.command("list")
@click.option("--limit", type=int, default=30, help="Number of days to show (default: 30)")
@click.pass_context
def list_records(ctx, limit: int):
    """List the latest records, newest first."""
    coordinator = build_coordinator(ctx)

    async def run():
        try:
            return await coordinator.history(limit=limit)
        finally:
            await coordinator.close()

    try:
        records = asyncio.run(run())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if not records:
        click.echo("No records found.")
        return

    header = ("Date", "Sales", "Purchases", "Expenses", "Assets", "Salaries", "Net cash", "Net profit")
    click.echo("".join(f"{h:>12}" for h in header))
    for record in records:
        totals = coordinator.aggregator.aggregate_items(record.total_sales, record.line_entries)
        values = (
            record.total_sales,
            totals.purchases,
            totals.expenses,
            totals.assets,
            totals.salaries,
            totals.net_cash,
            totals.net_profit,
        )
        click.echo(
            f"{record.inventory_date.isoformat():>12}"
            + "".join(f"{format_amount(v):>12}" for v in values)
        )


def register_commands(cli):
    """Register record commands with main CLI."""
    cli.add_command(record_group, name="record")
