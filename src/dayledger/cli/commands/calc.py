"""Live totals without saving."""

import click
from dayledger.cli.context import build_aggregator
from dayledger.cli.entries import parse_item_options
from dayledger.cli.formatting import print_totals
from dayledger.utils.amount_parser import coerce_amount


@click.command("calc")
@click.option("--sales", default="", help="Total sales for the day")
@click.option("--item", "entries", multiple=True, callback=parse_item_options, help="Item amount as NAME=AMOUNT (repeatable)")
@click.pass_context
def calc(ctx, sales: str, entries):
    """Show the totals the form would display, without saving."""
    aggregator = build_aggregator(ctx)
    totals = aggregator.aggregate(sales, entries)
    print_totals(coerce_amount(sales), totals)


def register_commands(cli):
    """Register calc command with main CLI."""
    cli.add_command(calc)
