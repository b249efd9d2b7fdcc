"""Parsing of NAME=AMOUNT item options."""

import click

from dayledger.domain.entities import LineEntry


def parse_item_options(ctx, param, values: tuple[str, ...]) -> list[LineEntry]:
    """Click callback turning repeated --item NAME=AMOUNT into line entries.

    Amounts are kept as typed; the aggregator decides what counts.
    """
    entries = []
    for value in values:
        name, sep, amount = value.rpartition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"'{value}' is not in NAME=AMOUNT form", ctx=ctx, param=param)
        entries.append(LineEntry(item_name=name.strip(), amount=amount.strip()))
    return entries
