"""Plain-text rendering of totals for the CLI."""

from decimal import Decimal

import click

from dayledger.domain.entities import DailyTotals, PeriodSummary


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def print_rows(rows: list[tuple[str, Decimal]]) -> None:
    for label, amount in rows:
        click.echo(f"  {label:<20} {format_amount(amount):>14}")


def print_totals(sales: Decimal, totals: DailyTotals) -> None:
    """Print a day's totals in the order of the form's summary cards."""
    print_rows(
        [
            ("Sales", sales),
            ("Purchases", totals.purchases),
            ("Salaries", totals.salaries),
            ("Assets", totals.assets),
            ("Damage", totals.damage),
            ("Hospitality", totals.hospitality),
            ("Employee meals", totals.employee_meals),
            ("Expenses", totals.expenses),
            ("Net cash", totals.net_cash),
            ("Net profit", totals.net_profit),
        ]
    )


def print_summary(summary: PeriodSummary) -> None:
    print_rows(
        [
            ("Sales", summary.total_sales),
            ("Purchases", summary.purchases),
            ("Salaries", summary.salaries),
            ("Assets", summary.assets),
            ("Damage", summary.damage),
            ("Hospitality", summary.hospitality),
            ("Employee meals", summary.employee_meals),
            ("Expenses", summary.expenses),
            ("Net cash", summary.net_cash),
            ("Net profit", summary.net_profit),
        ]
    )
    click.echo(f"  {'Recorded days':<20} {summary.day_count:>14}")
