"""CSV export of daily records and monthly inventory reports."""

import csv
from decimal import Decimal
from typing import TextIO

from dayledger.domain.aggregation import DailyAggregator
from dayledger.domain.classification import classify
from dayledger.domain.entities import Bucket, DailyInventoryRecord, MonthlyReport

EXPENSE_BUCKETS = frozenset({Bucket.DAMAGE, Bucket.HOSPITALITY, Bucket.EMPLOYEE_MEALS})


def _cell(amount: Decimal) -> str:
    return f"{amount:.2f}" if amount != 0 else "-"


def export_monthly_csv(report: MonthlyReport, stream: TextIO) -> None:
    """Write a monthly report as CSV.

    Layout: one row per item with a column per day and a monthly total,
    then the derived rows (sales, purchases, expenses, assets, salaries,
    net cash, net profit), then the monthly summary block.
    """
    writer = csv.writer(stream)
    days = report.days
    writer.writerow([f"Monthly inventory {report.year:04d}-{report.month:02d}"])
    writer.writerow([])
    writer.writerow(["Item"] + [str(row.day) for row in days] + ["Monthly total"])

    for item in report.item_names:
        writer.writerow(
            [item]
            + [_cell(row.item_amounts.get(item, Decimal("0"))) for row in days]
            + [f"{report.item_totals[item]:.2f}"]
        )

    derived_rows = [
        ("Sales", "sales"),
        ("Purchases", "purchases"),
        ("Expenses", "expenses"),
        ("Assets", "assets"),
        ("Salaries", "salaries"),
        ("Net cash", "net_cash"),
        ("Net profit", "net_profit"),
    ]
    for label, attr in derived_rows:
        values = [getattr(row, attr) for row in days]
        writer.writerow(
            [label] + [_cell(value) for value in values] + [f"{sum(values, Decimal('0')):.2f}"]
        )

    summary = report.summary
    writer.writerow([])
    writer.writerow(["Monthly summary"])
    writer.writerow(["Total sales", f"{summary.total_sales:.2f}"])
    writer.writerow(["Total purchases", f"{summary.purchases:.2f}"])
    writer.writerow(["Total expenses", f"{summary.expenses:.2f}"])
    writer.writerow(["Total assets", f"{summary.assets:.2f}"])
    writer.writerow(["Total salaries", f"{summary.salaries:.2f}"])
    writer.writerow(["Net cash", f"{summary.net_cash:.2f}"])
    writer.writerow(["Net profit", f"{summary.net_profit:.2f}"])
    writer.writerow(["Recorded days", str(summary.day_count)])


def export_daily_csv(record: DailyInventoryRecord, aggregator: DailyAggregator, stream: TextIO) -> None:
    """Write one day's record as CSV, in sections.

    Items are listed under every section whose bucket they feed, so an
    asset shows up under both purchases and assets. Totals are computed
    with the current categories.
    """
    purchases, expenses, assets = [], [], []
    for item_name in sorted(record.line_entries):
        amount = record.line_entries[item_name]
        if amount <= 0:
            continue
        buckets = classify(item_name, amount, aggregator.registry, aggregator.meals_token).buckets
        row = [item_name, f"{amount:.2f}"]
        if Bucket.PURCHASES in buckets:
            purchases.append(row)
        if buckets & EXPENSE_BUCKETS:
            expenses.append(row)
        if Bucket.ASSETS in buckets:
            assets.append(row)

    totals = aggregator.aggregate_items(record.total_sales, record.line_entries)
    writer = csv.writer(stream)
    writer.writerow([f"Daily inventory {record.inventory_date.isoformat()}"])
    writer.writerow([])

    writer.writerow(["Sales"])
    writer.writerow(["Total sales", f"{record.total_sales:.2f}"])
    writer.writerow([])

    sections = [
        ("Purchases", purchases, totals.purchases),
        ("Expenses", expenses, totals.expenses),
        ("Assets", assets, totals.assets),
    ]
    for title, rows, total in sections:
        writer.writerow([title])
        writer.writerow(["Item", "Amount"])
        writer.writerows(rows)
        writer.writerow(["Total", f"{total:.2f}"])
        if title == "Expenses":
            writer.writerow(["Damage", f"{totals.damage:.2f}"])
            writer.writerow(["Hospitality", f"{totals.hospitality:.2f}"])
            writer.writerow(["Employee meals", f"{totals.employee_meals:.2f}"])
        writer.writerow([])

    writer.writerow(["Financial summary"])
    writer.writerow(["Salaries", f"{totals.salaries:.2f}"])
    writer.writerow(["Net cash", f"{totals.net_cash:.2f}"])
    writer.writerow(["Net profit", f"{totals.net_profit:.2f}"])

    if record.notes:
        writer.writerow([])
        writer.writerow(["Notes"])
        writer.writerow([record.notes])
