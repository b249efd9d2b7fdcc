"""Period summaries and reports over stored daily records."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from dayledger.database.base import Database
from dayledger.domain.aggregation import BucketTotals, DailyAggregator
from dayledger.domain.entities import (
    ZERO,
    AverageSales,
    DailyInventoryRecord,
    DailyPoint,
    MonthlyDayRow,
    MonthlyReport,
    PeriodSummary,
)
from dayledger.utils.amount_parser import coerce_amount
from dayledger.utils.date_parser import month_range


class SummaryService:
    """Service for building period summaries.

    Stored total columns are ignored: every figure is rebuilt from each
    record's line entries using the current category registry. Changing
    an item's category therefore changes past reports too.
    """

    def __init__(self, db: Database, aggregator: DailyAggregator):
        """Initialize summary service.

        Args:
            db: Database instance holding the daily records
            aggregator: Aggregator bound to the current category registry
        """
        self.db = db
        self.aggregator = aggregator

    def aggregate_period(self, records: Sequence[DailyInventoryRecord]) -> PeriodSummary:
        """Sum buckets and sales over ``records``, then derive net figures.

        An empty sequence gives an all-zero summary.
        """
        buckets = BucketTotals()
        total_sales = ZERO
        for record in records:
            buckets.merge(self.aggregator.bucket_totals(record.line_entries))
            total_sales += coerce_amount(record.total_sales)
        return buckets.derive_period(total_sales, day_count=len(records))

    def records_between(self, start_date: date, end_date: date) -> list[DailyInventoryRecord]:
        """Load stored records between two dates, inclusive."""
        return self.db.list_daily_records(start_date=start_date, end_date=end_date)

    def summarize_range(self, start_date: date, end_date: date) -> PeriodSummary:
        """Summarize records between two dates, inclusive."""
        return self.aggregate_period(self.records_between(start_date, end_date))

    def summarize_month(self, year: int, month: int) -> PeriodSummary:
        """Summarize one calendar month."""
        start, end = month_range(year, month)
        return self.summarize_range(start, end)

    def monthly_report(self, year: int, month: int) -> MonthlyReport:
        """Build the day-by-day report for a calendar month."""
        start, end = month_range(year, month)
        records = self.records_between(start, end)
        by_day = {record.inventory_date.day: record for record in records}

        rows: list[MonthlyDayRow] = []
        item_totals: dict[str, Decimal] = {}
        for day in range(1, end.day + 1):
            record = by_day.get(day)
            if record is None:
                rows.append(MonthlyDayRow(day=day))
                continue

            sales = coerce_amount(record.total_sales)
            totals = self.aggregator.bucket_totals(record.line_entries).derive(sales)
            item_amounts = {
                name: coerce_amount(amount) for name, amount in record.line_entries.items()
            }
            for name, amount in item_amounts.items():
                item_totals[name] = item_totals.get(name, ZERO) + amount

            rows.append(
                MonthlyDayRow(
                    day=day,
                    sales=sales,
                    purchases=totals.purchases,
                    expenses=totals.expenses,
                    assets=totals.assets,
                    salaries=totals.salaries,
                    net_cash=totals.net_cash,
                    net_profit=totals.net_profit,
                    item_amounts=item_amounts,
                )
            )

        return MonthlyReport(
            year=year,
            month=month,
            days=tuple(rows),
            item_totals=item_totals,
            summary=self.aggregate_period(records),
        )

    def daily_series(self, records: Sequence[DailyInventoryRecord]) -> list[DailyPoint]:
        """Return chart points ordered by date."""
        points = []
        for record in sorted(records, key=lambda r: r.inventory_date):
            sales = coerce_amount(record.total_sales)
            totals = self.aggregator.bucket_totals(record.line_entries).derive(sales)
            points.append(
                DailyPoint(
                    inventory_date=record.inventory_date,
                    sales=sales,
                    purchases=totals.purchases,
                    net_profit=totals.net_profit,
                )
            )
        return points


def average_sales(records: Sequence[DailyInventoryRecord]) -> AverageSales:
    """Mean sales per recorded day."""
    if not records:
        return AverageSales(average=ZERO, day_count=0, latest_date=None)
    total = sum((coerce_amount(r.total_sales) for r in records), ZERO)
    return AverageSales(
        average=total / len(records),
        day_count=len(records),
        latest_date=max(r.inventory_date for r in records),
    )


def detect_sales_drop(
    recent: Sequence[DailyInventoryRecord],
    previous: Sequence[DailyInventoryRecord],
    threshold: Decimal = Decimal("0.2"),
) -> Optional[Decimal]:
    """Compare mean sales of two windows.

    Returns:
        The fractional drop (e.g. Decimal("0.25")) when it reaches
        ``threshold``, otherwise None. None as well when the previous
        window has no sales to compare against.
    """
    previous_mean = average_sales(previous).average
    if previous_mean <= 0:
        return None
    recent_mean = average_sales(recent).average
    drop = (previous_mean - recent_mean) / previous_mean
    return drop if drop >= threshold else None
