"""Tests for period summaries and monthly reports."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest
from dayledger.domain.aggregation import DailyAggregator
from dayledger.domain.category import CategoryRegistry
from dayledger.domain.entities import (
    CategoryEntry,
    DailyInventoryRecord,
    DailyTotals,
    MainCategory,
    PeriodSummary,
)
from dayledger.domain.export import export_daily_csv, export_monthly_csv
from dayledger.domain.summary import SummaryService, average_sales, detect_sales_drop


def _record(day, sales, items, totals=None):
    kwargs = {} if totals is None else {"totals": totals}
    return DailyInventoryRecord(
        inventory_date=day,
        total_sales=Decimal(sales),
        line_entries={name: Decimal(amount) for name, amount in items.items()},
        **kwargs,
    )


@pytest.fixture
def summary_service(temp_db, sample_categories):
    return SummaryService(temp_db, DailyAggregator(CategoryRegistry.load(temp_db)))


@pytest.fixture
def march_records(temp_db):
    records = [
        _record(date(2024, 3, 1), "1000", {"Chicken": "100", "Spoiled food": "25", "Driver salary": "75", "Staff meals": "10"}),
        _record(date(2024, 3, 2), "800", {"Vegetables": "50", "Freezer": "300"}),
        _record(date(2024, 3, 15), "500", {"Guest meals": "20"}),
        _record(date(2024, 4, 1), "9999", {"Chicken": "1"}),
    ]
    for record in records:
        temp_db.upsert_daily_record(record)
    return records


def test_aggregate_period_empty(aggregator):
    service = SummaryService(db=None, aggregator=aggregator)
    assert service.aggregate_period([]) == PeriodSummary()


def test_summarize_month(summary_service, march_records):
    summary = summary_service.summarize_month(2024, 3)

    assert summary.day_count == 3
    assert summary.total_sales == Decimal("2300")
    assert summary.purchases == Decimal("525")
    assert summary.salaries == Decimal("75")
    assert summary.assets == Decimal("300")
    assert summary.damage == Decimal("25")
    assert summary.hospitality == Decimal("20")
    assert summary.employee_meals == Decimal("10")
    assert summary.expenses == Decimal("55")
    assert summary.net_cash == Decimal("1775")
    assert summary.net_profit == Decimal("1720")


def test_summarize_range_is_inclusive(summary_service, march_records):
    summary = summary_service.summarize_range(date(2024, 3, 2), date(2024, 3, 15))
    assert summary.day_count == 2
    assert summary.total_sales == Decimal("1300")


def test_summary_ignores_stored_totals(aggregator):
    """Stored total columns are never trusted, only the line entries."""
    stale = DailyTotals(purchases=Decimal("999"), expenses=Decimal("999"))
    service = SummaryService(db=None, aggregator=aggregator)

    summary = service.aggregate_period([_record(date(2024, 1, 1), "100", {"Chicken": "10"}, totals=stale)])
    assert summary.purchases == Decimal("10")
    assert summary.expenses == Decimal("0")


def test_period_net_figures_derived_from_sums(summary_service, march_records):
    summary = summary_service.summarize_month(2024, 3)
    assert summary.net_cash == summary.total_sales - summary.purchases
    assert summary.net_profit == summary.net_cash - summary.expenses


def test_reclassification_changes_past_reports(temp_db, category_service, sample_categories, march_records):
    """Reports follow the current categories, including for old days."""
    before = SummaryService(temp_db, DailyAggregator(CategoryRegistry.load(temp_db))).summarize_month(2024, 3)
    assert before.damage == Decimal("25")

    category_service.reclassify("Chicken", main_category="Expenses", sub_category="Damage")
    after = SummaryService(temp_db, DailyAggregator(CategoryRegistry.load(temp_db))).summarize_month(2024, 3)

    assert after.damage == Decimal("125")
    assert after.purchases == before.purchases - Decimal("100")
    assert after.net_profit == before.net_profit


def test_monthly_report(summary_service, march_records):
    report = summary_service.monthly_report(2024, 3)

    assert len(report.days) == 31
    assert report.days[0].sales == Decimal("1000")
    assert report.days[0].purchases == Decimal("175")
    assert report.days[0].net_profit == Decimal("790")
    # days without a record are all zero
    assert report.days[2].sales == Decimal("0")
    assert report.days[2].item_amounts == {}
    assert report.item_totals["Chicken"] == Decimal("100")
    assert report.item_names == sorted(report.item_totals)
    assert report.summary.day_count == 3


def test_monthly_report_for_empty_month(summary_service):
    report = summary_service.monthly_report(2024, 2)
    assert len(report.days) == 29
    assert report.item_totals == {}
    assert report.summary == PeriodSummary()


def test_export_monthly_csv(summary_service, march_records):
    report = summary_service.monthly_report(2024, 3)
    stream = io.StringIO()
    export_monthly_csv(report, stream)

    rows = list(csv.reader(io.StringIO(stream.getvalue())))
    assert rows[0] == ["Monthly inventory 2024-03"]
    header = rows[2]
    assert header[0] == "Item"
    assert header[1] == "1"
    assert header[-1] == "Monthly total"
    assert len(header) == 33

    # first occurrence, the summary block repeats some labels
    by_label = {}
    for row in rows:
        if row:
            by_label.setdefault(row[0], row)
    assert by_label["Chicken"][1] == "100.00"
    assert by_label["Chicken"][2] == "-"
    assert by_label["Chicken"][-1] == "100.00"
    assert by_label["Sales"][-1] == "2300.00"
    assert by_label["Net profit"][1] == "790.00"
    assert by_label["Recorded days"] == ["Recorded days", "3"]


def test_daily_series_sorted(summary_service, march_records):
    points = summary_service.daily_series(list(reversed(march_records[:3])))
    assert [p.inventory_date.day for p in points] == [1, 2, 15]
    assert points[1].purchases == Decimal("350")


def test_average_sales():
    records = [
        _record(date(2024, 3, 1), "100", {}),
        _record(date(2024, 3, 3), "300", {}),
    ]
    result = average_sales(records)
    assert result.average == Decimal("200")
    assert result.day_count == 2
    assert result.latest_date == date(2024, 3, 3)


def test_average_sales_empty():
    result = average_sales([])
    assert result.average == Decimal("0")
    assert result.latest_date is None


def test_detect_sales_drop():
    previous = [_record(date(2024, 3, d), "100", {}) for d in range(1, 8)]
    recent = [_record(date(2024, 3, d), "75", {}) for d in range(8, 15)]

    assert detect_sales_drop(recent, previous) == Decimal("0.25")
    assert detect_sales_drop(recent, previous, threshold=Decimal("0.3")) is None


def test_detect_sales_drop_without_previous_sales():
    recent = [_record(date(2024, 3, 8), "75", {})]
    assert detect_sales_drop(recent, []) is None


def test_period_rederivation_after_reclassification():
    """Two days of one item move wholesale from purchases to damage."""
    registry = CategoryRegistry([CategoryEntry("A", MainCategory.PURCHASES)])
    service = SummaryService(db=None, aggregator=DailyAggregator(registry))
    records = [
        _record(date(2024, 5, 1), "0", {"A": "10"}),
        _record(date(2024, 5, 2), "0", {"A": "20"}),
    ]

    assert service.aggregate_period(records).purchases == Decimal("30")

    registry.reload([CategoryEntry("A", MainCategory.EXPENSES, "Damage")])
    summary = service.aggregate_period(records)
    assert summary.purchases == Decimal("0")
    assert summary.damage == Decimal("30")


def test_export_daily_csv(aggregator):
    record = DailyInventoryRecord(
        inventory_date=date(2024, 3, 15),
        total_sales=Decimal("1000"),
        line_entries={
            "Chicken": Decimal("100"),
            "Spoiled food": Decimal("25"),
            "Driver salary": Decimal("75"),
            "Staff meals": Decimal("10"),
            "Freezer": Decimal("300"),
            "Mystery box": Decimal("5"),
        },
        notes="busy",
    )
    stream = io.StringIO()
    export_daily_csv(record, aggregator, stream)
    rows = list(csv.reader(io.StringIO(stream.getvalue())))

    def section(title):
        start = rows.index([title]) + 2
        end = next(i for i in range(start, len(rows)) if rows[i][0] == "Total")
        return rows[start:end], rows[end][1]

    assert rows[0] == ["Daily inventory 2024-03-15"]
    assert ["Total sales", "1000.00"] in rows

    purchases, purchases_total = section("Purchases")
    assert [row[0] for row in purchases] == ["Chicken", "Driver salary", "Freezer", "Mystery box"]
    assert purchases_total == "480.00"

    expenses, expenses_total = section("Expenses")
    assert expenses == [["Spoiled food", "25.00"], ["Staff meals", "10.00"]]
    assert expenses_total == "35.00"
    assert ["Damage", "25.00"] in rows
    assert ["Employee meals", "10.00"] in rows

    assets, assets_total = section("Assets")
    assert assets == [["Freezer", "300.00"]]
    assert assets_total == "300.00"

    assert ["Salaries", "75.00"] in rows
    assert ["Net cash", "520.00"] in rows
    assert ["Net profit", "485.00"] in rows
    assert rows[-2:] == [["Notes"], ["busy"]]


def test_export_daily_csv_without_notes(aggregator):
    record = DailyInventoryRecord(inventory_date=date(2024, 3, 15), total_sales=Decimal("50"))
    stream = io.StringIO()
    export_daily_csv(record, aggregator, stream)
    rows = list(csv.reader(io.StringIO(stream.getvalue())))

    assert ["Net profit", "50.00"] in rows
    assert ["Notes"] not in rows
