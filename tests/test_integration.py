"""Integration tests for end-to-end CLI workflows."""

import csv
from datetime import date, timedelta
from decimal import Decimal

import pytest
from dayledger.cli.main import cli
from dayledger.domain.entities import DailyInventoryRecord

DAY_ITEMS = [
    "--item", "Chicken=100",
    "--item", "Spoiled food=25",
    "--item", "Driver salary=75",
    "--item", "Staff meals=10",
]


@pytest.fixture
def run(cli_runner, temp_db, tmp_path):
    """Invoke the CLI against the temporary database and cache directory."""
    cache_dir = str(tmp_path / "cache")

    def invoke(*args, **kwargs):
        return cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--cache-dir", cache_dir, *args], **kwargs
        )

    return invoke


@pytest.fixture
def initialized(run):
    result = run("init-categories")
    assert result.exit_code == 0
    return run


def test_init_categories(run):
    result = run("init-categories")

    assert result.exit_code == 0
    assert "Successfully created" in result.output

    again = run("init-categories")
    assert "already exist" in again.output.lower()


def test_category_commands(initialized):
    run = initialized

    result = run("category", "list")
    assert result.exit_code == 0
    assert "Payroll" in result.output
    assert "Staff meals" in result.output

    result = run("category", "create", "Lamb", "--main", "purchases", "--sub", "Meat & Poultry")
    assert result.exit_code == 0
    assert "Created category 'Lamb'" in result.output

    result = run("category", "create", "Lamb", "--main", "Purchases")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = run("category", "update", "Chicken", "--main", "Expenses", "--sub", "Damage")
    assert result.exit_code == 0
    assert "Updated 'Chicken': Expenses > Damage" in result.output

    result = run("category", "delete", "Lamb")
    assert result.exit_code == 0
    result = run("category", "list", "--all")
    assert "Lamb [deleted]" in result.output

    result = run("category", "delete", "Nothing")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_calc(initialized):
    result = initialized("calc", "--sales", "1000", *DAY_ITEMS)

    assert result.exit_code == 0
    lines = [line.split() for line in result.output.splitlines()]
    assert ["Purchases", "175.00"] in lines
    assert ["Net", "cash", "825.00"] in lines
    assert ["Net", "profit", "790.00"] in lines


def test_calc_rejects_malformed_item(initialized):
    result = initialized("calc", "--item", "Chicken")
    assert result.exit_code == 2


def test_record_save_show_delete(initialized, temp_db):
    run = initialized

    result = run("record", "save", "2024-03-15", "--sales", "1000", *DAY_ITEMS, "--notes", "busy")
    assert result.exit_code == 0
    assert "Saved 2024-03-15" in result.output
    assert "Status: synced" in result.output
    assert temp_db.get_daily_record(date(2024, 3, 15)).total_sales == Decimal("1000")

    result = run("record", "show", "2024-03-15")
    assert result.exit_code == 0
    assert "Inventory for 2024-03-15 (synced)" in result.output
    assert "Chicken" in result.output
    assert "Notes: busy" in result.output

    result = run("record", "list")
    assert "2024-03-15" in result.output

    result = run("record", "delete", "2024-03-15", "--yes")
    assert result.exit_code == 0
    assert "Deleted record for 2024-03-15" in result.output

    result = run("record", "show", "2024-03-15")
    assert "No inventory record for 2024-03-15" in result.output


def test_offline_save_then_sync(initialized, temp_db):
    run = initialized

    result = run("record", "save", "2024-03-16", "--sales", "500", "--item", "Rice=20", "--offline")
    assert result.exit_code == 0
    assert "pending sync" in result.output
    assert temp_db.get_daily_record(date(2024, 3, 16)) is None

    result = run("record", "show", "2024-03-16", "--offline")
    assert "(pending)" in result.output

    result = run("sync")
    assert result.exit_code == 0
    assert "Synced 1 record(s)." in result.output
    assert temp_db.get_daily_record(date(2024, 3, 16)) is not None


def test_record_save_invalid_date(initialized):
    result = initialized("record", "save", "someday", "--sales", "10")
    assert result.exit_code == 2


def test_summary_and_export(initialized, tmp_path):
    run = initialized
    run("record", "save", "2024-03-01", "--sales", "1000", *DAY_ITEMS)
    run("record", "save", "2024-03-02", "--sales", "500", "--item", "Freezer=300")

    result = run("summary", "--month", "2024-03")
    assert result.exit_code == 0
    assert "Summary 2024-03-01 to 2024-03-31" in result.output
    assert "Recorded days" in result.output
    assert "750.00" in result.output  # average daily sales

    output = tmp_path / "march.csv"
    result = run("export", "--month", "2024-03", "--output", str(output))
    assert result.exit_code == 0
    assert "Exported 2 day(s)" in result.output

    with open(output, newline="", encoding="utf-8-sig") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Monthly inventory 2024-03"]
    assert ["Recorded days", "2"] in rows


def test_export_single_day(initialized, tmp_path):
    run = initialized
    run("record", "save", "2024-03-15", "--sales", "1000", *DAY_ITEMS, "--notes", "busy")

    output = tmp_path / "day.csv"
    result = run("export", "--date", "2024-03-15", "--output", str(output))
    assert result.exit_code == 0
    assert "Exported 2024-03-15" in result.output

    with open(output, newline="", encoding="utf-8-sig") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Daily inventory 2024-03-15"]
    assert ["Net profit", "790.00"] in rows
    assert ["busy"] in rows


def test_export_needs_one_period(initialized):
    result = initialized("export")
    assert result.exit_code == 1
    assert "exactly one of --month or --date" in result.output

    result = initialized("export", "--month", "2024-03", "--date", "2024-03-15")
    assert result.exit_code == 1


def test_export_missing_day(initialized):
    result = initialized("export", "--date", "2024-03-20")
    assert result.exit_code == 1
    assert "No inventory record for 2024-03-20" in result.output


def test_category_meals_by_name(initialized, temp_db):
    run = initialized
    result = run("category", "update", "Staff meals", "--not-meals")
    assert result.exit_code == 0
    assert temp_db.get_category_by_item("Staff meals").is_meals_line is False

    result = run("category", "update", "Staff meals", "--meals-by-name")
    assert result.exit_code == 0
    assert temp_db.get_category_by_item("Staff meals").is_meals_line is None

    result = run("category", "update", "Staff meals", "--meals", "--meals-by-name")
    assert result.exit_code == 1


def test_summary_rejects_conflicting_options(initialized):
    result = initialized("summary", "--month", "2024-03", "--last-month")
    assert result.exit_code == 1
    assert "Use only one of" in result.output


def test_trend_warns_on_drop(initialized, temp_db):
    today = date.today()
    for offset in range(14):
        sales = "50" if offset < 7 else "100"
        temp_db.upsert_daily_record(
            DailyInventoryRecord(inventory_date=today - timedelta(days=offset), total_sales=Decimal(sales))
        )

    result = initialized("trend")

    assert result.exit_code == 0
    assert "sales dropped 50%" in result.output


def test_invalid_environment_setting(run):
    result = run("calc", env={"DAYLEDGER_SYNC_INTERVAL": "soon"})
    assert result.exit_code == 2
    assert "DAYLEDGER_SYNC_INTERVAL" in result.output


def test_help_does_not_touch_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "record" in result.output
