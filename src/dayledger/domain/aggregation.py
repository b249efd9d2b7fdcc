"""Daily aggregation of line entries into totals."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping

from dayledger.domain.category import CategoryRegistry
from dayledger.domain.classification import DEFAULT_MEALS_TOKEN, classify
from dayledger.domain.entities import (
    ZERO,
    Bucket,
    BucketAssignment,
    DailyTotals,
    LineEntry,
    PeriodSummary,
)
from dayledger.utils.amount_parser import coerce_amount


@dataclass
class BucketTotals:
    """Running sums per bucket.

    Derived figures are computed from the summed buckets, never summed
    themselves.
    """

    sums: dict[Bucket, Decimal] = field(
        default_factory=lambda: {bucket: ZERO for bucket in Bucket}
    )

    def add(self, assignment: BucketAssignment) -> None:
        for bucket, amount in assignment.allocations:
            self.sums[bucket] += amount

    def merge(self, other: "BucketTotals") -> None:
        for bucket, amount in other.sums.items():
            self.sums[bucket] += amount

    @property
    def expenses(self) -> Decimal:
        return (
            self.sums[Bucket.DAMAGE]
            + self.sums[Bucket.HOSPITALITY]
            + self.sums[Bucket.EMPLOYEE_MEALS]
        )

    def derive(self, sales: Decimal) -> DailyTotals:
        """Build DailyTotals for the given sales figure."""
        purchases = self.sums[Bucket.PURCHASES]
        expenses = self.expenses
        net_cash = sales - purchases
        return DailyTotals(
            purchases=purchases,
            damage=self.sums[Bucket.DAMAGE],
            salaries=self.sums[Bucket.SALARIES],
            hospitality=self.sums[Bucket.HOSPITALITY],
            employee_meals=self.sums[Bucket.EMPLOYEE_MEALS],
            assets=self.sums[Bucket.ASSETS],
            expenses=expenses,
            net_cash=net_cash,
            net_profit=net_cash - expenses,
        )

    def derive_period(self, total_sales: Decimal, day_count: int) -> PeriodSummary:
        """Build a PeriodSummary for the given summed sales."""
        totals = self.derive(total_sales)
        return PeriodSummary(
            total_sales=total_sales,
            purchases=totals.purchases,
            damage=totals.damage,
            salaries=totals.salaries,
            hospitality=totals.hospitality,
            employee_meals=totals.employee_meals,
            assets=totals.assets,
            expenses=totals.expenses,
            net_cash=totals.net_cash,
            net_profit=totals.net_profit,
            day_count=day_count,
        )


def collect_line_items(entries: Iterable[LineEntry]) -> dict[str, Decimal]:
    """Return the item → amount map that gets stored for a day.

    Blank, zero, negative and malformed amounts are dropped: an empty
    field means nothing was bought, not that zero was bought. Repeated
    item names are summed.
    """
    items: dict[str, Decimal] = {}
    for entry in entries:
        amount = coerce_amount(entry.amount)
        if amount <= 0:
            continue
        items[entry.item_name] = items.get(entry.item_name, ZERO) + amount
    return items


def entries_from_mapping(items: Mapping[str, Any]) -> list[LineEntry]:
    """Turn a stored item → amount map back into line entries."""
    return [LineEntry(item_name=name, amount=amount) for name, amount in items.items()]


class DailyAggregator:
    """Computes a day's totals against the current category snapshot."""

    def __init__(self, registry: CategoryRegistry, meals_token: str = DEFAULT_MEALS_TOKEN):
        self.registry = registry
        self.meals_token = meals_token

    def bucket_totals(self, items: Mapping[str, Decimal]) -> BucketTotals:
        """Classify every positive amount and sum it into buckets."""
        totals = BucketTotals()
        for item_name, raw in items.items():
            amount = coerce_amount(raw)
            if amount <= 0:
                continue
            totals.add(classify(item_name, amount, self.registry, self.meals_token))
        return totals

    def aggregate(self, sales: Any, entries: Iterable[LineEntry]) -> DailyTotals:
        """Compute DailyTotals from a sales figure and the form's entries.

        Never raises: unparseable sales count as zero and malformed amounts
        are skipped.
        """
        items = collect_line_items(entries)
        return self.bucket_totals(items).derive(coerce_amount(sales))

    def aggregate_items(self, sales: Any, items: Mapping[str, Any]) -> DailyTotals:
        """Same as :meth:`aggregate` for an item → amount map."""
        return self.aggregate(sales, entries_from_mapping(items))
