"""Classification of line entries into financial buckets.

Every place that needs totals (live form totals, saving a day, period
reports) goes through :func:`classify`, so they can never disagree.

Decision table, evaluated top to bottom:

=========== ================= ============== ==========================
main        sub               meals line     buckets
=========== ================= ============== ==========================
Expenses    Damage            any            Damage
Expenses    Hospitality       any            Hospitality
Expenses    Payroll           yes            EmployeeMeals
Expenses    Payroll           no             Salaries + Purchases
Expenses    Assets/Tools      any            Assets + Purchases
Expenses    anything else     any            Purchases
Purchases   any               any            Purchases
unknown item                                 Purchases (fallback)
=========== ================= ============== ==========================
"""

from decimal import Decimal
from typing import Optional

from dayledger.domain.category import CategoryRegistry
from dayledger.domain.entities import (
    Bucket,
    BucketAssignment,
    CategoryEntry,
    MainCategory,
)

SUB_DAMAGE = "Damage"
SUB_HOSPITALITY = "Hospitality"
SUB_PAYROLL = "Payroll"
SUB_ASSETS = "Assets/Tools"

DEFAULT_MEALS_TOKEN = "meals"


def is_meals_line(entry: CategoryEntry, meals_token: str = DEFAULT_MEALS_TOKEN) -> bool:
    """Return True if a payroll entry is a staff-meals line.

    The explicit flag wins; without it the item name is searched for the
    meals token, case-insensitively.
    """
    if entry.is_meals_line is not None:
        return entry.is_meals_line
    return meals_token.lower() in entry.item_name.lower()


def buckets_for(
    entry: Optional[CategoryEntry], meals_token: str = DEFAULT_MEALS_TOKEN
) -> tuple[Bucket, ...]:
    """Return the buckets an item's amount is added to."""
    if entry is None:
        return (Bucket.PURCHASES,)

    if entry.main_category == MainCategory.EXPENSES:
        sub = entry.sub_category
        if sub == SUB_DAMAGE:
            return (Bucket.DAMAGE,)
        if sub == SUB_HOSPITALITY:
            return (Bucket.HOSPITALITY,)
        # meals must be checked before salaries, both live under Payroll
        if sub == SUB_PAYROLL and is_meals_line(entry, meals_token):
            return (Bucket.EMPLOYEE_MEALS,)
        if sub == SUB_PAYROLL:
            return (Bucket.SALARIES, Bucket.PURCHASES)
        if sub == SUB_ASSETS:
            return (Bucket.ASSETS, Bucket.PURCHASES)
        return (Bucket.PURCHASES,)

    return (Bucket.PURCHASES,)


def classify(
    item_name: str,
    amount: Decimal,
    registry: CategoryRegistry,
    meals_token: str = DEFAULT_MEALS_TOKEN,
) -> BucketAssignment:
    """Decide which buckets ``amount`` of ``item_name`` contributes to.

    Args:
        item_name: Item name as stored in the daily record
        amount: Amount already coerced to Decimal
        registry: Current category snapshot
        meals_token: Substring marking staff-meal payroll items when the
            category has no explicit flag

    Returns:
        BucketAssignment; ``fallback`` is True when the item is unknown
    """
    entry = registry.lookup(item_name)
    if entry is None:
        registry.report_unknown(item_name)

    return BucketAssignment(
        item_name=item_name,
        allocations=tuple((bucket, amount) for bucket in buckets_for(entry, meals_token)),
        fallback=entry is None,
    )
