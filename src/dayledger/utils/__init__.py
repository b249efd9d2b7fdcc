"""Utility functions for dayledger."""

from dayledger.utils.date_parser import parse_date, parse_month, month_range
from dayledger.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_month", "month_range", "parse_amount", "coerce_amount"]
