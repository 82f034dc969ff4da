"""
Formatting helpers for receipts and API payloads.
Amounts are kept unrounded internally and only rounded here, for display.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import datetime
from typing import Union, Optional

CURRENCY_SUFFIX = "лв"


def money_2(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with exactly 2 decimals.

    Args:
        value: Amount to format

    Returns:
        Formatted string, or "-" if the value is invalid.

    Examples:
        money_2(Decimal('2.7625')) -> "2.76"
        money_2(6.75) -> "6.75"
        money_2(0) -> "0.00"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    return f"{num:.2f}"


def money_with_currency(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with 2 decimals followed by the store currency.

    Examples:
        money_with_currency(Decimal('11.55')) -> "11.55 лв"
    """
    return f"{money_2(value)} {CURRENCY_SUFFIX}"


def datetime_display(value: Optional[datetime]) -> str:
    """
    Format a datetime as YYYY-MM-DD HH:MM:SS.

    Examples:
        datetime_display(datetime(2026, 1, 12, 15, 30, 5)) -> "2026-01-12 15:30:05"
    """
    if value is None or not isinstance(value, datetime):
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S")
