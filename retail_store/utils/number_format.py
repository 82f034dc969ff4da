"""Parsing utilities for amounts, quantities and dates received from callers."""
from datetime import date
from decimal import Decimal, InvalidOperation


def parse_decimal(value, field: str = 'value') -> Decimal:
    """
    Parse a non-negative amount (e.g. "2.50", 2.5 or "2,50") to Decimal.

    Floats go through str() so 2.5 becomes Decimal('2.5') and not its
    binary expansion.

    Raises:
        ValueError: if the value is missing, malformed or negative.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f'{field} is required')

    if isinstance(value, str):
        cleaned = value.strip().replace(',', '.')
        if not cleaned:
            raise ValueError(f'{field} is required')
    else:
        cleaned = str(value)

    try:
        decimal_value = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        raise ValueError(f'Invalid format for {field}: {value!r}')

    if not decimal_value.is_finite():
        raise ValueError(f'Invalid format for {field}: {value!r}')
    if decimal_value < 0:
        raise ValueError(f'{field} cannot be negative')

    return decimal_value


def parse_quantity(value, field: str = 'quantity') -> int:
    """
    Parse a whole-unit quantity.

    Accepts ints and digit strings; rejects bools, fractions and negatives.

    Raises:
        ValueError: if the value is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise ValueError(f'Invalid {field}: {value!r}')
    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().lstrip('-').isdigit():
        qty = int(value.strip())
    else:
        raise ValueError(f'Invalid {field}: {value!r}')

    if qty < 0:
        raise ValueError(f'{field} cannot be negative')
    return qty


def parse_date(value, field: str = 'date') -> date:
    """Parse an ISO-8601 date string (YYYY-MM-DD)."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError(f'{field} is required')
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f'Invalid {field}, expected YYYY-MM-DD: {value!r}')
