"""Receipt model and receipt numbering."""
import threading
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from retail_store.exceptions import ReceiptValidationError
from retail_store.models.cashier import Cashier
from retail_store.models.sale_item import SaleItem
from retail_store.utils.formatters import datetime_display, money_with_currency


class ReceiptCounter:
    """
    Monotonic source of receipt numbers.

    Starts at 0, so the first number handed out is 1. Numbers are never
    reused.
    """

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def next_number(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def advance_to(self, number: int) -> None:
        """Move the counter forward so the next number is above `number`."""
        with self._lock:
            if number > self._value:
                self._value = number


# Shared by every Receipt and Store that is not given its own counter.
default_counter = ReceiptCounter()


class Receipt:
    """
    Immutable record of a completed transaction.

    Building a Receipt validates its inputs first; a number is drawn from
    the counter only once validation passed.
    """

    __slots__ = ('_number', '_cashier', '_timestamp', '_items', '_total_amount')

    def __init__(self, cashier: Cashier, items: Optional[Iterable[SaleItem]],
                 counter: Optional[ReceiptCounter] = None):
        items = self._validate(cashier, items)
        if counter is None:
            counter = default_counter

        self._number = counter.next_number()
        self._cashier = cashier
        self._timestamp = datetime.now()
        self._items = tuple(items)
        self._total_amount = sum((item.total_cost for item in self._items), Decimal('0'))

    @staticmethod
    def _validate(cashier, items) -> List[SaleItem]:
        if cashier is None:
            raise ReceiptValidationError("Cashier is required and cannot be null")
        if items is None:
            raise ReceiptValidationError("Items list is required and cannot be null")

        items = list(items)
        if not items:
            raise ReceiptValidationError("At least one item must be purchased")
        for position, item in enumerate(items):
            if item is None:
                raise ReceiptValidationError(f"Item at position {position} is null")
        return items

    @classmethod
    def restore(cls, number: int, cashier: Cashier, items: Iterable[SaleItem],
                timestamp: datetime) -> 'Receipt':
        """Rebuild a previously issued receipt without drawing a new number."""
        items = cls._validate(cashier, items)
        receipt = cls.__new__(cls)
        receipt._number = number
        receipt._cashier = cashier
        receipt._timestamp = timestamp
        receipt._items = tuple(items)
        receipt._total_amount = sum((item.total_cost for item in receipt._items), Decimal('0'))
        return receipt

    def __repr__(self):
        return f"<Receipt(number={self._number}, total={self._total_amount}, items={len(self._items)})>"

    @property
    def number(self) -> int:
        return self._number

    @property
    def cashier(self) -> Cashier:
        return self._cashier

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def items(self) -> List[SaleItem]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def total_amount(self) -> Decimal:
        return self._total_amount

    def to_text(self) -> str:
        lines = [
            f"======= Receipt №{self._number} =======",
            f"Cashier - {self._cashier.name}",
            f"Date - {datetime_display(self._timestamp)}",
            "------------------------",
            "Bought Items:",
        ]
        lines.extend(f"  {item}" for item in self._items)
        lines.append(f"Grand Total: {money_with_currency(self._total_amount)}")
        return "\n".join(lines)

    def __str__(self):
        return self.to_text()

    def to_dict(self):
        return {
            'number': self._number,
            'cashier': self._cashier.to_dict(),
            'timestamp': self._timestamp.isoformat(),
            'items': [item.to_dict() for item in self._items],
            'total_amount': self._total_amount,
        }
