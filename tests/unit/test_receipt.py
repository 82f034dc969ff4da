"""
Unit tests for Receipt construction and numbering.
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from retail_store.exceptions import ReceiptValidationError
from retail_store.models import Cashier, Product, ProductCategory, Receipt, ReceiptCounter, SaleItem

TODAY = date(2026, 3, 10)


@pytest.fixture
def receipt_cashier():
    return Cashier(1, 'Мария Петрова', Decimal('2500'))


@pytest.fixture
def items():
    yogurt = Product(101, 'Кисело мляко', Decimal('2.50'), TODAY + timedelta(days=7), 15, ProductCategory.FOOD)
    detergent = Product(102, 'Препарат за миене', Decimal('4.80'), TODAY + timedelta(days=365), 8,
                        ProductCategory.NON_FOOD)
    return [SaleItem(yogurt, 3, Decimal('2.25')), SaleItem(detergent, 1, Decimal('4.80'))]


class TestReceiptCreation:
    """Tests for building receipts."""

    def test_create_receipt(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)

        assert receipt.number == 1
        assert receipt.cashier == receipt_cashier
        assert receipt.item_count == 2
        assert isinstance(receipt.timestamp, datetime)

    def test_total_amount(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        assert receipt.total_amount == Decimal('6.75') + Decimal('4.80')
        assert receipt.total_amount == sum(i.unit_price * i.quantity for i in receipt.items)

    def test_single_item(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items[:1], counter=counter)
        assert receipt.total_amount == Decimal('6.75')
        assert receipt.item_count == 1

    def test_zero_total(self, receipt_cashier, counter):
        free = Product(999, 'Free Item', Decimal('0'), TODAY + timedelta(days=1), 1)
        receipt = Receipt(receipt_cashier, [SaleItem(free, 1, Decimal('0'))], counter=counter)
        assert receipt.total_amount == Decimal('0')

    def test_items_order_preserved(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        assert [i.product.id for i in receipt.items] == [101, 102]

    def test_accepts_any_iterable(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, (i for i in items), counter=counter)
        assert receipt.item_count == 2


class TestReceiptNumbering:
    """Tests for receipt numbers."""

    def test_numbers_strictly_increase(self, receipt_cashier, items, counter):
        numbers = [Receipt(receipt_cashier, items, counter=counter).number for _ in range(3)]
        assert numbers == [1, 2, 3]

    def test_default_counter_shared(self, receipt_cashier, items):
        """Receipts built without a counter share the process-wide one."""
        first = Receipt(receipt_cashier, items)
        second = Receipt(receipt_cashier, items)
        assert second.number > first.number

    def test_failed_construction_does_not_advance_counter(self, receipt_cashier, items, counter):
        Receipt(receipt_cashier, items, counter=counter)

        with pytest.raises(ReceiptValidationError):
            Receipt(None, items, counter=counter)
        with pytest.raises(ReceiptValidationError):
            Receipt(receipt_cashier, [], counter=counter)

        assert counter.current == 1
        assert Receipt(receipt_cashier, items, counter=counter).number == 2

    def test_counter_advance_to(self):
        counter = ReceiptCounter()
        counter.advance_to(41)
        assert counter.next_number() == 42
        counter.advance_to(10)
        assert counter.next_number() == 43


class TestReceiptValidation:
    """Tests for invalid receipt inputs."""

    def test_null_cashier(self, items, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(None, items, counter=counter)
        assert 'Cashier is required' in exc_info.value.message

    def test_null_items(self, receipt_cashier, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(receipt_cashier, None, counter=counter)
        assert 'Items list is required' in exc_info.value.message

    def test_empty_items(self, receipt_cashier, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(receipt_cashier, [], counter=counter)
        assert 'At least one item must be purchased' in exc_info.value.message

    def test_null_item_position(self, receipt_cashier, items, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(receipt_cashier, [items[0], None, items[1], None], counter=counter)
        assert 'Item at position 1 is null' in exc_info.value.message

    def test_cashier_checked_first(self, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(None, None, counter=counter)
        assert 'Cashier is required' in exc_info.value.message

    def test_validation_error_status(self, items, counter):
        with pytest.raises(ReceiptValidationError) as exc_info:
            Receipt(None, items, counter=counter)
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict()['status'] == 'error'


class TestReceiptImmutability:
    """Tests for defensive copies."""

    def test_items_returns_copy(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        returned = receipt.items
        returned.clear()
        assert receipt.item_count == 2
        assert len(receipt.items) == 2

    def test_source_list_changes_do_not_leak(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        total = receipt.total_amount
        items.append(items[0])
        assert receipt.item_count == 2
        assert receipt.total_amount == total

    def test_attributes_read_only(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        with pytest.raises(AttributeError):
            receipt.number = 99

    def test_sale_item_frozen(self, items):
        with pytest.raises(AttributeError):
            items[0].quantity = 100


class TestReceiptText:
    """Tests for the printable rendering."""

    def test_to_text(self, receipt_cashier, items, counter):
        receipt = Receipt(receipt_cashier, items, counter=counter)
        text = receipt.to_text()

        assert text.startswith(f'======= Receipt №{receipt.number} =======')
        assert f'Cashier - {receipt_cashier.name}' in text
        assert 'Date - ' in text
        assert 'Bought Items:' in text
        assert '  Кисело мляко x3 * 2.25 лв - 6.75 лв' in text
        assert text.endswith('Grand Total: 11.55 лв')

    def test_total_rounded_only_for_display(self, receipt_cashier, counter):
        product = Product(5, 'Waffle', Decimal('1.00'), TODAY, 10)
        receipt = Receipt(receipt_cashier, [SaleItem(product, 1, Decimal('1.105'))], counter=counter)
        assert receipt.total_amount == Decimal('1.105')
        assert 'Grand Total: 1.11 лв' in receipt.to_text()

    def test_restore_keeps_number(self, receipt_cashier, items, counter):
        stamp = datetime(2026, 3, 10, 12, 30, 0)
        receipt = Receipt.restore(77, receipt_cashier, items, stamp)

        assert receipt.number == 77
        assert receipt.timestamp == stamp
        assert counter.current == 0
        assert 'Date - 2026-03-10 12:30:00' in receipt.to_text()
