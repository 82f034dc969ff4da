"""
Store service - catalog, staff and the transaction pipeline.

A Store owns its products, cashiers and receipts. process_transaction turns
a basket (product id -> quantity) into a Receipt: every line is checked for
availability and freshness and priced against a single transaction date,
stock is decremented, the receipt is persisted through the receipt store and
then appended to the history.

Baskets are all-or-nothing by default: every line is validated before any
stock moves. With atomic_baskets=False lines are applied one at a time and a
failing line leaves the earlier decrements in place.
"""
import logging
import threading
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from retail_store.exceptions import (
    StoreError, BusinessLogicError, NotFoundError, PersistenceError,
    ReceiptValidationError, ExpiredOrMissingProductError, InsufficientStockError
)
from retail_store.models import Cashier, Product, Receipt, ReceiptCounter, SaleItem, default_counter

logger = logging.getLogger(__name__)

PricedLine = Tuple[Product, int, Decimal]


class Store:
    """
    Aggregate root for one retail store.

    All state changes and reads go through one re-entrant lock, so a
    Store can be shared between request threads. A sale holds the lock
    until its receipt is persisted and recorded.
    """

    def __init__(
        self,
        sale_discount_rate,
        near_expiry_days: int,
        receipt_store=None,
        counter: Optional[ReceiptCounter] = None,
        today: Callable[[], date] = date.today,
        atomic_baskets: bool = True,
    ):
        rate = Decimal(str(sale_discount_rate))
        if not Decimal('0') <= rate <= Decimal('1'):
            raise ValueError(f'sale_discount_rate must be between 0 and 1, got {sale_discount_rate}')
        if near_expiry_days < 0:
            raise ValueError(f'near_expiry_days cannot be negative, got {near_expiry_days}')

        self.sale_discount_rate = rate
        self.near_expiry_days = near_expiry_days
        self.atomic_baskets = atomic_baskets
        self.receipt_store = receipt_store
        self.counter = counter if counter is not None else default_counter
        self._today = today

        self._products: List[Product] = []
        self._products_by_id: Dict[int, Product] = {}
        self._cashiers: List[Cashier] = []
        self._transactions: List[Receipt] = []
        self._lock = threading.RLock()

    def __repr__(self):
        return (f"<Store(products={len(self._products)}, cashiers={len(self._cashiers)}, "
                f"receipts={len(self._transactions)})>")

    # =====================================================
    # CATALOG & STAFF
    # =====================================================

    def stock_product(self, product: Product) -> None:
        with self._lock:
            if product.id in self._products_by_id:
                raise BusinessLogicError(f'A product with id {product.id} is already stocked')
            self._products.append(product)
            self._products_by_id[product.id] = product
        logger.info(f"[STORE] Stocked {product.name!r} (id={product.id}, qty={product.quantity})")

    def register_cashier(self, cashier: Cashier) -> None:
        with self._lock:
            if any(c.id == cashier.id for c in self._cashiers):
                raise BusinessLogicError(f'A cashier with id {cashier.id} is already registered')
            self._cashiers.append(cashier)
        logger.info(f"[STORE] Registered cashier {cashier.name!r} (id={cashier.id})")

    def find_product(self, product_id: int) -> Optional[Product]:
        with self._lock:
            return self._products_by_id.get(product_id)

    def find_cashier(self, cashier_id: int) -> Optional[Cashier]:
        with self._lock:
            return next((c for c in self._cashiers if c.id == cashier_id), None)

    def get_receipt(self, number: int) -> Receipt:
        with self._lock:
            for receipt in self._transactions:
                if receipt.number == number:
                    return receipt
        raise NotFoundError(f'Receipt {number} not found in this store', payload={'number': number})

    # =====================================================
    # TRANSACTIONS
    # =====================================================

    def process_transaction(self, cashier: Cashier, basket: Mapping[int, int]) -> Receipt:
        """
        Sell the basket and return its receipt.

        Raises:
            ReceiptValidationError: empty basket or missing cashier
            BusinessLogicError: non-positive requested quantity
            ExpiredOrMissingProductError: unknown or expired product
            InsufficientStockError: not enough units on hand
            PersistenceError: the receipt could not be persisted; stock
                stays decremented and the receipt is not recorded
        """
        current_date = self._today()

        if not basket:
            raise ReceiptValidationError("Items list is required and cannot be null")

        # Readers never see stock decremented without its receipt recorded.
        with self._lock:
            try:
                if self.atomic_baskets:
                    receipt = self._sell_all_or_nothing(cashier, basket, current_date)
                else:
                    receipt = self._sell_line_by_line(cashier, basket, current_date)
            except StoreError as e:
                logger.warning(f"[STORE] Transaction rejected: {e.message}")
                raise

            self._persist(receipt)
            self._transactions.append(receipt)

        logger.info(
            f"[STORE] Receipt #{receipt.number} issued by {receipt.cashier.name!r}: "
            f"{receipt.item_count} line(s), total {receipt.total_amount}"
        )
        return receipt

    def _sell_all_or_nothing(self, cashier: Cashier, basket: Mapping[int, int], current_date: date) -> Receipt:
        lines = [self._check_line(product_id, qty, current_date) for product_id, qty in basket.items()]
        items = [SaleItem(product, qty, price) for product, qty, price in lines]

        # Receipt validation happens before any stock moves.
        receipt = Receipt(cashier, items, counter=self.counter)
        for product, qty, _ in lines:
            product.decrease_quantity(qty)
        return receipt

    def _sell_line_by_line(self, cashier: Cashier, basket: Mapping[int, int], current_date: date) -> Receipt:
        items = []
        for product_id, qty in basket.items():
            product, qty, price = self._check_line(product_id, qty, current_date)
            product.decrease_quantity(qty)
            items.append(SaleItem(product, qty, price))
        return Receipt(cashier, items, counter=self.counter)

    def _check_line(self, product_id: int, qty: int, current_date: date) -> PricedLine:
        """Validate one basket line and price it. Does not touch stock."""
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise BusinessLogicError(f'Quantity for product {product_id} must be a whole number greater than 0')

        product = self._products_by_id.get(product_id)
        if product is None:
            raise ExpiredOrMissingProductError(product_id, ExpiredOrMissingProductError.MISSING)
        if product.is_expired(current_date):
            raise ExpiredOrMissingProductError(product_id, ExpiredOrMissingProductError.EXPIRED, product.name)
        if product.quantity < qty:
            raise InsufficientStockError(product.name, qty, product.quantity)

        price = product.price_on_sale(current_date, self.near_expiry_days, self.sale_discount_rate)
        return product, qty, price

    def _persist(self, receipt: Receipt) -> None:
        if self.receipt_store is None:
            logger.debug(f"[STORE] No receipt store configured, receipt #{receipt.number} kept in memory only")
            return
        try:
            self.receipt_store.write_receipt_text(receipt.number, receipt.to_text())
            self.receipt_store.write_receipt_record(receipt.number, receipt)
        except PersistenceError:
            logger.error(f"[STORE] Receipt #{receipt.number} was not persisted; stock already decremented")
            raise
        except OSError as e:
            logger.exception(f"[STORE] Receipt #{receipt.number} was not persisted: {e}")
            raise PersistenceError(f"Could not persist receipt {receipt.number}: {e}", number=receipt.number)

    # =====================================================
    # REPORTING
    # =====================================================

    def compute_total_revenue(self) -> Decimal:
        with self._lock:
            return sum((r.total_amount for r in self._transactions), Decimal('0'))

    def compute_staff_payroll(self) -> Decimal:
        with self._lock:
            return sum((c.salary for c in self._cashiers), Decimal('0'))

    def compute_delivery_costs(self) -> Decimal:
        """Delivery price times the quantity currently on hand, over the whole catalog."""
        with self._lock:
            return sum((p.delivery_price * p.quantity for p in self._products), Decimal('0'))

    def compute_net_profit(self) -> Decimal:
        with self._lock:
            return self.compute_total_revenue() - self.compute_staff_payroll() - self.compute_delivery_costs()

    def get_total_transaction_count(self) -> int:
        with self._lock:
            return len(self._transactions)

    def summary(self) -> dict:
        """All money figures and counts taken from one consistent snapshot."""
        with self._lock:
            revenue = self.compute_total_revenue()
            payroll = self.compute_staff_payroll()
            delivery = self.compute_delivery_costs()
            return {
                'total_revenue': revenue,
                'staff_payroll': payroll,
                'delivery_costs': delivery,
                'net_profit': revenue - payroll - delivery,
                'transactions': len(self._transactions),
                'products': len(self._products),
                'cashiers': len(self._cashiers),
            }

    def get_store_inventory(self) -> List[Product]:
        with self._lock:
            return list(self._products)

    def get_store_employees(self) -> List[Cashier]:
        with self._lock:
            return list(self._cashiers)

    def get_all_transactions(self) -> List[Receipt]:
        with self._lock:
            return list(self._transactions)

    def find_expired_items(self, as_of: date) -> List[Product]:
        with self._lock:
            return [p for p in self._products if p.is_expired(as_of)]

    def find_items_running_low(self, threshold: int) -> List[Product]:
        with self._lock:
            return [p for p in self._products if p.quantity <= threshold]


# =====================================================
# APPLICATION WIRING
# =====================================================

def init_store(app) -> Store:
    """Build the application's Store from Flask config and register it."""
    from retail_store.services.receipt_store import ReceiptStore

    receipt_store = ReceiptStore(app=app)
    store = Store(
        sale_discount_rate=app.config['SALE_DISCOUNT_RATE'],
        near_expiry_days=app.config['NEAR_EXPIRY_DAYS'],
        receipt_store=receipt_store,
        atomic_baskets=app.config.get('ATOMIC_BASKETS', True),
    )

    # Keep numbering ahead of receipts already on disk.
    existing = receipt_store.list_receipt_numbers()
    if existing:
        store.counter.advance_to(existing[-1])

    app.extensions['store'] = store
    app.extensions['receipt_store'] = receipt_store
    return store


def get_store() -> Store:
    """Get the Store of the current application."""
    from flask import current_app

    store = current_app.extensions.get('store')
    if store is None:
        raise RuntimeError("Store not initialized.")
    return store
