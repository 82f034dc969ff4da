"""Product model."""
import enum
from datetime import date, timedelta
from decimal import Decimal

from retail_store.exceptions import QuantityError


class ProductCategory(str, enum.Enum):
    """Product category, each with a fixed profit margin."""
    FOOD = 'food'
    NON_FOOD = 'non_food'

    @property
    def margin(self) -> Decimal:
        return _MARGIN_FACTORS[self]


_MARGIN_FACTORS = {
    ProductCategory.FOOD: Decimal('0.30'),
    ProductCategory.NON_FOOD: Decimal('0.50'),
}


class Product:
    """
    An inventory item owned by a Store.

    Only the quantity changes after stocking, and only downwards.
    """

    def __init__(self, id: int, name: str, delivery_price, expiry_date: date, quantity: int,
                 category: ProductCategory = ProductCategory.FOOD):
        delivery_price = Decimal(str(delivery_price))
        if delivery_price < 0:
            raise ValueError('delivery_price cannot be negative')
        if quantity < 0:
            raise ValueError('quantity cannot be negative')

        self.id = id
        self.name = name
        self.delivery_price = delivery_price
        self.expiry_date = expiry_date
        self.category = ProductCategory(category)
        self._quantity = quantity

    def __repr__(self):
        return (f"<Product(id={self.id}, name='{self.name}', category={self.category.value}, "
                f"quantity={self._quantity})>")

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def margin_factor(self) -> Decimal:
        return self.category.margin

    def is_expired(self, current_date: date) -> bool:
        """True once current_date is past the expiry date."""
        return current_date > self.expiry_date

    def is_close_to_expiry(self, current_date: date, threshold_days: int) -> bool:
        """True inside the near-expiry window, for products not yet expired."""
        window_start = self.expiry_date - timedelta(days=threshold_days)
        return window_start < current_date and not self.is_expired(current_date)

    def price_on_sale(self, current_date: date, threshold_days: int, discount_rate) -> Decimal:
        """
        Sale price for one unit on current_date.

        The delivery price is marked up by the category margin, then marked
        down by discount_rate inside the near-expiry window. The result is
        not rounded.
        """
        amount = self.delivery_price * (1 + self.margin_factor)
        if self.is_close_to_expiry(current_date, threshold_days):
            amount = amount * (1 - Decimal(str(discount_rate)))
        return amount

    def decrease_quantity(self, amount: int) -> None:
        if amount < 0:
            raise QuantityError(f'Cannot decrease "{self.name}" by a negative amount ({amount}).')
        if amount > self._quantity:
            raise QuantityError(
                f'Insufficient quantity of "{self.name}": requested {amount}, on hand {self._quantity}.'
            )
        self._quantity -= amount

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'delivery_price': self.delivery_price,
            'expiry_date': self.expiry_date.isoformat(),
            'quantity': self._quantity,
        }
