"""Sale item model."""
from dataclasses import dataclass
from decimal import Decimal

from retail_store.models.product import Product
from retail_store.utils.formatters import money_with_currency


@dataclass(frozen=True)
class SaleItem:
    """One priced line of a transaction. The product is referenced, not owned."""
    product: Product
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'unit_price', Decimal(str(self.unit_price)))

    @property
    def total_cost(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self):
        return (f"{self.product.name} x{self.quantity} * {money_with_currency(self.unit_price)}"
                f" - {money_with_currency(self.total_cost)}")

    def to_dict(self):
        return {
            'product_id': self.product.id,
            'product_name': self.product.name,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'total_cost': self.total_cost,
        }
