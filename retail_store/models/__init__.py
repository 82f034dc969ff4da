"""Models package - exports the store's domain objects."""
from retail_store.models.product import Product, ProductCategory
from retail_store.models.cashier import Cashier
from retail_store.models.sale_item import SaleItem
from retail_store.models.receipt import Receipt, ReceiptCounter, default_counter

__all__ = [
    'Product', 'ProductCategory',
    'Cashier',
    'SaleItem',
    'Receipt', 'ReceiptCounter', 'default_counter',
]
