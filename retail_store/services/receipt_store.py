"""
Receipt store - flat per-receipt files on disk.

Each receipt gets two files keyed by its number:
- receipt-<n>.txt   human-readable rendering (Receipt.to_text)
- receipt-<n>.json  durable record that can be read back into a Receipt

Decimals are written as strings so amounts survive the round trip exactly.
"""
import json
import logging
import os
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from retail_store.exceptions import PersistenceError, ReceiptNotFoundError, ReceiptValidationError
from retail_store.models import Cashier, Product, ProductCategory, Receipt, SaleItem

logger = logging.getLogger(__name__)

RECORD_VERSION = 1
_RECORD_NAME = re.compile(r'^receipt-(\d+)\.json$')


class ReceiptStore:
    """
    Directory-backed persistence for receipts.

    Usage:
        receipts = ReceiptStore('/var/lib/store/receipts')
        receipts.write_receipt_text(receipt.number, receipt.to_text())
        receipts.write_receipt_record(receipt.number, receipt)
        same = receipts.read_receipt_record(receipt.number)
    """

    def __init__(self, directory: Optional[str] = None, app=None):
        self.directory = directory
        if app:
            self.init_app(app)
        elif directory:
            self._ensure_directory()

    def init_app(self, app) -> None:
        """Take the receipts directory from Flask app config."""
        self.directory = app.config.get('RECEIPTS_DIR', 'receipts')
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create receipts directory {self.directory}: {e}")

    def text_path(self, number: int) -> str:
        return os.path.join(self.directory, f"receipt-{number}.txt")

    def record_path(self, number: int) -> str:
        return os.path.join(self.directory, f"receipt-{number}.json")

    # ------------------------------------------------------------------
    # Write / read
    # ------------------------------------------------------------------

    def write_receipt_text(self, number: int, text: str) -> str:
        """Write the printable rendering of a receipt. Returns the file path."""
        path = self.text_path(number)
        try:
            with open(path, 'w', encoding='utf-8') as fh:
                fh.write(text)
                fh.write('\n')
        except OSError as e:
            logger.exception(f"[RECEIPTS] ✗ Text write failed for receipt {number}: {e}")
            raise PersistenceError(f"Could not write receipt {number} text: {e}", number=number)
        logger.debug(f"[RECEIPTS] Text written: {path}")
        return path

    def write_receipt_record(self, number: int, receipt: Receipt) -> str:
        """Write the durable record of a receipt. Returns the file path."""
        path = self.record_path(number)
        try:
            payload = self._serialize(self._receipt_to_record(receipt))
        except TypeError as e:
            raise PersistenceError(f"Could not serialize receipt {number}: {e}", number=number)

        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, 'w', encoding='utf-8') as fh:
                fh.write(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.exception(f"[RECEIPTS] ✗ Record write failed for receipt {number}: {e}")
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise PersistenceError(f"Could not write receipt {number} record: {e}", number=number)
        logger.debug(f"[RECEIPTS] Record written: {path}")
        return path

    def read_receipt_record(self, number: int) -> Receipt:
        """Read a receipt back from its record."""
        path = self.record_path(number)
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                raw = fh.read()
        except FileNotFoundError:
            raise ReceiptNotFoundError(number)
        except OSError as e:
            raise PersistenceError(f"Could not read receipt {number} record: {e}", number=number)

        try:
            return self._record_to_receipt(self._deserialize(raw))
        except (ValueError, KeyError, TypeError, ReceiptValidationError) as e:
            # json.JSONDecodeError is a ValueError
            raise PersistenceError(f"Receipt {number} record is malformed: {e}", number=number)

    def read_receipt_text(self, number: int) -> str:
        path = self.text_path(number)
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                return fh.read()
        except FileNotFoundError:
            raise ReceiptNotFoundError(number)
        except OSError as e:
            raise PersistenceError(f"Could not read receipt {number} text: {e}", number=number)

    def list_receipt_numbers(self) -> List[int]:
        """Numbers of all receipts with a record on disk, ascending."""
        try:
            names = os.listdir(self.directory)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise PersistenceError(f"Cannot list receipts directory {self.directory}: {e}")

        numbers = []
        for name in names:
            match = _RECORD_NAME.match(name)
            if match:
                numbers.append(int(match.group(1)))
        return sorted(numbers)

    # ------------------------------------------------------------------
    # Record format
    # ------------------------------------------------------------------

    def _serialize(self, value: Any) -> str:
        """Serialize to JSON keeping Decimal precision."""
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            elif isinstance(obj, Decimal):
                return {"__decimal__": str(obj)}
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
        return json.dumps(value, default=default_handler, ensure_ascii=False, indent=2)

    def _deserialize(self, value: str) -> Any:
        """Deserialize JSON, reconstructing Decimals."""
        def object_hook(dct: Dict[str, Any]) -> Any:
            if "__decimal__" in dct:
                return Decimal(dct["__decimal__"])
            return dct
        return json.loads(value, object_hook=object_hook)

    @staticmethod
    def _receipt_to_record(receipt: Receipt) -> Dict[str, Any]:
        return {
            'version': RECORD_VERSION,
            'number': receipt.number,
            'timestamp': receipt.timestamp,
            'cashier': {
                'id': receipt.cashier.id,
                'name': receipt.cashier.name,
                'salary': receipt.cashier.salary,
            },
            'items': [
                {
                    'product': {
                        'id': item.product.id,
                        'name': item.product.name,
                        'category': item.product.category.value,
                        'delivery_price': item.product.delivery_price,
                        'expiry_date': item.product.expiry_date,
                        'quantity': item.product.quantity,
                    },
                    'quantity': item.quantity,
                    'unit_price': item.unit_price,
                }
                for item in receipt.items
            ],
            'total_amount': receipt.total_amount,
        }

    @staticmethod
    def _record_to_receipt(record: Dict[str, Any]) -> Receipt:
        cashier_data = record['cashier']
        cashier = Cashier(cashier_data['id'], cashier_data['name'], cashier_data['salary'])

        items = []
        for line in record['items']:
            product_data = line['product']
            product = Product(
                product_data['id'],
                product_data['name'],
                product_data['delivery_price'],
                date.fromisoformat(product_data['expiry_date']),
                product_data['quantity'],
                ProductCategory(product_data['category']),
            )
            items.append(SaleItem(product, line['quantity'], line['unit_price']))

        return Receipt.restore(
            record['number'],
            cashier,
            items,
            datetime.fromisoformat(record['timestamp']),
        )
