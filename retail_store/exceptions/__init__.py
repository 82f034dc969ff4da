"""Custom exceptions for the retail store application."""


class StoreError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class BusinessLogicError(StoreError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class ReceiptValidationError(BusinessLogicError):
    """Raised when a receipt cannot be built from the given cashier and items."""
    def __init__(self, reason):
        super().__init__(f"Receipt cannot be created: {reason}")
        self.reason = reason


class ExpiredOrMissingProductError(BusinessLogicError):
    """
    Raised when a requested product is not in the catalog or is past its expiry date.

    Both causes share one error kind; ``reason`` tells them apart
    ('missing' or 'expired').
    """
    MISSING = 'missing'
    EXPIRED = 'expired'

    def __init__(self, product_id, reason=MISSING, product_name=None):
        if reason == self.EXPIRED:
            message = f'Product "{product_name}" (id {product_id}) is expired'
        else:
            message = f"Product with id {product_id} is not available"
        super().__init__(message, status_code=422,
                         payload={'product_id': product_id, 'reason': reason})
        self.product_id = product_id
        self.reason = reason


class InsufficientStockError(BusinessLogicError):
    """Raised when an operation fails due to lack of stock."""
    def __init__(self, product_name, required, available):
        message = f'Not enough quantity of "{product_name}". We have only {available} available.'
        super().__init__(message, status_code=409,
                         payload={'product': product_name, 'requested': required, 'available': available})
        self.product_name = product_name
        self.required = required
        self.available = available


class QuantityError(StoreError):
    """Raised when a stock decrement would leave a negative quantity."""
    def __init__(self, message="Insufficient quantity."):
        super().__init__(message, 500)


class NotFoundError(StoreError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ReceiptNotFoundError(NotFoundError):
    """Raised when no persisted record exists for a receipt number."""
    def __init__(self, number):
        super().__init__(f"Receipt {number} not found", payload={'number': number})
        self.number = number


class PersistenceError(StoreError):
    """Raised when a receipt could not be written to or read from the receipt store."""
    def __init__(self, message, number=None):
        super().__init__(message, 500, payload={'number': number} if number is not None else None)
        self.number = number
