class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""
    code = "stock_ledger_error"


class ProductNotFoundError(StockLedgerError):
    """Raised when a referenced product does not exist."""
    code = "product_not_found"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class DuplicateSkuError(StockLedgerError):
    """Raised when a product is created with a SKU that is already taken."""
    code = "duplicate_sku"

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"SKU {sku} already exists")


class LedgerImmutableError(StockLedgerError):
    """Raised when something tries to update or delete a recorded stock event."""
    code = "ledger_immutable"


class LedgerValidationError(StockLedgerError):
    """Base exception for stock events rejected before they are appended."""
    code = "ledger_validation_error"


class InvalidQuantityError(LedgerValidationError):
    """Raised when a quantity is missing, not an integer, or below 1 where a positive one is required."""
    code = "invalid_quantity"


class ZeroAdjustmentError(LedgerValidationError):
    """Raised when an adjustment of exactly 0 is requested."""
    code = "zero_adjustment"

    def __init__(self):
        super().__init__("Adjustment quantity cannot be zero")


class NoStockAvailableError(LedgerValidationError):
    """Raised when stock is taken out of a product whose balance is 0."""
    code = "no_stock_available"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("No stock available")


class InsufficientStockError(LedgerValidationError):
    """Raised when more stock is taken out than the product holds."""
    code = "insufficient_stock"

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(f"Only {available} units available")


class NegativeBalanceRejectedError(LedgerValidationError):
    """Raised when an adjustment would leave the balance below zero."""
    code = "negative_balance_rejected"

    def __init__(self, product_id: int, balance: int, adjustment: int):
        self.product_id = product_id
        self.balance = balance
        self.adjustment = adjustment
        super().__init__(f"Adjustment of {adjustment} would result in negative stock (current: {balance})")
