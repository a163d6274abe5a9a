from stockledger.schemas.inventory import StockMovementRequest
from stockledger.schemas.product import ProductCreate, ProductUpdate

__all__ = [
    "ProductCreate",
    "ProductUpdate",
    "StockMovementRequest",
]
