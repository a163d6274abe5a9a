from stockledger.models.notification import Notification
from stockledger.models.product import Product
from stockledger.models.sku_sequence import SkuSequence
from stockledger.models.stock_event import StockEvent

__all__ = [
    "Notification",
    "Product",
    "SkuSequence",
    "StockEvent",
]
