import logging

from sqlalchemy.orm import Session

from stockledger.models.product import Product
from stockledger.services.catalog import create_product
from stockledger.services.ledger import LedgerEngine
from stockledger.services.ledger_store import SqlLedgerStore


logger = logging.getLogger(__name__)

DEMO_PRODUCTS = [
    {"name": "Basmati Rice", "unit": "kg", "reorder_level": 20, "opening_stock": 120},
    {"name": "Sunflower Oil", "unit": "liters", "reorder_level": 10, "opening_stock": 45},
    {"name": "Paper Cups", "unit": "pcs", "reorder_level": 200, "opening_stock": 150},
]


def seed_initial_data(db: Session) -> None:
    if db.query(Product).count() > 0:
        return

    engine = LedgerEngine(SqlLedgerStore(db))
    for item in DEMO_PRODUCTS:
        product = create_product(db, item["name"], item["unit"], item["reorder_level"])
        engine.record_stock_in(product.id, item["opening_stock"], "Opening stock")
    logger.info("Seeded %s demo products", len(DEMO_PRODUCTS))
