from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockledger.core.config import get_settings
from stockledger.core.exceptions import DuplicateSkuError, ProductNotFoundError
from stockledger.models.product import Product
from stockledger.services.ledger import compute_balance
from stockledger.services.ledger_store import SqlLedgerStore
from stockledger.services.sku import next_sku


logger = logging.getLogger(__name__)


def product_view(product: Product, stock: int) -> dict:
    return {
        "id": product.id,
        "sku": product.sku,
        "name": product.name,
        "unit": product.unit,
        "reorder_level": product.reorder_level,
        "stock": stock,
        "is_low_stock": stock <= product.reorder_level,
        "created_at": product.created_at.isoformat(),
        "updated_at": product.updated_at.isoformat(),
    }


def create_product(db: Session, name: str, unit: str, reorder_level: int = 0, sku: str | None = None) -> Product:
    sku = (sku or "").strip().upper()
    if sku:
        if db.scalar(select(Product.id).where(Product.sku == sku)) is not None:
            raise DuplicateSkuError(sku)
    else:
        sku = next_sku(db, name, unit, prefix=get_settings().sku_prefix)

    product = Product(sku=sku, name=name.strip(), unit=unit.strip(), reorder_level=reorder_level)
    db.add(product)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateSkuError(sku) from exc
    db.refresh(product)

    logger.info("Product %s created with SKU %s", product.id, product.sku)
    return product


def list_products(db: Session) -> list[dict]:
    balances = SqlLedgerStore(db).balances()
    products = db.scalars(select(Product).order_by(Product.name.asc(), Product.id.asc())).all()
    return [product_view(product, balances.get(product.id, 0)) for product in products]


def get_product(db: Session, product_id: int) -> dict:
    store = SqlLedgerStore(db)
    product = store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product_view(product, compute_balance(store.list_events(product_id)))


def update_product(
    db: Session,
    product_id: int,
    name: str | None = None,
    unit: str | None = None,
    reorder_level: int | None = None,
) -> dict:
    product = db.scalar(select(Product).where(Product.id == product_id))
    if product is None:
        raise ProductNotFoundError(product_id)

    if name is not None:
        product.name = name.strip()
    if unit is not None:
        product.unit = unit.strip()
    if reorder_level is not None:
        product.reorder_level = reorder_level
    db.commit()
    db.refresh(product)

    logger.info("Product %s updated", product.id)
    return get_product(db, product.id)


def low_stock_products(db: Session) -> list[dict]:
    return [row for row in list_products(db) if row["is_low_stock"]]
