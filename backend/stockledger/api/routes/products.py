from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stockledger.db.session import get_db
from stockledger.schemas.product import ProductCreate, ProductUpdate
from stockledger.services import catalog


router = APIRouter()


@router.get("")
def list_products(db: Session = Depends(get_db)) -> list[dict]:
    return catalog.list_products(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)) -> dict:
    product = catalog.create_product(db, payload.name, payload.unit, payload.reorder_level, sku=payload.sku)
    return catalog.product_view(product, 0)


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)) -> dict:
    return catalog.get_product(db, product_id)


@router.put("/{product_id}")
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)) -> dict:
    return catalog.update_product(
        db,
        product_id,
        name=payload.name,
        unit=payload.unit,
        reorder_level=payload.reorder_level,
    )
