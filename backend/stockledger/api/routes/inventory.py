from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.api.deps import get_ledger
from stockledger.core.config import get_settings
from stockledger.core.enums import StockEventType
from stockledger.db.session import get_db
from stockledger.models.product import Product
from stockledger.models.stock_event import StockEvent
from stockledger.schemas.inventory import StockMovementRequest
from stockledger.services import catalog
from stockledger.services.export import events_to_csv, events_to_pdf
from stockledger.services.ledger import LedgerEngine, LedgerWrite
from stockledger.services.ledger_store import SqlLedgerStore
from stockledger.services.notifications import notify_low_stock
from stockledger.services.telegram import relay_notification


router = APIRouter()


def serialize_event(row: StockEvent, product: Product | None) -> dict:
    return {
        "id": row.id,
        "product_id": row.product_id,
        "sku": product.sku if product else None,
        "product_name": product.name if product else None,
        "type": row.event_type,
        "quantity": row.quantity,
        "reason": row.reason,
        "created_at": row.created_at.isoformat(),
    }


def products_for(db: Session, events: list[StockEvent]) -> dict[int, Product]:
    product_ids = {row.product_id for row in events}
    if not product_ids:
        return {}
    return {p.id: p for p in db.scalars(select(Product).where(Product.id.in_(product_ids))).all()}


def after_write(db: Session, write: LedgerWrite, background_tasks: BackgroundTasks) -> None:
    settings = get_settings()
    if not settings.low_stock_notifications:
        return
    notification = notify_low_stock(db, write)
    if notification is not None and settings.telegram_bot_token:
        background_tasks.add_task(relay_notification, f"{notification.title}: {notification.message}")


@router.post("/in")
def stock_in(payload: StockMovementRequest, ledger: LedgerEngine = Depends(get_ledger)) -> dict:
    write = ledger.stock_in(payload.product_id, payload.quantity, payload.reason)
    return {"message": "Stock added successfully", "product_id": write.product_id, "current_stock": write.balance}


@router.post("/out")
def stock_out(
    payload: StockMovementRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ledger: LedgerEngine = Depends(get_ledger),
) -> dict:
    write = ledger.stock_out(payload.product_id, payload.quantity, payload.reason)
    after_write(db, write, background_tasks)
    return {"message": "Stock deducted successfully", "product_id": write.product_id, "current_stock": write.balance}


@router.post("/adjust")
def adjust_stock(
    payload: StockMovementRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ledger: LedgerEngine = Depends(get_ledger),
) -> dict:
    write = ledger.adjust(payload.product_id, payload.quantity, payload.reason)
    after_write(db, write, background_tasks)
    return {
        "message": "Inventory adjusted successfully",
        "product_id": write.product_id,
        "adjustment": write.quantity,
        "current_stock": write.balance,
    }


@router.get("/events")
def list_events(
    product_id: int | None = None,
    event_type: StockEventType | None = Query(default=None, alias="type"),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[dict]:
    rows = SqlLedgerStore(db).recent_events(product_id=product_id, event_type=event_type, limit=limit)
    products = products_for(db, rows)
    return [serialize_event(row, products.get(row.product_id)) for row in rows]


@router.get("/events/export")
def export_events(
    format: str = Query(default="csv", pattern="^(csv|pdf)$"),
    product_id: int | None = None,
    db: Session = Depends(get_db),
) -> Response:
    rows = SqlLedgerStore(db).recent_events(product_id=product_id, limit=None)
    products = products_for(db, rows)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")

    if format == "pdf":
        return Response(
            content=events_to_pdf(rows, products),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="stock-ledger-{stamp}.pdf"'},
        )
    return Response(
        content=events_to_csv(rows, products),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="stock-ledger-{stamp}.csv"'},
    )


@router.get("/low-stock")
def low_stock(db: Session = Depends(get_db)) -> list[dict]:
    return catalog.low_stock_products(db)


@router.get("/{product_id}/stock")
def product_stock(product_id: int, ledger: LedgerEngine = Depends(get_ledger)) -> dict:
    return {"product_id": product_id, "stock": ledger.current_balance(product_id)}


@router.get("/{product_id}/status")
def product_status(product_id: int, ledger: LedgerEngine = Depends(get_ledger)) -> dict:
    status = ledger.is_low_stock(product_id)
    return {
        "product_id": status.product_id,
        "is_low_stock": status.is_low_stock,
        "current_stock": status.current_stock,
        "reorder_level": status.reorder_level,
    }
