from __future__ import annotations

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.core.enums import StockEventType
from stockledger.models.product import Product
from stockledger.models.stock_event import StockEvent
from stockledger.services.ledger import compute_balance


class SqlLedgerStore:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int, for_update: bool = False) -> Product | None:
        query = select(Product).where(Product.id == product_id)
        if for_update:
            query = query.with_for_update()
        return self.db.scalar(query)

    def list_events(self, product_id: int) -> list[StockEvent]:
        return list(
            self.db.scalars(
                select(StockEvent)
                .where(StockEvent.product_id == product_id)
                .order_by(StockEvent.created_at.asc(), StockEvent.id.asc())
            ).all()
        )

    def append_event(self, product_id: int, event_type: StockEventType, quantity: int, reason: str) -> StockEvent:
        stock_event = StockEvent(
            product_id=product_id,
            event_type=event_type.value,
            quantity=quantity,
            reason=reason,
        )
        self.db.add(stock_event)
        # Committing releases the product row lock with the new event visible.
        self.db.commit()
        self.db.refresh(stock_event)
        return stock_event

    def balances(self) -> dict[int, int]:
        grouped: dict[int, list[StockEvent]] = defaultdict(list)
        for row in self.db.scalars(select(StockEvent)).all():
            grouped[row.product_id].append(row)
        return {product_id: compute_balance(rows) for product_id, rows in grouped.items()}

    def recent_events(
        self,
        product_id: int | None = None,
        event_type: StockEventType | None = None,
        limit: int | None = 100,
    ) -> list[StockEvent]:
        query = select(StockEvent)
        if product_id is not None:
            query = query.where(StockEvent.product_id == product_id)
        if event_type is not None:
            query = query.where(StockEvent.event_type == event_type.value)
        query = query.order_by(StockEvent.created_at.desc(), StockEvent.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.scalars(query).all())
