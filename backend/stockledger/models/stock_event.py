from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockledger.core.exceptions import LedgerImmutableError
from stockledger.db.base import Base


class StockEvent(Base):
    __tablename__ = "stock_events"
    __table_args__ = (
        CheckConstraint("event_type IN ('IN', 'OUT', 'ADJUST')", name="ck_stock_events_type"),
        CheckConstraint(
            "(event_type = 'ADJUST' AND quantity <> 0) OR (event_type IN ('IN', 'OUT') AND quantity >= 1)",
            name="ck_stock_events_quantity",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(10), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )

    product = relationship("Product")


@event.listens_for(StockEvent, "before_update")
def reject_update(_mapper, _connection, target: StockEvent) -> None:
    raise LedgerImmutableError(f"Stock event {target.id} cannot be modified")


@event.listens_for(StockEvent, "before_delete")
def reject_delete(_mapper, _connection, target: StockEvent) -> None:
    raise LedgerImmutableError(f"Stock event {target.id} cannot be deleted")
