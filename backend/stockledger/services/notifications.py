from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockledger.core.enums import NotificationPriority
from stockledger.models.notification import Notification
from stockledger.models.product import Product
from stockledger.services.ledger import LedgerWrite


logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = {"inventory", "system"}


def create_notification(
    db: Session,
    title: str,
    message: str,
    notification_type: str = "inventory",
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    product_id: int | None = None,
) -> Notification | None:
    """Store a notification without ever failing the caller's request."""
    notification = Notification(
        title=(title or "Notification").strip(),
        message=(message or "").strip(),
        notification_type=notification_type if notification_type in NOTIFICATION_TYPES else "system",
        priority=priority.value,
        product_id=product_id,
    )
    try:
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create notification %r", title)
        return None
    return notification


def notify_low_stock(db: Session, write: LedgerWrite) -> Notification | None:
    if not write.crossed_reorder_level:
        return None

    try:
        product = db.get(Product, write.product_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load product %s for low stock alert", write.product_id)
        return None
    label = f"{product.name} ({product.sku})" if product else f"Product {write.product_id}"
    if write.balance == 0:
        title = "Out of stock"
        priority = NotificationPriority.HIGH
    else:
        title = "Low stock"
        priority = NotificationPriority.MEDIUM
    message = f"{label} is down to {write.balance} units (reorder level {write.reorder_level})."

    logger.info("Low stock alert for product %s: %s units", write.product_id, write.balance)
    return create_notification(db, title, message, "inventory", priority, product_id=write.product_id)


def list_notifications(db: Session, unread_only: bool = False, limit: int = 50) -> list[Notification]:
    query = select(Notification)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(db.scalars(query).all())


def mark_read(db: Session, notification_id: int) -> Notification | None:
    notification = db.get(Notification, notification_id)
    if notification is None:
        return None
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session) -> int:
    result = db.execute(update(Notification).where(Notification.is_read.is_(False)).values(is_read=True))
    db.commit()
    return result.rowcount or 0
