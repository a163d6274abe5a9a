from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stockledger.db.session import get_db
from stockledger.models.notification import Notification
from stockledger.services import notifications


router = APIRouter()


def serialize(row: Notification) -> dict:
    return {
        "id": row.id,
        "product_id": row.product_id,
        "title": row.title,
        "message": row.message,
        "type": row.notification_type,
        "priority": row.priority,
        "read": row.is_read,
        "created_at": row.created_at.isoformat(),
    }


@router.get("")
def list_notifications(unread_only: bool = False, db: Session = Depends(get_db)) -> list[dict]:
    return [serialize(row) for row in notifications.list_notifications(db, unread_only=unread_only)]


@router.patch("/read-all")
def mark_all_read(db: Session = Depends(get_db)) -> dict:
    updated = notifications.mark_all_read(db)
    return {"message": "Notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read")
def mark_read(notification_id: int, db: Session = Depends(get_db)) -> dict:
    row = notifications.mark_read(db, notification_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return serialize(row)
