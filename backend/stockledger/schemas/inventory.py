from typing import Any

from pydantic import BaseModel, Field


class StockMovementRequest(BaseModel):
    product_id: int
    # Passed through unconverted: the ledger rejects missing, bool, string and float quantities itself.
    quantity: Any = None
    reason: str = Field(default="", max_length=255)
