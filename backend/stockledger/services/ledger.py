"""
Stock ledger engine.

A product's stock is never stored: it is the fold of its append-only stock
events (IN adds, OUT subtracts, ADJUST adds its signed quantity). Writes are
validated against that folded balance before the event is appended, and the
read-validate-append sequence for one product runs under a per-product lock
plus a row lock on the product, so concurrent stock-outs cannot overdraw it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol

from stockledger.core.enums import StockEventType
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    NegativeBalanceRejectedError,
    NoStockAvailableError,
    ProductNotFoundError,
    ZeroAdjustmentError,
)


logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    def get_product(self, product_id: int, for_update: bool = False) -> Any | None: ...

    def list_events(self, product_id: int) -> list[Any]: ...

    def append_event(self, product_id: int, event_type: StockEventType, quantity: int, reason: str) -> Any: ...


@dataclass(frozen=True)
class LowStockStatus:
    product_id: int
    is_low_stock: bool
    current_stock: int
    reorder_level: int


@dataclass(frozen=True)
class LedgerWrite:
    """Outcome of an accepted write: the balance before and after the append."""

    product_id: int
    event_type: StockEventType
    quantity: int
    previous_balance: int
    balance: int
    reorder_level: int

    @property
    def crossed_reorder_level(self) -> bool:
        return self.previous_balance > self.reorder_level >= self.balance


def compute_balance(events: Iterable[Any]) -> int:
    balance = 0
    for event in events:
        event_type = StockEventType(event.event_type)
        if event_type is StockEventType.IN:
            balance += event.quantity
        elif event_type is StockEventType.OUT:
            balance -= event.quantity
        else:
            balance += event.quantity
    return balance


def _require_positive_quantity(quantity: Any) -> int:
    # bool is an int subclass; True must not count as one unit.
    if quantity is None or isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError("Quantity must be an integer")
    if quantity < 1:
        raise InvalidQuantityError("Quantity must be greater than 0")
    return quantity


def _require_adjustment_quantity(quantity: Any) -> int:
    if quantity is None or isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError("Adjustment quantity must be an integer")
    if quantity == 0:
        raise ZeroAdjustmentError()
    return quantity


class ProductLocks:
    """Process-local mutexes keyed by product id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, product_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[product_id] = lock
            return lock

    @contextmanager
    def hold(self, product_id: int) -> Iterator[None]:
        lock = self._lock_for(product_id)
        with lock:
            yield


class LedgerEngine:
    def __init__(self, store: LedgerStore, locks: ProductLocks | None = None):
        self.store = store
        self.locks = locks or ProductLocks()

    def _require_product(self, product_id: int, for_update: bool = False) -> Any:
        product = self.store.get_product(product_id, for_update=for_update)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def current_balance(self, product_id: int) -> int:
        self._require_product(product_id)
        return compute_balance(self.store.list_events(product_id))

    def is_low_stock(self, product_id: int) -> LowStockStatus:
        product = self._require_product(product_id)
        balance = compute_balance(self.store.list_events(product_id))
        return LowStockStatus(
            product_id=product_id,
            is_low_stock=balance <= product.reorder_level,
            current_stock=balance,
            reorder_level=product.reorder_level,
        )

    def record_stock_in(self, product_id: int, quantity: Any, reason: str | None = "") -> int:
        return self.stock_in(product_id, quantity, reason).balance

    def record_stock_out(self, product_id: int, quantity: Any, reason: str | None = "") -> int:
        return self.stock_out(product_id, quantity, reason).balance

    def record_adjustment(self, product_id: int, quantity: Any, reason: str | None = "") -> int:
        return self.adjust(product_id, quantity, reason).balance

    def stock_in(self, product_id: int, quantity: Any, reason: str | None = "") -> LedgerWrite:
        quantity = _require_positive_quantity(quantity)
        self._require_product(product_id)
        with self.locks.hold(product_id):
            product = self._require_product(product_id, for_update=True)
            balance = compute_balance(self.store.list_events(product_id))
            return self._append(product, StockEventType.IN, quantity, reason, balance)

    def stock_out(self, product_id: int, quantity: Any, reason: str | None = "") -> LedgerWrite:
        quantity = _require_positive_quantity(quantity)
        self._require_product(product_id)
        with self.locks.hold(product_id):
            product = self._require_product(product_id, for_update=True)
            balance = compute_balance(self.store.list_events(product_id))
            if balance == 0:
                logger.warning("Stock out of %s rejected for product %s: no stock", quantity, product_id)
                raise NoStockAvailableError(product_id)
            if quantity > balance:
                logger.warning(
                    "Stock out of %s rejected for product %s: only %s available", quantity, product_id, balance
                )
                raise InsufficientStockError(product_id, requested=quantity, available=balance)
            return self._append(product, StockEventType.OUT, quantity, reason, balance)

    def adjust(self, product_id: int, quantity: Any, reason: str | None = "") -> LedgerWrite:
        quantity = _require_adjustment_quantity(quantity)
        self._require_product(product_id)
        with self.locks.hold(product_id):
            product = self._require_product(product_id, for_update=True)
            balance = compute_balance(self.store.list_events(product_id))
            if balance + quantity < 0:
                logger.warning(
                    "Adjustment of %s rejected for product %s: balance is %s", quantity, product_id, balance
                )
                raise NegativeBalanceRejectedError(product_id, balance=balance, adjustment=quantity)
            return self._append(product, StockEventType.ADJUST, quantity, reason, balance)

    def _append(
        self,
        product: Any,
        event_type: StockEventType,
        quantity: int,
        reason: str | None,
        previous_balance: int,
    ) -> LedgerWrite:
        self.store.append_event(product.id, event_type, quantity, (reason or "").strip())
        balance = compute_balance(self.store.list_events(product.id))
        logger.info(
            "%s %s recorded for product %s: balance %s -> %s",
            event_type.value,
            quantity,
            product.id,
            previous_balance,
            balance,
        )
        return LedgerWrite(
            product_id=product.id,
            event_type=event_type,
            quantity=quantity,
            previous_balance=previous_balance,
            balance=balance,
            reorder_level=product.reorder_level,
        )
