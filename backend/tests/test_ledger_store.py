import pytest
from sqlalchemy.exc import IntegrityError

from stockledger.core.enums import StockEventType
from stockledger.core.exceptions import (
    InsufficientStockError,
    LedgerImmutableError,
    NoStockAvailableError,
    ProductNotFoundError,
)
from stockledger.models.stock_event import StockEvent
from stockledger.services.catalog import create_product
from stockledger.services.ledger_store import SqlLedgerStore


def test_scenario_against_database(sql_ledger, product):
    assert sql_ledger.record_stock_in(product.id, 10, "delivery") == 10
    assert sql_ledger.record_stock_out(product.id, 3, "sale") == 7
    assert sql_ledger.record_adjustment(product.id, -2, "damage") == 5

    with pytest.raises(InsufficientStockError) as exc_info:
        sql_ledger.record_stock_out(product.id, 10, "")
    assert exc_info.value.available == 5
    assert sql_ledger.current_balance(product.id) == 5


def test_empty_product_has_no_stock(sql_ledger, product):
    assert sql_ledger.current_balance(product.id) == 0
    with pytest.raises(NoStockAvailableError):
        sql_ledger.record_stock_out(product.id, 1, "")


def test_missing_product(sql_ledger):
    with pytest.raises(ProductNotFoundError):
        sql_ledger.record_stock_in(404, 1, "")


def test_events_listed_in_creation_order(db_session, product):
    store = SqlLedgerStore(db_session)
    store.append_event(product.id, StockEventType.IN, 5, "a")
    store.append_event(product.id, StockEventType.OUT, 2, "b")
    store.append_event(product.id, StockEventType.ADJUST, -1, "c")

    assert [row.reason for row in store.list_events(product.id)] == ["a", "b", "c"]
    assert [row.reason for row in store.recent_events(product.id)] == ["c", "b", "a"]


def test_recent_events_filters(db_session, product):
    other = create_product(db_session, "Sunflower Oil", "liters")
    store = SqlLedgerStore(db_session)
    store.append_event(product.id, StockEventType.IN, 5, "")
    store.append_event(product.id, StockEventType.OUT, 1, "")
    store.append_event(other.id, StockEventType.IN, 9, "")

    assert len(store.recent_events()) == 3
    assert len(store.recent_events(limit=2)) == 2
    assert {row.product_id for row in store.recent_events(product_id=other.id)} == {other.id}
    assert [row.event_type for row in store.recent_events(event_type=StockEventType.OUT)] == ["OUT"]


def test_balances_per_product(db_session, product, sql_ledger):
    other = create_product(db_session, "Sunflower Oil", "liters")
    sql_ledger.record_stock_in(product.id, 7, "")
    sql_ledger.record_stock_out(product.id, 2, "")
    sql_ledger.record_stock_in(other.id, 1, "")

    assert SqlLedgerStore(db_session).balances() == {product.id: 5, other.id: 1}


def test_events_cannot_be_modified(db_session, product):
    stock_event = SqlLedgerStore(db_session).append_event(product.id, StockEventType.IN, 5, "")

    stock_event.quantity = 50
    with pytest.raises(LedgerImmutableError):
        db_session.commit()
    db_session.rollback()


def test_events_cannot_be_deleted(db_session, product):
    stock_event = SqlLedgerStore(db_session).append_event(product.id, StockEventType.IN, 5, "")

    db_session.delete(stock_event)
    with pytest.raises(LedgerImmutableError):
        db_session.commit()
    db_session.rollback()


@pytest.mark.parametrize("event_type, quantity", [("IN", 0), ("OUT", -1), ("ADJUST", 0), ("MOVE", 1)])
def test_table_rejects_invalid_rows(db_session, product, event_type, quantity):
    db_session.add(StockEvent(product_id=product.id, event_type=event_type, quantity=quantity))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
