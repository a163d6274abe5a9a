# backend/tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import itertools
import threading
import time
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import stockledger.models  # noqa: F401
from stockledger.db.base import Base
from stockledger.db.session import get_db
from stockledger.main import app
from stockledger.services.catalog import create_product
from stockledger.services.ledger import LedgerEngine
from stockledger.services.ledger_store import SqlLedgerStore


class InMemoryLedgerStore:
    """LedgerStore kept in dicts; ``read_delay`` widens the read-then-append window."""

    def __init__(self, read_delay: float = 0.0):
        self.products: dict[int, SimpleNamespace] = {}
        self.events: list[SimpleNamespace] = []
        self.read_delay = read_delay
        self._ids = itertools.count(1)
        self._append_guard = threading.Lock()

    def add_product(self, product_id: int, reorder_level: int = 0) -> SimpleNamespace:
        product = SimpleNamespace(id=product_id, reorder_level=reorder_level)
        self.products[product_id] = product
        return product

    def get_product(self, product_id, for_update=False):
        return self.products.get(product_id)

    def list_events(self, product_id):
        rows = [row for row in self.events if row.product_id == product_id]
        if self.read_delay:
            time.sleep(self.read_delay)
        return rows

    def append_event(self, product_id, event_type, quantity, reason):
        with self._append_guard:
            row = SimpleNamespace(
                id=next(self._ids),
                product_id=product_id,
                event_type=event_type.value,
                quantity=quantity,
                reason=reason,
                created_at=datetime.now(timezone.utc),
            )
            self.events.append(row)
        return row


@pytest.fixture
def make_memory_store():
    return InMemoryLedgerStore


@pytest.fixture
def memory_store():
    store = InMemoryLedgerStore()
    store.add_product(1, reorder_level=3)
    return store


@pytest.fixture
def memory_ledger(memory_store):
    return LedgerEngine(memory_store)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sql_ledger(db_session):
    return LedgerEngine(SqlLedgerStore(db_session))


@pytest.fixture
def product(db_session):
    return create_product(db_session, "Basmati Rice", "kg", reorder_level=5)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_product_data():
    return {"name": "Sunflower Oil", "unit": "liters", "reorder_level": 4}
