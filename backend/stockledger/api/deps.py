from fastapi import Depends
from sqlalchemy.orm import Session

from stockledger.db.session import get_db
from stockledger.services.ledger import LedgerEngine, ProductLocks
from stockledger.services.ledger_store import SqlLedgerStore


# One registry per process so every request for a product contends on the same lock.
product_locks = ProductLocks()


def get_ledger(db: Session = Depends(get_db)) -> LedgerEngine:
    return LedgerEngine(SqlLedgerStore(db), locks=product_locks)
