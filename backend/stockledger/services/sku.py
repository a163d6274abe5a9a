from __future__ import annotations

import re
import unicodedata

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockledger.models.product import Product
from stockledger.models.sku_sequence import SkuSequence


def _normalize_segment(value: str, fallback: str, max_len: int) -> str:
    raw = (value or "").strip()
    if not raw:
        return fallback

    ascii_text = unicodedata.normalize("NFKD", raw).encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^A-Za-z0-9]", "", ascii_text).upper()
    if not cleaned:
        return fallback
    return cleaned[:max_len]


def build_sku_key(name: str, unit: str) -> str:
    name_part = _normalize_segment(name, "GEN", 4)
    unit_part = _normalize_segment(unit, "NA", 4)
    return f"{name_part}-{unit_part}"


def next_sku(db: Session, name: str, unit: str, prefix: str = "SKU") -> str:
    """Reserve the next SKU for a name/unit pair, e.g. ``SKU-RICE-KG-00001``.

    The sequence row is locked and only flushed; the caller's commit makes the
    reservation durable together with the product that uses it.
    """
    key = build_sku_key(name, unit)
    prefix_part = _normalize_segment(prefix, "SKU", 8)

    for _ in range(3):
        try:
            sequence = db.scalar(select(SkuSequence).where(SkuSequence.sequence_key == key).with_for_update())
            if not sequence:
                sequence = SkuSequence(sequence_key=key, last_value=0)
                db.add(sequence)
                db.flush()

            # Explicit SKUs may already use numbers from this sequence.
            while True:
                sequence.last_value += 1
                sku = f"{prefix_part}-{key}-{sequence.last_value:05d}"
                if db.scalar(select(Product.id).where(Product.sku == sku)) is None:
                    break
            db.flush()
            return sku
        except IntegrityError:
            db.rollback()

    raise ValueError(f"Could not reserve a unique SKU for {key}")
