from __future__ import annotations

import logging

from sqlalchemy import select

from backend.app.db.session import SessionLocal
from backend.app.db.models.models_v1 import CatalogProduct
from backend.services.catalog import REFERENCE_CATALOG, to_row

logger = logging.getLogger(__name__)


def run_seed(db=None) -> int:
    """Charge le jeu de référence. Idempotent : un SKU déjà présent est ignoré."""
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        existing = set(db.execute(select(CatalogProduct.sku)).scalars().all())

        created = 0
        for product in REFERENCE_CATALOG:
            if product.id in existing:
                continue
            db.add(to_row(product))
            created += 1
        db.commit()

        logger.info("SEED OK: %d catalog products created", created)
        return created
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_seed()
