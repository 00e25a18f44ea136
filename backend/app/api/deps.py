from __future__ import annotations

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.app.db.session import SessionLocal
from backend.services import catalog
from backend.services.catalog import CatalogProvider, SqlCatalogProvider

def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_catalog(db: Session = Depends(get_db)) -> CatalogProvider:
    return catalog.make_provider(catalog.CATALOG_SOURCE, db)

def get_sql_catalog(db: Session = Depends(get_db)) -> SqlCatalogProvider:
    return SqlCatalogProvider(db)
