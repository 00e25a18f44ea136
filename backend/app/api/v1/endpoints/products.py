from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.deps import get_catalog, get_sql_catalog
from backend.app.schemas.replenishment import Product, ProductCreate, ProductRead
from backend.services.catalog import CatalogProvider, DuplicateProductError, SqlCatalogProvider
from backend.services.replenishment import classify
from backend.services.reporting import stock_level_pct

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products")


def _read(p: Product) -> ProductRead:
    return ProductRead(**p.model_dump(), status=classify(p), stock_level_pct=stock_level_pct(p))


@router.get("", response_model=list[ProductRead])
def list_products(provider: CatalogProvider = Depends(get_catalog)):
    return [_read(p) for p in provider.load_products()]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, provider: CatalogProvider = Depends(get_catalog)):
    for p in provider.load_products():
        if p.id == product_id:
            return _read(p)
    raise HTTPException(status_code=404, detail="Product not found")


@router.post("", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, catalog: SqlCatalogProvider = Depends(get_sql_catalog)):
    """
    Écriture catalogue (toujours en base, quelle que soit CATALOG_SOURCE).
    Validation de forme faite par ProductCreate -> 422 automatique.
    """
    try:
        p = catalog.add(payload)
    except DuplicateProductError:
        raise HTTPException(status_code=409, detail="Product id already exists")

    return _read(p)
