"""
Catalog service.

Le moteur de réappro CONSOMME un catalogue, il ne le possède pas.
Ce module fournit l'abstraction (CatalogProvider) et ses sources :
- InMemoryCatalogProvider : liste figée (jeu de référence / démo / tests)
- SqlCatalogProvider      : table catalog_products via SQLAlchemy
- CsvCatalogProvider      : export CSV (upload du dashboard), lu avec pandas
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Iterable, Protocol

import pandas as pd
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.db.models.core_types import CatalogSource
from backend.app.db.models.models_v1 import CatalogProduct
from backend.app.schemas.replenishment import Product, ProductCreate

logger = logging.getLogger(__name__)

CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", CatalogSource.memory.value)


class DuplicateProductError(Exception):
    """SKU déjà présent dans le catalogue."""


def _p(id, name, category, stock, par, rop, supplier, last, auto, price, uom) -> Product:
    return Product(
        id=id,
        name=name,
        category=category,
        current_stock=stock,
        par_level=par,
        reorder_point=rop,
        supplier=supplier,
        last_order_date=date.fromisoformat(last),
        auto_order_enabled=auto,
        unit_price=price,
        unit_of_measure=uom,
    )


# Jeu de référence de l'écran "Automated Orders"
REFERENCE_CATALOG: tuple[Product, ...] = (
    _p("P001", "Office Paper (A4)", "Office Supplies", 15, 50, 20, "Office Depot", "2025-04-15", True, 4.99, "Ream"),
    _p("P002", "Ballpoint Pens (Black)", "Office Supplies", 45, 100, 30, "Staples", "2025-04-10", True, 0.99, "Each"),
    _p("P003", "Printer Toner (Black)", "IT Supplies", 2, 10, 3, "Tech Solutions", "2025-04-20", True, 79.99, "Cartridge"),
    _p("P004", "Laptop Chargers", "IT Supplies", 5, 15, 5, "Tech Solutions", "2025-03-25", False, 45.99, "Each"),
    _p("P005", "Coffee Beans", "Kitchen Supplies", 3, 20, 5, "Gourmet Foods", "2025-04-28", True, 12.99, "Pound"),
    _p("P006", "Paper Towels", "Kitchen Supplies", 12, 30, 10, "Janitorial Supplies Inc", "2025-04-05", True, 1.99, "Roll"),
    _p("P007", "Hand Sanitizer", "Health Supplies", 25, 50, 15, "Health Essentials", "2025-03-15", True, 3.99, "Bottle"),
    _p("P008", "Disposable Masks", "Health Supplies", 150, 500, 200, "Health Essentials", "2025-02-20", False, 0.50, "Each"),
    _p("P009", "Cleaning Solution", "Janitorial", 8, 20, 10, "Janitorial Supplies Inc", "2025-04-12", True, 8.99, "Gallon"),
    _p("P010", "Trash Bags", "Janitorial", 5, 30, 10, "Janitorial Supplies Inc", "2025-04-18", True, 5.99, "Box"),
    _p("P011", "Sticky Notes", "Office Supplies", 35, 50, 20, "Office Depot", "2025-03-30", False, 2.99, "Pack"),
    _p("P012", "Staples", "Office Supplies", 15, 30, 10, "Staples", "2025-03-10", True, 1.99, "Box"),
)


class CatalogProvider(Protocol):
    def load_products(self) -> list[Product]:
        ...


class InMemoryCatalogProvider:
    def __init__(self, products: Iterable[Product] = REFERENCE_CATALOG):
        self._products = tuple(products)

    def load_products(self) -> list[Product]:
        logger.info("catalog loaded from memory: %d products", len(self._products))
        return list(self._products)


# Colonnes attendues dans un export CSV du catalogue (camelCase, comme l'API)
CSV_COLUMNS = {
    "id": "id",
    "name": "name",
    "category": "category",
    "supplier": "supplier",
    "currentStock": "current_stock",
    "parLevel": "par_level",
    "reorderPoint": "reorder_point",
    "unitPrice": "unit_price",
    "unitOfMeasure": "unit_of_measure",
    "autoOrderEnabled": "auto_order_enabled",
    "lastOrderDate": "last_order_date",
}

TEXT_COLUMNS = ("id", "name", "category", "supplier", "unitOfMeasure")


class CsvCatalogProvider:
    """
    Catalogue importé d'un CSV (upload du dashboard).

    La validation de forme se fait ici : colonne obligatoire absente ->
    ValueError ; valeur non numérique -> ValidationError pydantic.
    """

    def __init__(self, source):
        self.source = source

    def load_products(self) -> list[Product]:
        # colonnes texte forcées en str : un nom "2024" ou un fournisseur "3M" restent du texte
        df = pd.read_csv(self.source, dtype={c: str for c in TEXT_COLUMNS})

        missing = [c for c in ("id", "name", "category", "supplier") if c not in df.columns]
        if missing:
            raise ValueError(f"Missing catalog columns: {', '.join(missing)}")

        df = df[[c for c in CSV_COLUMNS if c in df.columns]].rename(columns=CSV_COLUMNS)
        df = df.astype(object).where(pd.notna(df), None)

        products = [
            Product(**{k: v for k, v in rec.items() if v is not None})
            for rec in df.to_dict(orient="records")
        ]
        logger.info("catalog loaded from csv: %d products", len(products))
        return products


def to_product(row: CatalogProduct) -> Product:
    return Product(
        id=row.sku,
        name=row.name,
        category=row.category,
        supplier=row.supplier,
        current_stock=float(row.current_stock),
        par_level=float(row.par_level),
        reorder_point=float(row.reorder_point),
        unit_price=float(row.unit_price),
        unit_of_measure=row.uom,
        auto_order_enabled=row.auto_order_enabled,
        last_order_date=row.last_order_date,
    )


def to_row(payload: ProductCreate | Product) -> CatalogProduct:
    return CatalogProduct(
        sku=payload.id,
        name=payload.name,
        category=payload.category,
        supplier=payload.supplier,
        current_stock=payload.current_stock,
        par_level=payload.par_level,
        reorder_point=payload.reorder_point,
        unit_price=payload.unit_price,
        uom=payload.unit_of_measure,
        auto_order_enabled=payload.auto_order_enabled,
        last_order_date=payload.last_order_date,
    )


class SqlCatalogProvider:
    """Catalogue lu en base. Ordre = ordre d'insertion (pk), comme la liste source."""

    def __init__(self, db: Session):
        self.db = db

    def load_products(self) -> list[Product]:
        rows = self.db.execute(select(CatalogProduct).order_by(CatalogProduct.pk)).scalars().all()
        logger.info("catalog loaded from db: %d products", len(rows))
        return [to_product(r) for r in rows]

    def get(self, product_id: str) -> Product | None:
        row = self.db.execute(
            select(CatalogProduct).where(CatalogProduct.sku == product_id)
        ).scalar_one_or_none()
        return to_product(row) if row else None

    def add(self, payload: ProductCreate) -> Product:
        """
        Ajoute un SKU. Lève DuplicateProductError si l'id existe déjà
        (l'API traduit en 409), y compris si un insert concurrent passe
        entre la vérification et le commit (contrainte unique sur sku).
        """
        if self.get(payload.id) is not None:
            raise DuplicateProductError(f"Product {payload.id} already exists")

        row = to_row(payload)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateProductError(f"Product {payload.id} already exists") from e
        self.db.refresh(row)
        logger.info("catalog product created: %s", row.sku)
        return to_product(row)


def make_provider(source: str | CatalogSource, db: Session | None = None) -> CatalogProvider:
    source = CatalogSource(source)  # ValueError si source inconnue

    if source is CatalogSource.db:
        if db is None:
            raise ValueError("A DB session is required for the 'db' catalog source")
        return SqlCatalogProvider(db)

    return InMemoryCatalogProvider()
