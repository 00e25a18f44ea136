from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import (
    String,
    BigInteger,
    Integer,
    DateTime,
    Date,
    Boolean,
    Numeric,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base


# ---------- CATALOGUE ----------
class CatalogProduct(Base):
    """
    Fiche SKU telle que fournie par le catalogue.

    Les contraintes de signe vivent ici (frontière de chargement),
    PAS dans le moteur de réappro qui accepte n'importe quel nombre.
    """

    __tablename__ = "catalog_products"
    pk: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)

    current_stock: Mapped[Decimal] = mapped_column(Numeric(14, 3), default=0, nullable=False)
    par_level: Mapped[Decimal] = mapped_column(Numeric(14, 3), default=0, nullable=False)
    reorder_point: Mapped[Decimal] = mapped_column(Numeric(14, 3), default=0, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    uom: Mapped[str] = mapped_column(String(32), default="Each", nullable=False)

    auto_order_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_order_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_catalog_current_stock_nonneg"),
        CheckConstraint("par_level >= 0", name="ck_catalog_par_level_nonneg"),
        CheckConstraint("reorder_point >= 0", name="ck_catalog_reorder_point_nonneg"),
        CheckConstraint("unit_price >= 0", name="ck_catalog_unit_price_nonneg"),
        Index("ix_catalog_products_category", "category"),
        Index("ix_catalog_products_supplier", "supplier"),
    )
