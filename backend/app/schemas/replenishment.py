from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from backend.app.db.models.core_types import StockStatus

ALL = "all"


class _Record(BaseModel):
    """Base des enregistrements du moteur : immuables, JSON en camelCase."""

    class Config:
        frozen = True
        populate_by_name = True
        alias_generator = to_camel


class Product(_Record):
    id: str
    name: str
    category: str
    supplier: str

    # Aucun contrôle de signe ni de reorder_point <= par_level : le moteur est total
    current_stock: float
    par_level: float
    reorder_point: float
    unit_price: float

    unit_of_measure: str = "Each"
    auto_order_enabled: bool = False
    last_order_date: date | None = None


class OrderCandidate(_Record):
    product: Product
    order_quantity: float  # peut être <= 0 si reorder_point > par_level
    estimated_cost: float


class CategorySummary(_Record):
    name: str
    below_par: int = 0
    at_par: int = 0
    above_par: int = 0


class SupplierSummary(_Record):
    name: str
    product_count: int = 0
    auto_enabled_count: int = 0
    pending_orders: int = 0
    estimated_order_value: float = 0.0


class FilterCriteria(_Record):
    category: str = ALL
    supplier: str = ALL
    search_text: str = ""


class StatusCount(_Record):
    name: StockStatus
    value: int


class ReplenishmentReport(_Record):
    statuses: dict[str, StockStatus]
    orders: list[OrderCandidate]
    categories: list[CategorySummary]
    suppliers: list[SupplierSummary]


class Overview(_Record):
    total_products: int
    auto_order_enabled: int
    auto_order_enabled_pct: float
    below_par: int
    below_par_pct: float
    pending_orders: int
    estimated_order_value: float
    status_distribution: list[StatusCount]


class FilterOptions(_Record):
    categories: list[str]
    suppliers: list[str]


class ProductCreate(BaseModel):
    """Payload d'entrée du catalogue : c'est ICI qu'on valide la forme."""

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=128)
    supplier: str = Field(min_length=1, max_length=255)
    current_stock: float = Field(default=0, ge=0)
    par_level: float = Field(default=0, ge=0)
    reorder_point: float = Field(default=0, ge=0)
    unit_price: float = Field(default=0, ge=0)
    unit_of_measure: str = Field(default="Each", min_length=1, max_length=32)
    auto_order_enabled: bool = False
    last_order_date: date | None = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class ProductRead(Product):
    status: StockStatus
    stock_level_pct: float
