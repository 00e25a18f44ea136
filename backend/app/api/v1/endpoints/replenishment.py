from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from backend.app.api.deps import get_catalog
from backend.app.schemas.replenishment import (
    ALL,
    CategorySummary,
    FilterCriteria,
    FilterOptions,
    OrderCandidate,
    Overview,
    ReplenishmentReport,
    SupplierSummary,
)
from backend.services.catalog import CatalogProvider
from backend.services.replenishment import (
    available_categories,
    available_suppliers,
    evaluate,
    filter_products,
)
from backend.services.reporting import build_overview, render_purchase_order_pdf

router = APIRouter(prefix="/replenishment")


def get_criteria(category: str = ALL, supplier: str = ALL, q: str = "") -> FilterCriteria:
    return FilterCriteria(category=category, supplier=supplier, search_text=q)


@router.get("", response_model=ReplenishmentReport)
def get_report(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    """
    Rapport complet (READ ONLY)
    - recalculé à chaque appel sur un instantané du catalogue
    - aucun état serveur : les filtres sont des paramètres
    """
    return evaluate(provider.load_products(), criteria)


@router.get("/orders", response_model=list[OrderCandidate])
def get_orders(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    return evaluate(provider.load_products(), criteria).orders


@router.get("/orders.pdf")
def get_orders_pdf(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    orders = evaluate(provider.load_products(), criteria).orders
    return Response(
        content=render_purchase_order_pdf(orders),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="automated_orders.pdf"'},
    )


@router.get("/categories", response_model=list[CategorySummary])
def get_categories(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    return evaluate(provider.load_products(), criteria).categories


@router.get("/suppliers", response_model=list[SupplierSummary])
def get_suppliers(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    return evaluate(provider.load_products(), criteria).suppliers


@router.get("/overview", response_model=Overview)
def get_overview(
    criteria: FilterCriteria = Depends(get_criteria),
    provider: CatalogProvider = Depends(get_catalog),
):
    return build_overview(filter_products(provider.load_products(), criteria))


@router.get("/filters", response_model=FilterOptions)
def get_filters(provider: CatalogProvider = Depends(get_catalog)):
    products = provider.load_products()
    return FilterOptions(
        categories=available_categories(products),
        suppliers=available_suppliers(products),
    )
