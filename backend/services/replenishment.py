from __future__ import annotations

import logging
from typing import Iterable, Sequence

from backend.app.db.models.core_types import StockStatus
from backend.app.schemas.replenishment import (
    ALL,
    CategorySummary,
    FilterCriteria,
    OrderCandidate,
    Product,
    ReplenishmentReport,
    SupplierSummary,
)

logger = logging.getLogger(__name__)

# Compteur de CategorySummary incrémenté pour chaque statut
_CATEGORY_COUNTER = {
    StockStatus.below_par: "below_par",
    StockStatus.at_par: "at_par",
    StockStatus.above_par: "above_par",
}


# ---------- CLASSIFICATION ----------
def classify(product: Product) -> StockStatus:
    """
    Statut de stock d'un SKU.

    Règle métier :
        current_stock <  reorder_point -> Below Par
        current_stock <  par_level     -> At Par
        sinon                          -> Above Par

    NB : comparaison STRICTE. Un SKU pile au point de commande est
    "At Par" ici, alors que is_eligible() le commande quand même (<=).
    Ne pas harmoniser sans validation métier.
    """
    if product.current_stock < product.reorder_point:
        return StockStatus.below_par
    if product.current_stock < product.par_level:
        return StockStatus.at_par
    return StockStatus.above_par


def build_status_map(catalog: Iterable[Product]) -> dict[str, StockStatus]:
    return {p.id: classify(p) for p in catalog}


# ---------- ÉLIGIBILITÉ ----------
def is_eligible(product: Product) -> bool:
    return product.auto_order_enabled and product.current_stock <= product.reorder_point


def select_eligible(catalog: Iterable[Product]) -> list[Product]:
    """SKU à commander maintenant, dans l'ordre du catalogue."""
    return [p for p in catalog if is_eligible(p)]


# ---------- QUANTITÉ / COÛT ----------
def compute_order(product: Product) -> OrderCandidate:
    """
    Commande implicite d'un SKU éligible.

    Règle métier :
        order_quantity = par_level - current_stock
        estimated_cost = order_quantity * unit_price

    Pas de clamp : si reorder_point > par_level (donnée incohérente),
    la quantité peut être nulle ou négative et elle est propagée telle quelle.
    """
    order_quantity = product.par_level - product.current_stock
    return OrderCandidate(
        product=product,
        order_quantity=order_quantity,
        estimated_cost=order_quantity * product.unit_price,
    )


def build_orders(catalog: Iterable[Product]) -> list[OrderCandidate]:
    return [compute_order(p) for p in select_eligible(catalog)]


# ---------- AGRÉGATS ----------
def build_category_summary(catalog: Iterable[Product]) -> list[CategorySummary]:
    """
    Compte les statuts par catégorie.

    Propriétés :
    - une seule passe sur le catalogue
    - ordre STABLE : catégories dans l'ordre de première apparition
    - below_par + at_par + above_par == nb de SKU de la catégorie
    """
    counters: dict[str, dict[str, int]] = {}

    for p in catalog:
        row = counters.setdefault(p.category, {"below_par": 0, "at_par": 0, "above_par": 0})
        row[_CATEGORY_COUNTER[classify(p)]] += 1

    return [CategorySummary(name=name, **row) for name, row in counters.items()]


def build_supplier_summary(
    catalog: Iterable[Product],
    eligible: Iterable[Product],
) -> list[SupplierSummary]:
    """
    Résumé par fournisseur.

    - product_count / auto_enabled_count : passe sur le catalogue
    - pending_orders / estimated_order_value : passe sur les SKU éligibles

    Clé = nom fournisseur EXACT (pas de trim, pas de casse) : "Staples" et
    "staples" sont deux fournisseurs distincts. Ordre de première apparition
    dans le catalogue ; un fournisseur présent uniquement dans `eligible`
    est ajouté à la suite avec product_count == 0.
    """
    rows: dict[str, dict] = {}

    def _row(name: str) -> dict:
        return rows.setdefault(
            name,
            {
                "product_count": 0,
                "auto_enabled_count": 0,
                "pending_orders": 0,
                "estimated_order_value": 0.0,
            },
        )

    for p in catalog:
        row = _row(p.supplier)
        row["product_count"] += 1
        if p.auto_order_enabled:
            row["auto_enabled_count"] += 1

    for p in eligible:
        row = _row(p.supplier)
        row["pending_orders"] += 1
        row["estimated_order_value"] += compute_order(p).estimated_cost

    return [SupplierSummary(name=name, **row) for name, row in rows.items()]


# ---------- FILTRES ----------
def matches_search(product: Product, search_text: str) -> bool:
    if not search_text:
        return True

    query = search_text.lower()
    return any(
        query in field.lower()
        for field in (product.id, product.name, product.category, product.supplier)
    )


def filter_products(
    catalog: Iterable[Product],
    criteria: FilterCriteria | None = None,
) -> list[Product]:
    """
    Vue filtrée du catalogue.

    - category / supplier : égalité exacte, "all" = pas de filtre
    - search_text : sous-chaîne insensible à la casse sur id, name,
      category, supplier (OU)
    - les trois critères se combinent en ET
    """
    criteria = criteria or FilterCriteria()

    out = []
    for p in catalog:
        if criteria.category != ALL and p.category != criteria.category:
            continue
        if criteria.supplier != ALL and p.supplier != criteria.supplier:
            continue
        if not matches_search(p, criteria.search_text):
            continue
        out.append(p)
    return out


def available_categories(catalog: Iterable[Product]) -> list[str]:
    return sorted({p.category for p in catalog})


def available_suppliers(catalog: Iterable[Product]) -> list[str]:
    return sorted({p.supplier for p in catalog})


# ---------- PIPELINE ----------
def evaluate(
    catalog: Sequence[Product],
    criteria: FilterCriteria | None = None,
) -> ReplenishmentReport:
    """
    Pipeline complet sur un instantané du catalogue.

    Propriétés :
    - pur : aucune écriture, aucun état partagé
    - déterministe / idempotent : même catalogue -> même rapport
    - le filtre est appliqué AVANT éligibilité et agrégats
    """
    products = filter_products(catalog, criteria)
    eligible = select_eligible(products)

    report = ReplenishmentReport(
        statuses=build_status_map(products),
        orders=[compute_order(p) for p in eligible],
        categories=build_category_summary(products),
        suppliers=build_supplier_summary(products, eligible),
    )

    logger.debug(
        "replenishment evaluated: %d/%d products, %d pending orders",
        len(products),
        len(catalog),
        len(report.orders),
    )
    return report
