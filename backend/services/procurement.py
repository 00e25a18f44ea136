"""
Procurement service.

Point d'entrée "Automated Orders" : ce module expose le pipeline de réappro
mais ne contient AUCUNE règle de calcul.

Toute la logique seuils / quantités / agrégats est centralisée dans :
    backend.services.replenishment
Les indicateurs et le PDF dans :
    backend.services.reporting
"""

from backend.services.catalog import CatalogProvider
from backend.services.replenishment import (
    build_category_summary,
    build_orders,
    build_status_map,
    build_supplier_summary,
    classify,
    compute_order,
    evaluate,
    filter_products,
    select_eligible,
)
from backend.services.reporting import build_overview, render_purchase_order_pdf
from backend.app.schemas.replenishment import FilterCriteria, ReplenishmentReport


def run_replenishment(
    provider: CatalogProvider,
    criteria: FilterCriteria | None = None,
) -> ReplenishmentReport:
    """Charge un instantané du catalogue puis évalue le pipeline dessus."""
    return evaluate(provider.load_products(), criteria)


__all__ = [
    "build_category_summary",
    "build_orders",
    "build_overview",
    "build_status_map",
    "build_supplier_summary",
    "classify",
    "compute_order",
    "evaluate",
    "filter_products",
    "render_purchase_order_pdf",
    "run_replenishment",
    "select_eligible",
]
