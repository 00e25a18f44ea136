"""
Reporting service.

Indicateurs du tableau de bord "Automated Orders" construits au-dessus du
moteur de réappro (backend.services.replenishment), plus l'export PDF du
bon de commande automatique.

Les divisions sont gardées ici : catalogue vide -> ratio 0.0, jamais d'erreur.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from backend.app.db.models.core_types import StockStatus
from backend.app.schemas.replenishment import (
    OrderCandidate,
    Overview,
    Product,
    StatusCount,
)
from backend.services.replenishment import build_orders, classify


def ratio(part: float, whole: float) -> float:
    """Pourcentage part/whole, 0.0 si whole == 0."""
    if not whole:
        return 0.0
    return part / whole * 100


def stock_level_pct(product: Product) -> float:
    return ratio(product.current_stock, product.par_level)


def build_status_distribution(catalog: Sequence[Product]) -> list[StatusCount]:
    """Toujours les trois statuts, dans l'ordre Below / At / Above."""
    counts = {status: 0 for status in StockStatus}
    for p in catalog:
        counts[classify(p)] += 1
    return [StatusCount(name=status, value=value) for status, value in counts.items()]


def build_overview(catalog: Sequence[Product]) -> Overview:
    total = len(catalog)
    auto_enabled = sum(1 for p in catalog if p.auto_order_enabled)
    orders = build_orders(catalog)
    distribution = build_status_distribution(catalog)
    below_par = distribution[0].value

    return Overview(
        total_products=total,
        auto_order_enabled=auto_enabled,
        auto_order_enabled_pct=ratio(auto_enabled, total),
        below_par=below_par,
        below_par_pct=ratio(below_par, total),
        pending_orders=len(orders),
        estimated_order_value=sum(o.estimated_cost for o in orders),
        status_distribution=distribution,
    )


# ---------- PDF ----------
def _latin1(text: str) -> str:
    # les polices core de fpdf ne couvrent que latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def render_purchase_order_pdf(
    orders: Sequence[OrderCandidate],
    *,
    issued_on: date | None = None,
) -> bytes:
    """
    Bon de commande automatique, une section par fournisseur.

    Les quantités sont imprimées telles que calculées (y compris <= 0) :
    c'est au lecteur du document de trancher sur une fiche incohérente.
    """
    issued_on = issued_on or date.today()

    by_supplier: dict[str, list[OrderCandidate]] = {}
    for o in orders:
        by_supplier.setdefault(o.product.supplier, []).append(o)

    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("helvetica", "B", 16)
    pdf.cell(0, 10, "AUTOMATED PURCHASE ORDER", new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="C")
    pdf.set_font("helvetica", size=10)
    pdf.cell(0, 8, f"Issued on: {issued_on.isoformat()}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    if not by_supplier:
        pdf.cell(0, 8, "No pending auto orders.", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    grand_total = 0.0
    for supplier, lines in by_supplier.items():
        pdf.set_font("helvetica", "B", 12)
        pdf.cell(0, 8, _latin1(f"Supplier: {supplier}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("helvetica", size=10)

        subtotal = 0.0
        for o in lines:
            p = o.product
            pdf.cell(25, 7, _latin1(p.id))
            pdf.cell(80, 7, _latin1(p.name[:45]))
            pdf.cell(40, 7, _latin1(f"{o.order_quantity:g} {p.unit_of_measure}"), align="R")
            pdf.cell(0, 7, f"${o.estimated_cost:,.2f}", new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="R")
            subtotal += o.estimated_cost

        pdf.set_font("helvetica", "I", 10)
        pdf.cell(0, 7, f"Subtotal: ${subtotal:,.2f}", new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="R")
        pdf.ln(3)
        grand_total += subtotal

    pdf.set_font("helvetica", "B", 12)
    pdf.cell(0, 10, f"Estimated total: ${grand_total:,.2f}", new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="R")
    return bytes(pdf.output())
