import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from backend.app.db.models.core_types import StockStatus
from backend.app.schemas.replenishment import ALL, FilterCriteria
from backend.services.catalog import CsvCatalogProvider, InMemoryCatalogProvider
from backend.services.replenishment import (
    available_categories,
    available_suppliers,
    classify,
    evaluate,
    filter_products,
)
from backend.services.reporting import (
    build_overview,
    render_purchase_order_pdf,
    stock_level_pct,
)

# --- CONFIGURATION & DESIGN ---
st.set_page_config(page_title="TIMEWISE - AUTOMATED ORDERS", layout="wide", page_icon="📦")

st.markdown("""
    <style>
    .stMetric {
        background-color: #1e2130;
        padding: 15px;
        border-radius: 10px;
        border-left: 5px solid #7e57c2;
    }
    h1 {
        color: #b39ddb;
    }
    </style>
    """, unsafe_allow_html=True)

STATUS_COLORS = {
    StockStatus.below_par: "#F44336",
    StockStatus.at_par: "#FFC107",
    StockStatus.above_par: "#4CAF50",
}


def products_frame(products):
    return pd.DataFrame([
        {
            "ID": p.id,
            "Produit": p.name,
            "Catégorie": p.category,
            "Fournisseur": p.supplier,
            "Stock": f"{p.current_stock:g} {p.unit_of_measure}",
            "Par": f"{p.par_level:g} {p.unit_of_measure}",
            "Point de commande": f"{p.reorder_point:g} {p.unit_of_measure}",
            "Niveau %": round(stock_level_pct(p), 1),
            "Statut": classify(p).value,
            "Auto-Order": "Enabled" if p.auto_order_enabled else "Disabled",
            "Dernière commande": p.last_order_date,
        }
        for p in products
    ])


# --- INTERFACE ---
st.title("📦 AUTOMATED ORDERS")

with st.sidebar:
    st.header("📥 CATALOGUE")
    uploaded_file = st.file_uploader("Importer CSV", type="csv")
    st.divider()

# Catalogue de référence ou upload
provider = CsvCatalogProvider(uploaded_file) if uploaded_file is not None else InMemoryCatalogProvider()
try:
    catalog = provider.load_products()
except ValueError as e:
    st.error(f"CSV invalide : {e}")
    st.stop()

with st.sidebar:
    st.header("🔎 FILTRES")
    category = st.selectbox("Catégorie", [ALL] + available_categories(catalog))
    supplier = st.selectbox("Fournisseur", [ALL] + available_suppliers(catalog))
    search = st.text_input("Recherche (id, nom, catégorie, fournisseur)")

# Les filtres sont des paramètres explicites du pipeline, pas un état caché
criteria = FilterCriteria(category=category, supplier=supplier, search_text=search)
products = filter_products(catalog, criteria)
report = evaluate(catalog, criteria)
overview = build_overview(products)

c1, c2, c3, c4 = st.columns(4)
c1.metric("PRODUITS", overview.total_products)
c2.metric("AUTO-ORDER ACTIFS", overview.auto_order_enabled, f"{overview.auto_order_enabled_pct:.1f}% des produits", delta_color="off")
c3.metric("SOUS LE PAR", overview.below_par, f"{overview.below_par_pct:.1f}% des produits", delta_color="off")
c4.metric("COMMANDES EN ATTENTE", overview.pending_orders, f"${overview.estimated_order_value:,.2f}", delta_color="off")

tab_overview, tab_orders, tab_inventory, tab_suppliers = st.tabs(
    ["Overview", "Auto Orders", "Inventory Levels", "By Supplier"]
)

with tab_overview:
    left, right = st.columns(2)

    dist = overview.status_distribution
    fig = go.Figure(go.Pie(
        labels=[d.name.value for d in dist],
        values=[d.value for d in dist],
        marker=dict(colors=[STATUS_COLORS[d.name] for d in dist]),
    ))
    fig.update_layout(template="plotly_dark", height=350, title="Statut des stocks")
    left.plotly_chart(fig, use_container_width=True)

    cats = report.categories
    fig = go.Figure()
    for status, attr in (
        (StockStatus.below_par, "below_par"),
        (StockStatus.at_par, "at_par"),
        (StockStatus.above_par, "above_par"),
    ):
        fig.add_trace(go.Bar(
            y=[c.name for c in cats],
            x=[getattr(c, attr) for c in cats],
            name=status.value,
            orientation="h",
            marker_color=STATUS_COLORS[status],
        ))
    fig.update_layout(template="plotly_dark", height=350, barmode="stack", title="Statut par catégorie")
    right.plotly_chart(fig, use_container_width=True)

with tab_orders:
    if not report.orders:
        st.success("✅ Aucune commande automatique en attente")
    else:
        st.dataframe(pd.DataFrame([
            {
                "ID": o.product.id,
                "Produit": o.product.name,
                "Fournisseur": o.product.supplier,
                "Stock": o.product.current_stock,
                "Par": o.product.par_level,
                "Point de commande": o.product.reorder_point,
                "Quantité": o.order_quantity,
                "Coût estimé": round(o.estimated_cost, 2),
            }
            for o in report.orders
        ]), use_container_width=True, hide_index=True)

        st.download_button(
            label="📄 Générer Bon de Commande",
            data=render_purchase_order_pdf(report.orders),
            file_name="automated_orders.pdf",
            mime="application/pdf",
        )

with tab_inventory:
    st.dataframe(products_frame(products), use_container_width=True, hide_index=True)

with tab_suppliers:
    sups = report.suppliers
    st.dataframe(pd.DataFrame([
        {
            "Fournisseur": s.name,
            "Produits": s.product_count,
            "Auto-Order actifs": s.auto_enabled_count,
            "Commandes en attente": s.pending_orders,
            "Valeur estimée": round(s.estimated_order_value, 2),
        }
        for s in sups
    ]), use_container_width=True, hide_index=True)

    fig = go.Figure()
    fig.add_trace(go.Bar(x=[s.name for s in sups], y=[s.product_count for s in sups], name="Produits", marker_color="#4e7fff"))
    fig.add_trace(go.Bar(x=[s.name for s in sups], y=[s.pending_orders for s in sups], name="Commandes en attente", marker_color="#7e57c2"))
    fig.update_layout(
        template="plotly_dark",
        height=350,
        margin=dict(l=20, r=20, t=30, b=20),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    st.plotly_chart(fig, use_container_width=True)

st.divider()
st.caption("Timewise Procurement | Automated Orders engine")
