import pytest

from backend.app.db.models.core_types import StockStatus
from backend.app.schemas.replenishment import FilterCriteria
from backend.services.replenishment import (
    available_categories,
    available_suppliers,
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


# ---------- CLASSIFICATION ----------
@pytest.mark.parametrize(
    "stock, rop, par, expected",
    [
        (15, 20, 50, StockStatus.below_par),
        (20, 20, 50, StockStatus.at_par),  # pile au point de commande
        (49, 20, 50, StockStatus.at_par),
        (50, 20, 50, StockStatus.above_par),
        (-5, 0, 0, StockStatus.below_par),
        (0, 0, 0, StockStatus.above_par),
    ],
)
def test_classify_thresholds(product, stock, rop, par, expected):
    assert classify(product(current_stock=stock, reorder_point=rop, par_level=par)) is expected


def test_classify_with_reorder_point_above_par(product):
    # donnée incohérente : pas d'erreur, juste la règle appliquée
    p = product(current_stock=30, reorder_point=40, par_level=20)
    assert classify(p) is StockStatus.below_par


# ---------- EXEMPLES MÉTIER ----------
def test_example_office_paper(product):
    p = product(current_stock=15, reorder_point=20, par_level=50, auto_order_enabled=True, unit_price=4.99)

    assert classify(p) is StockStatus.below_par
    assert select_eligible([p]) == [p]

    order = compute_order(p)
    assert order.order_quantity == 35
    assert order.estimated_cost == pytest.approx(174.65)


def test_example_pens_not_eligible(product):
    p = product(current_stock=45, reorder_point=30, par_level=100, auto_order_enabled=True, unit_price=0.99)

    assert classify(p) is StockStatus.at_par
    assert select_eligible([p]) == []


def test_example_toner(product):
    p = product(current_stock=2, reorder_point=3, par_level=10, auto_order_enabled=True, unit_price=79.99)

    assert classify(p) is StockStatus.below_par
    order = compute_order(p)
    assert order.order_quantity == 8
    assert order.estimated_cost == pytest.approx(639.92)


def test_at_reorder_point_is_at_par_but_still_ordered(product):
    """< pour le statut, <= pour l'éligibilité : les deux règles divergent."""
    p = product(current_stock=5, reorder_point=5, par_level=15, auto_order_enabled=True)

    assert classify(p) is StockStatus.at_par
    assert select_eligible([p]) == [p]


# ---------- ÉLIGIBILITÉ ----------
def test_auto_order_disabled_never_eligible(product):
    p = product(current_stock=0, reorder_point=10, auto_order_enabled=False)
    assert select_eligible([p]) == []


def test_select_eligible_keeps_catalog_order(reference_catalog):
    eligible = select_eligible(reference_catalog)
    assert [p.id for p in eligible] == ["P001", "P003", "P005", "P009", "P010"]


# ---------- QUANTITÉ ----------
def test_order_quantity_not_clamped(product):
    p = product(current_stock=25, reorder_point=30, par_level=20, unit_price=2.0)

    order = compute_order(p)
    assert order.order_quantity == -5
    assert order.estimated_cost == -10.0


def test_order_quantity_zero(product):
    p = product(current_stock=20, reorder_point=20, par_level=20, unit_price=3.0)

    order = compute_order(p)
    assert order.order_quantity == 0
    assert order.estimated_cost == 0


def test_build_orders(reference_catalog):
    orders = build_orders(reference_catalog)

    assert [(o.product.id, o.order_quantity) for o in orders] == [
        ("P001", 35),
        ("P003", 8),
        ("P005", 17),
        ("P009", 12),
        ("P010", 25),
    ]
    assert sum(o.estimated_cost for o in orders) == pytest.approx(1293.03)


# ---------- AGRÉGATS ----------
def test_category_summary_first_seen_order(reference_catalog):
    summary = build_category_summary(reference_catalog)

    assert [(c.name, c.below_par, c.at_par, c.above_par) for c in summary] == [
        ("Office Supplies", 1, 3, 0),
        ("IT Supplies", 1, 1, 0),
        ("Kitchen Supplies", 1, 1, 0),
        ("Health Supplies", 1, 1, 0),
        ("Janitorial", 2, 0, 0),
    ]


def test_category_counts_sum_to_category_size(reference_catalog, product):
    catalog = reference_catalog + [product(id="X1", category="Janitorial", current_stock=100)]

    for c in build_category_summary(catalog):
        size = sum(1 for p in catalog if p.category == c.name)
        assert c.below_par + c.at_par + c.above_par == size


def test_supplier_summary(reference_catalog):
    summary = build_supplier_summary(reference_catalog, select_eligible(reference_catalog))
    rows = {s.name: s for s in summary}

    assert [s.name for s in summary] == [
        "Office Depot",
        "Staples",
        "Tech Solutions",
        "Gourmet Foods",
        "Janitorial Supplies Inc",
        "Health Essentials",
    ]
    assert rows["Janitorial Supplies Inc"].product_count == 3
    assert rows["Janitorial Supplies Inc"].pending_orders == 2
    assert rows["Janitorial Supplies Inc"].estimated_order_value == pytest.approx(257.63)
    assert rows["Staples"].pending_orders == 0
    assert rows["Staples"].estimated_order_value == 0
    assert rows["Tech Solutions"].auto_enabled_count == 1


def test_supplier_keys_are_exact(product):
    catalog = [
        product(id="A", supplier="Staples"),
        product(id="B", supplier="staples"),
        product(id="C", supplier="Staples "),
    ]

    summary = build_supplier_summary(catalog, select_eligible(catalog))
    assert [s.name for s in summary] == ["Staples", "staples", "Staples "]
    assert all(s.product_count == 1 for s in summary)


def test_supplier_only_in_eligible_is_appended(product):
    in_catalog = product(id="A", supplier="Office Depot")
    outsider = product(id="B", supplier="Gourmet Foods", current_stock=0, par_level=10, unit_price=2.0)

    summary = build_supplier_summary([in_catalog], [outsider])

    assert [s.name for s in summary] == ["Office Depot", "Gourmet Foods"]
    assert summary[1].product_count == 0
    assert summary[1].pending_orders == 1
    assert summary[1].estimated_order_value == 20.0


def test_empty_catalog():
    assert build_category_summary([]) == []
    assert build_supplier_summary([], []) == []
    assert select_eligible([]) == []
    assert build_status_map([]) == {}

    report = evaluate([])
    assert report.statuses == {}
    assert report.orders == []
    assert report.categories == []
    assert report.suppliers == []


# ---------- FILTRES ----------
def test_filter_defaults_match_everything(reference_catalog):
    assert filter_products(reference_catalog) == reference_catalog
    assert filter_products(reference_catalog, FilterCriteria()) == reference_catalog


def test_filter_by_supplier_then_summarize(product):
    catalog = [
        product(id="P1", supplier="Staples"),
        product(id="P2", supplier="Office Depot"),
        product(id="P3", supplier="Staples"),
    ]

    filtered = filter_products(catalog, FilterCriteria(supplier="Staples"))
    assert [p.id for p in filtered] == ["P1", "P3"]

    summary = build_supplier_summary(filtered, select_eligible(filtered))
    assert len(summary) == 1
    assert summary[0].name == "Staples"
    assert summary[0].product_count == len(filtered)


def test_filter_category_is_exact_match(reference_catalog):
    assert filter_products(reference_catalog, FilterCriteria(category="office supplies")) == []

    office = filter_products(reference_catalog, FilterCriteria(category="Office Supplies"))
    assert [p.id for p in office] == ["P001", "P002", "P011", "P012"]


@pytest.mark.parametrize(
    "query, expected",
    [
        ("p003", ["P003"]),  # id
        ("TONER", ["P003"]),  # name
        ("janitorial", ["P006", "P009", "P010"]),  # category OU supplier
        ("staples", ["P002", "P012"]),  # supplier + name
        ("nothing-here", []),
    ],
)
def test_filter_search_text(reference_catalog, query, expected):
    result = filter_products(reference_catalog, FilterCriteria(search_text=query))
    assert [p.id for p in result] == expected


def test_filters_combine_with_and(reference_catalog):
    criteria = FilterCriteria(category="Office Supplies", supplier="Office Depot", search_text="paper")
    assert [p.id for p in filter_products(reference_catalog, criteria)] == ["P001"]


def test_available_filter_options(reference_catalog):
    assert available_categories(reference_catalog) == [
        "Health Supplies",
        "IT Supplies",
        "Janitorial",
        "Kitchen Supplies",
        "Office Supplies",
    ]
    assert available_suppliers(reference_catalog)[0] == "Gourmet Foods"
    assert len(available_suppliers(reference_catalog)) == 6


# ---------- PIPELINE ----------
def test_evaluate_is_idempotent(reference_catalog):
    assert evaluate(reference_catalog) == evaluate(reference_catalog)


def test_evaluate_applies_filter_before_eligibility(reference_catalog):
    report = evaluate(reference_catalog, FilterCriteria(supplier="Tech Solutions"))

    assert set(report.statuses) == {"P003", "P004"}
    assert [o.product.id for o in report.orders] == ["P003"]
    assert [c.name for c in report.categories] == ["IT Supplies"]
    assert report.suppliers[0].product_count == 2
    assert report.suppliers[0].pending_orders == 1


def test_evaluate_status_map(reference_catalog):
    statuses = evaluate(reference_catalog).statuses

    assert len(statuses) == len(reference_catalog)
    assert statuses["P001"] is StockStatus.below_par
    assert statuses["P004"] is StockStatus.at_par
