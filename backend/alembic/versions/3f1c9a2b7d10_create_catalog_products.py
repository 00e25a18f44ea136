"""create catalog_products

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18 09:12:05.114532
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE_NAME = "catalog_products"


def upgrade() -> None:
    op.create_table(
        TABLE_NAME,
        sa.Column("pk", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("sku", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("supplier", sa.String(255), nullable=False),
        sa.Column("current_stock", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("par_level", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("reorder_point", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("uom", sa.String(32), nullable=False, server_default="Each"),
        sa.Column("auto_order_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_order_date", sa.Date()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # Signe contrôlé au chargement ; reorder_point <= par_level volontairement NON contraint
        sa.CheckConstraint("current_stock >= 0", name="ck_catalog_current_stock_nonneg"),
        sa.CheckConstraint("par_level >= 0", name="ck_catalog_par_level_nonneg"),
        sa.CheckConstraint("reorder_point >= 0", name="ck_catalog_reorder_point_nonneg"),
        sa.CheckConstraint("unit_price >= 0", name="ck_catalog_unit_price_nonneg"),
    )
    op.create_index("ix_catalog_products_category", TABLE_NAME, ["category"])
    op.create_index("ix_catalog_products_supplier", TABLE_NAME, ["supplier"])


def downgrade() -> None:
    op.drop_index("ix_catalog_products_supplier", table_name=TABLE_NAME)
    op.drop_index("ix_catalog_products_category", table_name=TABLE_NAME)
    op.drop_table(TABLE_NAME)
