"""create sales warehouse tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

_JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "data_sources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("source_type", sa.String(length=32), nullable=False),
        sa.Column("owner_id", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_data_sources_owner_id", "data_sources", ["owner_id"], unique=False)

    op.create_table(
        "data_source_mappings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data_source_id", sa.Integer(), nullable=False),
        sa.Column("sheet_name", sa.String(length=255), nullable=False),
        sa.Column("culture", sa.String(length=35), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("column_map_json", _JSON, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["data_source_id"], ["data_sources.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("data_source_id", name="uq_data_source_mappings_data_source_id"),
    )

    op.create_table(
        "import_jobs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data_source_id", sa.Integer(), nullable=False),
        sa.Column("file_path", sa.String(length=1024), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("rows_imported", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["data_source_id"], ["data_sources.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_import_jobs_data_source_id", "import_jobs", ["data_source_id"], unique=False)
    op.create_index("ix_import_jobs_status", "import_jobs", ["status"], unique=False)

    op.create_table(
        "dim_products",
        sa.Column("product_key", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("sub_category", sa.String(length=120), nullable=True),
        sa.PrimaryKeyConstraint("product_key"),
        sa.UniqueConstraint("product_name", name="uq_dim_products_product_name"),
    )

    op.create_table(
        "dim_customers",
        sa.Column("customer_key", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("region", sa.String(length=120), nullable=True),
        sa.PrimaryKeyConstraint("customer_key"),
        sa.UniqueConstraint("customer_name", name="uq_dim_customers_customer_name"),
    )

    op.create_table(
        "dim_dates",
        sa.Column("date_key", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("full_date", sa.Date(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("quarter", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("month_name", sa.String(length=32), nullable=False),
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("iso_week", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("date_key"),
    )
    op.create_index("ix_dim_dates_year_month", "dim_dates", ["year", "month"], unique=False)

    op.create_table(
        "fact_sales",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data_source_id", sa.Integer(), nullable=False),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("date_key", sa.Integer(), nullable=False),
        sa.Column("product_key", sa.Integer(), nullable=False),
        sa.Column("customer_key", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=18, scale=4), nullable=False),
        sa.ForeignKeyConstraint(["data_source_id"], ["data_sources.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["date_key"], ["dim_dates.date_key"]),
        sa.ForeignKeyConstraint(["product_key"], ["dim_products.product_key"]),
        sa.ForeignKeyConstraint(["customer_key"], ["dim_customers.customer_key"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fact_sales_data_source_id", "fact_sales", ["data_source_id"], unique=False)
    op.create_index("ix_fact_sales_date_key", "fact_sales", ["date_key"], unique=False)
    op.create_index("ix_fact_sales_product_key", "fact_sales", ["product_key"], unique=False)
    op.create_index("ix_fact_sales_customer_key", "fact_sales", ["customer_key"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_fact_sales_customer_key", table_name="fact_sales")
    op.drop_index("ix_fact_sales_product_key", table_name="fact_sales")
    op.drop_index("ix_fact_sales_date_key", table_name="fact_sales")
    op.drop_index("ix_fact_sales_data_source_id", table_name="fact_sales")
    op.drop_table("fact_sales")
    op.drop_index("ix_dim_dates_year_month", table_name="dim_dates")
    op.drop_table("dim_dates")
    op.drop_table("dim_customers")
    op.drop_table("dim_products")
    op.drop_index("ix_import_jobs_status", table_name="import_jobs")
    op.drop_index("ix_import_jobs_data_source_id", table_name="import_jobs")
    op.drop_table("import_jobs")
    op.drop_table("data_source_mappings")
    op.drop_index("ix_data_sources_owner_id", table_name="data_sources")
    op.drop_table("data_sources")
