"""
db/models/fact_sales.py

Sales fact table: one row per successfully parsed input row.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class FactSales(Base):
    __tablename__ = "fact_sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    data_source_id: Mapped[int] = mapped_column(
        ForeignKey("data_sources.id", ondelete="CASCADE"),
        nullable=False,
    )
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)
    date_key: Mapped[int] = mapped_column(ForeignKey("dim_dates.date_key"), nullable=False)
    product_key: Mapped[int] = mapped_column(ForeignKey("dim_products.product_key"), nullable=False)
    customer_key: Mapped[int] = mapped_column(ForeignKey("dim_customers.customer_key"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)

    __table_args__ = (
        Index("ix_fact_sales_data_source_id", "data_source_id"),
        Index("ix_fact_sales_date_key", "date_key"),
        Index("ix_fact_sales_product_key", "product_key"),
        Index("ix_fact_sales_customer_key", "customer_key"),
    )
