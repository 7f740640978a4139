"""
app/repositories/fact_sales_repository.py

Persistence layer for sales fact rows and the date dimension they join to.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from babel import Locale
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.sales_import import FactRecord, to_date_key
from db.models.dim_date import DimDate
from db.models.fact_sales import FactSales


class FactSalesRepository:
    """
    Repository for append-only fact inserts.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def ensure_dates(self, dates: Iterable[date], *, locale: Locale | str = "en") -> int:
        """
        Create missing ``dim_dates`` rows; returns how many were added.
        """

        by_key = {to_date_key(value): value for value in dates}
        if not by_key:
            return 0

        existing = set(
            self._session.execute(
                select(DimDate.date_key).where(DimDate.date_key.in_(list(by_key)))
            ).scalars()
        )
        created = 0
        for key, value in by_key.items():
            if key in existing:
                continue
            try:
                with self._session.begin_nested():
                    self._session.add(DimDate.from_date(value, locale=locale))
                    self._session.flush()
            except IntegrityError:
                # Created concurrently by another import.
                continue
            created += 1
        return created

    def add_facts(self, records: Sequence[FactRecord]) -> int:
        self._session.add_all(
            [
                FactSales(
                    data_source_id=record.data_source_id,
                    sale_date=record.sale_date,
                    date_key=record.date_key,
                    product_key=record.product_key,
                    customer_key=record.customer_key,
                    quantity=record.quantity,
                    amount=record.amount,
                )
                for record in records
            ]
        )
        self._session.flush()
        return len(records)

    def count_for_data_source(self, data_source_id: int) -> int:
        stmt = select(func.count(FactSales.id)).where(FactSales.data_source_id == data_source_id)
        return int(self._session.execute(stmt).scalar_one())
