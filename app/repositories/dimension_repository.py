"""
app/repositories/dimension_repository.py

Lookup and insert helpers for the product and customer dimensions.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.sales_import import DimensionKind
from db.models.dim_customer import DimCustomer
from db.models.dim_product import DimProduct
from db.repositories.errors import DuplicateDimensionError


class DimensionRepository:
    """
    Repository for name-keyed dimension entries.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_key(self, kind: str, name: str) -> int | None:
        if kind == DimensionKind.PRODUCT:
            stmt = select(DimProduct.product_key).where(DimProduct.product_name == name)
        elif kind == DimensionKind.CUSTOMER:
            stmt = select(DimCustomer.customer_key).where(DimCustomer.customer_name == name)
        else:
            raise ValueError(f"Unknown dimension kind: {kind}")
        return self._session.execute(stmt).scalars().first()

    def create(self, kind: str, name: str) -> int:
        """
        Insert one entry inside a savepoint and return its surrogate key.

        Raises:
            DuplicateDimensionError: another writer created the same name first.
        """

        if kind == DimensionKind.PRODUCT:
            entry: DimProduct | DimCustomer = DimProduct(product_name=name)
        elif kind == DimensionKind.CUSTOMER:
            entry = DimCustomer(customer_name=name)
        else:
            raise ValueError(f"Unknown dimension kind: {kind}")

        try:
            with self._session.begin_nested():
                self._session.add(entry)
                self._session.flush()
        except IntegrityError as exc:
            raise DuplicateDimensionError(kind, name) from exc

        if isinstance(entry, DimProduct):
            return entry.product_key
        return entry.customer_key
