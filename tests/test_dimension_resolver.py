"""
tests/test_dimension_resolver.py

Lookup-or-create semantics against an in-memory store and the SQL store.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.sales_import import UNKNOWN_DIMENSION_NAME, DimensionKind
from app.services.dimension_resolver import DimensionResolver
from app.storage.base import DimensionStore
from app.storage.sqlalchemy_storage import SQLAlchemyDimensionStore
from db.models import DimCustomer, DimProduct
from db.repositories.errors import DuplicateDimensionError


class InMemoryDimensionStore(DimensionStore):
    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], int] = {}
        self.lookups = 0
        self.creates = 0

    def find_by_name(self, kind: str, name: str) -> int | None:
        self.lookups += 1
        return self.entries.get((kind, name))

    def create(self, kind: str, name: str) -> int:
        self.creates += 1
        if (kind, name) in self.entries:
            raise DuplicateDimensionError(kind, name)
        key = len(self.entries) + 1
        self.entries[(kind, name)] = key
        return key


class RacingDimensionStore(InMemoryDimensionStore):
    """
    Simulates another import creating the entry between lookup and create.
    """

    def create(self, kind: str, name: str) -> int:
        if (kind, name) not in self.entries:
            self.entries[(kind, name)] = 100 + len(self.entries)
        return super().create(kind, name)


class TestDimensionResolver:
    def test_same_name_same_key(self) -> None:
        store = InMemoryDimensionStore()
        resolver = DimensionResolver(store)

        first = resolver.resolve_or_create(DimensionKind.PRODUCT, "Espresso")
        second = resolver.resolve_or_create(DimensionKind.PRODUCT, "  Espresso ")

        assert first == second
        assert store.creates == 1
        assert store.lookups == 1

    def test_kinds_are_separate(self) -> None:
        store = InMemoryDimensionStore()
        resolver = DimensionResolver(store)

        product = resolver.resolve_or_create(DimensionKind.PRODUCT, "Nikos")
        customer = resolver.resolve_or_create(DimensionKind.CUSTOMER, "Nikos")

        assert product != customer
        assert len(store.entries) == 2

    def test_uncached_resolver_returns_same_keys(self) -> None:
        store = InMemoryDimensionStore()
        cached = DimensionResolver(store)
        uncached = DimensionResolver(store, use_cache=False)

        names = ["Tea", "Coffee", "Tea", "Cake", "Coffee"]
        cached_keys = [cached.resolve_or_create(DimensionKind.PRODUCT, name) for name in names]
        uncached_keys = [uncached.resolve_or_create(DimensionKind.PRODUCT, name) for name in names]

        assert cached_keys == uncached_keys
        assert len(store.entries) == 3
        assert uncached.cached_entries == 0

    def test_blank_name_maps_to_placeholder(self) -> None:
        store = InMemoryDimensionStore()
        resolver = DimensionResolver(store)

        key = resolver.resolve_or_create(DimensionKind.CUSTOMER, "   ")

        assert store.entries[(DimensionKind.CUSTOMER, UNKNOWN_DIMENSION_NAME)] == key

    def test_create_race_falls_back_to_lookup(self) -> None:
        store = RacingDimensionStore()
        resolver = DimensionResolver(store)

        key = resolver.resolve_or_create(DimensionKind.PRODUCT, "Freddo")

        assert key == 100
        assert store.lookups == 2


class TestSQLAlchemyDimensionStore:
    def test_resolves_across_resolvers_without_duplicates(self, session: Session) -> None:
        store = SQLAlchemyDimensionStore(session=session)

        first = DimensionResolver(store).resolve_or_create(DimensionKind.PRODUCT, "Bougatsa")
        session.commit()
        second = DimensionResolver(store).resolve_or_create(DimensionKind.PRODUCT, "Bougatsa")

        assert first == second
        assert session.scalar(select(func.count(DimProduct.product_key))) == 1

    def test_duplicate_create_raises_and_keeps_session_usable(self, session: Session) -> None:
        store = SQLAlchemyDimensionStore(session=session)
        key = store.create(DimensionKind.CUSTOMER, "Maria")

        with pytest.raises(DuplicateDimensionError):
            store.create(DimensionKind.CUSTOMER, "Maria")

        assert store.find_by_name(DimensionKind.CUSTOMER, "Maria") == key
        assert session.scalar(select(func.count(DimCustomer.customer_key))) == 1

    def test_created_entry_is_committed_immediately(self, session: Session) -> None:
        store = SQLAlchemyDimensionStore(session=session)

        key = store.create(DimensionKind.PRODUCT, "Loukoumades")

        assert not session.in_transaction()
        session.rollback()
        assert store.find_by_name(DimensionKind.PRODUCT, "Loukoumades") == key

    def test_entries_survive_a_discarded_fact_batch(self, session: Session) -> None:
        store = SQLAlchemyDimensionStore(session=session)
        resolver = DimensionResolver(store)

        resolver.resolve_or_create(DimensionKind.PRODUCT, "Tea")
        resolver.resolve_or_create(DimensionKind.CUSTOMER, "Eleni")
        session.rollback()

        assert session.scalar(select(func.count(DimProduct.product_key))) == 1
        assert session.scalar(select(func.count(DimCustomer.customer_key))) == 1
