"""
app/services/dimension_resolver.py

Lookup-or-create of product/customer surrogate keys during a load.
"""

from __future__ import annotations

import logging

from app.domain.sales_import import UNKNOWN_DIMENSION_NAME
from app.storage.base import DimensionStore
from db.repositories.errors import DuplicateDimensionError

logger = logging.getLogger(__name__)


class DimensionResolver:
    """
    Resolves dimension names to keys, creating entries on first sight.

    The per-name cache only saves round trips; a resolver without it returns
    the same keys.
    """

    def __init__(self, store: DimensionStore, *, use_cache: bool = True) -> None:
        self._store = store
        self._use_cache = use_cache
        self._cache: dict[tuple[str, str], int] = {}

    @property
    def cached_entries(self) -> int:
        return len(self._cache)

    def resolve_or_create(self, kind: str, name: str | None) -> int:
        normalized = (name or "").strip() or UNKNOWN_DIMENSION_NAME
        cache_key = (kind, normalized)
        if self._use_cache and cache_key in self._cache:
            return self._cache[cache_key]

        key = self._store.find_by_name(kind, normalized)
        if key is None:
            try:
                key = self._store.create(kind, normalized)
            except DuplicateDimensionError:
                logger.info("Concurrent create for %s %r; reusing existing entry.", kind, normalized)
                key = self._store.find_by_name(kind, normalized)
                if key is None:
                    raise

        if self._use_cache:
            self._cache[cache_key] = key
        return key
