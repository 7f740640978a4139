"""
app/repositories/data_source_mapping_repository.py

Persistence helpers for per-data-source header mappings.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.data_source_mapping import (
    DEFAULT_MAPPING_CULTURE,
    DEFAULT_MAPPING_KIND,
    DataSourceMapping,
)


class DataSourceMappingRepository:
    """
    Repository for reading and upserting the saved mapping of a data source.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, data_source_id: int) -> DataSourceMapping | None:
        stmt = select(DataSourceMapping).where(DataSourceMapping.data_source_id == data_source_id)
        return self._session.execute(stmt).scalars().first()

    def save(
        self,
        *,
        data_source_id: int,
        column_map: Mapping[str, str | None] | None,
        sheet_name: str | None = None,
        culture: str | None = None,
        kind: str | None = None,
    ) -> DataSourceMapping:
        """
        Insert or update the mapping keyed by data source.

        Unmapped canonical fields are not stored.
        """

        cleaned = None
        if column_map is not None:
            cleaned = {
                field: header.strip()
                for field, header in column_map.items()
                if isinstance(header, str) and header.strip()
            }

        existing = self.get(data_source_id)
        if existing is None:
            existing = DataSourceMapping(
                data_source_id=data_source_id,
                sheet_name=(sheet_name or "").strip(),
                culture=(culture or DEFAULT_MAPPING_CULTURE).strip(),
                kind=(kind or DEFAULT_MAPPING_KIND).strip(),
                column_map_json=cleaned,
            )
            self._session.add(existing)
        else:
            existing.column_map_json = cleaned
            if sheet_name is not None:
                existing.sheet_name = sheet_name.strip()
            if culture:
                existing.culture = culture.strip()
            if kind:
                existing.kind = kind.strip()

        self._session.flush()
        return existing
