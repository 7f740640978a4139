"""
app/storage/sqlalchemy_storage.py

SQLAlchemy-backed collaborators for the sales import pipeline.
"""

from __future__ import annotations

import logging

from babel import Locale
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.sales_import import FactRecord, PersistedMapping
from app.mappers.mapping_resolver import load_column_map
from app.repositories.data_source_mapping_repository import DataSourceMappingRepository
from app.repositories.dimension_repository import DimensionRepository
from app.repositories.fact_sales_repository import FactSalesRepository
from app.storage.base import DimensionStore, FactStore, ImportJobStore, MappingStore
from db.models.import_job import ImportJob
from db.repositories.errors import DuplicateDimensionError, ImportPersistenceError
from db.repositories.import_job_repository import ImportJobRepository

logger = logging.getLogger(__name__)


class SQLAlchemyDimensionStore(DimensionStore):
    """
    Every created entry is committed on its own; no row lock outlives the
    insert that took it.
    """

    def __init__(self, *, session: Session) -> None:
        self._session = session
        self._repository = DimensionRepository(session)

    def find_by_name(self, kind: str, name: str) -> int | None:
        return self._repository.find_key(kind, name)

    def create(self, kind: str, name: str) -> int:
        try:
            key = self._repository.create(kind, name)
        except DuplicateDimensionError:
            self._session.rollback()
            raise
        self._session.commit()
        return key


class SQLAlchemyFactStore(FactStore):
    """
    Buffers fact rows and writes each flushed batch in its own commit.
    """

    def __init__(self, *, session: Session, date_locale: Locale | str = "en") -> None:
        self._session = session
        self._repository = FactSalesRepository(session)
        self._date_locale = date_locale
        self._buffer: list[FactRecord] = []

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def append(self, record: FactRecord) -> None:
        self._buffer.append(record)

    def flush(self) -> int:
        if not self._buffer:
            return 0

        batch, self._buffer = self._buffer, []
        try:
            self._repository.ensure_dates(
                (record.sale_date for record in batch),
                locale=self._date_locale,
            )
            written = self._repository.add_facts(batch)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise ImportPersistenceError(f"Failed to write {len(batch)} fact rows: {exc}") from exc
        except Exception:
            self._session.rollback()
            raise

        logger.debug("Flushed %s fact rows.", written)
        return written

    def discard(self) -> int:
        dropped = len(self._buffer)
        self._buffer = []
        self._session.rollback()
        return dropped


class SQLAlchemyMappingStore(MappingStore):
    def __init__(self, *, session: Session) -> None:
        self._repository = DataSourceMappingRepository(session)

    def get(self, data_source_id: int) -> PersistedMapping | None:
        record = self._repository.get(data_source_id)
        if record is None:
            return None
        return PersistedMapping(
            column_map=load_column_map(record.column_map_json),
            culture=record.culture,
            sheet_name=record.sheet_name,
        )


class SQLAlchemyImportJobStore(ImportJobStore):
    def __init__(self, *, session: Session) -> None:
        self._repository = ImportJobRepository(session)

    def load(self, job_id: int) -> ImportJob | None:
        return self._repository.get_job(job_id)

    def save(self, job: ImportJob) -> None:
        self._repository.save(job)
