"""
app/storage/base.py

Collaborator contracts consumed by the sales import pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.sales_import import FactRecord, PersistedMapping
from db.models.import_job import ImportJob


class DimensionStore(ABC):
    """
    Name-keyed product/customer dimension storage.
    """

    @abstractmethod
    def find_by_name(self, kind: str, name: str) -> int | None:
        """
        Return the surrogate key for ``name`` or None when absent.
        """

    @abstractmethod
    def create(self, kind: str, name: str) -> int:
        """
        Create an entry, make it visible to other writers and return its key.

        Implementations raise DuplicateDimensionError when a concurrent writer
        created the same name first.
        """


class FactStore(ABC):
    """
    Buffered append-only fact storage.
    """

    @abstractmethod
    def append(self, record: FactRecord) -> None:
        """
        Buffer one fact row.
        """

    @abstractmethod
    def flush(self) -> int:
        """
        Persist buffered rows and return how many were written.
        """

    @abstractmethod
    def discard(self) -> int:
        """
        Drop buffered rows without writing them; returns how many were dropped.
        """

    @property
    @abstractmethod
    def pending(self) -> int:
        """
        Number of buffered rows not yet flushed.
        """


class MappingStore(ABC):
    @abstractmethod
    def get(self, data_source_id: int) -> PersistedMapping | None:
        """
        Return the saved mapping of a data source, if any.
        """


class ImportJobStore(ABC):
    @abstractmethod
    def load(self, job_id: int) -> ImportJob | None:
        """
        Return the job or None when it does not exist.
        """

    @abstractmethod
    def save(self, job: ImportJob) -> None:
        """
        Persist a status transition.
        """
