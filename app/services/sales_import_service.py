"""
app/services/sales_import_service.py

Import orchestration for staged sales files.

One call to ``parse_and_import`` moves a staged job to a terminal state:

    1. load the data source's saved mapping and parsing culture
    2. pick a reader from the file extension and read the header row
    3. resolve the header map (saved mapping or inference) and validate it
    4. stream rows through the parser, resolve dimensions, buffer facts
    5. flush buffered facts every ``batch_size`` rows and once at the end
    6. apply the error budget and mark the job Parsed or Failed

Dimension entries are committed as they are created. Batches flushed before
a failure stay persisted; the job then records zero imported rows.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from sqlalchemy.orm import Session

from app.config import SalesImportSettings, get_sales_import_settings
from app.domain.sales_import import (
    DimensionKind,
    FactRecord,
    ImportErrorBudget,
    ImportResult,
    PersistedMapping,
    RowParseError,
)
from app.logging_utils import log_event, row_error_fields
from app.mappers.mapping_resolver import MappingResolution, MappingResolver
from app.readers.base import SourceReader, UnsupportedFileTypeError
from app.readers.registry import get_source_reader
from app.services.dimension_resolver import DimensionResolver
from app.storage.base import DimensionStore, FactStore, ImportJobStore, MappingStore
from app.storage.sqlalchemy_storage import (
    SQLAlchemyDimensionStore,
    SQLAlchemyFactStore,
    SQLAlchemyImportJobStore,
    SQLAlchemyMappingStore,
)
from app.validators.mapping_validator import MappingValidator, SchemaMappingError
from app.validators.sales_row_parser import SalesRowParser, resolve_locale
from db.models.import_job import ImportJob, ImportJobStatus

logger = logging.getLogger(__name__)

# Header is line/row 1, so the first data row is row 2.
_FIRST_DATA_ROW = 2


class CancellationSignal(Protocol):
    def is_set(self) -> bool: ...


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ImportCancelledError(RuntimeError):
    """
    Raised inside the row loop when the caller's cancellation signal is set.
    """

    def __init__(self, rows_processed: int) -> None:
        super().__init__(f"Import cancelled after {rows_processed} rows.")
        self.rows_processed = rows_processed


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SalesImportService:
    """
    Drives one staged import through parsing, loading and the error budget.
    """

    def __init__(
        self,
        *,
        job_store: ImportJobStore,
        mapping_store: MappingStore,
        dimension_store: DimensionStore,
        fact_store: FactStore,
        settings: SalesImportSettings | None = None,
        mapping_resolver: MappingResolver | None = None,
        mapping_validator: MappingValidator | None = None,
        reader_factory: Callable[[str | Path], SourceReader] = get_source_reader,
    ) -> None:
        self._job_store = job_store
        self._mapping_store = mapping_store
        self._dimension_store = dimension_store
        self._fact_store = fact_store
        self._settings = settings or get_sales_import_settings()
        self._mapping_resolver = mapping_resolver or MappingResolver()
        self._mapping_validator = mapping_validator or MappingValidator()
        self._reader_factory = reader_factory

    def parse_and_import(
        self,
        job_id: int,
        cancel_event: CancellationSignal | None = None,
    ) -> ImportResult:
        """
        Parse a staged job's file and load its rows as sales facts.

        Args:
            job_id:        Import job to process; it must be Staged.
            cancel_event:  Optional signal (e.g. ``threading.Event``) checked
                           before every row and every flush.
        """
        job = self._job_store.load(job_id)
        if job is None:
            return ImportResult.failed("Import not found.")

        if job.status != ImportJobStatus.STAGED:
            log_event(
                logger,
                logging.WARNING,
                "sales_import.rejected",
                job_id=job_id,
                status=job.status,
            )
            return ImportResult.failed(f"Invalid status: {job.status}.")

        log_event(
            logger,
            logging.INFO,
            "sales_import.started",
            job_id=job_id,
            data_source_id=job.data_source_id,
            file_path=job.file_path,
        )

        try:
            return self._run(job, cancel_event)
        except ImportCancelledError as exc:
            dropped = self._fact_store.discard()
            log_event(
                logger,
                logging.WARNING,
                "sales_import.cancelled",
                job_id=job_id,
                rows_processed=exc.rows_processed,
                buffered_rows_dropped=dropped,
            )
            return self._fail(job, str(exc))
        except Exception as exc:  # noqa: BLE001
            # discard() rolls the session back; it must run before the job is read again.
            self._fact_store.discard()
            logger.exception("Sales import job %s failed unexpectedly.", job_id)
            return self._fail(job, str(exc) or exc.__class__.__name__)

    # ------------------------------------------------------------------
    # Import internals
    # ------------------------------------------------------------------

    def _run(self, job: ImportJob, cancel_event: CancellationSignal | None) -> ImportResult:
        persisted = self._mapping_store.get(job.data_source_id)
        culture = self._culture_for(persisted)
        path = self._resolve_path(job.file_path)

        try:
            reader = self._reader_factory(path)
        except UnsupportedFileTypeError as exc:
            return self._fail(job, str(exc))

        sheet_hint = persisted.sheet_name if persisted is not None else None
        source = reader.read_headers(path, sheet_hint)
        resolution = self._mapping_resolver.resolve(
            source.headers,
            persisted.column_map if persisted is not None else None,
        )
        try:
            self._mapping_validator.validate(
                mapping=resolution.canonical_to_source,
                source_headers=resolution.source_headers,
            )
        except SchemaMappingError as exc:
            return self._fail(job, exc.message)

        log_event(
            logger,
            logging.INFO,
            "sales_import.mapping_resolved",
            job_id=job.id,
            strategy=resolution.strategy,
            persisted_completeness=resolution.persisted_completeness,
            mapping=resolution.canonical_to_source,
            sheet=source.sheet_name,
            culture=culture,
        )

        budget = self._load_rows(
            job=job,
            reader=reader,
            path=path,
            sheet_name=source.sheet_name,
            resolution=resolution,
            culture=culture,
            cancel_event=cancel_event,
        )

        if budget.exceeded(self._settings.max_error_rate):
            log_event(
                logger,
                logging.WARNING,
                "sales_import.aborted",
                job_id=job.id,
                rows=budget.success_count,
                errors=budget.error_count,
                error_rate=round(budget.rate, 4),
            )
            return self._fail(job, budget.abort_message())

        job.status = ImportJobStatus.PARSED
        job.rows_imported = budget.success_count
        job.error_message = budget.completion_message()
        job.completed_at = _utcnow()
        self._job_store.save(job)

        log_event(
            logger,
            logging.INFO,
            "sales_import.finished",
            job_id=job.id,
            rows=budget.success_count,
            errors=budget.error_count,
        )
        return ImportResult(rows_imported=budget.success_count, success=True, error=None)

    def _load_rows(
        self,
        *,
        job: ImportJob,
        reader: SourceReader,
        path: Path,
        sheet_name: str | None,
        resolution: MappingResolution,
        culture: str,
        cancel_event: CancellationSignal | None,
    ) -> ImportErrorBudget:
        parser = SalesRowParser(resolve_locale(culture))
        dimensions = DimensionResolver(self._dimension_store)
        budget = ImportErrorBudget(max_samples=self._settings.max_error_samples)
        mapping = resolution.canonical_to_source

        for row_number, row in enumerate(reader.iter_rows(path, sheet_name), start=_FIRST_DATA_ROW):
            _check_cancelled(cancel_event, budget)

            fact, error = parser.parse(row, mapping, row_number=row_number)
            if error is not None:
                budget.record_error(error)
                self._log_row_error(job, error)
                continue

            self._fact_store.append(
                FactRecord(
                    data_source_id=job.data_source_id,
                    date_key=fact.date_key,
                    sale_date=fact.sale_date,
                    product_key=dimensions.resolve_or_create(DimensionKind.PRODUCT, fact.product_name),
                    customer_key=dimensions.resolve_or_create(DimensionKind.CUSTOMER, fact.customer_name),
                    quantity=fact.quantity,
                    amount=fact.amount,
                )
            )
            budget.record_success()

            if self._fact_store.pending >= self._settings.batch_size:
                self._flush(job, cancel_event, budget)

        self._flush(job, cancel_event, budget)
        return budget

    def _flush(
        self,
        job: ImportJob,
        cancel_event: CancellationSignal | None,
        budget: ImportErrorBudget,
    ) -> None:
        _check_cancelled(cancel_event, budget)
        written = self._fact_store.flush()
        if written:
            log_event(
                logger,
                logging.DEBUG,
                "sales_import.flushed",
                job_id=job.id,
                written=written,
                rows_so_far=budget.success_count,
            )

    def _fail(self, job: ImportJob, message: str) -> ImportResult:
        job.status = ImportJobStatus.FAILED
        job.rows_imported = 0
        job.error_message = message
        job.completed_at = _utcnow()
        self._job_store.save(job)

        log_event(
            logger,
            logging.WARNING,
            "sales_import.failed",
            job_id=job.id,
            error=message,
        )
        return ImportResult.failed(message)

    def _culture_for(self, persisted: PersistedMapping | None) -> str:
        if persisted is not None and persisted.culture and persisted.culture.strip():
            return persisted.culture.strip()
        return self._settings.default_culture

    def _resolve_path(self, file_path: str) -> Path:
        path = Path(file_path)
        if not path.is_absolute() and self._settings.upload_root:
            return Path(self._settings.upload_root) / path
        return path

    def _log_row_error(self, job: ImportJob, error: RowParseError) -> None:
        if not self._settings.log_row_errors:
            return
        log_event(
            logger,
            logging.WARNING,
            "sales_import.row_rejected",
            job_id=job.id,
            **row_error_fields(error),
        )


def _check_cancelled(cancel_event: CancellationSignal | None, budget: ImportErrorBudget) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ImportCancelledError(budget.total_rows)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_sales_import_service(
    session: Session,
    settings: SalesImportSettings | None = None,
) -> SalesImportService:
    """
    Wire the import service to SQLAlchemy-backed collaborators on ``session``.
    """
    settings = settings or get_sales_import_settings()
    return SalesImportService(
        job_store=SQLAlchemyImportJobStore(session=session),
        mapping_store=SQLAlchemyMappingStore(session=session),
        dimension_store=SQLAlchemyDimensionStore(session=session),
        fact_store=SQLAlchemyFactStore(
            session=session,
            date_locale=resolve_locale(settings.default_culture),
        ),
        settings=settings,
    )
