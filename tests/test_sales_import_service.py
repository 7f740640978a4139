"""
tests/test_sales_import_service.py

End-to-end import runs against an in-memory SQLite warehouse.

Coverage
--------
- Error budget boundary (5% tolerated, 10% aborts with partial commit)
- Terminal jobs cannot be re-parsed
- Missing required headers fail before any row is read
- Unsupported extensions and unknown jobs
- Greek CSV with a saved mapping, XLSX with native cell values
- Cancellation before the first row and between batches
- Out-of-range dates, quantities and write errors
"""

from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config import SalesImportSettings
from app.repositories.data_source_mapping_repository import DataSourceMappingRepository
from app.repositories.fact_sales_repository import FactSalesRepository
from app.services.sales_import_service import SalesImportService, build_sales_import_service
from db.models import DataSource, DimProduct, FactSales, ImportJob, ImportJobStatus
from db.repositories.import_job_repository import ImportJobRepository

HEADER = ["Date", "Product", "Customer", "Qty", "Amount"]


def _rows(count: int, *, bad_rows: tuple[int, ...] = ()) -> list[list[str]]:
    rows = []
    for index in range(count):
        amount = "ABC" if index in bad_rows else str(10 + index)
        rows.append([f"2024-01-{index + 1:02d}", f"Product {index % 3}", f"Customer {index % 4}", "2", amount])
    return rows


def _stage(session: Session, data_source: DataSource, path: Path | str) -> ImportJob:
    job = ImportJobRepository(session).create_job(data_source_id=data_source.id, file_path=str(path))
    session.commit()
    return job


def _fact_count(session: Session) -> int:
    return session.scalar(select(func.count(FactSales.id))) or 0


class CountdownSignal:
    """
    Reports "set" from the n-th check onwards.
    """

    def __init__(self, set_on_call: int) -> None:
        self._remaining = set_on_call
        self.calls = 0

    def is_set(self) -> bool:
        self.calls += 1
        return self.calls >= self._remaining


@pytest.fixture()
def service(session: Session, settings: SalesImportSettings) -> SalesImportService:
    return build_sales_import_service(session, settings)


# ---------------------------------------------------------------------------
# Error budget
# ---------------------------------------------------------------------------


class TestErrorBudget:
    def test_one_bad_row_in_twenty_is_tolerated(self, session, data_source, service, write_csv) -> None:
        path = write_csv("jan.csv", HEADER, _rows(20, bad_rows=(7,)))
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is True
        assert result.rows_imported == 19
        assert result.error is None
        session.refresh(job)
        assert job.status == ImportJobStatus.PARSED
        assert job.rows_imported == 19
        assert job.error_message == "Completed with 1 row errors."
        assert job.completed_at is not None
        assert _fact_count(session) == 19

    def test_two_bad_rows_in_twenty_abort(self, session, data_source, service, write_csv) -> None:
        path = write_csv("jan.csv", HEADER, _rows(20, bad_rows=(3, 11)))
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is False
        assert result.rows_imported == 0
        assert "Error rate 10.0%" in (result.error or "")
        assert "Row 5: Invalid Amount: 'ABC'" in (result.error or "")
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED
        assert job.rows_imported == 0
        assert "Error rate" in (job.error_message or "")
        # Flushed batches are kept.
        assert _fact_count(session) == 18

    def test_clean_file_clears_error_message(self, session, data_source, service, write_csv) -> None:
        path = write_csv("clean.csv", HEADER, _rows(3))
        job = _stage(session, data_source, path)

        service.parse_and_import(job.id)

        session.refresh(job)
        assert job.status == ImportJobStatus.PARSED
        assert job.error_message is None

    def test_header_only_file_fails(self, session, data_source, service, write_csv) -> None:
        path = write_csv("empty.csv", HEADER, [])
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is False
        assert "Error rate 100.0%" in (result.error or "")


# ---------------------------------------------------------------------------
# Job lifecycle and configuration errors
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_parsed_job_cannot_be_parsed_again(self, session, data_source, service, write_csv) -> None:
        path = write_csv("jan.csv", HEADER, _rows(4))
        job = _stage(session, data_source, path)
        service.parse_and_import(job.id)

        again = service.parse_and_import(job.id)

        assert again.success is False
        assert again.error == "Invalid status: parsed."
        assert _fact_count(session) == 4

    def test_unknown_job(self, service) -> None:
        result = service.parse_and_import(424242)

        assert result.success is False
        assert result.error == "Import not found."

    def test_missing_required_headers(self, session, data_source, service, write_csv) -> None:
        path = write_csv("odd.csv", ["Foo", "Bar", "Amount"], [["a", "b", "1"]])
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is False
        assert result.error == "Missing column mapping for: Date, Product, Customer."
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED
        assert _fact_count(session) == 0

    def test_unsupported_extension(self, session, data_source, service, tmp_path) -> None:
        job = _stage(session, data_source, tmp_path / "sales.txt")

        result = service.parse_and_import(job.id)

        assert result.error == "Unsupported file type: .txt"
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED

    def test_missing_file_marks_job_failed(self, session, data_source, service, tmp_path) -> None:
        job = _stage(session, data_source, tmp_path / "gone.csv")

        result = service.parse_and_import(job.id)

        assert result.success is False
        assert "Unable to open source file" in (result.error or "")
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED

    def test_relative_path_resolved_against_upload_root(self, session, data_source, write_csv) -> None:
        path = write_csv("rel.csv", HEADER, _rows(2))
        settings = SalesImportSettings(batch_size=5, log_row_errors=False, upload_root=str(path.parent))
        job = _stage(session, data_source, "rel.csv")

        result = build_sales_import_service(session, settings).parse_and_import(job.id)

        assert result.success is True
        assert result.rows_imported == 2


# ---------------------------------------------------------------------------
# Locale handling and file kinds
# ---------------------------------------------------------------------------


class TestFormats:
    def test_greek_csv_with_saved_mapping(self, session, data_source, service, write_csv) -> None:
        path = write_csv(
            "athens.csv",
            ["Ημ/νία", "Είδος", "Πελάτης", "Τεμάχια", "Αξία"],
            [["01/02/2024", "Καφές", "Πελάτης Α", "2", "1234,56"]],
            delimiter=";",
        )
        DataSourceMappingRepository(session).save(
            data_source_id=data_source.id,
            column_map={
                "Date": "Ημ/νία",
                "Product": "Είδος",
                "Customer": "Πελάτης",
                "Quantity": "Τεμάχια",
                "Amount": "Αξία",
            },
            culture="el-GR",
        )
        session.commit()
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is True
        fact = session.scalars(select(FactSales)).one()
        assert fact.amount == Decimal("1234.56")
        assert fact.sale_date == date(2024, 2, 1)
        assert fact.date_key == 20240201
        assert fact.quantity == 2

    def test_xlsx_with_native_values(self, session, data_source, service, write_xlsx) -> None:
        path = write_xlsx(
            "feb.xlsx",
            {
                "Πωλήσεις": [
                    ["Ημερομηνία", "Προϊόν", "Πελάτης", "Ποσό"],
                    [datetime(2024, 2, 3), "Τσάι", "Ελένη", 4.5],
                    [datetime(2024, 2, 4), "Τσάι", "Ελένη", 5],
                ]
            },
        )
        job = _stage(session, data_source, path)

        result = service.parse_and_import(job.id)

        assert result.success is True
        assert result.rows_imported == 2
        assert session.scalar(select(func.count(DimProduct.product_key))) == 1
        amounts = sorted(session.scalars(select(FactSales.amount)))
        assert amounts == [Decimal("4.5"), Decimal("5")]

    def test_repeated_names_reuse_dimension_keys_across_jobs(
        self, session, data_source, service, write_csv
    ) -> None:
        first = _stage(session, data_source, write_csv("a.csv", HEADER, _rows(6)))
        second = _stage(session, data_source, write_csv("b.csv", HEADER, _rows(6)))

        service.parse_and_import(first.id)
        service.parse_and_import(second.id)

        assert session.scalar(select(func.count(DimProduct.product_key))) == 3
        assert _fact_count(session) == 12


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_cancel_before_first_row(self, session, data_source, service, write_csv) -> None:
        path = write_csv("jan.csv", HEADER, _rows(10))
        job = _stage(session, data_source, path)
        event = threading.Event()
        event.set()

        result = service.parse_and_import(job.id, cancel_event=event)

        assert result.success is False
        assert result.error == "Import cancelled after 0 rows."
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED
        assert _fact_count(session) == 0

    def test_cancel_between_batches_keeps_flushed_rows(self, session, data_source, service, write_csv) -> None:
        path = write_csv("jan.csv", HEADER, _rows(20))
        job = _stage(session, data_source, path)
        # Checks: rows 1-5, flush, rows 6-7, then row 8 sees the signal.
        signal = CountdownSignal(set_on_call=9)

        result = service.parse_and_import(job.id, cancel_event=signal)

        assert result.error == "Import cancelled after 7 rows."
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED
        assert job.rows_imported == 0
        assert _fact_count(session) == 5


# ---------------------------------------------------------------------------
# Values the warehouse columns cannot hold
# ---------------------------------------------------------------------------


class TestOversizedValues:
    def test_out_of_range_date_is_counted_as_row_error(self, session, data_source, service, write_csv) -> None:
        rows = _rows(20)
        rows[4][0] = "1/2/99999999999999999999"
        job = _stage(session, data_source, write_csv("far.csv", HEADER, rows))

        result = service.parse_and_import(job.id)

        assert result.success is True
        assert result.rows_imported == 19
        session.refresh(job)
        assert job.status == ImportJobStatus.PARSED
        assert job.error_message == "Completed with 1 row errors."

    def test_huge_quantity_falls_back_to_one(self, session, data_source, service, write_csv) -> None:
        rows = _rows(20)
        rows[2][3] = "99999999999999999999"
        job = _stage(session, data_source, write_csv("qty.csv", HEADER, rows))

        result = service.parse_and_import(job.id)

        assert result.success is True
        assert result.rows_imported == 20
        assert sorted(set(session.scalars(select(FactSales.quantity)))) == [1, 2]

    def test_unexpected_write_error_marks_job_failed(
        self, session, data_source, service, write_csv, monkeypatch
    ) -> None:
        def _broken_add_facts(self, records):
            raise OverflowError("Python int too large to convert to SQLite INTEGER")

        monkeypatch.setattr(FactSalesRepository, "add_facts", _broken_add_facts)
        job = _stage(session, data_source, write_csv("jan.csv", HEADER, _rows(8)))

        result = service.parse_and_import(job.id)

        assert result.success is False
        assert result.error == "Python int too large to convert to SQLite INTEGER"
        session.refresh(job)
        assert job.status == ImportJobStatus.FAILED
        assert job.rows_imported == 0
        assert _fact_count(session) == 0
