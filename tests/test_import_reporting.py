"""
tests/test_import_reporting.py

Job status responses and the JSON log lines emitted during an import.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from app.domain.sales_import import RowParseError
from app.logging_utils import log_event, row_error_fields
from app.schemas.sales_import import ImportJobStatusResponse
from db.models import DataSource, ImportJobStatus
from db.repositories.import_job_repository import ImportJobRepository

logger = logging.getLogger("tests.import_reporting")


class TestImportJobStatusResponse:
    def test_from_staged_job(self, session: Session, data_source: DataSource) -> None:
        job = ImportJobRepository(session).create_job(data_source_id=data_source.id, file_path="uploads/jan.csv")
        session.commit()

        response = ImportJobStatusResponse.from_job(job)

        assert response.job_id == job.id
        assert response.data_source_id == data_source.id
        assert response.status == ImportJobStatus.STAGED
        assert response.rows_imported == 0
        assert response.started_at is not None
        assert response.completed_at is None
        assert response.model_dump(mode="json")["file_path"] == "uploads/jan.csv"


class TestLogEvent:
    def test_pipeline_values_render_as_json_scalars(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_event(
                logger,
                logging.INFO,
                "sales_import.flushed",
                job_id=3,
                amount=Decimal("1234.5600"),
                sale_date=date(2024, 2, 1),
                file_path=Path("uploads") / "Πωλήσεις.csv",
                sheet=None,
            )

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload == {
            "event": "sales_import.flushed",
            "job_id": 3,
            "amount": "1234.5600",
            "sale_date": "2024-02-01",
            "file_path": str(Path("uploads") / "Πωλήσεις.csv"),
        }

    def test_disabled_level_emits_nothing(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_event(logger, logging.DEBUG, "sales_import.flushed", written=5)

        assert caplog.records == []

    def test_row_error_fields(self) -> None:
        error = RowParseError(message="Invalid Amount: 'ABC'", row_number=7, column="Ποσό", value="ABC")

        assert row_error_fields(error) == {
            "row": 7,
            "column": "Ποσό",
            "message": "Invalid Amount: 'ABC'",
            "value": "ABC",
        }
