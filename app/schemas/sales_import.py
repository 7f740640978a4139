"""
app/schemas/sales_import.py

Response schemas for sales import and file preview results.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.sales_import import ImportResult
from db.models.import_job import ImportJob


class ImportResultResponse(BaseModel):
    """
    Outcome of one parse-and-import attempt.
    """

    rows_imported: int = Field(..., ge=0)
    success: bool
    error: str | None = None

    @classmethod
    def from_result(cls, result: ImportResult) -> ImportResultResponse:
        return cls(rows_imported=result.rows_imported, success=result.success, error=result.error)


class ImportJobStatusResponse(BaseModel):
    """
    Persisted state of an import job after a parse attempt.
    """

    job_id: int
    data_source_id: int
    file_path: str
    status: str
    rows_imported: int = Field(..., ge=0)
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_job(cls, job: ImportJob) -> ImportJobStatusResponse:
        return cls(
            job_id=job.id,
            data_source_id=job.data_source_id,
            file_path=job.file_path,
            status=job.status,
            rows_imported=job.rows_imported,
            error_message=job.error_message,
            started_at=job.started_at,
            completed_at=job.completed_at,
        )


class PreviewResponse(BaseModel):
    """
    Headers, sample rows and suggested mapping of an uploaded file.
    """

    file_type: str
    sheets: list[str] = Field(default_factory=list)
    selected_sheet: str | None = None
    headers: list[str] = Field(default_factory=list)
    sample_rows: list[dict[str, Any]] = Field(default_factory=list)
    suggested_map: dict[str, str | None] = Field(default_factory=dict)
