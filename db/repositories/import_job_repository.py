"""
Repository for import job lifecycle persistence and status lookup.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.import_job import ImportJob, ImportJobStatus


class ImportJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_job(self, *, data_source_id: int, file_path: str) -> ImportJob:
        """
        Stage a stored file for parsing.
        """

        job = ImportJob(
            data_source_id=data_source_id,
            file_path=file_path,
            status=ImportJobStatus.STAGED,
            rows_imported=0,
            started_at=datetime.now(timezone.utc),
        )
        self._session.add(job)
        self._session.flush()
        self._session.refresh(job)
        return job

    def get_job(self, job_id: int) -> ImportJob | None:
        return self._session.get(ImportJob, job_id)

    def list_jobs(
        self,
        *,
        data_source_id: int | None = None,
        status: str | None = None,
        limit: int = 100,
    ) -> list[ImportJob]:
        stmt: Select[tuple[ImportJob]] = select(ImportJob)

        if data_source_id is not None:
            stmt = stmt.where(ImportJob.data_source_id == data_source_id)
        if status:
            stmt = stmt.where(ImportJob.status == status)

        stmt = stmt.order_by(ImportJob.id.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def save(self, job: ImportJob) -> None:
        """
        Persist the job's current state and commit the surrounding transaction.
        """

        self._session.add(job)
        self._session.commit()
