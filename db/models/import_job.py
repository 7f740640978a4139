"""
db/models/import_job.py

Import job model tracking one staged file through parsing.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.data_source import DataSource


class ImportJobStatus:
    STAGED = "staged"
    PARSED = "parsed"
    FAILED = "failed"


class ImportJob(Base, TimestampMixin):
    __tablename__ = "import_jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    data_source_id: Mapped[int] = mapped_column(
        ForeignKey("data_sources.id", ondelete="CASCADE"),
        nullable=False,
    )
    file_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Path of the stored upload; the bytes live in file storage",
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ImportJobStatus.STAGED,
        comment="staged, parsed, failed",
    )
    rows_imported: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    data_source: Mapped["DataSource"] = relationship("DataSource", back_populates="import_jobs")

    __table_args__ = (
        Index("ix_import_jobs_data_source_id", "data_source_id"),
        Index("ix_import_jobs_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<ImportJob id={self.id} status={self.status!r} rows={self.rows_imported}>"
