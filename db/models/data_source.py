"""
db/models/data_source.py

Data source model. Root entity that owns mappings, import jobs and facts.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.data_source_mapping import DataSourceMapping
    from db.models.import_job import ImportJob


class DataSourceType:
    SALES = "sales"
    SATISFACTION = "satisfaction"
    GENERIC = "generic"


class DataSource(Base, TimestampMixin):
    """
    A named stream of uploaded files (e.g. one shop's monthly sales exports).

    Every file imported for the source shares one persisted header mapping.
    """

    __tablename__ = "data_sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    source_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DataSourceType.SALES,
        comment="sales, satisfaction, generic",
    )

    owner_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Identifier of the owning user, managed by the auth layer",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    mapping: Mapped["DataSourceMapping | None"] = relationship(
        "DataSourceMapping",
        back_populates="data_source",
        uselist=False,
        cascade="all, delete-orphan",
    )

    import_jobs: Mapped[list["ImportJob"]] = relationship(
        "ImportJob",
        back_populates="data_source",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_data_sources_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<DataSource id={self.id} name={self.name!r} type={self.source_type!r}>"
