"""
db/models/data_source_mapping.py

Persisted header mapping and parsing options for one data source.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, JSONType, TimestampMixin

if TYPE_CHECKING:
    from db.models.data_source import DataSource

DEFAULT_MAPPING_CULTURE = "el-GR"
DEFAULT_MAPPING_KIND = "Sales"


class DataSourceMapping(Base, TimestampMixin):
    __tablename__ = "data_source_mappings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    data_source_id: Mapped[int] = mapped_column(
        ForeignKey("data_sources.id", ondelete="CASCADE"),
        nullable=False,
    )
    sheet_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        comment="Worksheet to read for spreadsheet files; empty means first sheet",
    )
    culture: Mapped[str] = mapped_column(
        String(35),
        nullable=False,
        default=DEFAULT_MAPPING_CULTURE,
        comment="Parsing culture, e.g. el-GR or en-US",
    )
    kind: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_MAPPING_KIND,
        comment="Sales | Generic",
    )
    column_map_json: Mapped[dict[str, str] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Canonical field -> source header",
    )

    data_source: Mapped["DataSource"] = relationship("DataSource", back_populates="mapping")

    __table_args__ = (
        UniqueConstraint("data_source_id", name="uq_data_source_mappings_data_source_id"),
    )
