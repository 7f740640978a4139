"""
db/models/dim_date.py

Calendar dimension. The primary key is the dense YYYYMMDD date key that
fact rows join on.
"""

from __future__ import annotations

from datetime import date

from babel import Locale
from babel.dates import format_date
from sqlalchemy import Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DimDate(Base):
    __tablename__ = "dim_dates"

    date_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    full_date: Mapped[date] = mapped_column(Date, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    month_name: Mapped[str] = mapped_column(String(32), nullable=False)
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    iso_week: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_dim_dates_year_month", "year", "month"),
    )

    @classmethod
    def from_date(cls, value: date, *, locale: Locale | str = "en") -> DimDate:
        """
        Build the calendar row for one date; month_name is rendered in ``locale``.
        """

        return cls(
            date_key=value.year * 10000 + value.month * 100 + value.day,
            full_date=value,
            year=value.year,
            quarter=(value.month - 1) // 3 + 1,
            month=value.month,
            month_name=format_date(value, "LLLL", locale=locale),
            day=value.day,
            iso_week=value.isocalendar()[1],
        )
