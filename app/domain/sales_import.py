"""
app/domain/sales_import.py

Domain values shared by the sales file parsing and loading pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any


class CanonicalField:
    DATE = "Date"
    PRODUCT = "Product"
    CUSTOMER = "Customer"
    QUANTITY = "Quantity"
    AMOUNT = "Amount"


# Evaluation order matters for header inference; keep it fixed.
CANONICAL_FIELDS: tuple[str, ...] = (
    CanonicalField.DATE,
    CanonicalField.PRODUCT,
    CanonicalField.CUSTOMER,
    CanonicalField.QUANTITY,
    CanonicalField.AMOUNT,
)

REQUIRED_CANONICAL_FIELDS: tuple[str, ...] = (
    CanonicalField.DATE,
    CanonicalField.PRODUCT,
    CanonicalField.CUSTOMER,
    CanonicalField.AMOUNT,
)

UNKNOWN_DIMENSION_NAME = "(unknown)"

RawRow = Mapping[str, Any]
HeaderMap = dict[str, str | None]


class DimensionKind:
    PRODUCT = "product"
    CUSTOMER = "customer"


def to_date_key(value: date) -> int:
    """
    Encode a calendar date as the dense YYYYMMDD integer used by dim_dates.
    """

    return value.year * 10000 + value.month * 100 + value.day


def stringify_cell(value: Any) -> str:
    """
    Render a raw cell (text or native spreadsheet scalar) as text.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == value.microsecond == 0:
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class ParsedFact:
    """
    One input row converted to typed values, before dimension lookup.
    """

    sale_date: date
    product_name: str
    customer_name: str
    quantity: int
    amount: Decimal

    @property
    def date_key(self) -> int:
        return to_date_key(self.sale_date)


@dataclass(frozen=True)
class FactRecord:
    """
    A fact row ready to be appended to the warehouse.
    """

    data_source_id: int
    date_key: int
    sale_date: date
    product_key: int
    customer_key: int
    quantity: int
    amount: Decimal


@dataclass(frozen=True)
class RowParseError:
    """
    One row-level parse failure.
    """

    message: str
    row_number: int | None = None
    column: str | None = None
    value: str | None = None

    def describe(self) -> str:
        if self.row_number is None:
            return self.message
        return f"Row {self.row_number}: {self.message}"


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of one import attempt, as returned to the calling layer.
    """

    rows_imported: int
    success: bool
    error: str | None = None

    @classmethod
    def failed(cls, message: str) -> ImportResult:
        return cls(rows_imported=0, success=False, error=message)


def error_rate(success_count: int, error_count: int) -> float:
    """
    Fraction of processed rows that failed; an empty file counts as all-failed.
    """

    total = success_count + error_count
    if total == 0:
        return 1.0
    return error_count / total


def exceeds_error_budget(success_count: int, error_count: int, max_rate: float) -> bool:
    return error_rate(success_count, error_count) > max_rate


@dataclass
class ImportErrorBudget:
    """
    Running success/error tally with a bounded sample of error messages.
    """

    max_samples: int = 10
    success_count: int = 0
    error_count: int = 0
    samples: list[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.success_count += 1

    def record_error(self, error: RowParseError) -> None:
        self.error_count += 1
        if len(self.samples) < self.max_samples:
            self.samples.append(error.describe())

    @property
    def total_rows(self) -> int:
        return self.success_count + self.error_count

    @property
    def rate(self) -> float:
        return error_rate(self.success_count, self.error_count)

    def exceeded(self, max_rate: float) -> bool:
        return exceeds_error_budget(self.success_count, self.error_count, max_rate)

    def abort_message(self) -> str:
        return (
            f"Parsing aborted. Error rate {self.rate * 100:.1f}% "
            f"(rows={self.success_count}, errors={self.error_count}). "
            f"Samples: {' | '.join(self.samples)}"
        )

    def completion_message(self) -> str | None:
        if self.error_count == 0:
            return None
        return f"Completed with {self.error_count} row errors."


@dataclass(frozen=True)
class PersistedMapping:
    """
    Saved parsing options of one data source as seen by the import pipeline.
    """

    column_map: dict[str, str] | None = None
    culture: str | None = None
    sheet_name: str | None = None
