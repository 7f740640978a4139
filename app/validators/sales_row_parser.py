"""
app/validators/sales_row_parser.py

Locale-aware conversion of one raw sales row into a typed fact.

Every typed value is parsed under the configured culture first and under the
invariant culture second. Amount and Date failures reject the row, while a
Quantity that cannot be read falls back to 1.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any

from babel import Locale, UnknownLocaleError
from babel.dates import parse_date as babel_parse_date
from babel.numbers import parse_decimal, parse_number

from app.domain.sales_import import (
    UNKNOWN_DIMENSION_NAME,
    CanonicalField,
    ParsedFact,
    RawRow,
    RowParseError,
    stringify_cell,
)

logger = logging.getLogger(__name__)

INVARIANT_LOCALE = Locale.parse("en")

# strptime accepts unpadded day/month, so these also cover d/M/yyyy and d-M-yyyy.
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
)

DEFAULT_QUANTITY = 1

# Column limits of fact_sales: quantity is a 32-bit INTEGER, amount is NUMERIC(18, 4).
MAX_QUANTITY = 2**31 - 1
MAX_AMOUNT = Decimal("99999999999999.9999")

_CURRENCY_SYMBOLS = re.compile(r"[€$£]")


@lru_cache(maxsize=32)
def resolve_locale(culture: str | None) -> Locale:
    """
    Map a culture name such as ``el-GR`` or ``en_US`` to a Babel locale.
    """

    if not culture or not culture.strip():
        return INVARIANT_LOCALE
    try:
        return Locale.parse(culture.strip().replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        logger.warning("Unknown culture %r; using invariant number and date rules.", culture)
        return INVARIANT_LOCALE


def cell_value(row: RawRow, header: str | None) -> Any:
    """
    Look a header up exactly, then case-insensitively.
    """

    if not header:
        return None
    if header in row:
        return row[header]
    folded = header.strip().casefold()
    for key, value in row.items():
        if isinstance(key, str) and key.strip().casefold() == folded:
            return value
    return None


class SalesRowParser:
    """
    Parses mapped sales rows under one culture with invariant fallback.
    """

    def __init__(self, culture: str | Locale | None = "el-GR") -> None:
        self._locale = culture if isinstance(culture, Locale) else resolve_locale(culture)

    @property
    def locale(self) -> Locale:
        return self._locale

    def parse(
        self,
        row: RawRow,
        mapping: Mapping[str, str | None],
        *,
        row_number: int | None = None,
    ) -> tuple[ParsedFact | None, RowParseError | None]:
        """
        Convert one row; exactly one side of the returned pair is set.
        """

        raw_date = cell_value(row, mapping.get(CanonicalField.DATE))
        product = self.parse_name(cell_value(row, mapping.get(CanonicalField.PRODUCT)))
        customer = self.parse_name(cell_value(row, mapping.get(CanonicalField.CUSTOMER)))

        quantity_header = mapping.get(CanonicalField.QUANTITY)
        if quantity_header and quantity_header.strip():
            raw_quantity: Any = cell_value(row, quantity_header)
        else:
            raw_quantity = str(DEFAULT_QUANTITY)

        raw_amount = cell_value(row, mapping.get(CanonicalField.AMOUNT))

        sale_date = self.parse_date(raw_date)
        if sale_date is None:
            return None, RowParseError(
                message=f"Invalid Date: '{stringify_cell(raw_date)}'",
                row_number=row_number,
                column=mapping.get(CanonicalField.DATE),
                value=stringify_cell(raw_date),
            )

        quantity = self.parse_quantity(raw_quantity)

        amount = self.parse_amount(raw_amount)
        if amount is None:
            return None, RowParseError(
                message=f"Invalid Amount: '{stringify_cell(raw_amount)}'",
                row_number=row_number,
                column=mapping.get(CanonicalField.AMOUNT),
                value=stringify_cell(raw_amount),
            )

        return (
            ParsedFact(
                sale_date=sale_date,
                product_name=product,
                customer_name=customer,
                quantity=quantity,
                amount=amount,
            ),
            None,
        )

    @staticmethod
    def parse_name(value: Any) -> str:
        name = stringify_cell(value).strip()
        return name or UNKNOWN_DIMENSION_NAME

    def parse_date(self, value: Any) -> date | None:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        text = stringify_cell(value).strip()
        if not text:
            return None

        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except (ValueError, OverflowError):
                continue

        parsed = _babel_date(text, self._locale)
        if parsed is not None:
            return parsed

        try:
            return datetime.fromisoformat(text).date()
        except (ValueError, OverflowError):
            pass
        return _babel_date(text, INVARIANT_LOCALE)

    def parse_quantity(self, value: Any) -> int:
        """
        Read a non-negative integer quantity; anything else becomes 1.
        """

        if isinstance(value, bool):
            return DEFAULT_QUANTITY
        if isinstance(value, int):
            return _storable_quantity(value)
        if isinstance(value, (float, Decimal)):
            try:
                integral = int(value)
            except (ValueError, OverflowError, InvalidOperation):
                return DEFAULT_QUANTITY
            if integral != value:
                return DEFAULT_QUANTITY
            return _storable_quantity(integral)

        text = stringify_cell(value).strip()
        if not text:
            return DEFAULT_QUANTITY
        for locale in (self._locale, INVARIANT_LOCALE):
            try:
                quantity = parse_number(text, locale=locale)
            except ValueError:
                continue
            return _storable_quantity(quantity)
        return DEFAULT_QUANTITY

    def parse_amount(self, value: Any) -> Decimal | None:
        """
        Read a finite amount that fits the fact column; anything else is rejected.
        """

        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return _storable_amount(Decimal(value))
        if isinstance(value, float):
            return _storable_amount(Decimal(repr(value))) if math.isfinite(value) else None
        if isinstance(value, Decimal):
            return _storable_amount(value)

        text = _CURRENCY_SYMBOLS.sub("", stringify_cell(value)).strip()
        if not text:
            return None
        for locale in (self._locale, INVARIANT_LOCALE):
            try:
                amount = parse_decimal(text, locale=locale, strict=True)
            except ValueError:
                continue
            if _storable_amount(amount) is not None:
                return amount
        return None


def _storable_quantity(value: int) -> int:
    if 0 <= value <= MAX_QUANTITY:
        return value
    return DEFAULT_QUANTITY


def _storable_amount(value: Decimal) -> Decimal | None:
    if value.is_finite() and abs(value) <= MAX_AMOUNT:
        return value
    return None


def _babel_date(text: str, locale: Locale) -> date | None:
    try:
        return babel_parse_date(text, locale=locale)
    except (ValueError, IndexError, OverflowError):
        return None
