"""
app/readers/spreadsheet_reader.py

Workbook reader for .xlsx (openpyxl, read-only streaming) and legacy .xls
(xlrd). The first row of the chosen sheet is the header row.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from app.readers.base import (
    FileKind,
    SourceHeaders,
    SourceReadError,
    SourceReader,
    is_blank_row,
    make_unique_headers,
    zip_row,
)

logger = logging.getLogger(__name__)


def _clean_cell(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _pick_sheet(names: Sequence[str], sheet_hint: str | None) -> str:
    if not names:
        raise SourceReadError("Workbook contains no sheets.")
    if sheet_hint and sheet_hint.strip():
        hint = sheet_hint.strip()
        if hint in names:
            return hint
        logger.warning("Sheet %r not found; falling back to %r.", hint, names[0])
    return names[0]


class SpreadsheetSourceReader(SourceReader):
    """
    Reads named sheets from Excel workbooks.
    """

    def __init__(self, *, file_kind: str = FileKind.XLSX) -> None:
        if file_kind not in (FileKind.XLSX, FileKind.XLS):
            raise ValueError(f"SpreadsheetSourceReader does not read '{file_kind}' files.")
        self.file_kind = file_kind

    def sheet_names(self, path: str | Path) -> list[str]:
        with self._workbook(path) as workbook:
            return self._sheet_names(workbook)

    def read_headers(self, path: str | Path, sheet_hint: str | None = None) -> SourceHeaders:
        with self._workbook(path) as workbook:
            sheet_name = _pick_sheet(self._sheet_names(workbook), sheet_hint)
            first_row: Sequence[Any] = next(self._iter_values(workbook, sheet_name), ())
        return SourceHeaders(headers=make_unique_headers(first_row), sheet_name=sheet_name)

    def iter_rows(self, path: str | Path, sheet_name: str | None = None) -> Iterator[dict[str, Any]]:
        with self._workbook(path) as workbook:
            chosen = _pick_sheet(self._sheet_names(workbook), sheet_name)
            values = self._iter_values(workbook, chosen)
            headers = make_unique_headers(next(values, ()))
            for raw in values:
                cells = [_clean_cell(cell) for cell in raw]
                if is_blank_row(cells):
                    continue
                yield zip_row(headers, cells)

    @contextmanager
    def _workbook(self, path: str | Path) -> Iterator[Any]:
        try:
            if self.file_kind == FileKind.XLS:
                workbook = xlrd.open_workbook(str(path), on_demand=True)
            else:
                workbook = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
        except FileNotFoundError as exc:
            raise SourceReadError(f"Unable to open source file '{path}': {exc}") from exc
        except (
            InvalidFileException,
            zipfile.BadZipFile,
            xlrd.XLRDError,
            OSError,
            KeyError,
            ValueError,
        ) as exc:
            raise SourceReadError(f"Unable to read workbook '{path}': {exc}") from exc

        try:
            yield workbook
        finally:
            if self.file_kind == FileKind.XLS:
                workbook.release_resources()
            else:
                workbook.close()

    def _sheet_names(self, workbook: Any) -> list[str]:
        if self.file_kind == FileKind.XLS:
            return list(workbook.sheet_names())
        return list(workbook.sheetnames)

    def _iter_values(self, workbook: Any, sheet_name: str) -> Iterator[Sequence[Any]]:
        if self.file_kind == FileKind.XLS:
            yield from _iter_xls_values(workbook, sheet_name)
            return
        worksheet = workbook[sheet_name]
        yield from worksheet.iter_rows(values_only=True)


def _iter_xls_values(workbook: Any, sheet_name: str) -> Iterator[list[Any]]:
    sheet = workbook.sheet_by_name(sheet_name)
    for row_index in range(sheet.nrows):
        yield [
            _xls_cell_value(workbook, sheet.cell(row_index, col_index))
            for col_index in range(sheet.ncols)
        ]


def _xls_cell_value(workbook: Any, cell: Any) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, workbook.datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return None
    return cell.value
