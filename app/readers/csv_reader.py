"""
app/readers/csv_reader.py

Delimited text reader. The delimiter is picked from the header line and the
first line is always the header row.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

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

CSV_ENCODING = "utf-8-sig"
CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t")


def detect_delimiter(first_line: str) -> str:
    """
    Pick the most frequent candidate delimiter on the header line.

    Ties resolve in candidate order; a line with none of them is comma-separated.
    """

    best = ","
    best_count = 0
    for delimiter in CANDIDATE_DELIMITERS:
        count = first_line.count(delimiter)
        if count > best_count:
            best, best_count = delimiter, count
    return best


class CSVSourceReader(SourceReader):
    file_kind = FileKind.CSV

    def __init__(self, *, encoding: str = CSV_ENCODING) -> None:
        self._encoding = encoding

    def sheet_names(self, path: str | Path) -> list[str]:
        return []

    def read_headers(self, path: str | Path, sheet_hint: str | None = None) -> SourceHeaders:
        with self._reader(path) as reader:
            try:
                raw_headers = next(reader, [])
            except UnicodeDecodeError as exc:
                raise SourceReadError("File must be UTF-8 encoded.") from exc
            except csv.Error as exc:
                # A mangled header line still yields a best-effort (possibly empty) header list.
                logger.warning("Malformed CSV header line in %s: %s", path, exc)
                raw_headers = []
        return SourceHeaders(headers=make_unique_headers(raw_headers), sheet_name=None)

    def iter_rows(self, path: str | Path, sheet_name: str | None = None) -> Iterator[dict[str, Any]]:
        with self._reader(path) as reader:
            try:
                headers = make_unique_headers(next(reader, []))
                for values in reader:
                    cells = [value.strip() for value in values]
                    if is_blank_row(cells):
                        continue
                    yield zip_row(headers, cells)
            except UnicodeDecodeError as exc:
                raise SourceReadError("File must be UTF-8 encoded.") from exc
            except csv.Error as exc:
                raise SourceReadError(f"Invalid CSV format: {exc}") from exc

    @contextmanager
    def _reader(self, path: str | Path) -> Iterator[Any]:
        try:
            handle: IO[str] = open(path, "r", encoding=self._encoding, newline="")
        except OSError as exc:
            raise SourceReadError(f"Unable to open source file '{path}': {exc}") from exc

        with handle:
            try:
                first_line = handle.readline()
            except UnicodeDecodeError as exc:
                raise SourceReadError("File must be UTF-8 encoded.") from exc
            handle.seek(0)
            delimiter = detect_delimiter(first_line)
            logger.debug("Detected CSV delimiter %r for %s", delimiter, path)
            yield csv.reader(handle, delimiter=delimiter)
