"""
app/readers/registry.py

File-kind detection and reader factory.
"""

from __future__ import annotations

from pathlib import Path

from app.readers.base import FileKind, SourceReader, UnsupportedFileTypeError, file_extension
from app.readers.csv_reader import CSVSourceReader
from app.readers.spreadsheet_reader import SpreadsheetSourceReader

_EXTENSION_KINDS: dict[str, str] = {
    ".csv": FileKind.CSV,
    ".xlsx": FileKind.XLSX,
    ".xls": FileKind.XLS,
}


def detect_file_kind(path: str | Path) -> str:
    """
    Map a file extension to a supported file kind.

    Raises:
        UnsupportedFileTypeError: the extension has no reader.
    """

    extension = file_extension(path)
    kind = _EXTENSION_KINDS.get(extension)
    if kind is None:
        raise UnsupportedFileTypeError(extension or "(none)")
    return kind


def get_source_reader(path: str | Path) -> SourceReader:
    kind = detect_file_kind(path)
    if kind == FileKind.CSV:
        return CSVSourceReader()
    return SpreadsheetSourceReader(file_kind=kind)
