"""
app/readers package marker.
"""

from app.readers.base import (
    FileKind,
    SourceHeaders,
    SourceReadError,
    SourceReader,
    UnsupportedFileTypeError,
    make_unique_headers,
)
from app.readers.csv_reader import CSVSourceReader, detect_delimiter
from app.readers.registry import detect_file_kind, get_source_reader
from app.readers.spreadsheet_reader import SpreadsheetSourceReader

__all__ = [
    "CSVSourceReader",
    "FileKind",
    "SourceHeaders",
    "SourceReadError",
    "SourceReader",
    "SpreadsheetSourceReader",
    "UnsupportedFileTypeError",
    "detect_delimiter",
    "detect_file_kind",
    "get_source_reader",
    "make_unique_headers",
]
