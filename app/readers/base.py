"""
app/readers/base.py

Source Reader contract shared by the CSV and spreadsheet readers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class FileKind:
    CSV = "csv"
    XLSX = "xlsx"
    XLS = "xls"


SUPPORTED_FILE_KINDS: tuple[str, ...] = (FileKind.CSV, FileKind.XLSX, FileKind.XLS)


class SourceReadError(RuntimeError):
    """Raised when a source file cannot be opened or decoded."""


class UnsupportedFileTypeError(ValueError):
    """Raised when a file extension has no reader."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported file type: {extension}")
        self.extension = extension


@dataclass(frozen=True)
class SourceHeaders:
    headers: list[str] = field(default_factory=list)
    sheet_name: str | None = None


def file_extension(path: str | Path) -> str:
    return Path(path).suffix.lower()


def make_unique_headers(raw_headers: Iterable[Any]) -> list[str]:
    """
    Turn a raw header row into distinct, non-empty column names.

    Blank cells become ``Column<n>`` (1-based position); repeated names get
    ``_1``, ``_2`` ... suffixes in order of appearance.
    """

    headers: list[str] = []
    seen: dict[str, int] = {}
    for index, raw in enumerate(raw_headers, start=1):
        name = "" if raw is None else str(raw).strip()
        if not name:
            name = f"Column{index}"
        if name in seen:
            seen[name] += 1
            candidate = f"{name}_{seen[name]}"
            while candidate in seen:
                seen[name] += 1
                candidate = f"{name}_{seen[name]}"
            name = candidate
        seen.setdefault(name, 0)
        headers.append(name)
    return headers


def is_blank_row(values: Sequence[Any]) -> bool:
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True


def zip_row(headers: Sequence[str], values: Sequence[Any]) -> dict[str, Any]:
    """
    Pair headers with cell values; short rows are padded with None, extra cells dropped.
    """

    return {
        header: values[index] if index < len(values) else None
        for index, header in enumerate(headers)
    }


class SourceReader(ABC):
    """
    Reads the header row and a lazy row stream from one kind of tabular file.
    """

    file_kind: str = ""

    @abstractmethod
    def sheet_names(self, path: str | Path) -> list[str]:
        """
        Return the sheet names of the file; CSV files have none.
        """

    @abstractmethod
    def read_headers(self, path: str | Path, sheet_hint: str | None = None) -> SourceHeaders:
        """
        Read the header row and report which sheet it came from.
        """

    @abstractmethod
    def iter_rows(self, path: str | Path, sheet_name: str | None = None) -> Iterator[dict[str, Any]]:
        """
        Yield one header -> raw cell mapping per data row. Each call reopens the file.
        """
