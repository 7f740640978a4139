"""
app/services/preview_service.py

Reads the first rows of an uploaded file so a user can confirm the suggested
column mapping before an import runs.
"""

from __future__ import annotations

import logging
from itertools import islice
from pathlib import Path

from app.config import SalesImportSettings, get_sales_import_settings
from app.mappers.header_inference import FieldMatcher
from app.readers.registry import detect_file_kind, get_source_reader
from app.schemas.sales_import import PreviewResponse

logger = logging.getLogger(__name__)


class PreviewService:
    def __init__(
        self,
        *,
        settings: SalesImportSettings | None = None,
        matcher: FieldMatcher | None = None,
    ) -> None:
        self._settings = settings or get_sales_import_settings()
        self._matcher = matcher or FieldMatcher()

    def preview(
        self,
        path: str | Path,
        sheet: str | None = None,
        sample: int | None = None,
    ) -> PreviewResponse:
        """
        Return sheets, headers, sample rows and the inferred mapping of a file.

        Raises:
            UnsupportedFileTypeError: the extension has no reader.
            SourceReadError: the file cannot be opened or decoded.
        """
        file_kind = detect_file_kind(path)
        reader = get_source_reader(path)
        limit = self._settings.preview_sample_rows if sample is None else max(0, sample)

        sheets = reader.sheet_names(path)
        source = reader.read_headers(path, sheet)
        sample_rows = list(islice(reader.iter_rows(path, source.sheet_name), limit))

        logger.info(
            "Previewed %s file=%s sheet=%s headers=%s rows=%s",
            file_kind,
            path,
            source.sheet_name,
            len(source.headers),
            len(sample_rows),
        )
        return PreviewResponse(
            file_type=file_kind,
            sheets=sheets,
            selected_sheet=source.sheet_name,
            headers=source.headers,
            sample_rows=sample_rows,
            suggested_map=self._matcher.suggest_map(source.headers),
        )
