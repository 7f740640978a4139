"""
app/services package marker.
"""

from app.services.dimension_resolver import DimensionResolver
from app.services.preview_service import PreviewService
from app.services.sales_import_service import (
    ImportCancelledError,
    SalesImportService,
    build_sales_import_service,
)

__all__ = [
    "DimensionResolver",
    "ImportCancelledError",
    "PreviewService",
    "SalesImportService",
    "build_sales_import_service",
]
