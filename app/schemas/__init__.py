"""
app/schemas package marker.
"""

from app.schemas.sales_import import ImportJobStatusResponse, ImportResultResponse, PreviewResponse

__all__ = [
    "ImportJobStatusResponse",
    "ImportResultResponse",
    "PreviewResponse",
]
