"""
app/validators package marker.
"""

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError
from app.validators.sales_row_parser import SalesRowParser, resolve_locale

__all__ = [
    "MappingErrorDetail",
    "MappingValidator",
    "SalesRowParser",
    "SchemaMappingError",
    "resolve_locale",
]
