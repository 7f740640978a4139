"""
app/domain package marker.
"""

from app.domain.sales_import import (
    CANONICAL_FIELDS,
    REQUIRED_CANONICAL_FIELDS,
    CanonicalField,
    DimensionKind,
    FactRecord,
    ImportErrorBudget,
    ImportResult,
    ParsedFact,
    PersistedMapping,
    RowParseError,
)

__all__ = [
    "CANONICAL_FIELDS",
    "REQUIRED_CANONICAL_FIELDS",
    "CanonicalField",
    "DimensionKind",
    "FactRecord",
    "ImportErrorBudget",
    "ImportResult",
    "ParsedFact",
    "PersistedMapping",
    "RowParseError",
]
