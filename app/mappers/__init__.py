"""
app/mappers package marker.
"""

from app.mappers.header_inference import FieldMatcher, normalize_header, score_header, suggest_map
from app.mappers.mapping_resolver import (
    MappingCompleteness,
    MappingResolution,
    MappingResolver,
    MappingStrategy,
    classify_mapping,
    resolve_header_map,
)

__all__ = [
    "FieldMatcher",
    "MappingCompleteness",
    "MappingResolution",
    "MappingResolver",
    "MappingStrategy",
    "classify_mapping",
    "normalize_header",
    "resolve_header_map",
    "score_header",
    "suggest_map",
]
