"""
app/mappers/mapping_resolver.py

Chooses the effective canonical-to-source header map for one file: a complete
persisted mapping wins outright, anything less falls back to inference.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.sales_import import CANONICAL_FIELDS, REQUIRED_CANONICAL_FIELDS, HeaderMap
from app.mappers.header_inference import FieldMatcher
from app.validators.mapping_validator import is_mapped

logger = logging.getLogger(__name__)


class MappingCompleteness:
    NONE = "none"
    PARTIAL = "partial"
    COMPLETE = "complete"


class MappingStrategy:
    PERSISTED = "persisted"
    INFERRED = "inferred"


def classify_mapping(column_map: Mapping[str, str | None] | None) -> str:
    """
    Tag a stored mapping by how many required fields it covers.
    """

    if not column_map:
        return MappingCompleteness.NONE
    covered = [field for field in REQUIRED_CANONICAL_FIELDS if is_mapped(column_map.get(field))]
    if len(covered) == len(REQUIRED_CANONICAL_FIELDS):
        return MappingCompleteness.COMPLETE
    if covered:
        return MappingCompleteness.PARTIAL
    return MappingCompleteness.NONE


def load_column_map(raw: Any) -> dict[str, str] | None:
    """
    Read a stored column map that may be a dict or its JSON text.
    """

    if raw is None:
        return None
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring stored column map that is not valid JSON.")
            return None
    if not isinstance(raw, Mapping):
        return None
    return {
        str(key).strip(): value.strip()
        for key, value in raw.items()
        if isinstance(value, str) and value.strip()
    }


@dataclass(frozen=True)
class MappingResolution:
    """
    Effective mapping used to parse one file.
    """

    canonical_to_source: HeaderMap
    source_headers: tuple[str, ...]
    strategy: str
    persisted_completeness: str = MappingCompleteness.NONE

    def source_for(self, canonical_field: str) -> str | None:
        return self.canonical_to_source.get(canonical_field)


class MappingResolver:
    """
    Resolve header maps without merging stored and inferred entries.
    """

    def __init__(self, *, matcher: FieldMatcher | None = None) -> None:
        self._matcher = matcher or FieldMatcher()

    def resolve(
        self,
        headers: Sequence[str],
        persisted: Mapping[str, str | None] | None = None,
    ) -> MappingResolution:
        source_headers = tuple(headers)
        completeness = classify_mapping(persisted)

        if persisted is not None and completeness == MappingCompleteness.COMPLETE:
            resolved: HeaderMap = {field: persisted.get(field) for field in CANONICAL_FIELDS}
            absent = sorted(
                source
                for source in resolved.values()
                if source and source not in source_headers
            )
            if absent:
                logger.warning(
                    "Persisted mapping references headers missing from file: %s",
                    ", ".join(absent),
                )
            return MappingResolution(
                canonical_to_source=resolved,
                source_headers=source_headers,
                strategy=MappingStrategy.PERSISTED,
                persisted_completeness=completeness,
            )

        return MappingResolution(
            canonical_to_source=self._matcher.suggest_map(source_headers),
            source_headers=source_headers,
            strategy=MappingStrategy.INFERRED,
            persisted_completeness=completeness,
        )


def resolve_header_map(
    headers: Sequence[str],
    persisted: Mapping[str, str | None] | None = None,
) -> MappingResolution:
    return MappingResolver().resolve(headers, persisted)
