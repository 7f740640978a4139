"""
app/validators/mapping_validator.py

Validation for resolved canonical-to-source header mappings.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.sales_import import REQUIRED_CANONICAL_FIELDS


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    canonical_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None


class SchemaMappingError(ValueError):
    """
    Raised when a mapping cannot be used to parse rows.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    @property
    def missing_fields(self) -> list[str]:
        return [
            error.canonical_field
            for error in self.errors
            if error.code == "required_field_unmapped" and error.canonical_field
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "canonical_field": error.canonical_field,
                    "source_column": error.source_column,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


def is_mapped(value: str | None) -> bool:
    return value is not None and bool(value.strip())


class MappingValidator:
    """
    Ensures every required canonical field points at a source header.
    """

    def __init__(
        self,
        *,
        required_fields: Sequence[str] = REQUIRED_CANONICAL_FIELDS,
    ) -> None:
        self._required_fields = tuple(required_fields)

    def missing_required(self, mapping: Mapping[str, str | None]) -> list[str]:
        """
        Return unmapped required fields in canonical order.
        """

        return [field for field in self._required_fields if not is_mapped(mapping.get(field))]

    def validate(
        self,
        *,
        mapping: Mapping[str, str | None],
        source_headers: Sequence[str] = (),
    ) -> None:
        """
        Raise SchemaMappingError naming every unmapped required field.
        """

        missing = self.missing_required(mapping)
        if not missing:
            return

        errors = [
            MappingErrorDetail(
                code="required_field_unmapped",
                message="Required canonical field is not mapped.",
                canonical_field=field,
                source_column=mapping.get(field),
                context={"source_headers": list(source_headers)},
            )
            for field in missing
        ]
        raise SchemaMappingError(
            message=f"Missing column mapping for: {', '.join(missing)}.",
            errors=errors,
        )
