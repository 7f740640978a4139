"""
app/mappers/header_inference.py

Header normalization and fuzzy matching of source headers to canonical
sales fields (Greek and English synonyms).
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from app.domain.sales_import import CANONICAL_FIELDS, CanonicalField, HeaderMap

DEFAULT_MATCH_THRESHOLD = 0.65

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9α-ω ]")
_WHITESPACE = re.compile(r"\s+")


def normalize_header(value: str | None) -> str:
    """
    Canonicalize a header for comparison.

    Accents are removed via canonical decomposition, the result is lower-cased
    and reduced to latin letters, digits, Greek letters and single spaces.
    """

    if value is None or not value.strip():
        return ""
    decomposed = unicodedata.normalize("NFD", value.strip())
    without_marks = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    lowered = unicodedata.normalize("NFC", without_marks).lower()
    cleaned = _DISALLOWED_CHARS.sub("", _WHITESPACE.sub(" ", lowered))
    return _WHITESPACE.sub(" ", cleaned).strip()


_RAW_SYNONYMS: dict[str, tuple[str, ...]] = {
    CanonicalField.DATE: ("ημερομηνια", "date", "transaction date", "doc date", "ημ", "ημερα"),
    CanonicalField.PRODUCT: ("προιον", "product", "item", "sku", "κωδικος προιοντος", "περιγραφη"),
    CanonicalField.CUSTOMER: ("πελατης", "customer", "client", "account", "αγοραστης"),
    CanonicalField.QUANTITY: ("ποσοτητα", "qty", "quantity", "τεμ", "τμχ", "pieces", "units"),
    CanonicalField.AMOUNT: (
        "ποσο",
        "amount",
        "value",
        "total",
        "συνολο",
        "ποσον",
        "τιμη",
        "net",
        "καθαρο",
    ),
}


def _build_synonym_table(raw: Mapping[str, Iterable[str]]) -> Mapping[str, tuple[str, ...]]:
    table: dict[str, tuple[str, ...]] = {}
    for canonical_field, words in raw.items():
        normalized = (normalize_header(word) for word in words)
        table[canonical_field] = tuple(dict.fromkeys(word for word in normalized if word))
    return MappingProxyType(table)


SYNONYMS: Mapping[str, tuple[str, ...]] = _build_synonym_table(_RAW_SYNONYMS)


class FieldMatcher:
    """
    Scores source headers against canonical fields and proposes a mapping.
    """

    def __init__(
        self,
        *,
        synonyms: Mapping[str, Iterable[str]] | None = None,
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        field_order: Sequence[str] = CANONICAL_FIELDS,
    ) -> None:
        self._synonyms = SYNONYMS if synonyms is None else _build_synonym_table(synonyms)
        self._threshold = max(0.0, min(1.0, threshold))
        self._field_order = tuple(field_order)

    @property
    def threshold(self) -> float:
        return self._threshold

    def score(self, header: str | None, canonical_field: str) -> float:
        """
        Return a confidence in [0, 1] that ``header`` holds ``canonical_field``.
        """

        normalized = normalize_header(header)
        words = self._synonyms.get(canonical_field, ())
        if not words:
            return 0.0

        if normalized in words:
            return 1.0
        if any(word in normalized for word in words):
            return 0.8
        # Subsumed by containment above.
        if any(normalized.startswith(word) for word in words):
            return 0.7

        nearest = min(abs(len(word) - len(normalized)) for word in words)
        return 0.5 - min(nearest, 10) / 20.0

    def suggest_map(self, headers: Iterable[str]) -> HeaderMap:
        """
        Pick the best remaining header per canonical field, never reusing one.

        Fields are evaluated in the fixed canonical order; on equal scores the
        header that appears first in the source wins.
        """

        remaining = [header for header in headers if header is not None]
        result: HeaderMap = {canonical_field: None for canonical_field in self._field_order}

        for canonical_field in self._field_order:
            if not remaining:
                break
            best = max(remaining, key=lambda header: self.score(header, canonical_field))
            if self.score(best, canonical_field) >= self._threshold:
                result[canonical_field] = best
                remaining.remove(best)

        return result


_DEFAULT_MATCHER = FieldMatcher()


def score_header(header: str | None, canonical_field: str) -> float:
    return _DEFAULT_MATCHER.score(header, canonical_field)


def suggest_map(headers: Iterable[str]) -> HeaderMap:
    return _DEFAULT_MATCHER.suggest_map(headers)
