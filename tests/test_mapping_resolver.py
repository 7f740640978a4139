from __future__ import annotations

import unittest

from app.domain.sales_import import CanonicalField
from app.mappers.mapping_resolver import (
    MappingCompleteness,
    MappingStrategy,
    classify_mapping,
    load_column_map,
    resolve_header_map,
)

HEADERS = ["Ημερομηνία", "Προϊόν", "Πελάτης", "Ποσότητα", "Ποσό", "Σχόλια"]


class TestClassifyMapping(unittest.TestCase):
    def test_none_and_empty(self) -> None:
        self.assertEqual(classify_mapping(None), MappingCompleteness.NONE)
        self.assertEqual(classify_mapping({}), MappingCompleteness.NONE)
        self.assertEqual(classify_mapping({CanonicalField.QUANTITY: "Qty"}), MappingCompleteness.NONE)

    def test_partial(self) -> None:
        self.assertEqual(
            classify_mapping({CanonicalField.DATE: "Date", CanonicalField.AMOUNT: "  "}),
            MappingCompleteness.PARTIAL,
        )

    def test_complete_without_quantity(self) -> None:
        mapping = {
            CanonicalField.DATE: "a",
            CanonicalField.PRODUCT: "b",
            CanonicalField.CUSTOMER: "c",
            CanonicalField.AMOUNT: "d",
        }
        self.assertEqual(classify_mapping(mapping), MappingCompleteness.COMPLETE)


class TestResolveHeaderMap(unittest.TestCase):
    def test_complete_persisted_mapping_is_used_verbatim(self) -> None:
        persisted = {
            CanonicalField.DATE: "Ημερομηνία",
            CanonicalField.PRODUCT: "Σχόλια",
            CanonicalField.CUSTOMER: "Πελάτης",
            CanonicalField.AMOUNT: "Ποσό",
        }

        resolution = resolve_header_map(HEADERS, persisted)

        self.assertEqual(resolution.strategy, MappingStrategy.PERSISTED)
        self.assertEqual(resolution.source_for(CanonicalField.PRODUCT), "Σχόλια")
        self.assertIsNone(resolution.source_for(CanonicalField.QUANTITY))

    def test_partial_persisted_mapping_is_discarded(self) -> None:
        persisted = {
            CanonicalField.DATE: "Σχόλια",
            CanonicalField.PRODUCT: "Προϊόν",
            CanonicalField.AMOUNT: "Ποσό",
        }

        resolution = resolve_header_map(HEADERS, persisted)

        self.assertEqual(resolution.strategy, MappingStrategy.INFERRED)
        self.assertEqual(resolution.persisted_completeness, MappingCompleteness.PARTIAL)
        self.assertEqual(resolution.source_for(CanonicalField.DATE), "Ημερομηνία")
        self.assertEqual(resolution.source_for(CanonicalField.QUANTITY), "Ποσότητα")

    def test_inference_is_repeatable(self) -> None:
        first = resolve_header_map(HEADERS)
        second = resolve_header_map(HEADERS)

        self.assertEqual(first.canonical_to_source, second.canonical_to_source)
        self.assertEqual(first.source_headers, tuple(HEADERS))


class TestLoadColumnMap(unittest.TestCase):
    def test_json_text(self) -> None:
        self.assertEqual(
            load_column_map('{"Date": " Ημερομηνία ", "Quantity": "", "Amount": 5}'),
            {"Date": "Ημερομηνία"},
        )

    def test_invalid_inputs(self) -> None:
        self.assertIsNone(load_column_map(None))
        self.assertIsNone(load_column_map("  "))
        self.assertIsNone(load_column_map("{not json"))
        self.assertIsNone(load_column_map(["Date"]))


if __name__ == "__main__":
    unittest.main()
