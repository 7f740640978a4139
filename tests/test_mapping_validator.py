from __future__ import annotations

import unittest

from app.domain.sales_import import CanonicalField
from app.validators.mapping_validator import MappingValidator, SchemaMappingError


class TestMappingValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = MappingValidator()

    def test_complete_mapping_passes(self) -> None:
        self.validator.validate(
            mapping={
                CanonicalField.DATE: "Date",
                CanonicalField.PRODUCT: "Item",
                CanonicalField.CUSTOMER: "Client",
                CanonicalField.QUANTITY: None,
                CanonicalField.AMOUNT: "Total",
            },
            source_headers=("Date", "Item", "Client", "Total"),
        )

    def test_raises_on_missing_required_fields(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(
                mapping={CanonicalField.DATE: "Date", CanonicalField.PRODUCT: "  ", CanonicalField.AMOUNT: None},
                source_headers=("Date",),
            )

        self.assertEqual(
            ctx.exception.message,
            "Missing column mapping for: Product, Customer, Amount.",
        )
        self.assertEqual(ctx.exception.missing_fields, ["Product", "Customer", "Amount"])
        codes = {error.code for error in ctx.exception.errors}
        self.assertEqual(codes, {"required_field_unmapped"})

    def test_error_payload_shape(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(mapping={}, source_headers=("Notes",))

        payload = ctx.exception.to_dict()
        self.assertEqual(len(payload["errors"]), 4)
        self.assertEqual(payload["errors"][0]["canonical_field"], "Date")
        self.assertEqual(payload["errors"][0]["context"], {"source_headers": ["Notes"]})

    def test_quantity_is_optional(self) -> None:
        missing = self.validator.missing_required(
            {
                CanonicalField.DATE: "d",
                CanonicalField.PRODUCT: "p",
                CanonicalField.CUSTOMER: "c",
                CanonicalField.AMOUNT: "a",
            }
        )
        self.assertEqual(missing, [])


if __name__ == "__main__":
    unittest.main()
