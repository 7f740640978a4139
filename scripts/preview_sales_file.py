"""
Preview a sales file from CLI and optionally save the suggested mapping.
"""

from __future__ import annotations

import argparse
import json

from app.repositories.data_source_mapping_repository import DataSourceMappingRepository
from app.services.preview_service import PreviewService
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Show headers, sample rows and the inferred mapping.")
    parser.add_argument("path", help="CSV, XLSX or XLS file to inspect.")
    parser.add_argument("--sheet", dest="sheet", default=None, help="Worksheet name (spreadsheets only).")
    parser.add_argument("--rows", dest="rows", type=int, default=None, help="Number of sample rows.")
    parser.add_argument(
        "--save-mapping-for",
        dest="data_source_id",
        type=int,
        default=None,
        help="Persist the suggested mapping for this data source id.",
    )
    parser.add_argument("--culture", dest="culture", default=None, help="Culture saved with the mapping.")
    args = parser.parse_args()

    preview = PreviewService().preview(args.path, sheet=args.sheet, sample=args.rows)

    if args.data_source_id is not None:
        with SessionLocal() as db:
            DataSourceMappingRepository(db).save(
                data_source_id=args.data_source_id,
                column_map=preview.suggested_map,
                sheet_name=preview.selected_sheet,
                culture=args.culture,
            )
            db.commit()

    print(json.dumps(preview.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
