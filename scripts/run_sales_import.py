"""
Parse a staged sales import from CLI.

Either parse an existing job (``--job-id``) or stage a file for a data source
and parse it right away (``--data-source-id`` with ``--file``).
"""

from __future__ import annotations

import argparse
import json
import logging

from app.schemas.sales_import import ImportJobStatusResponse, ImportResultResponse
from app.services.sales_import_service import build_sales_import_service
from db.repositories.import_job_repository import ImportJobRepository
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Parse a sales file into the warehouse.")
    parser.add_argument("--job-id", dest="job_id", type=int, default=None, help="Staged import job to parse.")
    parser.add_argument(
        "--data-source-id",
        dest="data_source_id",
        type=int,
        default=None,
        help="Data source to stage --file for.",
    )
    parser.add_argument("--file", dest="file_path", default=None, help="Path of the file to stage.")
    parser.add_argument("--verbose", action="store_true", help="Log import events to stderr.")
    args = parser.parse_args()

    if args.job_id is None and (args.data_source_id is None or not args.file_path):
        parser.error("pass --job-id, or --data-source-id together with --file")

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    with SessionLocal() as db:
        job_id = args.job_id
        if job_id is None:
            staged = ImportJobRepository(db).create_job(
                data_source_id=args.data_source_id,
                file_path=args.file_path,
            )
            db.commit()
            job_id = staged.id

        result = build_sales_import_service(db).parse_and_import(job_id)
        job = ImportJobRepository(db).get_job(job_id)
        payload = {
            "result": ImportResultResponse.from_result(result).model_dump(mode="json"),
            "job": ImportJobStatusResponse.from_job(job).model_dump(mode="json") if job is not None else None,
        }

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
