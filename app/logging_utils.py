"""
app/logging_utils.py

JSON log lines for sales import lifecycle events and row errors.

Field values coming out of the pipeline (Decimal amounts, sale dates, file
paths, header maps) are rendered to stable JSON scalars so one line can be
grepped or shipped as-is.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import PurePath
from typing import Any

from app.domain.sales_import import RowParseError


def _to_json_scalar(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return str(value)
    return str(value)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit ``event`` with ``fields`` as one compact JSON line.

    Fields whose value is None are left out.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event}
    payload.update({key: value for key, value in fields.items() if value is not None})
    logger.log(
        level,
        json.dumps(payload, default=_to_json_scalar, ensure_ascii=False, sort_keys=True),
    )


def row_error_fields(error: RowParseError) -> dict[str, Any]:
    """
    Structured fields describing one rejected row.
    """

    return {
        "row": error.row_number,
        "column": error.column,
        "message": error.message,
        "value": error.value,
    }
