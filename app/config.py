"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class SalesImportSettings:
    """
    Runtime settings for sales file parsing and loading.
    """

    batch_size: int = 1000
    max_error_samples: int = 10
    max_error_rate: float = 0.05
    default_culture: str = "el-GR"
    log_row_errors: bool = True
    preview_sample_rows: int = 20
    upload_root: str | None = None


@lru_cache(maxsize=1)
def get_sales_import_settings() -> SalesImportSettings:
    """
    Return cached sales import settings from environment variables.
    """

    return SalesImportSettings(
        batch_size=max(1, _get_int_env("SALES_IMPORT_BATCH_SIZE", 1000)),
        max_error_samples=max(1, _get_int_env("SALES_IMPORT_MAX_ERROR_SAMPLES", 10)),
        max_error_rate=min(1.0, max(0.0, _get_float_env("SALES_IMPORT_MAX_ERROR_RATE", 0.05))),
        default_culture=_get_str_env("SALES_IMPORT_DEFAULT_CULTURE", "el-GR"),
        log_row_errors=_get_bool_env("SALES_IMPORT_LOG_ROW_ERRORS", True),
        preview_sample_rows=max(1, _get_int_env("SALES_IMPORT_PREVIEW_SAMPLE_ROWS", 20)),
        upload_root=_get_optional_str_env("SALES_IMPORT_UPLOAD_ROOT"),
    )
