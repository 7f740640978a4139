"""
tests/conftest.py

Shared fixtures: an in-memory SQLite warehouse and helpers that write sample
CSV/XLSX files under ``tmp_path``.
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import openpyxl
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import SalesImportSettings
from db.base import Base
from db.models import DataSource
from db.session import enable_sqlite_savepoints


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def data_source(session: Session) -> DataSource:
    source = DataSource(name="Athens store")
    session.add(source)
    session.commit()
    return source


@pytest.fixture()
def settings() -> SalesImportSettings:
    return SalesImportSettings(batch_size=5, log_row_errors=False)


@pytest.fixture()
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    def _write(
        name: str,
        header: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> Path:
        path = tmp_path / name
        with path.open("w", encoding=encoding, newline="") as handle:
            writer = csv.writer(handle, delimiter=delimiter)
            writer.writerow(header)
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture()
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, sheets: Mapping[str, Sequence[Sequence[Any]]]) -> Path:
        workbook = openpyxl.Workbook()
        workbook.remove(workbook.active)
        for title, rows in sheets.items():
            worksheet = workbook.create_sheet(title=title)
            for row in rows:
                worksheet.append(list(row))
        path = tmp_path / name
        workbook.save(path)
        return path

    return _write
