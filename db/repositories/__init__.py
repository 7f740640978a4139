"""
Repository layer exports.
"""

from db.repositories.errors import (
    DuplicateDimensionError,
    ImportPersistenceError,
    WarehouseRepositoryError,
)
from db.repositories.import_job_repository import ImportJobRepository

__all__ = [
    "DuplicateDimensionError",
    "ImportJobRepository",
    "ImportPersistenceError",
    "WarehouseRepositoryError",
]
