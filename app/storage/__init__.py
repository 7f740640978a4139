"""
app/storage package marker.
"""

from app.storage.base import DimensionStore, FactStore, ImportJobStore, MappingStore
from app.storage.sqlalchemy_storage import (
    SQLAlchemyDimensionStore,
    SQLAlchemyFactStore,
    SQLAlchemyImportJobStore,
    SQLAlchemyMappingStore,
)

__all__ = [
    "DimensionStore",
    "FactStore",
    "ImportJobStore",
    "MappingStore",
    "SQLAlchemyDimensionStore",
    "SQLAlchemyFactStore",
    "SQLAlchemyImportJobStore",
    "SQLAlchemyMappingStore",
]
