"""
app/repositories package marker.
"""

from app.repositories.data_source_mapping_repository import DataSourceMappingRepository
from app.repositories.dimension_repository import DimensionRepository
from app.repositories.fact_sales_repository import FactSalesRepository

__all__ = [
    "DataSourceMappingRepository",
    "DimensionRepository",
    "FactSalesRepository",
]
