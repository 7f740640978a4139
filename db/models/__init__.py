"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.data_source import DataSource, DataSourceType
from db.models.data_source_mapping import DataSourceMapping
from db.models.dim_customer import DimCustomer
from db.models.dim_date import DimDate
from db.models.dim_product import DimProduct
from db.models.fact_sales import FactSales
from db.models.import_job import ImportJob, ImportJobStatus

__all__ = [
    "DataSource",
    "DataSourceMapping",
    "DataSourceType",
    "DimCustomer",
    "DimDate",
    "DimProduct",
    "FactSales",
    "ImportJob",
    "ImportJobStatus",
]
