"""
Data Sources module for SQL Analyzer.

This module provides the SQL Server connector and catalog-based schema
inspection.
"""

from .base_data_source import (
    BaseDataSource,
    DatabaseConnectionError,
    QueryExecutionError,
    QueryResult,
)
from .mssql_data_source import MSSQLDataSource
from .schema_inspector import (
    ColumnDescriptor,
    ForeignKeyRef,
    IndexDescriptor,
    MetadataError,
    SchemaInspector,
    TableDescriptor,
)

__all__ = [
    # Base data source
    "BaseDataSource",
    "QueryResult",
    "DatabaseConnectionError",
    "QueryExecutionError",
    # SQL Server connector
    "MSSQLDataSource",
    # Schema inspection
    "SchemaInspector",
    "MetadataError",
    "TableDescriptor",
    "ColumnDescriptor",
    "ForeignKeyRef",
    "IndexDescriptor",
]
