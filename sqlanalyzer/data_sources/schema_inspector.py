"""
Schema Inspector Module for SQL Analyzer.

Walks the database catalog (tables, columns, keys and indexes) and renders
one plain-text schema document used as grounding context for SQL
generation. Nothing is cached: every call reads the live catalog.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from . import catalog_queries
from .base_data_source import BaseDataSource

logger = logging.getLogger(__name__)

DOCUMENT_TITLE = "Database Schema:\n=================\n\n"
SECTION_SEPARATOR = "----------------------------------------\n"


def _require(row: Mapping[str, Any], key: str) -> Any:
    """Read a mandatory catalog field from a row."""
    try:
        return row[key]
    except KeyError:
        raise MetadataError(
            f"Catalog row is missing field '{key}' (got: {', '.join(row.keys())})"
        ) from None


@dataclass
class ColumnDescriptor:
    """One table column, in catalog ordinal order."""

    name: str
    data_type: str
    nullable: bool = True
    default_value: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ColumnDescriptor":
        default = row.get("COLUMN_DEFAULT")
        return cls(
            name=_require(row, "COLUMN_NAME"),
            data_type=_require(row, "DATA_TYPE"),
            nullable=row.get("IS_NULLABLE") != "NO",
            default_value=None if default is None else str(default),
            description=row.get("COLUMN_DESCRIPTION") or None,
        )


@dataclass
class ForeignKeyRef:
    """A foreign-key edge from a column of the inspected table."""

    source_column: str
    referenced_table: str
    referenced_column: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ForeignKeyRef":
        return cls(
            source_column=_require(row, "COLUMN_NAME"),
            referenced_table=_require(row, "REFERENCED_TABLE_NAME"),
            referenced_column=_require(row, "REFERENCED_COLUMN_NAME"),
        )


@dataclass
class IndexDescriptor:
    """Key columns of one non-primary-key index, in key order."""

    columns: List[str] = field(default_factory=list)
    is_unique: bool = True


@dataclass
class TableDescriptor:
    """Everything the schema document says about one base table."""

    name: str
    description: Optional[str] = None
    columns: List[ColumnDescriptor] = field(default_factory=list)
    primary_keys: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKeyRef] = field(default_factory=list)
    indexes: Dict[str, IndexDescriptor] = field(default_factory=dict)


def group_indexes(rows: List[Mapping[str, Any]]) -> Dict[str, IndexDescriptor]:
    """
    Group index rows by index name.

    Index names keep their first-seen order and each index keeps its
    columns in row order. An index is unique only if every one of its rows
    is flagged unique.
    """
    indexes: Dict[str, IndexDescriptor] = {}
    for row in rows:
        index_name = _require(row, "INDEX_NAME")
        index = indexes.setdefault(index_name, IndexDescriptor())
        index.columns.append(_require(row, "COLUMN_NAME"))
        index.is_unique = index.is_unique and bool(_require(row, "is_unique"))
    return indexes


def render_table(table: TableDescriptor) -> str:
    """Render one table section of the schema document."""
    section = f"Table: {table.name}\n"
    if table.description:
        section += f"Description: {table.description}\n"
    section += SECTION_SEPARATOR

    section += "Columns:\n"
    for column in table.columns:
        section += f"- {column.name} ({column.data_type})"

        properties = []
        if not column.nullable:
            properties.append("NOT NULL")
        if column.default_value is not None:
            properties.append(f"DEFAULT: {column.default_value}")
        if properties:
            section += f" [{', '.join(properties)}]"

        if column.description:
            section += f"\n  Description: {column.description}"
        section += "\n"

    if table.primary_keys:
        section += "\nPrimary Keys:\n"
        for column_name in table.primary_keys:
            section += f"- {column_name}\n"

    if table.foreign_keys:
        section += "\nForeign Keys:\n"
        for fk in table.foreign_keys:
            section += f"- {fk.source_column} -> {fk.referenced_table}({fk.referenced_column})\n"

    if table.indexes:
        section += "\nIndexes:\n"
        for index_name, index in table.indexes.items():
            unique = " (UNIQUE)" if index.is_unique else ""
            section += f"- {index_name}{unique}: {', '.join(index.columns)}\n"

    return section + "\n\n"


def render_document(tables: List[TableDescriptor]) -> str:
    """Render the full schema document, tables in the given order."""
    return DOCUMENT_TITLE + "".join(render_table(table) for table in tables)


class SchemaInspector:
    """
    Builds the schema document from a data source's catalog.

    Tables are processed one at a time, in the order the catalog
    enumerates them; each table issues its column, primary key, foreign
    key and index queries in sequence on the data source's connection.
    """

    def __init__(self, data_source: BaseDataSource):
        """
        Initialize the inspector.

        Args:
            data_source: Connected (or lazily connecting) data source to read
                catalog metadata from
        """
        self.data_source = data_source

    def inspect_tables(self) -> List[TableDescriptor]:
        """
        Read descriptors for every base table.

        Returns:
            TableDescriptor list in catalog enumeration order

        Raises:
            MetadataError: If any catalog query fails
        """
        try:
            table_rows = self.data_source.query(catalog_queries.TABLES_QUERY)
            tables = [self._inspect_table(row) for row in table_rows]
        except Exception as e:
            logger.error(f"Schema inspection failed: {e}")
            raise MetadataError(f"Failed to inspect database schema: {e}") from e

        logger.info(f"Inspected {len(tables)} tables")
        return tables

    def build_document(self) -> str:
        """
        Build the schema document for all base tables.

        Raises:
            MetadataError: If any catalog query fails
        """
        return render_document(self.inspect_tables())

    inspect_schema = build_document

    def _inspect_table(self, table_row: Mapping[str, Any]) -> TableDescriptor:
        table_name = _require(table_row, "TABLE_NAME")
        params = [table_name]

        columns = [
            ColumnDescriptor.from_row(row)
            for row in self.data_source.query(catalog_queries.COLUMNS_QUERY, params)
        ]

        primary_keys: List[str] = []
        for row in self.data_source.query(catalog_queries.PRIMARY_KEYS_QUERY, params):
            column_name = _require(row, "COLUMN_NAME")
            if column_name not in primary_keys:
                primary_keys.append(column_name)

        foreign_keys = [
            ForeignKeyRef.from_row(row)
            for row in self.data_source.query(catalog_queries.FOREIGN_KEYS_QUERY, params)
        ]

        indexes = group_indexes(
            self.data_source.query(catalog_queries.INDEXES_QUERY, params)
        )

        logger.debug(
            f"Table {table_name}: {len(columns)} columns, {len(primary_keys)} primary keys, "
            f"{len(foreign_keys)} foreign keys, {len(indexes)} indexes"
        )

        return TableDescriptor(
            name=table_name,
            description=table_row.get("TABLE_DESCRIPTION") or None,
            columns=columns,
            primary_keys=primary_keys,
            foreign_keys=foreign_keys,
            indexes=indexes,
        )


class MetadataError(Exception):
    """Exception raised when reading catalog metadata fails."""

    pass
