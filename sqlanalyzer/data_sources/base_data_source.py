"""
Base Data Source Interface for SQL Analyzer.

This module defines the abstract base class for database connectors.
Implementations own a single connection handle: opened lazily, reused for
every statement, and released explicitly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd


@dataclass
class QueryResult:
    """Result of a query execution."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    execution_time_ms: float = 0.0
    query: str = ""
    parameters: Optional[Sequence[Any]] = None

    @property
    def data(self) -> pd.DataFrame:
        """The result rows as a DataFrame, columns in result-set order."""
        return pd.DataFrame.from_records(self.records)


class BaseDataSource(ABC):
    """
    Abstract base class for data source connectors.

    ``connect`` must be idempotent and ``disconnect`` must be safe to call
    when no connection is open.

    Example:
        ```python
        with MSSQLDataSource(connection_string=conn_str) as ds:
            rows = ds.query("SELECT name FROM sys.tables")
        ```
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the data source currently holds a live connection."""

    @abstractmethod
    def connect(self) -> None:
        """
        Establish the connection if none is open.

        Raises:
            DatabaseConnectionError: If connection cannot be established.
        """

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection if one is open."""

    @abstractmethod
    def execute_query(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> QueryResult:
        """
        Execute a SQL statement and return its rows.

        Args:
            query: The SQL statement, with ``?`` placeholders for parameters.
            parameters: Optional positional parameter values.

        Returns:
            QueryResult with one dict per row, keyed by result column name.

        Raises:
            QueryExecutionError: If the statement fails.
        """

    def query(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Execute a statement and return just its rows as records."""
        return self.execute_query(query, parameters).records

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False


class DatabaseConnectionError(Exception):
    """Exception raised when a database connection cannot be established."""

    pass


class QueryExecutionError(Exception):
    """Exception raised when a statement fails against the database."""

    pass
