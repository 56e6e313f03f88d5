"""
SQL Server Data Source Connector for SQL Analyzer.

Connects through ODBC with pyodbc. One connection is opened on first use
and reused until ``disconnect`` is called.
"""

import logging
import time
from typing import Any, Optional, Sequence

from ..helpers.env_helper import EnvHelper
from .base_data_source import (
    BaseDataSource,
    DatabaseConnectionError,
    QueryExecutionError,
    QueryResult,
)

logger = logging.getLogger(__name__)


class MSSQLDataSource(BaseDataSource):
    """
    SQL Server data source connector.

    Example:
        ```python
        from sqlanalyzer.data_sources import MSSQLDataSource

        ds = MSSQLDataSource(
            connection_string=(
                "DRIVER={ODBC Driver 18 for SQL Server};"
                "SERVER=localhost,1433;DATABASE=Shop;UID=sa;PWD=secret;"
            )
        )

        with ds:
            result = ds.execute_query(
                "SELECT * FROM Users WHERE Country = ?", ["UA"]
            )
            print(result.row_count)
        ```
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        login_timeout: int = 30,
        autocommit: bool = True,
        env_helper: Optional[EnvHelper] = None,
    ):
        """
        Initialize SQL Server data source.

        Args:
            connection_string: ODBC connection string. Built from
                ``env_helper`` (or the environment) on first connect when omitted.
            login_timeout: Login timeout in seconds.
            autocommit: Whether statements run in autocommit mode.
            env_helper: Optional configuration for the connection string.
        """
        self._connection_string = connection_string
        self._login_timeout = login_timeout
        self._autocommit = autocommit
        self._env_helper = env_helper
        self._connection: Optional[Any] = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def _resolve_connection_string(self) -> str:
        if self._connection_string is None:
            if self._env_helper is None:
                self._env_helper = EnvHelper()
            self._connection_string = self._env_helper.get_connection_string()
        return self._connection_string

    def connect(self) -> None:
        """Open the connection unless one is already open."""
        if self._connection is not None:
            return

        # Import here so the package imports without the ODBC driver manager
        import pyodbc

        try:
            connection_string = self._resolve_connection_string()
            self._connection = pyodbc.connect(
                connection_string,
                timeout=self._login_timeout,
                autocommit=self._autocommit,
            )
            logger.info("Connected to SQL Server")
        except (pyodbc.Error, ValueError) as e:
            logger.error(f"Failed to connect to SQL Server: {e}")
            raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    def disconnect(self) -> None:
        """Close the connection if one is open."""
        if self._connection is None:
            return

        import pyodbc

        try:
            self._connection.close()
        except pyodbc.Error as e:
            logger.warning(f"Error while closing SQL Server connection: {e}")
        finally:
            self._connection = None
            logger.info("SQL Server connection closed")

    def execute_query(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> QueryResult:
        """Execute a statement on the shared connection, connecting first if needed."""
        import pyodbc

        self.connect()

        start_time = time.perf_counter()
        logger.debug(f"Executing query: {query[:500]}")

        cursor = self._connection.cursor()
        try:
            if parameters:
                cursor.execute(query, list(parameters))
            else:
                cursor.execute(query)

            # Statements without a result set (e.g. UPDATE) have no description
            if cursor.description is None:
                records = []
            else:
                columns = [column[0] for column in cursor.description]
                records = [dict(zip(columns, row)) for row in cursor.fetchall()]

        except pyodbc.Error as e:
            logger.error(f"Query execution failed: {e}")
            raise QueryExecutionError(f"Query execution failed: {e}") from e
        finally:
            cursor.close()

        execution_time = (time.perf_counter() - start_time) * 1000
        logger.info(f"Query executed: {len(records)} rows in {execution_time:.1f}ms")

        return QueryResult(
            records=records,
            row_count=len(records),
            execution_time_ms=execution_time,
            query=query,
            parameters=parameters,
        )
