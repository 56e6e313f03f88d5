from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import Mock

import pytest

from sqlanalyzer.data_sources import BaseDataSource, QueryExecutionError, QueryResult
from sqlanalyzer.data_sources import catalog_queries
from sqlanalyzer.helpers.llm_helper import LLMHelper


# =============================================================================
# Fake catalog data source
# =============================================================================


_PER_TABLE_QUERIES = {
    catalog_queries.COLUMNS_QUERY: "columns",
    catalog_queries.PRIMARY_KEYS_QUERY: "primary_keys",
    catalog_queries.FOREIGN_KEYS_QUERY: "foreign_keys",
    catalog_queries.INDEXES_QUERY: "indexes",
}


class FakeDataSource(BaseDataSource):
    """
    In-memory data source serving catalog rows.

    ``tables`` holds the table enumeration rows; ``catalog`` maps a table
    name to its per-category rows. Any other statement returns
    ``statement_rows`` or raises ``execute_error`` when set.
    """

    def __init__(
        self,
        tables: Optional[List[Dict[str, Any]]] = None,
        catalog: Optional[Dict[str, Dict[str, List[Dict[str, Any]]]]] = None,
        statement_rows: Optional[List[Dict[str, Any]]] = None,
    ):
        self.tables = tables or []
        self.catalog = catalog or {}
        self.statement_rows = statement_rows or []
        self.execute_error: Optional[Exception] = None
        self.catalog_error: Optional[Exception] = None
        self.connected = False
        self.connect_count = 0
        self.disconnect_count = 0
        self.calls: List[tuple] = []

    @property
    def is_connected(self) -> bool:
        return self.connected

    def connect(self) -> None:
        if self.connected:
            return
        self.connected = True
        self.connect_count += 1

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        self.disconnect_count += 1

    def execute_query(
        self,
        query: str,
        parameters: Optional[Sequence[Any]] = None,
    ) -> QueryResult:
        self.connect()
        self.calls.append((query, list(parameters) if parameters else None))

        if query == catalog_queries.TABLES_QUERY:
            records = self._catalog_rows(self.tables)
        elif query in _PER_TABLE_QUERIES:
            table = self.catalog.get(parameters[0], {})
            records = self._catalog_rows(table.get(_PER_TABLE_QUERIES[query], []))
        else:
            if self.execute_error is not None:
                raise self.execute_error
            records = list(self.statement_rows)

        return QueryResult(records=records, row_count=len(records), query=query)

    def _catalog_rows(self, rows):
        if self.catalog_error is not None:
            raise self.catalog_error
        return [dict(row) for row in rows]

    @property
    def statements(self) -> List[str]:
        return [query for query, _ in self.calls]


def table_row(name: str, description: Optional[str] = None) -> Dict[str, Any]:
    return {"TABLE_NAME": name, "TABLE_DESCRIPTION": description}


def column_row(
    name: str,
    data_type: str,
    nullable: bool = True,
    default: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "COLUMN_NAME": name,
        "DATA_TYPE": data_type,
        "IS_NULLABLE": "YES" if nullable else "NO",
        "COLUMN_DEFAULT": default,
        "COLUMN_DESCRIPTION": description,
    }


def index_row(index_name: str, column: str, is_unique: bool) -> Dict[str, Any]:
    return {"INDEX_NAME": index_name, "COLUMN_NAME": column, "is_unique": is_unique}


@pytest.fixture
def users_catalog() -> FakeDataSource:
    """Users(Id int PK, Name varchar NOT NULL, Country varchar DEFAULT 'UA') with a unique index on Name."""
    return FakeDataSource(
        tables=[table_row("Users")],
        catalog={
            "Users": {
                "columns": [
                    column_row("Id", "int", nullable=False),
                    column_row("Name", "varchar", nullable=False),
                    column_row("Country", "varchar", default="'UA'"),
                ],
                "primary_keys": [{"COLUMN_NAME": "Id"}],
                "foreign_keys": [],
                "indexes": [index_row("UX_Users_Name", "Name", True)],
            }
        },
        statement_rows=[{"Id": 1, "Name": "Olena", "Country": "UA"}],
    )


# =============================================================================
# Language model mocks
# =============================================================================


def make_completion(content: Optional[str]) -> Mock:
    """Build an object shaped like an OpenAI chat completion response."""
    choice = Mock()
    choice.message.content = content
    response = Mock()
    response.choices = [choice]
    response.usage = Mock(total_tokens=42)
    return response


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client returning a fenced SQL statement."""
    client = Mock()
    client.chat.completions.create.return_value = make_completion("```sql\nSELECT 1\n```")
    return client


@pytest.fixture
def llm_helper():
    """LLMHelper whose ``complete`` is a mock."""
    helper = Mock(spec=LLMHelper)
    helper.complete.return_value = "SELECT 1"
    return helper


@pytest.fixture
def sample_schema() -> str:
    return (
        "Database Schema:\n=================\n\n"
        "Table: Users\n"
        "----------------------------------------\n"
        "Columns:\n"
        "- Id (int) [NOT NULL]\n\n\n"
    )


@pytest.fixture
def failing_execution_error() -> QueryExecutionError:
    return QueryExecutionError("Query execution failed: Invalid object name 'Userz'.")


# =============================================================================
# Environment
# =============================================================================


ENV_VARS = [
    "MSSQL_CONNECTION_STRING",
    "MSSQL_SERVER",
    "MSSQL_PORT",
    "MSSQL_DATABASE",
    "MSSQL_USER",
    "MSSQL_PASSWORD",
    "MSSQL_DRIVER",
    "MSSQL_ENCRYPT",
    "MSSQL_TRUST_SERVER_CERTIFICATE",
    "OPENAI_API_KEY",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_API_VERSION",
    "AZURE_OPENAI_MODEL",
    "SQL_ANALYZER_MODEL",
    "SQL_ANALYZER_LANGUAGE",
    "SQL_ANALYZER_PROMPTS_PATH",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting EnvHelper reads and skip loading .env files."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sqlanalyzer.helpers.env_helper.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch
