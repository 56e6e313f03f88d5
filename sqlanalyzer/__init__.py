"""
SQL Analyzer: ask a SQL Server database questions in natural language.

The schema is read from the live catalog, a language model writes the SQL,
the SQL runs against the database, and the model describes the results.
"""

from .data_sources import (
    DatabaseConnectionError,
    MetadataError,
    MSSQLDataSource,
    QueryExecutionError,
    SchemaInspector,
)
from .helpers import EnvHelper, LLMHelper
from .nl2sql import GenerationError, NL2SQLConfig, QueryGenerator, ResultFormatter
from .orchestrator import AnalysisResponse, PipelineError, PipelineStage, SQLAnalyzer

__version__ = "0.1.0"

__all__ = [
    "SQLAnalyzer",
    "AnalysisResponse",
    "PipelineStage",
    "SchemaInspector",
    "MSSQLDataSource",
    "QueryGenerator",
    "ResultFormatter",
    "NL2SQLConfig",
    "LLMHelper",
    "EnvHelper",
    # Errors
    "PipelineError",
    "DatabaseConnectionError",
    "MetadataError",
    "GenerationError",
    "QueryExecutionError",
]
