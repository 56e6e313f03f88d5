"""
NL2SQL module for SQL Analyzer.

This module converts natural language questions to SQL and query results
back to natural language using a chat completion model.
"""

from .prompt_builder import PromptBuilder, serialize_rows
from .response_formatter import ResultFormatter
from .sql_generator import GenerationError, NL2SQLConfig, QueryGenerator, clean_query

__all__ = [
    # SQL Generator
    "QueryGenerator",
    "NL2SQLConfig",
    "GenerationError",
    "clean_query",
    # Response Formatter
    "ResultFormatter",
    # Prompt Builder
    "PromptBuilder",
    "serialize_rows",
]
