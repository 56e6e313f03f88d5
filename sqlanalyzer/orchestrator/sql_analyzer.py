"""
SQL Analyzer pipeline.

This module provides the orchestrator that answers a natural language
question in four strictly ordered stages:
1. Introspect the database schema
2. Generate SQL from the question
3. Execute the SQL
4. Format the results as a natural language answer
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..data_sources import BaseDataSource, MSSQLDataSource, SchemaInspector
from ..helpers.env_helper import EnvHelper
from ..helpers.llm_helper import LLMHelper
from ..nl2sql import NL2SQLConfig, PromptBuilder, QueryGenerator, ResultFormatter

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Pipeline stages, in execution order."""

    INTROSPECT = "introspect"
    GENERATE = "generate"
    EXECUTE = "execute"
    FORMAT = "format"
    DONE = "done"


@dataclass
class AnalysisResponse:
    """Everything one pipeline run produced."""

    request_id: str
    question: str
    sql_query: str
    answer: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "request_id": self.request_id,
            "question": self.question,
            "sql_query": self.sql_query,
            "answer": self.answer,
            "rows": self.rows,
            "row_count": self.row_count,
            "execution_time_ms": self.execution_time_ms,
        }


class SQLAnalyzer:
    """
    Answers natural language questions about a SQL Server database.

    The analyzer owns one data source and therefore at most one open
    connection. The connection is opened on first use, shared by all
    stages, and released by ``disconnect`` (or on leaving a ``with``
    block). One analyzer runs one pipeline at a time; use separate
    instances for concurrent questions.

    Example:
        ```python
        with SQLAnalyzer() as analyzer:
            print(analyzer.run("How many users live in Ukraine?"))
        ```
    """

    def __init__(
        self,
        data_source: Optional[BaseDataSource] = None,
        llm_helper: Optional[LLMHelper] = None,
        config: Optional[NL2SQLConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        env_helper: Optional[EnvHelper] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            data_source: Optional data source (SQL Server from env vars otherwise)
            llm_helper: Optional language model client (built from env vars otherwise)
            config: Optional model configuration (model and language from env vars otherwise)
            prompt_builder: Optional prompt builder
            env_helper: Optional configuration source for the defaults above
        """
        self._env_helper = env_helper

        if data_source is None:
            data_source = MSSQLDataSource(env_helper=self._get_env_helper())
        self._data_source = data_source
        if llm_helper is None:
            llm_helper = LLMHelper(env_helper=self._get_env_helper())
        self.config = config or self._load_config_from_env()
        if prompt_builder is None:
            prompt_builder = PromptBuilder(
                prompts_path=self._get_env_helper().PROMPTS_PATH,
                language=self.config.language,
            )

        self._inspector = SchemaInspector(self._data_source)
        self._generator = QueryGenerator(llm_helper, self.config, prompt_builder)
        self._formatter = ResultFormatter(llm_helper, self.config, prompt_builder)

        logger.info(
            "SQLAnalyzer initialized (model=%s, language=%s)",
            self.config.model, self.config.language,
        )

    def _get_env_helper(self) -> EnvHelper:
        if self._env_helper is None:
            self._env_helper = EnvHelper()
        return self._env_helper

    def _load_config_from_env(self) -> NL2SQLConfig:
        env = self._get_env_helper()
        return NL2SQLConfig(model=env.MODEL, language=env.LANGUAGE)

    @property
    def is_connected(self) -> bool:
        return self._data_source.is_connected

    def connect(self) -> None:
        """Open the database connection; does nothing if it is already open."""
        self._data_source.connect()

    def disconnect(self) -> None:
        """Release the database connection if one is open."""
        self._data_source.disconnect()

    def inspect_schema(self) -> str:
        """Connect if needed and return the schema document."""
        self.connect()
        return self._inspector.build_document()

    def ask(self, question: str) -> AnalysisResponse:
        """
        Run the full pipeline for one question.

        Args:
            question: Natural language question about the database

        Returns:
            AnalysisResponse with the SQL, result rows and answer

        Raises:
            PipelineError: If any stage fails; later stages are not run
        """
        request_id = str(uuid4())
        start_time = time.perf_counter()
        stage = PipelineStage.INTROSPECT

        logger.info("Processing request_id=%s: %s", request_id, question[:100])

        try:
            self.connect()
            schema = self._inspector.build_document()

            stage = PipelineStage.GENERATE
            sql_query = self._generator.generate(question, schema)

            stage = PipelineStage.EXECUTE
            result = self._data_source.execute_query(sql_query)
            logger.debug("SQL Results: %s", result.records)

            stage = PipelineStage.FORMAT
            answer = self._formatter.format(sql_query, result.records)

            stage = PipelineStage.DONE

        except Exception as e:
            logger.error(
                "Pipeline failed request_id=%s at stage %s: %s",
                request_id, stage.value, e,
            )
            raise PipelineError(
                f"Failed to analyze and query ({stage.value}): {e}", stage=stage
            ) from e

        execution_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Request completed request_id=%s, rows=%d, time=%.0fms",
            request_id, result.row_count, execution_time,
        )

        return AnalysisResponse(
            request_id=request_id,
            question=question,
            sql_query=sql_query,
            answer=answer,
            rows=result.records,
            execution_time_ms=execution_time,
        )

    def run(self, question: str) -> str:
        """Answer ``question`` in natural language. Raises PipelineError on failure."""
        return self.ask(question).answer

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False


class PipelineError(Exception):
    """Exception raised when any pipeline stage fails."""

    def __init__(self, message: str, stage: Optional[PipelineStage] = None):
        super().__init__(message)
        self.stage = stage
