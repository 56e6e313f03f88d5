"""
SQL Generator for natural language questions.

Turns a question plus the schema document into one SQL statement using a
chat completion model. The statement is returned as the model wrote it,
minus markdown code fences; it is not validated.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..helpers.env_helper import DEFAULT_LANGUAGE, DEFAULT_MODEL
from ..helpers.llm_helper import LLMHelper
from .prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

_SQL_FENCE = re.compile(r"```sql\n?")
_FENCE = re.compile(r"```")


@dataclass
class NL2SQLConfig:
    """Configuration shared by SQL generation and response formatting."""

    model: str = DEFAULT_MODEL
    temperature: float = 0.0
    language: str = DEFAULT_LANGUAGE


def clean_query(text: str) -> str:
    """Strip markdown code fences and surrounding whitespace from model output."""
    text = _SQL_FENCE.sub("", text)
    text = _FENCE.sub("", text)
    return text.strip()


class QueryGenerator:
    """
    Generates SQL from natural language using a chat completion model.

    Example:
        ```python
        generator = QueryGenerator(llm_helper=LLMHelper())
        sql = generator.generate("How many users are there?", schema_document)
        ```
    """

    def __init__(
        self,
        llm_helper: LLMHelper,
        config: Optional[NL2SQLConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize the generator.

        Args:
            llm_helper: Language model client
            config: Optional model configuration
            prompt_builder: Optional prompt builder (default templates otherwise)
        """
        self.llm_helper = llm_helper
        self.config = config or NL2SQLConfig()
        self.prompt_builder = prompt_builder or PromptBuilder(language=self.config.language)

        logger.info(f"QueryGenerator initialized with model: {self.config.model}")

    def generate(self, question: str, schema: str) -> str:
        """
        Generate a SQL statement answering ``question``.

        Args:
            question: The natural language question
            schema: Schema document used as grounding context

        Returns:
            The cleaned SQL statement

        Raises:
            GenerationError: If the prompt cannot be built or the model call fails
        """
        try:
            messages = self.prompt_builder.build_generation_messages(question, schema)
            content = self.llm_helper.complete(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
            )
        except Exception as e:
            logger.error(f"SQL generation failed: {e}")
            raise GenerationError(f"Failed to generate SQL: {e}") from e

        sql = self.clean_query(content or "")
        logger.info(f"Generated SQL for question: {question[:50]}")
        logger.debug(f"Generated SQL: {sql}")
        return sql

    @staticmethod
    def clean_query(text: str) -> str:
        return clean_query(text)


class GenerationError(Exception):
    """Exception raised when a language model call fails."""

    pass
