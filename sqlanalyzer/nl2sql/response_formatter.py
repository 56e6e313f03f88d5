"""
Response formatting: query results back to natural language.
"""

import logging
from typing import Any, List, Mapping, Optional

from ..helpers.llm_helper import LLMHelper
from .prompt_builder import PromptBuilder
from .sql_generator import GenerationError, NL2SQLConfig

logger = logging.getLogger(__name__)


class ResultFormatter:
    """Asks the language model to describe query results in the configured language."""

    def __init__(
        self,
        llm_helper: LLMHelper,
        config: Optional[NL2SQLConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        self.llm_helper = llm_helper
        self.config = config or NL2SQLConfig()
        self.prompt_builder = prompt_builder or PromptBuilder(language=self.config.language)

    def format(self, query: str, rows: List[Mapping[str, Any]]) -> str:
        """
        Describe ``rows`` returned by ``query`` in natural language.

        Returns:
            The model's answer, or an empty string if it returned no content

        Raises:
            GenerationError: If the prompt cannot be built or the model call fails
        """
        try:
            messages = self.prompt_builder.build_formatting_messages(query, rows)
            content = self.llm_helper.complete(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
            )
        except Exception as e:
            logger.error(f"Response formatting failed: {e}")
            raise GenerationError(f"Failed to format response: {e}") from e

        if not content:
            logger.warning(f"Model returned no content for {len(rows)} result rows")
            return ""
        return content
