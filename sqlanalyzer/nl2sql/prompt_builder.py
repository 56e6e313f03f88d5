"""
Prompt Builder for SQL generation and result formatting.

This module holds the prompt templates sent to the language model and
assembles the chat messages for both directions: question to SQL, and
result rows to a natural language answer.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..helpers.env_helper import DEFAULT_LANGUAGE, validate_language

logger = logging.getLogger(__name__)


SQL_GENERATION_SYSTEM_PROMPT = """You are a SQL expert. Given a database schema, generate a SQL query to answer the user's question.
Database Schema:
{schema}

Rules:
1. Return ONLY the SQL query, nothing else
2. Use proper SQL syntax
3. Make sure the query is safe and efficient"""

RESPONSE_FORMATTING_SYSTEM_PROMPT = (
    "Format the SQL query results into a natural language response in {language}."
)

RESPONSE_FORMATTING_USER_PROMPT = (
    "SQL Query: {query}\nResults: {results}\n\n"
    "Please provide a natural language response:"
)

# Template name -> placeholders the template must contain
REQUIRED_PLACEHOLDERS = {
    "sql_generation": ["{schema}"],
    "response_formatting": ["{language}"],
}


def serialize_rows(rows: List[Mapping[str, Any]]) -> str:
    """Serialize result rows to JSON; dates, decimals and GUIDs become strings."""
    return json.dumps([dict(row) for row in rows], default=str, ensure_ascii=False)


class PromptBuilder:
    """
    Builds chat messages for the language model.

    Templates can be overridden from a YAML file with the keys
    ``sql_generation`` and ``response_formatting``.
    """

    def __init__(
        self,
        prompts_path: Optional[str] = None,
        language: str = DEFAULT_LANGUAGE,
    ):
        """
        Initialize the prompt builder.

        Args:
            prompts_path: Optional path to a YAML file with template overrides
            language: Natural language for formatted responses
        """
        self.language = validate_language(language)
        self.templates: Dict[str, str] = {
            "sql_generation": SQL_GENERATION_SYSTEM_PROMPT,
            "response_formatting": RESPONSE_FORMATTING_SYSTEM_PROMPT,
        }

        if prompts_path:
            for name, template in self._load_prompts(prompts_path).items():
                self.set_custom_prompt(name, template)

    def _load_prompts(self, path: str) -> Dict[str, str]:
        """Load template overrides from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load prompts from {path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring prompts file {path}: expected a mapping")
            return {}

        overrides = {
            name: template
            for name, template in data.items()
            if name in REQUIRED_PLACEHOLDERS and isinstance(template, str)
        }
        logger.info(f"Loaded {len(overrides)} prompt overrides from {path}")
        return overrides

    def set_custom_prompt(self, name: str, template: str) -> None:
        """Replace one template after checking its placeholders."""
        if name not in REQUIRED_PLACEHOLDERS:
            raise ValueError(
                f"Unknown prompt '{name}'. "
                f"Known prompts: {', '.join(REQUIRED_PLACEHOLDERS)}"
            )
        for placeholder in REQUIRED_PLACEHOLDERS[name]:
            if placeholder not in template:
                raise ValueError(
                    f"Template '{name}' must contain {placeholder} placeholder"
                )

        # Literal braces must be doubled ({{ and }})
        fields = {placeholder.strip("{}"): "" for placeholder in REQUIRED_PLACEHOLDERS[name]}
        try:
            template.format(**fields)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"Template '{name}' is not a valid format string: {e!r}. "
                "Write literal braces as {{ and }}"
            ) from e

        self.templates[name] = template
        logger.info(f"Custom {name} prompt set")

    def build_generation_messages(self, question: str, schema: str) -> List[Dict[str, str]]:
        """Messages asking for one SQL statement answering ``question``."""
        return [
            {
                "role": "system",
                "content": self.templates["sql_generation"].format(schema=schema),
            },
            {"role": "user", "content": question},
        ]

    def build_formatting_messages(
        self,
        query: str,
        rows: List[Mapping[str, Any]],
    ) -> List[Dict[str, str]]:
        """Messages asking for a natural language answer from query results."""
        return [
            {
                "role": "system",
                "content": self.templates["response_formatting"].format(
                    language=self.language
                ),
            },
            {
                "role": "user",
                "content": RESPONSE_FORMATTING_USER_PROMPT.format(
                    query=query, results=serialize_rows(rows)
                ),
            },
        ]
