"""
Helpers for SQL Analyzer: environment configuration and the language model client.
"""

from .env_helper import SUPPORTED_LANGUAGES, EnvHelper, validate_language
from .llm_helper import LLMHelper

__all__ = [
    "EnvHelper",
    "LLMHelper",
    "SUPPORTED_LANGUAGES",
    "validate_language",
]
