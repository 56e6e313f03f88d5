"""
Environment configuration for SQL Analyzer.

Settings are read from process environment variables, after loading an
optional ``.env`` file from the working directory.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("english", "ukrainian")

DEFAULT_MODEL = "gpt-4o"
DEFAULT_LANGUAGE = "english"
DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"


def _env_flag(name: str, default: str) -> str:
    """Normalize an ODBC yes/no flag from the environment."""
    value = os.getenv(name, default).strip().lower()
    return "yes" if value in ("1", "true", "yes", "on") else "no"


class EnvHelper:
    """Reads database, model and language settings from the environment."""

    def __init__(self, load_env_file: bool = True):
        if load_env_file:
            load_dotenv()

        # Database
        self.MSSQL_CONNECTION_STRING: Optional[str] = os.getenv("MSSQL_CONNECTION_STRING")
        self.MSSQL_SERVER: Optional[str] = os.getenv("MSSQL_SERVER")
        self.MSSQL_PORT: int = int(os.getenv("MSSQL_PORT", "1433"))
        self.MSSQL_DATABASE: Optional[str] = os.getenv("MSSQL_DATABASE")
        self.MSSQL_USER: Optional[str] = os.getenv("MSSQL_USER")
        self.MSSQL_PASSWORD: Optional[str] = os.getenv("MSSQL_PASSWORD")
        self.MSSQL_DRIVER: str = os.getenv("MSSQL_DRIVER", DEFAULT_ODBC_DRIVER)
        self.MSSQL_ENCRYPT: str = _env_flag("MSSQL_ENCRYPT", "yes")
        self.MSSQL_TRUST_SERVER_CERTIFICATE: str = _env_flag(
            "MSSQL_TRUST_SERVER_CERTIFICATE", "no"
        )

        # Language model
        self.OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.AZURE_OPENAI_API_KEY: Optional[str] = os.getenv("AZURE_OPENAI_API_KEY")
        self.AZURE_OPENAI_ENDPOINT: Optional[str] = os.getenv("AZURE_OPENAI_ENDPOINT")
        self.AZURE_OPENAI_API_VERSION: str = os.getenv(
            "AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION
        )
        self.MODEL: str = os.getenv(
            "SQL_ANALYZER_MODEL", os.getenv("AZURE_OPENAI_MODEL", DEFAULT_MODEL)
        )

        # Responses
        self.LANGUAGE: str = validate_language(
            os.getenv("SQL_ANALYZER_LANGUAGE", DEFAULT_LANGUAGE)
        )
        self.PROMPTS_PATH: Optional[str] = os.getenv("SQL_ANALYZER_PROMPTS_PATH")

    def use_azure_openai(self) -> bool:
        """Azure OpenAI is used whenever an Azure endpoint is configured."""
        return bool(self.AZURE_OPENAI_ENDPOINT)

    def get_connection_string(self) -> str:
        """
        Build the ODBC connection string for SQL Server.

        ``MSSQL_CONNECTION_STRING`` wins when set; otherwise the string is
        assembled from the individual ``MSSQL_*`` settings.

        Raises:
            ValueError: If neither a full connection string nor the server
                and database names are configured.
        """
        if self.MSSQL_CONNECTION_STRING:
            return self.MSSQL_CONNECTION_STRING

        if not self.MSSQL_SERVER or not self.MSSQL_DATABASE:
            raise ValueError(
                "Missing required database settings: "
                "MSSQL_SERVER and MSSQL_DATABASE (or MSSQL_CONNECTION_STRING)"
            )

        parts = [
            f"DRIVER={{{self.MSSQL_DRIVER}}}",
            f"SERVER={self.MSSQL_SERVER},{self.MSSQL_PORT}",
            f"DATABASE={self.MSSQL_DATABASE}",
        ]
        if self.MSSQL_USER:
            parts.append(f"UID={self.MSSQL_USER}")
            parts.append(f"PWD={self.MSSQL_PASSWORD or ''}")
        else:
            parts.append("Trusted_Connection=yes")
        parts.append(f"Encrypt={self.MSSQL_ENCRYPT}")
        parts.append(f"TrustServerCertificate={self.MSSQL_TRUST_SERVER_CERTIFICATE}")

        return ";".join(parts) + ";"


def validate_language(language: str) -> str:
    """Return the normalized language name, or raise ValueError if unsupported."""
    normalized = (language or "").strip().lower()
    if normalized not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Unsupported language '{language}'. "
            f"Supported languages: {', '.join(SUPPORTED_LANGUAGES)}"
        )
    return normalized
