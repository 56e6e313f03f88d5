"""
Command line entry point.

Usage:
    python -m sqlanalyzer "How many users live in Ukraine?"
    python -m sqlanalyzer --schema-only
"""

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from .data_sources import DatabaseConnectionError, MetadataError
from .helpers.env_helper import SUPPORTED_LANGUAGES, EnvHelper
from .nl2sql import NL2SQLConfig
from .orchestrator import PipelineError, SQLAnalyzer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sql-analyzer",
        description="Ask a SQL Server database questions in natural language",
    )
    parser.add_argument("question", nargs="?", help="Natural language question")
    parser.add_argument("--schema-only", action="store_true", help="Print the schema document and exit")
    parser.add_argument("--show-sql", action="store_true", help="Print the generated SQL")
    parser.add_argument("--show-rows", action="store_true", help="Print the result rows")
    parser.add_argument("--language", choices=SUPPORTED_LANGUAGES, help="Response language")
    parser.add_argument("--model", help="Model or deployment name")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.schema_only and not args.question:
        parser.error("a question is required unless --schema-only is given")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        env = EnvHelper()
        config = NL2SQLConfig(
            model=args.model or env.MODEL,
            language=args.language or env.LANGUAGE,
        )

        with SQLAnalyzer(config=config, env_helper=env) as analyzer:
            if args.schema_only:
                print(analyzer.inspect_schema())
                return 0

            response = analyzer.ask(args.question)
    except (PipelineError, DatabaseConnectionError, MetadataError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.show_sql:
        print(f"SQL: {response.sql_query}\n")
    if args.show_rows:
        print(pd.DataFrame.from_records(response.rows).to_string(index=False))
        print()
    print(response.answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
