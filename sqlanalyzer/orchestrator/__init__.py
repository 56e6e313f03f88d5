"""
Orchestrator module for SQL Analyzer.
"""

from .sql_analyzer import AnalysisResponse, PipelineError, PipelineStage, SQLAnalyzer

__all__ = [
    "SQLAnalyzer",
    "AnalysisResponse",
    "PipelineError",
    "PipelineStage",
]
