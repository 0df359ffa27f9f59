"""Pipeline stages, in the order the orchestrator runs them."""

from workflows.stages.analyzer import SentimentAnalyzer
from workflows.stages.base import Stage, StageResult
from workflows.stages.collector import NewsCollector
from workflows.stages.synthesizer import ReportWriter

__all__ = ["Stage", "StageResult", "NewsCollector", "SentimentAnalyzer", "ReportWriter"]
