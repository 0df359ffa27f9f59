"""Command-line entry point for crypto market analyses.

Notes:
    ``run SYMBOL...`` creates one pending analysis per symbol and runs them
    concurrently while logging live progress events. ``show`` and ``list``
    read stored analyses, stage outcomes, and reports back from SQLite.
"""

import argparse
import asyncio
import contextlib
import json
import logging
import os
import sqlite3
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from config.llm import GeminiSettings, OllamaSettings, OpenAISettings
from config.providers import ChromaSettings, CryptoPanicSettings
from data import DataSourceError, SqlitePersistenceGateway
from data.providers.chroma import ChromaVectorStore
from data.providers.cryptopanic import CryptoPanicNewsProvider
from data.storage import (
    create_analysis,
    get_analysis,
    get_report_by_analysis,
    get_stage_outcomes,
    init_database,
    list_analyses,
)
from llm import GeminiProvider, LLMError, LLMProvider, OllamaProvider, OpenAIProvider
from utils.logging import setup_logging
from utils.retry import RetryableError
from utils.symbols import parse_symbols
from workflows.events import Event, EventBroadcaster, Subscription
from workflows.orchestrator import AnalysisWorkflow, WorkflowResult
from workflows.stages import NewsCollector, ReportWriter, SentimentAnalyzer

logger = logging.getLogger(__name__)

LLM_PROVIDERS = ("openai", "gemini", "ollama")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis runs."""

    db_path: str
    llm_provider: str
    llm_model: str | None
    cryptopanic_settings: CryptoPanicSettings
    ollama_settings: OllamaSettings
    chroma_settings: ChromaSettings | None = None
    openai_settings: OpenAISettings | None = None
    gemini_settings: GeminiSettings | None = None


def setup_environment() -> None:
    """Load environment and setup logging."""
    load_dotenv(override=True)
    setup_logging()


def database_path() -> str:
    db_path = os.getenv("DATABASE_PATH", "data/database/analysis.db")
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return db_path


def build_config() -> AnalysisConfig:
    """Parse environment variables and build configuration object."""
    llm_provider = (os.getenv("LLM_PROVIDER") or "ollama").strip().lower()
    if llm_provider not in LLM_PROVIDERS:
        raise ValueError(
            f"Invalid LLM_PROVIDER '{llm_provider}', must be one of: {', '.join(LLM_PROVIDERS)}"
        )

    try:
        cryptopanic_settings = CryptoPanicSettings.from_env()
    except ValueError as exc:
        raise ValueError(
            f"Failed to load CryptoPanic settings: {exc}. "
            "Please set CRYPTOPANIC_API_KEY environment variable"
        ) from exc

    openai_settings = OpenAISettings.from_env() if llm_provider == "openai" else None
    gemini_settings = GeminiSettings.from_env() if llm_provider == "gemini" else None
    # Ollama also serves the embeddings for the vector store
    ollama_settings = OllamaSettings.from_env()
    chroma_settings = ChromaSettings.from_env() if os.getenv("CHROMA_URL") else None

    return AnalysisConfig(
        db_path=database_path(),
        llm_provider=llm_provider,
        llm_model=(os.getenv("LLM_MODEL") or "").strip() or None,
        cryptopanic_settings=cryptopanic_settings,
        ollama_settings=ollama_settings,
        chroma_settings=chroma_settings,
        openai_settings=openai_settings,
        gemini_settings=gemini_settings,
    )


def build_llm(config: AnalysisConfig) -> LLMProvider:
    if config.llm_provider == "openai" and config.openai_settings:
        return OpenAIProvider(config.openai_settings, config.llm_model)
    if config.llm_provider == "gemini" and config.gemini_settings:
        return GeminiProvider(config.gemini_settings, config.llm_model)
    return OllamaProvider(config.ollama_settings, config.llm_model)


def build_workflow(
    config: AnalysisConfig, broadcaster: EventBroadcaster, llm: LLMProvider
) -> AnalysisWorkflow:
    """Wire the stages to their collaborators."""
    news = CryptoPanicNewsProvider(config.cryptopanic_settings)

    vector_store = None
    if config.chroma_settings is not None:
        embedder = OllamaProvider(config.ollama_settings)
        vector_store = ChromaVectorStore(config.chroma_settings, embedder.embed)
        logger.info("Vector store enabled: %s", config.chroma_settings.base_url)

    return AnalysisWorkflow(
        gateway=SqlitePersistenceGateway(config.db_path),
        publisher=broadcaster,
        collector=NewsCollector(news, llm, vector_store),
        analyzer=SentimentAnalyzer(llm),
        synthesizer=ReportWriter(llm),
    )


def log_event(event: Event) -> None:
    fields = {k: v for k, v in event.payload.items() if k != "analysis_id"}
    logger.info("[%s] %s %s", event.analysis_id, event.name, fields)


async def log_events(subscription: Subscription) -> None:
    """Log every event the subscription receives until cancelled."""
    async for event in subscription:
        log_event(event)


async def run_command(symbols: Sequence[str]) -> int:
    """Create and run one analysis per symbol; 0 when all complete."""
    subjects = parse_symbols(symbols)
    if not subjects:
        logger.error("No valid symbols given (expected e.g. BTC ETH)")
        return 2

    try:
        config = build_config()
    except ValueError as exc:
        logger.exception("%s", exc)
        return 1

    try:
        init_database(config.db_path)
        analyses = [create_analysis(config.db_path, subject) for subject in subjects]
    except (RuntimeError, sqlite3.Error, OSError) as exc:
        logger.exception("Failed to prepare database: %s", exc)
        return 1

    broadcaster = EventBroadcaster()
    llm = build_llm(config)
    workflow = build_workflow(config, broadcaster, llm)

    if not await llm.validate_connection():
        logger.warning("LLM provider %s did not validate; runs may fail", config.llm_provider)

    subscription = broadcaster.subscribe()
    listener = asyncio.create_task(log_events(subscription))
    try:
        results = await asyncio.gather(
            *(workflow.execute(a.analysis_id, a.subject) for a in analyses),
            return_exceptions=True,
        )
    finally:
        listener.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await listener
        for event in subscription.drain():
            log_event(event)
        subscription.close()

    exit_code = 0
    for analysis, result in zip(analyses, results, strict=True):
        if isinstance(result, WorkflowResult) and result.success:
            logger.info("%s: completed (analysis %s)", analysis.subject, analysis.analysis_id)
            continue
        exit_code = 1
        if isinstance(result, BaseException):
            logger.error("%s: run aborted: %s", analysis.subject, result)
        else:
            logger.error("%s: failed: %s", analysis.subject, result.error)
    return exit_code


def show_command(analysis_id: str) -> int:
    db_path = database_path()
    init_database(db_path)
    analysis = get_analysis(db_path, analysis_id)
    if analysis is None:
        logger.error("Analysis not found: %s", analysis_id)
        return 1

    print(f"Analysis {analysis.analysis_id} [{analysis.subject}] {analysis.status.value}")
    print(f"  started:   {analysis.started_at.isoformat()}")
    if analysis.completed_at:
        print(f"  completed: {analysis.completed_at.isoformat()}")
    if analysis.error:
        print(f"  error:     {analysis.error}")

    for outcome in get_stage_outcomes(db_path, analysis_id):
        print(f"\n[{outcome.stage_name}] {outcome.content}")

    report = get_report_by_analysis(db_path, analysis_id)
    if report is not None:
        print(f"\nReport {report.report_id}")
        rec = report.recommendation
        print(
            f"  action: {rec.get('action')}  risk: {rec.get('risk_level')}  "
            f"horizon: {rec.get('time_horizon')}"
        )
        print(f"  sentiment: {json.dumps(report.sentiment, sort_keys=True)}")
        print()
        print(report.narrative)
    return 0


def list_command(limit: int) -> int:
    db_path = database_path()
    init_database(db_path)
    for analysis in list_analyses(db_path, limit=limit):
        print(
            f"{analysis.analysis_id}  {analysis.subject:<8} {analysis.status.value:<10} "
            f"{analysis.started_at.isoformat()}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crypto market analysis workflow")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run analyses for one or more symbols (e.g. BTC ETH)")
    run.add_argument("symbols", nargs="+")

    show = sub.add_parser("show", help="Show one analysis with its outcomes and report")
    show.add_argument("analysis_id")

    ls = sub.add_parser("list", help="List recent analyses")
    ls.add_argument("--limit", type=int, default=20)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_environment()

    try:
        if args.command == "run":
            return asyncio.run(run_command(args.symbols))
        if args.command == "show":
            return show_command(args.analysis_id)
        return list_command(args.limit)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 130
    except (
        DataSourceError,
        LLMError,
        RetryableError,
        RuntimeError,
        ValueError,
        sqlite3.Error,
        OSError,
    ) as exc:
        logger.exception("Unexpected error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
