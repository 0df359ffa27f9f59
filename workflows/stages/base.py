"""Stage contract shared by the news, sentiment, and report stages."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from data.base import DataSourceError
from llm.base import LLMError, LLMProvider
from utils.retry import RetryableError
from workflows.context import AnalysisContext
from workflows.errors import (
    ExternalCallError,
    MissingUpstreamDataError,
    NoDataAvailableError,
)

logger = logging.getLogger(__name__)

# Failures raised by collaborator clients after their own retries are spent.
COLLABORATOR_ERRORS = (DataSourceError, LLMError, RetryableError)


@dataclass(frozen=True)
class StageResult:
    """What a stage hands back to the orchestrator."""

    succeeded: bool
    summary: str
    payload: dict[str, Any] | None = None
    error_detail: str | None = None

    @classmethod
    def success(cls, summary: str, payload: dict[str, Any] | None = None) -> "StageResult":
        return cls(True, summary, payload)

    @classmethod
    def failure(cls, summary: str, error_detail: str) -> "StageResult":
        return cls(False, summary, None, error_detail)


class Stage(ABC):
    """
    One step of the analysis pipeline.

    Subclasses implement ``run``. Domain failures (no news, missing upstream
    output) and collaborator failures (ExternalCallError) raised from ``run``
    are turned into failure results here, so every invoked stage leaves an
    outcome behind before the orchestrator ends the run.
    """

    name: str = ""
    label: str = ""
    system_instruction: str | None = None
    failure_summary: str = ""
    error_summary: str = ""

    def __init__(self, llm: LLMProvider) -> None:
        self.llm = llm

    async def execute(self, context: AnalysisContext) -> StageResult:
        logger.info(f"[{self.name}] starting for {context.subject} ({context.analysis_id})")
        try:
            result = await self.run(context)
        except (NoDataAvailableError, MissingUpstreamDataError) as exc:
            logger.warning(f"[{self.name}] {exc}")
            return StageResult.failure(self.failure_summary or f"{self.label} failed", str(exc))
        except ExternalCallError as exc:
            logger.error(f"[{self.name}] {exc}")
            return StageResult.failure(self.error_summary or f"{self.label} failed", str(exc))
        logger.info(f"[{self.name}] finished for {context.subject}")
        return result

    @abstractmethod
    async def run(self, context: AnalysisContext) -> StageResult:
        """Do the stage's work; raise domain errors or ExternalCallError."""

    async def generate(self, prompt: str) -> str:
        """Ask the model, translating client failures to ExternalCallError."""
        try:
            return await self.llm.generate(prompt, system_instruction=self.system_instruction)
        except COLLABORATOR_ERRORS as exc:
            raise ExternalCallError(
                f"Model call failed: {exc}", collaborator=self.llm.name
            ) from exc
