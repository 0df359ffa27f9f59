"""News collection stage."""

import logging

from data.base import NewsDataSource, VectorStore
from llm.base import LLMProvider
from workflows.context import AnalysisContext
from workflows.errors import ExternalCallError, NoDataAvailableError
from workflows.stages.base import COLLABORATOR_ERRORS, Stage, StageResult

logger = logging.getLogger(__name__)

MAX_ARTICLES = 15
HEADLINES_IN_PROMPT = 10

SYSTEM_INSTRUCTION = (
    "You are a crypto news collector agent. Your task is to fetch and organize "
    "cryptocurrency news articles.\n"
    "Focus on relevance, recency, and quality. Provide a brief summary of what news "
    "you collected."
)


class NewsCollector(Stage):
    """Fetches recent news for the subject, indexes it, and summarises the headlines."""

    name = "news-collector"
    label = "News Collector"
    system_instruction = SYSTEM_INSTRUCTION
    failure_summary = "No news articles found"
    error_summary = "Failed to collect news"

    def __init__(
        self,
        news: NewsDataSource,
        llm: LLMProvider,
        vector_store: VectorStore | None = None,
        max_articles: int = MAX_ARTICLES,
    ) -> None:
        super().__init__(llm)
        if max_articles < 1:
            raise ValueError("max_articles must be >= 1")
        self.news = news
        self.vector_store = vector_store
        self.max_articles = max_articles

    async def run(self, context: AnalysisContext) -> StageResult:
        try:
            articles = await self.news.fetch(context.subject, self.max_articles)
        except COLLABORATOR_ERRORS as exc:
            raise ExternalCallError(
                f"News fetch failed: {exc}", collaborator=self.news.source_name
            ) from exc

        articles = articles[: self.max_articles]
        if not articles:
            raise NoDataAvailableError(f"No news available for {context.subject}")

        logger.info(f"Fetched {len(articles)} news articles for {context.subject}")
        await self._index(articles)

        headlines = "\n".join(
            f"{i}. {a.title}" for i, a in enumerate(articles[:HEADLINES_IN_PROMPT], start=1)
        )
        prompt = (
            f"Summarize the key themes from these {len(articles)} crypto news headlines:\n\n"
            f"{headlines}\n\n"
            "Provide a 2-3 sentence summary of the main market narrative."
        )
        summary = (await self.generate(prompt)).strip()

        return StageResult.success(
            f"Collected {len(articles)} news articles. {summary}",
            {
                "article_count": len(articles),
                "articles": [a.to_payload() for a in articles],
                "summary": summary,
            },
        )

    async def _index(self, articles) -> None:
        """Best-effort write to the vector store; failures are logged only."""
        if self.vector_store is None:
            return
        try:
            await self.vector_store.add_batch(articles)
        except Exception as exc:
            logger.warning(
                f"Vector store {self.vector_store.source_name} rejected "
                f"{len(articles)} articles: {exc}",
                exc_info=True,
            )
