"""
Centralized retry and timeout policy for the external collaborators.

The workflow itself never retries a stage; these policies only apply inside the
LLM, news, and vector-store clients.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryConfig:
    """Timeout and exponential-backoff knobs for one class of remote calls."""
    timeout_seconds: int
    max_retries: int = 3
    base: float = 0.25
    mult: float = 2.0
    jitter: float = 0.1

    @property
    def attempts(self) -> int:
        """Total number of attempts (first call plus retries)."""
        return self.max_retries + 1


# Local models can take minutes on long report prompts
DEFAULT_LLM_RETRY = RetryConfig(timeout_seconds=360)
DEFAULT_NEWS_RETRY = RetryConfig(timeout_seconds=30)
DEFAULT_VECTOR_RETRY = RetryConfig(timeout_seconds=30, max_retries=1)
