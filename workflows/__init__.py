"""
Workflow orchestration for crypto market analyses.

This package sequences the news, sentiment, and report stages, persists their
outcomes, and publishes progress events. It is the orchestration layer and can
import from data/, llm/ and analysis/; ``workflows.errors`` is dependency-free
and may be imported from anywhere.
"""
