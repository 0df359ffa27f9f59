"""Configuration package exposing settings modules for the crypto analysis workflow."""

from config import llm, providers, retry

__all__ = ["llm", "providers", "retry"]
