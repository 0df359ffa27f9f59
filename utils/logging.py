"""Centralized logging configuration for the crypto analysis workflow."""

import logging
import os
import sys

# Third-party loggers that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger from LOG_LEVEL / LOG_FORMAT / LOG_FILE.

    An explicit ``level`` (e.g. from a CLI flag) wins over LOG_LEVEL.
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    fmt = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = os.getenv("LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level.upper(),
        format=fmt,
        handlers=handlers,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
