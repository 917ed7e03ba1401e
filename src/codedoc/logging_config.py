"""Centralized logging configuration for codedoc."""

import logging
import sys

# Third-party loggers that are chatty at INFO during model load and indexing.
QUIET_LOGGERS = ("chromadb", "sentence_transformers", "httpx", "urllib3", "huggingface_hub")


def configure_logging(level: int | str | None = None) -> None:
    """Configure app-wide logging. Call once at startup.

    level: logging level or name; defaults to CODEDOC_LOG_LEVEL (INFO).
    """
    if level is None:
        from codedoc.config.settings import settings

        level = settings.codedoc_log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
