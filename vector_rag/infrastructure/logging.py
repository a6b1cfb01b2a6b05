from __future__ import annotations

import logging
import os
from typing import Optional


def _level(name: Optional[str]) -> int:
    return getattr(logging, (name or "INFO").upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        # basicConfig writes to stderr; stdout is reserved for command JSON
        logging.basicConfig(level=_level(os.getenv("RAG_LOG_LEVEL")), format="%(levelname)s | %(message)s")
    return logger


def configure_logging(level: Optional[str]) -> None:
    """Apply the configured level to every ``vector_rag.*`` logger."""
    logging.getLogger("vector_rag").setLevel(_level(level))
