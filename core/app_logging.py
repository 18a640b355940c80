"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO", handler: logging.Handler | None = None) -> None:
    """Configure application logging with a single handler (stream by default)."""
    logger = logging.getLogger("core")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if logger.handlers:
        return
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
