"""Loguru logging configuration for the gateway.

``setup_logging()`` makes loguru the only backend:

- one stderr sink, coloured text or serialised JSON
- every record carries an ``entity`` field (``-`` outside a request); the
  use cases set it with ``logger.contextualize`` so the page-by-page
  upstream crawl of one listing can be told apart from another
- stdlib loggers of the server and client libraries are routed through
  loguru; httpx's own per-request INFO lines are held back to WARNING
  unless DEBUG is on, since ``SwapiClient`` already logs each fetch
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

DEFAULT_ENTITY = "-"

INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "openai",
    "pydantic_ai",
)

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[entity]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(*, level: str = "INFO", json: bool = False) -> None:
    """Configure loguru sinks and stdlib interception.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ...).
        json: Emit serialised JSON records instead of coloured text.
    """
    logger.remove()
    logger.configure(extra={"entity": DEFAULT_ENTITY})

    if json:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=TEXT_FORMAT, colorize=True)

    intercept = InterceptHandler()
    for name in INTERCEPTED_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [intercept]
        stdlib_logger.propagate = False

    httpx_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)

    logging.root.handlers = [intercept]
    logging.root.setLevel(logging.DEBUG)
