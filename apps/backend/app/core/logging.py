"""Logging for the ``app`` package.

``configure_logging`` is called once from the FastAPI lifespan; modules only
ever call ``get_logger(__name__)``.
"""

from __future__ import annotations

import logging

_PKG_LOGGER_NAME = "app"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_configured = False


def _level(name: str | None) -> int:
    numeric = getattr(logging, (name or "").strip().upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Attach one stderr handler to the ``app`` logger (settings ``LOG_LEVEL``, default INFO)."""
    global _configured
    if _configured:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_level(level))
    # uvicorn 로거와 중복 출력 방지
    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
