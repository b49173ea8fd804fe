"""Logging for ``cartola``.

Library modules only ever call ``get_logger("cartola.<module>")``. Handlers
are the entrypoint's business: the CLI (or a host web app) calls
:func:`configure_logging` once at startup, which attaches a single
``StreamHandler`` to the ``"cartola"`` logger.

Until that happens the package logger carries a ``NullHandler`` and stays
silent. The OpenAI SDK and its HTTP client log every request at INFO; their
loggers are held at WARNING unless cartola itself runs at DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "cartola"
_LEVEL_ENV_VAR = "CARTOLA_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CHATTY_LOGGERS = ("openai", "httpx", "httpcore")
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        text = level.strip().upper()
        if text.isdigit():
            return int(text)
        named = logging.getLevelName(text)
        if isinstance(named, int):
            return named
    env_val = os.getenv(_LEVEL_ENV_VAR)
    if env_val and env_val != level:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
    force: bool = False,
) -> None:
    """Attach the package handler; later calls are no-ops unless ``force``.

    Parameters
    ----------
    level:
        ``int`` or level name. ``None`` (or an unknown name) falls back to
        ``CARTOLA_LOG_LEVEL``, then ``INFO``.
    fmt:
        Format string, default ``"%(asctime)s %(name)s %(levelname)s %(message)s"``.
    stream:
        Handler stream, ``sys.stderr`` when omitted.
    force:
        Replace a handler installed by an earlier call.
    """

    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    # The root logger belongs to the host.
    logger.propagate = False

    third_party = logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, silencing the package until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
