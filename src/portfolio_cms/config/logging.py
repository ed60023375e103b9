"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging

from .env import optional_env_var

LOG_LEVEL_VAR = "PORTFOLIO_LOG_LEVEL"
# one INFO line per request drowns out the CLI's own messages
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def resolve_level(default: int = logging.INFO) -> int:
    """Level named by ``PORTFOLIO_LOG_LEVEL`` (e.g. ``debug``), else ``default``."""
    name = optional_env_var(LOG_LEVEL_VAR)
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    return default if level is None else level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    Pass ``force=True`` to reconfigure an already configured root logger.
    """

    effective = resolve_level() if level is None else level
    logging.basicConfig(
        level=effective,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.WARNING))
