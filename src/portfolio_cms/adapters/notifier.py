"""Notifier that reports through the logging system (used by the CLI)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field


@dataclass(slots=True)
class LoggingNotifier:
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("portfolio_cms"))

    def success(self, message: str) -> None:
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.logger.error(message)
