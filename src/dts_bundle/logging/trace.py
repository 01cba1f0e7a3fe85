"""Verbose tracing passed explicitly through the bundling pipeline."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "dts_bundle"


class Tracer:
    """Emit diagnostic trace lines only when verbose tracing is enabled."""

    def __init__(self, enabled: bool = False, logger: logging.Logger | None = None) -> None:
        self._enabled = enabled
        self._logger = logger or logging.getLogger(LOGGER_NAME)

    @property
    def enabled(self) -> bool:
        """Return True when trace lines are emitted."""
        return self._enabled

    def trace(self, message: str, *args: object) -> None:
        """Log one %-formatted trace line."""
        if self._enabled:
            self._logger.info(message, *args)

    def section(self, title: str) -> None:
        """Log a pipeline stage header."""
        self.trace("### %s ###", title)

    def items(self, title: str, values: list[str] | tuple[str, ...]) -> None:
        """Log a titled bullet list."""
        if not self._enabled:
            return
        self.trace(title)
        for value in values:
            self.trace(" - %s", value)


def configure_logging(verbose: bool, stream: object | None = None) -> logging.Logger:
    """Attach a plain stderr handler to the package logger for CLI runs."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
