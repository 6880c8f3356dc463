"""Console log formatting with ANSI-colored level names."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

_RESET = "\033[0m"

_LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\033[2;37m",  # dim grey
    logging.INFO: "\033[34m",  # blue
    logging.WARNING: "\033[33m",  # yellow
    logging.ERROR: "\033[31m",  # red
    logging.CRITICAL: "\033[1;41m",  # bold on red
}


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal.

    Color is skipped when ``NO_COLOR`` is set, when ``FORCE_COLOR`` is unset and
    the target stream is not a TTY, or when ``use_color=False`` is passed.
    The record handed to the formatter is never modified.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: IO[str] | None = None,
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self.stream = stream
        self.use_color = use_color

    def colors_enabled(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        if self.use_color is not None:
            return self.use_color
        if os.environ.get("FORCE_COLOR") is not None:
            return True
        stream = self.stream or sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self.colors_enabled():
            return super().format(record)

        color = _LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(tinted)
