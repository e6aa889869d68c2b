#!/usr/bin/env python3
# augshell/ui/static/logging.py
from __future__ import annotations

"""
Diagnostics logging for the shell.

Command output and error reports are written directly to the session
streams; this logger only carries debug/diagnostic records. The console
handler colours records by level when stderr is a terminal; an optional
rotating file receives everything at DEBUG.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from augshell.ui.utils.ansi import strip_ansi, styled, supports_color

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVEL_STYLE = {
    logging.DEBUG: "grey",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold_red",
}


class ColorizingStreamHandler(logging.StreamHandler):
    """StreamHandler that colours whole records by level on terminals."""

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self.colour = supports_color(self.stream)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        style = _LEVEL_STYLE.get(record.levelno)
        if self.colour and style:
            return styled(message, style)
        return message if self.colour else strip_ansi(message)


def init_logger(
    name: str = "augshell",
    level: int | str = logging.WARNING,
    logfile: Optional[str | Path] = None,
) -> logging.Logger:
    """
    Configure the `name` logger once; calling it again only adjusts levels.

    The console handler writes to stderr at `level`. With `logfile`, a
    RotatingFileHandler (2 MB x 3) records everything at DEBUG.
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if logfile else level)

    console = next((h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)), None)
    if console is None:
        console = ColorizingStreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)
    console.setLevel(level)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
    return logger
