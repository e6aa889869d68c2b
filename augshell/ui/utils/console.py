#!/usr/bin/env python3
# augshell/ui/utils/console.py
from __future__ import annotations

import shutil
import sys
from typing import IO, Optional


def print_line(text: str = "", *, file: Optional[IO[str]] = None, flush: bool = False) -> None:
    """Write `text` and a newline to `file` (stdout by default)."""
    stream = file if file is not None else sys.stdout
    stream.write(text + "\n")
    if flush:
        stream.flush()


def get_terminal_columns(default: int = 80) -> int:
    try:
        return shutil.get_terminal_size((default, 24)).columns
    except (OSError, ValueError):
        return default
