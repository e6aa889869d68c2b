#!/usr/bin/env python3
# augshell/ui/utils/ansi.py
from __future__ import annotations

import os
import re
from typing import IO, Optional

RESET = "\x1b[0m"

# SGR sequences by name; only what the log handler uses
STYLES = {
    "grey": "\x1b[90m",
    "yellow": "\x1b[33m",
    "red": "\x1b[31m",
    "bold_red": "\x1b[1;31m",
}

_SGR = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return _SGR.sub("", text)


def supports_color(stream: Optional[IO[str]]) -> bool:
    """
    True when `stream` is a terminal that should get colours.
    NO_COLOR (any value) and TERM=dumb turn colours off.
    """
    if stream is None or "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def styled(text: str, style: str) -> str:
    """Wrap `text` in the named style; unknown names leave it unchanged."""
    sequence = STYLES.get(style)
    return f"{sequence}{text}{RESET}" if sequence else text
