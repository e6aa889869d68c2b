#!/usr/bin/env python3
# augshell/ui/static/table.py
from __future__ import annotations

"""
Plain-text layouts for help listings and completion candidates.
"""

from typing import Sequence


def format_listing(rows: Sequence[tuple[str, str]], *, indent: int = 2, separator: str = " - ") -> str:
    """
    Align (name, text) pairs on the name column:

        get      - Get the value of the node PATH.
        dump-xml - Print the subtree under PATH as XML.
    """
    if not rows:
        return ""
    width = max(len(name) for name, _ in rows)
    pad = " " * indent
    return "\n".join(f"{pad}{name.ljust(width)}{separator}{text}".rstrip() for name, text in rows)


def format_columns(words: Sequence[str], total_width: int, *, gap: int = 2) -> str:
    """
    Lay `words` out row by row in equal-width columns fitting `total_width`.
    At least one column is used however narrow the terminal is.
    """
    if not words:
        return ""
    cell = max(len(w) for w in words) + gap
    per_row = max(1, total_width // cell)
    lines = []
    for start in range(0, len(words), per_row):
        lines.append("".join(w.ljust(cell) for w in words[start:start + per_row]).rstrip())
    return "\n".join(lines)
