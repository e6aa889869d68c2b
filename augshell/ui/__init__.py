#!/usr/bin/env python3
# augshell/ui/__init__.py
from __future__ import annotations

"""
Terminal output helpers: plain line output, text layouts and logging setup.
"""

from .utils import get_terminal_columns, print_line, strip_ansi, styled, supports_color
from .static import ColorizingStreamHandler, format_columns, format_listing, init_logger

__all__ = [
    "get_terminal_columns",
    "print_line",
    "strip_ansi",
    "styled",
    "supports_color",
    "ColorizingStreamHandler",
    "format_columns",
    "format_listing",
    "init_logger",
]
