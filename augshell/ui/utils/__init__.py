#!/usr/bin/env python3
# augshell/ui/utils/__init__.py
from __future__ import annotations
from .ansi import RESET, STYLES, strip_ansi, styled, supports_color
from .console import get_terminal_columns, print_line

__all__ = [
    "RESET",
    "STYLES",
    "strip_ansi",
    "styled",
    "supports_color",
    "get_terminal_columns",
    "print_line",
]
