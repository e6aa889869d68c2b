#!/usr/bin/env python3
# augshell/ui/static/__init__.py
from __future__ import annotations
from .table import format_columns, format_listing
from .logging import ColorizingStreamHandler, init_logger

__all__ = [
    "format_columns",
    "format_listing",
    "ColorizingStreamHandler",
    "init_logger",
]
