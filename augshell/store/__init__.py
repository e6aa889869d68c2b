#!/usr/bin/env python3
# augshell/store/__init__.py
from __future__ import annotations

"""
Package for the tree-store contract and configuration.

Provides:
- The TreeStore protocol, error types and open flags (`base`).
- The python-augeas backed implementation (`augeas_store`).
- Configuration loader with environment variable overrides (`config`).
"""


from .base import (
    CONTEXT_PATH,
    ERRORS_PATTERN,
    NO_ERROR,
    SAVED_EVENTS_PATH,
    SEP,
    VERSION_PATH,
    ErrorCode,
    ErrorReport,
    OpenFlags,
    Span,
    TreeStore,
    TreeStoreError,
)
from .augeas_store import AugeasStore
from .config import ShellConfig, load_config, DEFAULTS

__all__ = [
    "CONTEXT_PATH",
    "ERRORS_PATTERN",
    "NO_ERROR",
    "SAVED_EVENTS_PATH",
    "SEP",
    "VERSION_PATH",
    "ErrorCode",
    "ErrorReport",
    "OpenFlags",
    "Span",
    "TreeStore",
    "TreeStoreError",
    "AugeasStore",
    "ShellConfig",
    "load_config",
    "DEFAULTS",
]
