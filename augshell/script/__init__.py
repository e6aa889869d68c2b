#!/usr/bin/env python3
# augshell/script/__init__.py
from __future__ import annotations

"""
Package for the Lua scripting mode.

Provides:
- The tree operations exposed to scripts (`bridge`).
- The lupa-backed evaluator (`runtime`, imported on demand).
"""


from .bridge import ALIASES, OPERATIONS, ScriptBridge, ScriptError, truthy

__all__ = [
    "ALIASES",
    "OPERATIONS",
    "ScriptBridge",
    "ScriptError",
    "truthy",
]
