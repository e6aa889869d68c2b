#!/usr/bin/env python3
# augshell/commands/__init__.py
from __future__ import annotations

"""
Package for native command management and registration.

Provides:
- Data structures and protocols (`Command`, `CommandResult`, `CommandCallback`).
- Status values shared by every evaluator (`OK`, `FAILED`, `QUIT`).
- In-memory registry and decorator (`REGISTRY`, `command`).
"""


from .command_types import (
    OK,
    FAILED,
    QUIT,
    Command,
    CommandCallback,
    CommandError,
    CommandResult,
)
from .commands import REGISTRY, CommandRegistry, command

__all__ = [
    "OK",
    "FAILED",
    "QUIT",
    "Command",
    "CommandCallback",
    "CommandError",
    "CommandResult",
    "REGISTRY",
    "CommandRegistry",
    "command",
]
