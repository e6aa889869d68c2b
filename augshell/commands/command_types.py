#!/usr/bin/env python3
# augshell/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandCallback: the callable protocol for any native command implementation.
- CommandResult: the outcome of one dispatched line (status, timing, error).
- CommandError: shell-level failure raised by native commands (bad arguments...).
- Command: a registered native command with metadata and a callable.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from augshell.store.base import ErrorReport

# Status values shared by every evaluator
OK = 0
FAILED = -1
QUIT = -2


class CommandCallback(Protocol):
    """Protocol for any command function. The first argument is the Session."""

    def __call__(self, session: Any, *args: Any) -> Any:  # pragma: no cover - signature only
        ...


class CommandError(Exception):
    """A native command rejected its input; reported as 'Failed to execute command'."""


@dataclass(slots=True)
class CommandResult:
    """
    Outcome of one dispatched line.

    Attributes:
        status: >= 0 on success, QUIT to end the session, other negatives on failure.
        elapsed_ms: Wall-clock duration when timing was requested.
        error: What to report on failure.
    """
    status: int = OK
    elapsed_ms: int | None = None
    error: ErrorReport | None = None

    @property
    def ok(self) -> bool:
        return self.status >= 0

    @property
    def quit(self) -> bool:
        return self.status == QUIT

    @property
    def failed(self) -> bool:
        return self.status < 0 and self.status != QUIT


@dataclass(slots=True)
class Command:
    """
    One entry of the native grammar.

    `callback(session, *args)` does the work; `param_names` lists the
    arguments after the session, in order. `category` groups the command
    in help output and defaults to the name of its defining module.
    """

    name: str
    description: str
    example: str
    callback: CommandCallback
    module: str = field(default="", repr=False)
    category: str = "general"
    aliases: list[str] = field(default_factory=list)
    param_names: list[str] = field(default_factory=list)

    def invoke(self, session: Any, *args: Any) -> Any:
        return self.callback(session, *args)
