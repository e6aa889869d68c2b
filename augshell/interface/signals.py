#!/usr/bin/env python3
# augshell/interface/signals.py
from __future__ import annotations

"""
Interrupt handling for the interactive line editor.

Ctrl-C while a line is being edited cancels that line and starts a fresh
prompt; Ctrl-C while a submitted command runs is recorded and otherwise
ignored, so the command always runs to completion.

The handler itself only flips flags or raises LineCancelled; it never calls
into the tree store or the dispatcher. CPython's readline frees the pending
line (and its undo list) when the interrupt unwinds input().
"""

import signal
from contextlib import contextmanager
from typing import IO, Any, Iterator


class LineCancelled(KeyboardInterrupt):
    """Raised from the SIGINT handler to abandon the line being edited."""


class CancellationController:
    """Installs a SIGINT handler and scopes it to line editing."""

    def __init__(self) -> None:
        self._editing = False
        self._installed = False
        self._previous: Any = None
        # Interrupts received while a command was running
        self.deferred = 0
        # Lines abandoned with Ctrl-C
        self.cancelled = 0

    @property
    def editing_active(self) -> bool:
        return self._editing

    def install(self) -> None:
        if self._installed:
            return
        self._previous = signal.signal(signal.SIGINT, self._handle)
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        signal.signal(signal.SIGINT, self._previous)
        self._installed = False
        self._previous = None

    def _handle(self, signum: int, frame: Any) -> None:
        if self._editing:
            raise LineCancelled()
        self.deferred += 1

    @contextmanager
    def editing(self) -> Iterator[None]:
        """Mark the enclosed block as 'reading a line'."""
        self._editing = True
        try:
            yield
        finally:
            self._editing = False

    def redraw(self, stream: IO[str]) -> None:
        """Move to a fresh line; the next prompt redraws itself."""
        self.cancelled += 1
        stream.write("\n")
        stream.flush()

    def __enter__(self) -> "CancellationController":
        self.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.uninstall()
