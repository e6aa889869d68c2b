#!/usr/bin/env python3
# augshell/session.py
from __future__ import annotations

"""
Process-wide shell state, passed explicitly to every component.

A Session owns the tree-store handle, the history log and the active
evaluator. It is created once at startup and closed once at shutdown.
"""

import logging
import sys
from enum import Enum
from typing import IO, Any, Optional

from augshell.interface.history import HistoryStore
from augshell.store.base import TreeStore

log = logging.getLogger("augshell.session")


class Mode(Enum):
    """Which evaluator runs the lines of this session."""

    NATIVE = "native"
    SCRIPT = "script"


class Session:
    """
    Shared state for one shell run.

    `mode` is fixed at construction; the remaining flags may be adjusted by
    the input controller (echo, autosave) while the session runs.
    """

    def __init__(
        self,
        store: TreeStore,
        *,
        mode: Mode = Mode.NATIVE,
        echo: bool = False,
        autosave: bool = False,
        timing: bool = False,
        interactive_after_file: bool = False,
        history: Optional[HistoryStore] = None,
        prompt: str = "augshell> ",
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ) -> None:
        self.store = store
        self._mode = mode
        self.echo = echo
        self.autosave = autosave
        self.timing = timing
        self.interactive_after_file = interactive_after_file
        self.history = history if history is not None else HistoryStore(None)
        self.prompt = prompt
        self.stdout: IO[str] = stdout if stdout is not None else sys.stdout
        self.stderr: IO[str] = stderr if stderr is not None else sys.stderr
        self.evaluator: Any = None
        self._closed = False

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Flush history, close the evaluator, then the store. Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            self.history.save()
        finally:
            try:
                close = getattr(self.evaluator, "close", None)
                if close is not None:
                    close()
            finally:
                log.debug("closing tree store")
                self.store.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
