#!/usr/bin/env python3
# augshell/interface/source.py
from __future__ import annotations

"""
Where the next command line comes from.

InputSource is a small state machine:

    INTERACTIVE_TTY  --EOF-->  TERMINATED (after an optional autosave 'save')
    FILE_REDIRECTED  --EOF-->  FALLBACK_TO_TTY   (with -i, at most once)
                     --EOF-->  TERMINATED        (after an optional autosave 'save')
    FALLBACK_TO_TTY  behaves like INTERACTIVE_TTY

Only InputSource changes the state; the REPL just asks for the next line.
"""

import logging
import os
import sys
from enum import Enum
from typing import IO, TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from augshell.interface.cli import BaseCLI
    from augshell.session import Session

log = logging.getLogger("augshell.source")

TTY_PATH = "/dev/tty"

# Line synthesized at end of input when autosave is pending
SAVE_LINE = "save"


class InputState(Enum):
    INTERACTIVE_TTY = "interactive"
    FILE_REDIRECTED = "file"
    FALLBACK_TO_TTY = "fallback"
    TERMINATED = "terminated"


class TerminalUnavailable(OSError):
    """The controlling terminal could not be reopened for the interactive fallback."""


def reopen_terminal(reopen_stdout: bool) -> None:
    """
    Point fd 0 (and fd 1 when `reopen_stdout`) at the controlling terminal.
    Both line editors pick the terminal up from the standard descriptors.
    """
    try:
        fd = os.open(TTY_PATH, os.O_RDWR)
    except OSError as exc:
        raise TerminalUnavailable(f"Failed to open terminal for reading: {exc}") from exc
    try:
        os.dup2(fd, 0)
        if reopen_stdout:
            os.dup2(fd, 1)
    except OSError as exc:
        raise TerminalUnavailable(f"Failed to reopen terminal: {exc}") from exc
    finally:
        os.close(fd)


class InputSource:
    """Produces command lines from a terminal or a file, one at a time."""

    def __init__(
        self,
        session: "Session",
        cli_factory: Callable[[], "BaseCLI"],
        *,
        stream: Optional[IO[str]] = None,
        interactive: Optional[bool] = None,
        open_tty: Callable[[bool], None] = reopen_terminal,
    ) -> None:
        """
        Args:
            session: Shared session; its echo/autosave flags are updated here.
            cli_factory: Builds the line editor the first time a terminal is read.
            stream: Raw input for FILE_REDIRECTED (defaults to sys.stdin).
            interactive: Force the initial state; defaults to stream.isatty().
            open_tty: Reopens the terminal for the fallback (injectable for tests).
        """
        self.session = session
        self._cli_factory = cli_factory
        self._stream: IO[str] = stream if stream is not None else sys.stdin
        self._open_tty = open_tty
        self._cli: Optional["BaseCLI"] = None
        self._fallback_used = False
        self._finishing = False
        # Whether the last returned line was typed at a terminal
        self.last_line_interactive = False

        if interactive is None:
            interactive = _isatty(self._stream)
        self.state = InputState.INTERACTIVE_TTY if interactive else InputState.FILE_REDIRECTED
        if interactive:
            session.echo = True

    # ---------------- State ----------------

    @property
    def interactive(self) -> bool:
        return self.state in (InputState.INTERACTIVE_TTY, InputState.FALLBACK_TO_TTY)

    @property
    def terminated(self) -> bool:
        return self.state is InputState.TERMINATED

    @property
    def fallback_used(self) -> bool:
        return self._fallback_used

    def terminate(self, *, newline: bool = True) -> None:
        """Enter TERMINATED. A quit passes newline=False."""
        if self.terminated:
            return
        if newline and self.session.echo:
            self._write("\n")
        log.debug("input source terminated from %s", self.state.value)
        self.state = InputState.TERMINATED
        if self._cli is not None:
            self._cli.teardown()
            self._cli = None

    # ---------------- Reading ----------------

    def next_line(self) -> Optional[str]:
        """Return the next line to run, or None once terminated."""
        while not self.terminated:
            if self._finishing:
                self.terminate()
                break
            line = self._read()
            if line is not None:
                self.last_line_interactive = self.interactive
                return line
            line = self._end_of_input()
            if line is not None:
                self.last_line_interactive = False
                return line
        return None

    def _terminal(self) -> "BaseCLI":
        if self._cli is None:
            self._cli = self._cli_factory()
            self._cli.setup()
        return self._cli

    def _read(self) -> Optional[str]:
        if self.interactive:
            return self._terminal().get_line(self.session.prompt)
        raw = self._stream.readline()
        if not raw:
            return None
        line = raw.rstrip("\r\n")
        if self.session.echo:
            self._write(f"{self.session.prompt}{line}\n")
        return line

    def _end_of_input(self) -> Optional[str]:
        if (self.state is InputState.FILE_REDIRECTED
                and self.session.interactive_after_file
                and not self._fallback_used):
            self._fall_back()
            return None

        if self.session.autosave:
            self.session.autosave = False
            self._finishing = True
            if self.session.echo:
                self._write(f"{SAVE_LINE}\n")
            return SAVE_LINE

        self.terminate()
        return None

    def _fall_back(self) -> None:
        self._fallback_used = True
        if self.session.echo:
            self._write("\n")
        self.session.echo = True
        log.debug("end of input file; reopening %s", TTY_PATH)
        self._open_tty(not _isatty(self.session.stdout))
        self.state = InputState.FALLBACK_TO_TTY

    def _write(self, text: str) -> None:
        self.session.stdout.write(text)
        self.session.stdout.flush()


def _isatty(stream: IO[str]) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty()) if isatty is not None else False
    except ValueError:
        return False
