#!/usr/bin/env python3
# augshell/interface/handler.py
from __future__ import annotations

"""
Command dispatch and error reporting.

One line goes through the same steps whichever grammar is active:
- empty and comment lines are ignored,
- the session's evaluator runs the line (native grammar or Lua),
- timing and failures are reported,
- interactive lines are recorded in history.
"""

import logging
import time
from typing import IO, TYPE_CHECKING, Optional, Protocol

from augshell.commands import (
    FAILED,
    OK,
    REGISTRY,
    CommandError,
    CommandRegistry,
    CommandResult,
)
from augshell.interface.parser import bind_args, tokenize
from augshell.store.base import ErrorCode, ErrorReport, TreeStoreError
from augshell.ui import print_line

if TYPE_CHECKING:
    from augshell.session import Session

log = logging.getLogger("augshell.handler")

# Short hint shown in unknown command errors
HELP_TEXT = "Type 'help' to list the available commands."


class Evaluator(Protocol):
    """What the dispatcher needs from a grammar."""

    comment_prefix: str

    def evaluate(self, line: str) -> CommandResult: ...

    def report(self, result: CommandResult, stream: IO[str]) -> None: ...

    def close(self) -> None: ...


def report_error(report: Optional[ErrorReport], stream: IO[str]) -> None:
    """Print an error report the way every failure is shown to the user."""
    if report is None:
        return
    if report.out_of_memory:
        print_line("Out of memory.", file=stream)
        return
    if not report.is_error:
        return
    print_line(f"error: {report.message}", file=stream)
    if report.minor:
        print_line(f"error: {report.minor}", file=stream)
    if report.details:
        print_line(report.details, file=stream)


def store_failure(session: "Session", exc: TreeStoreError) -> ErrorReport:
    """Prefer the store's own last-error record; fall back to the exception."""
    report = session.store.error()
    return report if report.is_error else exc.report


class NativeEvaluator:
    """Runs lines through the built-in command grammar."""

    comment_prefix = "#"

    def __init__(self, session: "Session", registry: CommandRegistry | None = None) -> None:
        self.session = session
        self.registry = registry if registry is not None else REGISTRY

    def evaluate(self, line: str) -> CommandResult:
        try:
            tokens = tokenize(line)
            if not tokens:
                return CommandResult(OK)
            name, *arg_tokens = tokens
            command_obj = self.registry.get(name)
            if command_obj is None:
                raise CommandError(f"Unknown command '{name}'. {HELP_TEXT}")
            status = command_obj.invoke(self.session, *bind_args(command_obj, arg_tokens))
        except CommandError as exc:
            return CommandResult(FAILED, error=ErrorReport(
                "Failed to execute command", minor=str(exc), code=ErrorCode.ECMDRUN))
        except TreeStoreError as exc:
            return CommandResult(FAILED, error=store_failure(self.session, exc))
        except MemoryError:
            return CommandResult(FAILED, error=ErrorReport(code=ErrorCode.ENOMEM))
        return CommandResult(OK if status is None else int(status))

    def report(self, result: CommandResult, stream: IO[str]) -> None:
        report_error(result.error, stream)

    def close(self) -> None:
        pass


class Dispatcher:
    """Runs one line through the session's evaluator and reports the outcome."""

    def __init__(self, session: "Session") -> None:
        self.session = session

    @property
    def evaluator(self) -> Evaluator:
        return self.session.evaluator

    def is_ignored(self, line: str) -> bool:
        stripped = line.strip()
        return not stripped or stripped.startswith(self.evaluator.comment_prefix)

    def execute(
        self,
        line: str,
        *,
        record: bool = False,
        timing: Optional[bool] = None,
    ) -> CommandResult:
        """
        Evaluate `line`.

        Args:
            record: Append the line to history (lines from an interactive source).
            timing: Override the session's timing flag.
        """
        if self.is_ignored(line):
            return CommandResult(OK)

        show_time = self.session.timing if timing is None else timing
        start = time.perf_counter()
        result = self.evaluator.evaluate(line)
        result.elapsed_ms = int((time.perf_counter() - start) * 1000)

        if result.ok and show_time:
            print_line(f"Time: {result.elapsed_ms} ms", file=self.session.stdout)
        if record:
            self.session.history.append(line)

        if result.failed:
            log.debug("line failed with status %d: %r", result.status, line)
            self.evaluator.report(result, self.session.stderr)
        return result
