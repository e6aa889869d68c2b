#!/usr/bin/env python3
# augshell/interface/repl.py
from __future__ import annotations

"""
The read-eval-print loop and the one-shot command runner.
"""

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from augshell.interface.handler import Dispatcher
from augshell.interface.signals import CancellationController
from augshell.interface.source import SAVE_LINE, InputSource

if TYPE_CHECKING:
    from augshell.session import Session

log = logging.getLogger("augshell.repl")

EXIT_OK = 0
EXIT_FAILURE = 1


class Shell:
    """Ties an input source, the dispatcher and the interrupt handler together."""

    def __init__(
        self,
        session: "Session",
        source: Optional[InputSource] = None,
        *,
        dispatcher: Optional[Dispatcher] = None,
        cancellation: Optional[CancellationController] = None,
    ) -> None:
        self.session = session
        self.source = source
        self.dispatcher = dispatcher if dispatcher is not None else Dispatcher(session)
        self.cancellation = cancellation if cancellation is not None else CancellationController()

    def run(self) -> int:
        """
        Read and run lines until the source terminates or a command quits.
        Returns EXIT_FAILURE if any line failed.
        """
        if self.source is None:
            raise RuntimeError("Shell.run() needs an input source")
        failed = False
        with self.cancellation:
            while (line := self.source.next_line()) is not None:
                result = self.dispatcher.execute(
                    line, record=self.source.last_line_interactive)
                if result.quit:
                    self.source.terminate(newline=False)
                    break
                if result.failed:
                    failed = True
        log.debug("main loop finished (failed=%s)", failed)
        return EXIT_FAILURE if failed else EXIT_OK

    def run_once(self, words: Sequence[str]) -> int:
        """
        Run the command formed by `words`, then always run 'save'.
        Fails if either step failed; a quit counts as success. With echo on,
        the save line is only shown after a successful command.
        """
        line = " ".join(words)
        if self.session.echo:
            self.session.stdout.write(f"{self.session.prompt}{line}\n")
            self.session.stdout.flush()

        first = self.dispatcher.execute(line)
        if self.session.echo and self.session.autosave and first.ok:
            self.session.stdout.write(f"{self.session.prompt}{SAVE_LINE}\n")
        saved = self.dispatcher.execute(SAVE_LINE, timing=False)
        return EXIT_FAILURE if first.failed or saved.failed else EXIT_OK
