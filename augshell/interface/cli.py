#!/usr/bin/env python3
# augshell/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (rich completion + history)
    2) readline (basic completion + history)
    3) plain input (last resort)

Every frontend returns None on end-of-input and handles Ctrl-C by dropping
the line being edited and prompting again.
"""

import logging
import sys
from typing import Optional

from augshell.interface.completion import Completer, display_name, split_current_token
from augshell.interface.history import HistoryStore
from augshell.interface.signals import CancellationController
from augshell.store.config import FRONTEND_CHOICES
from augshell.ui import format_columns, get_terminal_columns

log = logging.getLogger("augshell.cli")

FRONTENDS = FRONTEND_CHOICES


class BaseCLI:
    """
    Plain input() frontend, and the interface every frontend implements:
        - setup()
        - get_line(prompt)
        - teardown()

    This base also provides context manager support to guarantee teardown.
    """

    def __init__(self, cancellation: Optional[CancellationController] = None) -> None:
        self.cancellation = cancellation if cancellation is not None else CancellationController()

    def setup(self) -> None:
        pass

    def read(self, prompt: str) -> str:
        return input(prompt)

    def get_line(self, prompt: str) -> Optional[str]:
        """Read one line; None on end-of-input. Ctrl-C restarts the prompt."""
        while True:
            try:
                with self.cancellation.editing():
                    return self.read(prompt)
            except EOFError:
                return None
            except KeyboardInterrupt:
                self.cancellation.redraw(sys.stdout)

    def teardown(self) -> None:
        pass

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Rich line editor with history and live completion."""

    def __init__(
        self,
        completer: Optional[Completer],
        history: HistoryStore,
        cancellation: Optional[CancellationController] = None,
    ) -> None:
        super().__init__(cancellation)
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer as PTCompleter, Completion
        from prompt_toolkit.history import History
        from prompt_toolkit.key_binding import KeyBindings

        class _SessionHistory(History):
            """Shows the shell's history; the dispatcher owns persistence."""

            def load_history_strings(self):
                # prompt_toolkit expects newest first
                return list(reversed(history.entries()))

            def store_string(self, string: str) -> None:
                pass

        class _TreeCompleter(PTCompleter):
            def get_completions(self, document, complete_event):
                text_before_cursor = document.text_before_cursor
                _, current_prefix = split_current_token(text_before_cursor)
                # replace exactly the current token
                replace_len = len(current_prefix)
                for word in completer.candidates(text_before_cursor):
                    shown = display_name(word) if completer.filename_display else word
                    yield Completion(
                        word + completer.append_character,
                        start_position=-replace_len,
                        display=shown,
                    )

        # Key bindings to trigger completion when deleting characters.
        kb = KeyBindings()

        @kb.add("backspace")
        def _(event):
            b = event.app.current_buffer
            if b.read_only():
                return
            if b.selection_state:
                b.delete_selection()
            else:
                b.delete_before_cursor(1)
            if completer is not None:
                b.start_completion(select_first=False)

        self._session = PromptSession(
            history=_SessionHistory(),
            completer=_TreeCompleter() if completer is not None else None,
            complete_while_typing=completer is not None,
            key_bindings=kb,
        )

    def read(self, prompt: str) -> str:
        return self._session.prompt(prompt)


# ===== Fallback: readline =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion and history."""

    def __init__(
        self,
        completer: Optional[Completer],
        history: HistoryStore,
        cancellation: Optional[CancellationController] = None,
    ) -> None:
        super().__init__(cancellation)
        import readline

        self.readline = readline
        self.completer = completer
        self.history = history
        self._prompt = ""

    def setup(self) -> None:
        readline = self.readline
        # The dispatcher decides what is recorded
        readline.set_auto_history(False)
        readline.clear_history()
        for entry in self.history:
            readline.add_history(entry)
        self.history.subscribe(readline.add_history)

        if self.completer is None:
            return
        # '/', '[' and '=' belong to the path being completed
        readline.set_completer_delims(" \t\n")
        readline.set_completer(self._complete)
        readline.set_completion_display_matches_hook(self._display_matches)
        readline.parse_and_bind("tab: complete")

    def _complete(self, text_fragment: str, state_index: int) -> Optional[str]:
        begidx = self.readline.get_begidx()
        word = self.completer.complete(text_fragment, state_index, begidx)
        if word is None:
            return None
        return word + self.completer.append_character

    def _display_matches(self, substitution: str, matches: list[str], longest_match_length: int) -> None:
        if self.completer.filename_display:
            names = [display_name(m) for m in matches]
        else:
            names = [m.rstrip() for m in matches]
        out = sys.stdout
        out.write("\n" + format_columns(names, get_terminal_columns()) + "\n")
        out.write(self._prompt + self.readline.get_line_buffer())
        out.flush()

    def read(self, prompt: str) -> str:
        self._prompt = prompt
        return input(prompt)

    def teardown(self) -> None:
        self.history.unsubscribe(self.readline.add_history)
        if self.completer is not None:
            self.readline.set_completer(None)
            self.readline.set_completion_display_matches_hook(None)


def make_cli(
    completer: Optional[Completer],
    history: HistoryStore,
    cancellation: Optional[CancellationController] = None,
    frontend: str = "auto",
) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.
    An explicit `frontend` that cannot be loaded raises ImportError.
    """
    if frontend not in FRONTENDS:
        raise ValueError(f"unknown frontend {frontend!r}")
    if frontend == "plain":
        return BaseCLI(cancellation)
    if frontend == "prompt_toolkit":
        return PromptToolkitCLI(completer, history, cancellation)
    if frontend == "readline":
        return ReadlineCLI(completer, history, cancellation)

    # Try prompt_toolkit first
    try:
        return PromptToolkitCLI(completer, history, cancellation)
    except ImportError as exc:
        log.debug("prompt_toolkit unavailable: %s", exc)
    # Try readline
    try:
        return ReadlineCLI(completer, history, cancellation)
    except ImportError as exc:
        log.debug("readline unavailable: %s", exc)
    # Last resort: plain input with no completion or history
    return BaseCLI(cancellation)
