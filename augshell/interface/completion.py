#!/usr/bin/env python3
# augshell/interface/completion.py
from __future__ import annotations

"""
Tab completion against the live tree.

Two readline-style generators, called as gen(text, state) with state == 0
starting a new cycle:
- CommandNameGenerator: native command keywords (first word of the line).
- PathGenerator: tree paths, queried from the store on every new cycle.

Completer picks the generator from the cursor position and is shared by the
readline and prompt_toolkit frontends.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from augshell.store.base import CONTEXT_PATH, SEP, TreeStore, TreeStoreError

log = logging.getLogger("augshell.completion")

# Native keywords offered for the first word, in this order
COMMAND_KEYWORDS: tuple[str, ...] = (
    "quit", "clear", "defnode", "defvar",
    "get", "label", "ins", "load", "ls", "match",
    "mv", "cp", "rename", "print", "dump-xml", "rm", "save", "set", "setm",
    "clearm", "span", "store", "retrieve", "transform",
    "help", "touch", "insert", "move", "copy", "errors",
)


class Generator(Protocol):
    append_character: str

    def __call__(self, text: str, state: int) -> Optional[str]: ...


def split_current_token(text_before_cursor: str) -> tuple[int, str]:
    """
    Return (begidx, current_token) for the word under the cursor.

    Words are separated by whitespace only, so '/', '[' and '=' stay part of
    the path being completed.
    """
    begidx = len(text_before_cursor)
    while begidx > 0 and not text_before_cursor[begidx - 1].isspace():
        begidx -= 1
    return begidx, text_before_cursor[begidx:]


def display_name(candidate: str) -> str:
    """Final path segment of a candidate, keeping a trailing separator."""
    trailing = len(candidate) > 1 and candidate.endswith(SEP)
    core = candidate[:-1] if trailing else candidate
    name = core[core.rfind(SEP) + 1:]
    return f"{name}{SEP}" if trailing else name


class CommandNameGenerator:
    """Yields keywords starting with `text`, restarting on state == 0."""

    append_character = " "

    def __init__(self, keywords: Iterable[str] = COMMAND_KEYWORDS) -> None:
        self._keywords = tuple(keywords)
        self._current = 0

    def __call__(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            self._current = 0
        while self._current < len(self._keywords):
            name = self._keywords[self._current]
            self._current += 1
            if name.startswith(text):
                return name
        return None


@dataclass
class CompletionContext:
    """
    State of one completion cycle.

    `candidates` is owned by the cycle: each entry is handed out (take) or
    dropped exactly once, and a new cycle starts from a fresh context.
    """
    prefix: str = ""
    candidates: deque[str] = field(default_factory=deque)
    context: Optional[str] = None

    def __len__(self) -> int:
        return len(self.candidates)

    def take(self) -> Optional[str]:
        return self.candidates.popleft() if self.candidates else None

    def discard(self) -> None:
        self.candidates.clear()
        self.context = None


class PathGenerator:
    """Completes tree paths by matching `<typed up to last />*` in the store."""

    append_character = ""

    def __init__(self, store: TreeStore) -> None:
        self._store = store
        self.ctx = CompletionContext()

    @staticmethod
    def query_for(text: str) -> str:
        end = text.rfind(SEP)
        return "*" if end < 0 else f"{text[:end + 1]}*"

    def _start(self, text: str) -> None:
        # Never carry candidates over from the previous cycle
        self.ctx.discard()
        query = self.query_for(text)
        matches = self._store.match(query)
        context = None
        if not query.startswith(SEP):
            context = self._store.get(CONTEXT_PATH)
        self.ctx = CompletionContext(
            prefix=query, candidates=deque(matches), context=context or None)

    def _has_children(self, path: str) -> bool:
        pattern = f"{path}*" if path.endswith(SEP) else f"{path}{SEP}*"
        return self._store.count(pattern) > 0

    def _strip_context(self, child: str) -> str:
        ctx = self.ctx.context
        if not ctx or not child.startswith(ctx):
            return child
        idx = len(ctx)
        if child[idx:idx + 1] == SEP:
            idx += 1
        return child[idx:]

    def __call__(self, text: str, state: int) -> Optional[str]:
        typed = text[text.rfind(SEP) + 1:]
        try:
            if state == 0:
                self._start(text)
            while (child := self.ctx.take()) is not None:
                if not child[child.rfind(SEP) + 1:].startswith(typed):
                    continue
                if self._has_children(child):
                    child = f"{child}{SEP}"
                return self._strip_context(child)
        except TreeStoreError as exc:
            log.debug("completion aborted for %r: %s", text, exc)
            self.ctx.discard()
        return None


class Completer:
    """Chooses the generator by cursor position: word 0 → commands, else paths."""

    def __init__(self, store: TreeStore, keywords: Iterable[str] = COMMAND_KEYWORDS) -> None:
        self.commands = CommandNameGenerator(keywords)
        self.paths = PathGenerator(store)
        self._active: Generator = self.commands

    def generator_for(self, begidx: int) -> Generator:
        return self.commands if begidx == 0 else self.paths

    @property
    def append_character(self) -> str:
        return self._active.append_character

    @property
    def filename_display(self) -> bool:
        """True when matches should be listed by their final segment only."""
        return self._active is self.paths

    def complete(self, text: str, state: int, begidx: int) -> Optional[str]:
        if state == 0:
            self._active = self.generator_for(begidx)
        return self._active(text, state)

    def candidates(self, text_before_cursor: str) -> list[str]:
        """Run a full cycle for the word under the cursor."""
        begidx, token = split_current_token(text_before_cursor)
        found: list[str] = []
        state = 0
        while (word := self.complete(token, state, begidx)) is not None:
            found.append(word)
            state += 1
        return found
