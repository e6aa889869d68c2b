#!/usr/bin/env python3
# augshell/interface/history.py
from __future__ import annotations

"""
Bounded, persistent command history.

The log keeps at most `capacity` entries (oldest evicted first), is loaded
once at startup and written back once at shutdown. Failure to locate or
create the history directory only makes history session-only.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Callable, Iterator, Optional

log = logging.getLogger("augshell.history")

HISTORY_SIZE = 500
HISTORY_DIR_NAME = ".augeas"
HISTORY_FILE_NAME = "history"

# Header written by libedit-based readline builds
_LIBEDIT_HEADER = "_HiStOrY_V2_"


def default_history_path(home: Optional[Path] = None) -> Optional[Path]:
    """
    Return ~/.augeas/history, creating ~/.augeas if needed.
    Returns None when the home directory is unknown or not writable.
    """
    try:
        base = home if home is not None else Path.home()
    except (RuntimeError, KeyError) as exc:
        log.debug("cannot determine home directory: %s", exc)
        return None
    history_dir = base / HISTORY_DIR_NAME
    try:
        history_dir.mkdir(mode=0o755, exist_ok=True)
    except OSError as exc:
        log.debug("cannot create %s: %s", history_dir, exc)
        return None
    return history_dir / HISTORY_FILE_NAME


class HistoryStore:
    """Ordered, capacity-bounded log of executed lines."""

    def __init__(self, path: Optional[Path], capacity: int = HISTORY_SIZE) -> None:
        self.path = path
        self.capacity = capacity
        self._entries: deque[str] = deque(maxlen=capacity)
        self._listeners: list[Callable[[str], None]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def entries(self) -> list[str]:
        return list(self._entries)

    def subscribe(self, listener: Callable[[str], None]) -> None:
        """Call `listener(line)` for every appended line (e.g. readline.add_history)."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append(self, line: str) -> None:
        if self.capacity == 0:
            return
        self._entries.append(line)
        for listener in self._listeners:
            listener(line)

    def load(self) -> int:
        """Read entries from disk. Missing or unreadable files are not an error."""
        if self.path is None:
            return 0
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return 0
        except OSError as exc:
            log.debug("history not loaded from %s: %s", self.path, exc)
            return 0
        loaded = 0
        for raw in text.splitlines():
            if not raw or raw == _LIBEDIT_HEADER:
                continue
            self._entries.append(raw)
            loaded += 1
        log.debug("loaded %d history entries from %s", loaded, self.path)
        return loaded

    def save(self) -> bool:
        """Write the newest `capacity` entries. Returns False if nothing was written."""
        if self.path is None:
            return False
        try:
            self.path.write_text(
                "".join(f"{entry}\n" for entry in self._entries), encoding="utf-8")
        except OSError as exc:
            log.warning("could not save history to %s: %s", self.path, exc)
            return False
        log.debug("saved %d history entries to %s", len(self._entries), self.path)
        return True
