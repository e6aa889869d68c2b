#!/usr/bin/env python3
# augshell/script/bridge.py
from __future__ import annotations

"""
Tree-store operations exposed to scripts.

The whole surface is described by two tables: OPERATIONS (name -> arity) and
ALIASES. ScriptBridge turns them into callables; the runtime only has to
install them. The bridge holds no state besides the store handle and the
output stream.
"""

import logging
from typing import IO, Any, Callable, Optional

from augshell.store.base import TreeStore, TreeStoreError
from augshell.ui import print_line

log = logging.getLogger("augshell.script")

# Operation name -> number of arguments
OPERATIONS: dict[str, int] = {
    "get": 1,
    "label": 1,
    "set": 2,
    "setm": 3,
    "insert": 3,
    "rm": 1,
    "mv": 2,
    "cp": 2,
    "rename": 2,
    "matches": 1,
    "match": 1,
    "defvar": 2,
    "defnode": 3,
    "save": 0,
    "load": 0,
    "text_store": 3,
    "text_retrieve": 4,
    "transform": 3,
}

# Extra short names
ALIASES: dict[str, str] = {
    "ins": "insert",
    "move": "mv",
    "copy": "cp",
}

PREFIX = "aug_"

SAVE_FAILED = "saving failed (run 'errors' for details)"


class ScriptError(Exception):
    """An operation failed; the message is raised as a script error."""


def _type_name(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if callable(value):
        return "function"
    return "table"


def truthy(value: Any) -> bool:
    """Script truthiness: only nil and false are false."""
    return value is not None and value is not False


class ScriptBridge:
    """Validates arguments and forwards script calls to the tree store."""

    def __init__(
        self,
        store: TreeStore,
        out: Optional[IO[str]] = None,
        table_factory: Callable[[list], Any] = list,
    ) -> None:
        self.store = store
        self.out = out
        self._table = table_factory

    # ---------------- Argument handling ----------------

    @staticmethod
    def _string(name: str, index: int, value: Any, *, optional: bool = False) -> Optional[str]:
        if value is None and optional:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ScriptError(
            f"bad argument #{index} to '{name}' (string expected, got {_type_name(value)})")

    def _fail(self, exc: TreeStoreError) -> ScriptError:
        report = self.store.error()
        message = report.message if report.is_error and report.message else str(exc)
        return ScriptError(message)

    # ---------------- Dispatch ----------------

    @staticmethod
    def resolve(name: str) -> str:
        """Map 'aug_x', 'x' or an alias to its operation name."""
        if name.startswith(PREFIX):
            name = name[len(PREFIX):]
        name = ALIASES.get(name, name)
        if name not in OPERATIONS:
            raise ScriptError(f"unknown operation '{name}'")
        return name

    def call(self, name: str, *args: Any) -> tuple[Any, ...]:
        """Run one operation. Arity is checked before the store is touched."""
        op = self.resolve(name)
        if len(args) != OPERATIONS[op]:
            raise ScriptError(f"Wrong number of arguments for '{PREFIX}{op}'")
        handler = getattr(self, f"_op_{op}")
        try:
            return handler(f"{PREFIX}{op}", *args)
        except TreeStoreError as exc:
            log.debug("%s%s failed: %s", PREFIX, op, exc)
            raise self._fail(exc) from exc

    def protected(self, name: str) -> Callable[..., tuple[Any, ...]]:
        """Callable returning (True, results...) or (False, message)."""

        def invoke(*args: Any) -> tuple[Any, ...]:
            try:
                return (True, *self.call(name, *args))
            except ScriptError as exc:
                return (False, str(exc))

        invoke.__name__ = name
        return invoke

    def bindings(self) -> dict[str, Callable[..., tuple[Any, ...]]]:
        """Every exported name ('aug_x' and 'x', aliases included)."""
        exported: dict[str, Callable[..., tuple[Any, ...]]] = {}
        for name in (*OPERATIONS, *ALIASES):
            for public in (f"{PREFIX}{name}", name):
                exported[public] = self.protected(public)
        return exported

    # ---------------- Operations ----------------

    def _op_get(self, fn: str, path: Any) -> tuple[Any, ...]:
        return (self.store.get(self._string(fn, 1, path)),)

    def _op_label(self, fn: str, path: Any) -> tuple[Any, ...]:
        return (self.store.label(self._string(fn, 1, path)),)

    def _op_set(self, fn: str, path: Any, value: Any) -> tuple[Any, ...]:
        self.store.set(self._string(fn, 1, path), self._string(fn, 2, value, optional=True))
        return ()

    def _op_setm(self, fn: str, base: Any, sub: Any, value: Any) -> tuple[Any, ...]:
        count = self.store.setm(
            self._string(fn, 1, base),
            self._string(fn, 2, sub, optional=True),
            self._string(fn, 3, value, optional=True),
        )
        return (count,)

    def _op_insert(self, fn: str, path: Any, label: Any, before: Any) -> tuple[Any, ...]:
        self.store.insert(self._string(fn, 1, path), self._string(fn, 2, label), truthy(before))
        return ()

    def _op_rm(self, fn: str, path: Any) -> tuple[Any, ...]:
        return (self.store.remove(self._string(fn, 1, path)),)

    def _op_mv(self, fn: str, src: Any, dst: Any) -> tuple[Any, ...]:
        self.store.move(self._string(fn, 1, src), self._string(fn, 2, dst))
        return ()

    def _op_cp(self, fn: str, src: Any, dst: Any) -> tuple[Any, ...]:
        self.store.copy(self._string(fn, 1, src), self._string(fn, 2, dst))
        return ()

    def _op_rename(self, fn: str, src: Any, label: Any) -> tuple[Any, ...]:
        return (self.store.rename(self._string(fn, 1, src), self._string(fn, 2, label)),)

    def _op_matches(self, fn: str, path: Any) -> tuple[Any, ...]:
        return (self.store.count(self._string(fn, 1, path)),)

    def _op_match(self, fn: str, path: Any) -> tuple[Any, ...]:
        found = self.store.match(self._string(fn, 1, path))
        return (self._table(list(found)), len(found))

    def _op_defvar(self, fn: str, name: Any, expr: Any) -> tuple[Any, ...]:
        return (self.store.defvar(self._string(fn, 1, name), self._string(fn, 2, expr, optional=True)),)

    def _op_defnode(self, fn: str, name: Any, expr: Any, value: Any) -> tuple[Any, ...]:
        created = self.store.defnode(
            self._string(fn, 1, name),
            self._string(fn, 2, expr),
            self._string(fn, 3, value, optional=True),
        )
        return (created,)

    def _op_save(self, fn: str) -> tuple[Any, ...]:
        try:
            count = self.store.save()
        except TreeStoreError as exc:
            raise ScriptError(SAVE_FAILED) from exc
        if count > 0:
            print_line(f"Saved {count} file(s)", file=self.out)
        return (count,)

    def _op_load(self, fn: str) -> tuple[Any, ...]:
        self.store.load()
        return ()

    def _op_text_store(self, fn: str, lens: Any, node: Any, path: Any) -> tuple[Any, ...]:
        self.store.text_store(
            self._string(fn, 1, lens), self._string(fn, 2, node), self._string(fn, 3, path))
        return ()

    def _op_text_retrieve(self, fn: str, lens: Any, node_in: Any, path: Any, node_out: Any) -> tuple[Any, ...]:
        self.store.text_retrieve(
            self._string(fn, 1, lens),
            self._string(fn, 2, node_in),
            self._string(fn, 3, path),
            self._string(fn, 4, node_out),
        )
        return ()

    def _op_transform(self, fn: str, lens: Any, file: Any, excl: Any) -> tuple[Any, ...]:
        self.store.transform(self._string(fn, 1, lens), self._string(fn, 2, file), truthy(excl))
        return ()
