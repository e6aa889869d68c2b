#!/usr/bin/env python3
# augshell/store/base.py
from __future__ import annotations

"""
Tree-store contract.

The shell never talks to a concrete engine directly. Everything it needs is
described here:
- TreeStore: the protocol every backend implements.
- TreeStoreError / ErrorReport: failure signalling and the "last error" record.
- ErrorCode / OpenFlags: numeric codes and open flags (Augeas-compatible values).
"""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import NamedTuple, Optional, Protocol

# Path separator used by tree paths
SEP = "/"

# Well-known nodes
CONTEXT_PATH = "/augeas/context"
SAVED_EVENTS_PATH = "/augeas/events/saved"
VERSION_PATH = "/augeas/version"
ERRORS_PATTERN = "/augeas//error"


class ErrorCode(IntEnum):
    """Error codes reported by the tree store."""

    NOERROR = 0
    ENOMEM = 1
    EINTERNAL = 2
    EPATHX = 3
    ENOMATCH = 4
    EMMATCH = 5
    ESYNTAX = 6
    ENOLENS = 7
    EMXFM = 8
    ENOSPAN = 9
    EMVDESC = 10
    ECMDRUN = 11
    EBADARG = 12
    ELABEL = 13
    ECPDESC = 14


class OpenFlags(IntFlag):
    """Behaviour flags accepted when opening a store."""

    NONE = 0
    SAVE_BACKUP = 1 << 0
    SAVE_NEWFILE = 1 << 1
    TYPE_CHECK = 1 << 2
    NO_STDINC = 1 << 3
    SAVE_NOOP = 1 << 4
    NO_LOAD = 1 << 5
    NO_MODL_AUTOLOAD = 1 << 6
    ENABLE_SPAN = 1 << 7
    NO_ERR_CLOSE = 1 << 8


@dataclass(frozen=True, slots=True)
class ErrorReport:
    """
    A user-facing error description.

    Attributes:
        message: Primary message.
        minor: Optional secondary message.
        details: Optional multi-line detail text.
        code: Error code (ErrorCode.NOERROR means "nothing to report").
    """
    message: str = ""
    minor: Optional[str] = None
    details: Optional[str] = None
    code: int = ErrorCode.NOERROR

    @property
    def out_of_memory(self) -> bool:
        return self.code == ErrorCode.ENOMEM

    @property
    def is_error(self) -> bool:
        return self.code != ErrorCode.NOERROR or bool(self.message)


NO_ERROR = ErrorReport()


class TreeStoreError(Exception):
    """Raised by TreeStore implementations when an operation fails."""

    def __init__(
        self,
        message: str,
        *,
        code: int = ErrorCode.EINTERNAL,
        minor: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.report = ErrorReport(
            message=message, minor=minor, details=details, code=code)

    @property
    def code(self) -> int:
        return self.report.code


class Span(NamedTuple):
    """Source position of a node inside its backing file."""

    filename: str
    label_start: int
    label_end: int
    value_start: int
    value_end: int
    span_start: int
    span_end: int


class TreeStore(Protocol):
    """
    Operations the shell consumes from a tree-store engine.

    Every mutating or querying method raises TreeStoreError on failure and
    records the failure so that error() returns it afterwards.
    """

    def get(self, path: str) -> str | None: ...

    def label(self, path: str) -> str | None: ...

    def set(self, path: str, value: str | None) -> None: ...

    def setm(self, base: str, sub: str | None, value: str | None) -> int: ...

    def insert(self, path: str, label: str, before: bool) -> None: ...

    def remove(self, path: str) -> int: ...

    def move(self, src: str, dst: str) -> None: ...

    def copy(self, src: str, dst: str) -> None: ...

    def rename(self, src: str, label: str) -> int: ...

    def match(self, path: str) -> list[str]: ...

    def count(self, path: str) -> int: ...

    def defvar(self, name: str, expr: str | None) -> int: ...

    def defnode(self, name: str, expr: str, value: str | None) -> bool: ...

    def save(self) -> int: ...

    def load(self) -> None: ...

    def transform(self, lens: str, file: str, excl: bool) -> None: ...

    def text_store(self, lens: str, node: str, path: str) -> None: ...

    def text_retrieve(self, lens: str, node_in: str, path: str, node_out: str) -> None: ...

    def span(self, path: str) -> Span: ...

    def error(self) -> ErrorReport: ...

    def close(self) -> None: ...
