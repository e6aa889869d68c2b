#!/usr/bin/env python3
# augshell/store/augeas_store.py
from __future__ import annotations

"""
TreeStore backed by the python-augeas binding.

The binding is an optional dependency (extra 'augeas'); it is imported lazily
in AugeasStore.open() so the rest of the shell (and its tests) never need
libaugeas.

python-augeas raises AugeasValueError / AugeasRuntimeError / AugeasIOError
carrying the handle's error code, message, minor message and details; those
fields become the ErrorReport shown to the user.
"""

import logging
from typing import Any, Callable, NoReturn, Optional, Sequence

from augshell.store.base import (
    NO_ERROR,
    SAVED_EVENTS_PATH,
    ErrorCode,
    ErrorReport,
    OpenFlags,
    Span,
    TreeStoreError,
)

log = logging.getLogger("augshell.store")

# Exceptions python-augeas raises for failed calls; TypeError comes from its argument checks
_BINDING_ERRORS = (ValueError, OSError, RuntimeError, TypeError)


def _report_from(exc: BaseException, code: int) -> ErrorReport:
    """Build a report from a binding exception, keeping its error fields when present."""
    message = getattr(exc, "msg", None)
    if not message:
        return ErrorReport(str(exc) or type(exc).__name__, code=code)
    return ErrorReport(
        message,
        minor=getattr(exc, "minor", None) or None,
        details=getattr(exc, "details", None) or None,
        code=getattr(exc, "error", None) or code,
    )


class AugeasStore:
    """Adapter from the TreeStore protocol to augeas.Augeas."""

    def __init__(self, handle: Any, *, error_class: Optional[type[Exception]] = None) -> None:
        """
        Args:
            handle: An augeas.Augeas instance.
            error_class: The binding's AugeasValueError, used to read the
                handle's pending error after calls that only return -1.
        """
        self._aug = handle
        self._error_class = error_class
        self._last_error: ErrorReport = NO_ERROR

    @classmethod
    def open(
        cls,
        root: str | None = None,
        loadpath: Sequence[str] | str | None = None,
        flags: OpenFlags = OpenFlags.NONE,
    ) -> "AugeasStore":
        """
        Open a new Augeas handle. Raises TreeStoreError when no handle could be
        created; an initialization error on a live handle is left in error().
        """
        try:
            import augeas  # type: ignore[import-not-found]
        except ImportError as exc:
            raise TreeStoreError(
                "python-augeas is not installed (pip install 'augshell[augeas]')",
                code=ErrorCode.EINTERNAL,
            ) from exc

        if loadpath is not None and not isinstance(loadpath, str):
            loadpath = ":".join(loadpath)
        # keep the handle on init errors so they can be reported
        flags = OpenFlags(flags) | OpenFlags.NO_ERR_CLOSE
        try:
            handle = augeas.Augeas(root=root, loadpath=loadpath or None, flags=int(flags))
        except MemoryError as exc:
            raise TreeStoreError("Out of memory", code=ErrorCode.ENOMEM) from exc
        except _BINDING_ERRORS as exc:
            report = _report_from(exc, ErrorCode.EINTERNAL)
            raise TreeStoreError(report.message, code=report.code) from exc
        log.debug("opened augeas handle root=%r loadpath=%r flags=%r", root, loadpath, flags)

        store = cls(handle, error_class=getattr(augeas, "AugeasValueError", None))
        store._last_error = store._handle_error("init")
        return store

    # ---------------- error plumbing ----------------

    def _fail(self, report: ErrorReport, cause: Optional[BaseException] = None) -> NoReturn:
        self._last_error = report
        raise TreeStoreError(
            report.message, code=report.code, minor=report.minor, details=report.details,
        ) from cause

    def _call(self, fn: Callable[..., Any], *args: Any, code: int = ErrorCode.EINTERNAL) -> Any:
        try:
            result = fn(*args)
        except MemoryError as exc:
            self._fail(ErrorReport("Out of memory", code=ErrorCode.ENOMEM), exc)
        except _BINDING_ERRORS as exc:
            if isinstance(exc, TypeError):
                code = ErrorCode.EBADARG
            self._fail(_report_from(exc, code), exc)
        self._last_error = NO_ERROR
        return result

    def _handle_error(self, what: str) -> ErrorReport:
        """
        The handle's pending error, or NO_ERROR.

        python-augeas only exposes aug_error() and friends through
        Augeas._raise_error, which always raises the class it is given.
        """
        raise_error = getattr(self._aug, "_raise_error", None)
        if self._error_class is None or raise_error is None:
            return NO_ERROR
        try:
            raise_error(self._error_class, f"Augeas.{what}() failed")
        except MemoryError:
            return ErrorReport("Out of memory", code=ErrorCode.ENOMEM)
        except self._error_class as exc:
            if not getattr(exc, "error", None):
                return NO_ERROR
            return _report_from(exc, ErrorCode.EINTERNAL)
        return NO_ERROR

    def error(self) -> ErrorReport:
        return self._last_error

    # ---------------- queries ----------------

    def get(self, path: str) -> str | None:
        return self._call(self._aug.get, path, code=ErrorCode.EPATHX)

    def label(self, path: str) -> str | None:
        return self._call(self._aug.label, path, code=ErrorCode.EPATHX)

    def match(self, path: str) -> list[str]:
        return list(self._call(self._aug.match, path, code=ErrorCode.EPATHX) or [])

    def count(self, path: str) -> int:
        return len(self.match(path))

    def span(self, path: str) -> Span:
        return Span(*self._call(self._aug.span, path, code=ErrorCode.ENOSPAN))

    # ---------------- mutation ----------------

    def set(self, path: str, value: str | None) -> None:
        self._call(self._aug.set, path, value, code=ErrorCode.EPATHX)

    def setm(self, base: str, sub: str | None, value: str | None) -> int:
        result = self._call(self._aug.setm, base, sub, value, code=ErrorCode.EPATHX)
        return result if isinstance(result, int) else 0

    def insert(self, path: str, label: str, before: bool) -> None:
        self._call(self._aug.insert, path, label, bool(before), code=ErrorCode.EPATHX)

    def remove(self, path: str) -> int:
        # aug_rm reports failure as -1 instead of raising
        result = self._call(self._aug.remove, path, code=ErrorCode.EPATHX)
        if not isinstance(result, int):
            return 0
        if result < 0:
            report = self._handle_error("remove")
            if not report.is_error:
                report = ErrorReport(f"Failed to remove {path}", code=ErrorCode.EPATHX)
            self._fail(report)
        return result

    def move(self, src: str, dst: str) -> None:
        self._call(self._aug.move, src, dst, code=ErrorCode.EMVDESC)

    def copy(self, src: str, dst: str) -> None:
        self._call(self._aug.copy, src, dst, code=ErrorCode.ECPDESC)

    def rename(self, src: str, label: str) -> int:
        result = self._call(self._aug.rename, src, label, code=ErrorCode.ELABEL)
        return result if isinstance(result, int) else 0

    def defvar(self, name: str, expr: str | None) -> int:
        result = self._call(self._aug.defvar, name, expr, code=ErrorCode.EPATHX)
        return result if isinstance(result, int) else 0

    def defnode(self, name: str, expr: str, value: str | None) -> bool:
        # the binding insists on a string value
        result = self._call(self._aug.defnode, name, expr, "" if value is None else value,
                            code=ErrorCode.EPATHX)
        return bool(result)

    # ---------------- files & lenses ----------------

    def save(self) -> int:
        self._call(self._aug.save)
        return self.count(SAVED_EVENTS_PATH)

    def load(self) -> None:
        self._call(self._aug.load)

    def transform(self, lens: str, file: str, excl: bool) -> None:
        self._call(self._aug.transform, lens, file, bool(excl), code=ErrorCode.EMXFM)

    def text_store(self, lens: str, node: str, path: str) -> None:
        self._call(self._aug.text_store, lens, node, path, code=ErrorCode.ENOLENS)

    def text_retrieve(self, lens: str, node_in: str, path: str, node_out: str) -> None:
        self._call(self._aug.text_retrieve, lens, node_in, path, node_out,
                   code=ErrorCode.ENOLENS)

    def close(self) -> None:
        if self._aug is None:
            return
        try:
            self._aug.close()
        finally:
            self._aug = None
