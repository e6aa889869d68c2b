#!/usr/bin/env python3
# augshell/boot/boot.py
from __future__ import annotations
"""
Boot sequence for augshell.

Steps (each logged at debug level):
- Load configuration and initialize logging.
- Open the tree store (optionally timed).
- Apply -t transforms through the native 'transform' command, then reload.
- Load history, register native commands and build the evaluator.
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import IO, Any, Callable, Optional, Sequence

from augshell.commands import REGISTRY
from augshell.interface import (
    HistoryStore,
    NativeEvaluator,
    default_history_path,
    load_commands,
    report_error,
)
from augshell.script.runtime import ScriptRuntime
from augshell.session import Mode, Session
from augshell.store import (
    VERSION_PATH,
    AugeasStore,
    OpenFlags,
    ShellConfig,
    TreeStore,
    TreeStoreError,
    load_config,
)
from augshell.ui import init_logger, print_line

log = logging.getLogger("augshell.boot")

StoreOpener = Callable[[Optional[str], Sequence[str], OpenFlags], TreeStore]


class BootError(Exception):
    """Startup failed; the reason has already been shown to the user."""


@dataclass(slots=True)
class LaunchOptions:
    """What the command line asked for."""

    root: Optional[str] = None
    include: list[str] = field(default_factory=list)
    transforms: list[str] = field(default_factory=list)
    flags: OpenFlags = OpenFlags.NONE
    echo: bool = False
    input_file: Optional[str] = None
    use_lua: bool = False
    autosave: bool = False
    interactive: bool = False
    timing: bool = False
    version: bool = False
    frontend: Optional[str] = None
    command: list[str] = field(default_factory=list)


@dataclass(slots=True)
class BootState:
    config: ShellConfig
    logger: Any
    session: Session
    loaded_count: int


def _step(label: str, fn: Callable[[], Any]) -> Any:
    """Run a boot step with debug output."""
    log.debug("boot: %s", label)
    try:
        out = fn()
    except Exception as exc:
        log.debug("boot: %s failed (%s: %s)", label, type(exc).__name__, exc)
        raise
    return out


def open_store(
    options: LaunchOptions,
    config: ShellConfig,
    *,
    opener: StoreOpener = AugeasStore.open,
    stdout: IO[str] = sys.stdout,
    stderr: IO[str] = sys.stderr,
) -> TreeStore:
    """Open the store; print 'Failed to initialize Augeas' and raise BootError on failure."""
    root = options.root or (str(config.root) if config.root else None)
    loadpath = [*options.include, *config.loadpath]

    if options.timing:
        stdout.write("Initializing augeas ... ")
        stdout.flush()
    start = time.perf_counter()
    try:
        store = opener(root, loadpath, options.flags)
    except TreeStoreError as exc:
        if options.timing:
            print_line("done", file=stdout)
        print_line("Failed to initialize Augeas", file=stderr)
        report_error(exc.report, stderr)
        raise BootError(str(exc)) from exc
    elapsed = int((time.perf_counter() - start) * 1000)
    if options.timing:
        print_line("done", file=stdout)
        print_line(f"Time: {elapsed} ms", file=stdout)

    report = store.error()
    if report.is_error:
        print_line("Failed to initialize Augeas", file=stderr)
        report_error(report, stderr)
        store.close()
        raise BootError(report.message)
    return store


def add_transforms(session: Session, transforms: Sequence[str]) -> None:
    """Run each -t argument as 'transform ...', then reload if any was given."""
    if not transforms:
        return
    native = NativeEvaluator(session)
    for spec in transforms:
        result = native.evaluate(f"transform {spec}")
        if result.failed:
            message = (result.error.minor or result.error.message) if result.error else ""
            print_line(f"error: Failed to add transform {spec}: {message}", file=session.stderr)
    try:
        session.store.load()
    except TreeStoreError as exc:
        print_line(
            f"error: Failed to load with new transforms: {session.store.error().message or exc}",
            file=session.stderr,
        )


def print_version(session: Session) -> None:
    """Print the version banner (to stderr)."""
    try:
        version = session.store.get(VERSION_PATH)
    except TreeStoreError:
        version = None
    if version is None:
        print_line("Something went terribly wrong internally - please file a bug",
                   file=session.stderr)
        return
    print_line(f"augshell {version} <http://augeas.net/>", file=session.stderr)
    print_line("Interactive shell for the Augeas configuration tree.", file=session.stderr)


def boot_sequence(
    options: LaunchOptions,
    *,
    config: Optional[ShellConfig] = None,
    opener: StoreOpener = AugeasStore.open,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
) -> BootState:
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    # ---------- config ----------
    if config is None:
        try:
            config = _step("Load configuration", load_config)
        except ValueError as exc:
            print_line(f"error: invalid configuration: {exc}", file=err)
            raise BootError(str(exc)) from exc
    if options.frontend is not None:
        config = config.with_overrides(frontend=options.frontend)

    # ---------- logging ----------
    logger = _step(
        "Initialize logger",
        lambda: init_logger(
            "augshell",
            level=config.log_level or logging.WARNING,
            logfile=config.log_file_path,
        ),
    )

    # ---------- store ----------
    store = _step(
        "Open tree store",
        lambda: open_store(options, config, opener=opener, stdout=out, stderr=err),
    )

    # ---------- session ----------
    def _history() -> HistoryStore:
        path = config.history_file or default_history_path()
        history = HistoryStore(path, config.history_size)
        history.load()
        return history

    history = _step("Load history", _history)
    mode = Mode.SCRIPT if options.use_lua else Mode.NATIVE
    session = Session(
        store,
        mode=mode,
        echo=options.echo,
        autosave=options.autosave,
        timing=options.timing,
        interactive_after_file=options.interactive,
        history=history,
        prompt=config.lua_prompt if mode is Mode.SCRIPT else config.prompt,
        stdout=out,
        stderr=err,
    )

    # ---------- commands ----------
    _step("Load native commands", load_commands)
    loaded_count = _step("Count command definitions", lambda: len(REGISTRY.all()))
    _step("Apply transforms", lambda: add_transforms(session, options.transforms))

    # ---------- evaluator ----------
    def _evaluator() -> Any:
        if mode is Mode.SCRIPT:
            return ScriptRuntime(session)
        return NativeEvaluator(session)

    try:
        session.evaluator = _step("Build evaluator", _evaluator)
    except Exception:
        session.close()
        raise

    return BootState(
        config=config,
        logger=logger,
        session=session,
        loaded_count=loaded_count,
    )
