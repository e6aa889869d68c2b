#!/usr/bin/env python3
# augshell/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive console interface and command dispatch.

Provides:
- Bounded, persistent history.
- Completion of command names and live tree paths.
- Ctrl-C handling scoped to line editing.
- Parser utilities for binding arguments to native commands.
- Command dispatcher and error reporting.
- Input sources (terminal, file, fallback to the terminal).
- CLI frontends (prompt_toolkit / readline / plain) and the REPL driver.
- Dynamic command loader for the verbs package.

Modules here never import augshell.session at runtime (it imports history).
"""


# History and signals FIRST (session and cli depend on them)
from .history import HistoryStore, default_history_path, HISTORY_SIZE
from .signals import CancellationController, LineCancelled

# Completion (cli depends on it)
from .completion import (
    COMMAND_KEYWORDS,
    CommandNameGenerator,
    Completer,
    CompletionContext,
    PathGenerator,
    display_name,
    split_current_token,
)

# Parser utilities
from .parser import tokenize, bind_args, build_usage

# Command dispatcher
from .handler import Dispatcher, NativeEvaluator, HELP_TEXT, report_error, store_failure

# Loader
from .loader import load_commands

# Input sources and frontends
from .source import InputSource, InputState, TerminalUnavailable, reopen_terminal
from .cli import BaseCLI, PromptToolkitCLI, ReadlineCLI, make_cli
from .repl import Shell, EXIT_OK, EXIT_FAILURE

__all__ = [
    # history / signals
    "HistoryStore",
    "default_history_path",
    "HISTORY_SIZE",
    "CancellationController",
    "LineCancelled",
    # completion
    "COMMAND_KEYWORDS",
    "CommandNameGenerator",
    "Completer",
    "CompletionContext",
    "PathGenerator",
    "display_name",
    "split_current_token",
    # parser
    "tokenize",
    "bind_args",
    "build_usage",
    # handler
    "Dispatcher",
    "NativeEvaluator",
    "HELP_TEXT",
    "report_error",
    "store_failure",
    # loader
    "load_commands",
    # source / cli / repl
    "InputSource",
    "InputState",
    "TerminalUnavailable",
    "reopen_terminal",
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    "Shell",
    "EXIT_OK",
    "EXIT_FAILURE",
]
