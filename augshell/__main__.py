#!/usr/bin/env python3
# augshell/__main__.py
from __future__ import annotations

"""Command-line entry point: python -m augshell / augshell."""

import argparse
import sys
from collections.abc import Sequence
from typing import Optional

from augshell.boot import BootError, LaunchOptions, boot_sequence, print_version
from augshell.interface import (
    CancellationController,
    Completer,
    InputSource,
    Shell,
    TerminalUnavailable,
    make_cli,
)
from augshell.interface.cli import FRONTENDS
from augshell.session import Mode
from augshell.store import OpenFlags
from augshell.ui import print_line

EXIT_FAILURE = 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="augshell",
        description="Load the Augeas tree and modify it. If no COMMAND is given, run interactively.",
        epilog="Run 'augshell help' to get a list of possible commands.",
    )
    parser.add_argument("-c", "--typecheck", action="store_true",
                        help="typecheck lenses")
    parser.add_argument("-b", "--backup", action="store_true",
                        help="preserve originals of modified files with extension '.augsave'")
    parser.add_argument("-n", "--new", action="store_true",
                        help="save changes in files with extension '.augnew', leave originals unchanged")
    parser.add_argument("-r", "--root", metavar="ROOT",
                        help="use ROOT as the root of the filesystem")
    parser.add_argument("-I", "--include", metavar="DIR", action="append", default=[],
                        help="search DIR for modules; can be given multiple times")
    parser.add_argument("-t", "--transform", metavar="XFM", action="append", default=[],
                        help="add a file transform using the 'transform' command syntax, "
                             "e.g. -t 'Fstab incl /etc/fstab.bak'")
    parser.add_argument("-e", "--echo", action="store_true",
                        help="echo commands when reading from a file")
    parser.add_argument("-f", "--file", metavar="FILE",
                        help="read commands from FILE")
    parser.add_argument("-l", "--lua", action="store_true",
                        help="use the Lua interpreter instead of the native commands")
    parser.add_argument("-s", "--autosave", action="store_true",
                        help="automatically save at the end of instructions")
    parser.add_argument("-i", "--interactive", action="store_true",
                        help="run an interactive shell after evaluating the commands in STDIN and FILE")
    parser.add_argument("-S", "--nostdinc", action="store_true",
                        help="do not search the builtin default directories for modules")
    parser.add_argument("-L", "--noload", action="store_true",
                        help="do not load any files into the tree on startup")
    parser.add_argument("-A", "--noautoload", action="store_true",
                        help="do not autoload modules from the search path")
    parser.add_argument("--span", action="store_true",
                        help="load span positions for nodes related to a file")
    parser.add_argument("--timing", action="store_true",
                        help="after executing each command, show how long it took")
    parser.add_argument("--frontend", choices=FRONTENDS,
                        help="line editor to use (default: from configuration)")
    parser.add_argument("--version", action="store_true",
                        help="print version information and exit")
    parser.add_argument("command", nargs=argparse.REMAINDER, metavar="COMMAND",
                        help="run this single command, then save")
    return parser


def options_from_args(parsed: argparse.Namespace) -> LaunchOptions:
    flags = OpenFlags.NONE
    for enabled, flag in (
        (parsed.typecheck, OpenFlags.TYPE_CHECK),
        (parsed.backup, OpenFlags.SAVE_BACKUP),
        (parsed.new, OpenFlags.SAVE_NEWFILE),
        (parsed.nostdinc, OpenFlags.NO_STDINC),
        (parsed.noload, OpenFlags.NO_LOAD),
        (parsed.noautoload or parsed.version, OpenFlags.NO_MODL_AUTOLOAD),
        (parsed.span, OpenFlags.ENABLE_SPAN),
    ):
        if enabled:
            flags |= flag

    return LaunchOptions(
        root=parsed.root,
        include=list(parsed.include),
        transforms=list(parsed.transform),
        flags=flags,
        echo=parsed.echo,
        input_file=parsed.file,
        use_lua=parsed.lua,
        autosave=parsed.autosave,
        interactive=parsed.interactive,
        timing=parsed.timing,
        version=parsed.version,
        frontend=parsed.frontend,
        command=list(parsed.command),
    )


def run(options: LaunchOptions, **boot_kwargs) -> int:
    """Boot, run the requested mode and shut down. Returns the exit status."""
    try:
        state = boot_sequence(options, **boot_kwargs)
    except BootError:
        return EXIT_FAILURE

    session = state.session
    try:
        if options.version:
            print_version(session)
            return 0

        if options.command:
            return Shell(session).run_once(options.command)

        if session.mode is Mode.SCRIPT and options.input_file:
            result = session.evaluator.run_file(options.input_file)
            if result.failed:
                session.evaluator.report(result, session.stderr)
                return EXIT_FAILURE
            return 0

        stream = None
        if options.input_file:
            try:
                stream = open(options.input_file, encoding="utf-8")
            except OSError as exc:
                print_line(f"Failed to open {options.input_file}: {exc.strerror}", file=session.stderr)
                return EXIT_FAILURE

        cancellation = CancellationController()
        completer = Completer(session.store) if state.config.enable_completion else None
        source = InputSource(
            session,
            lambda: make_cli(completer, session.history, cancellation, state.config.frontend),
            stream=stream,
            interactive=False if stream is not None else None,
        )
        try:
            return Shell(session, source, cancellation=cancellation).run()
        except TerminalUnavailable as exc:
            print_line(str(exc), file=session.stderr)
            return EXIT_FAILURE
        finally:
            if stream is not None:
                stream.close()
    finally:
        session.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parsed = create_parser().parse_args(argv)
    return run(options_from_args(parsed))


if __name__ == "__main__":
    sys.exit(main())
