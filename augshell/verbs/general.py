# augshell/verbs/general.py
from __future__ import annotations

from typing import Optional

from augshell.commands import QUIT, REGISTRY, CommandError, command
from augshell.interface.parser import build_usage
from augshell.store.base import ERRORS_PATTERN
from augshell.ui import format_listing, print_line

CATEGORY_DESCRIPTION = "Shell control and diagnostics."

ERROR_SUFFIX = "/error"
META_ROOT = "/augeas"


# ---------- quit ----------
@command(
    name="quit",
    description="Exit the program.",
    example="quit",
    category="general",
)
def quit_shell(session) -> int:
    return QUIT


# ---------- help ----------
@command(
    name="help",
    description="List all commands, or show the usage of COMMAND.",
    example="help set",
    category="general",
)
def show_help(session, name: Optional[str] = None) -> None:
    out = session.stdout
    if name is None:
        for category, commands in REGISTRY.categories().items():
            heading = REGISTRY.category_description(category) or f"{category.capitalize()} commands."
            print_line(heading, file=out)
            print_line(format_listing([(c.name, c.description) for c in commands]), file=out)
            print_line("", file=out)
        print_line("Type 'help <command>' for more information on a command.", file=out)
        return

    command_obj = REGISTRY.get(name)
    if command_obj is None:
        raise CommandError(f"Unknown command '{name}'")
    print_line(f"  {command_obj.name} - {command_obj.description}", file=out)
    print_line("", file=out)
    print_line(f"  Usage:   {build_usage(command_obj.name, command_obj.callback)}", file=out)
    if command_obj.aliases:
        print_line(f"  Aliases: {', '.join(command_obj.aliases)}", file=out)
    if command_obj.example:
        print_line(f"  Example: {command_obj.example}", file=out)


# ---------- errors ----------
@command(
    name="errors",
    description="Show the errors met while loading or saving files, optionally only for PATH.",
    example="errors /files/etc/hosts",
    category="general",
)
def errors(session, path: Optional[str] = None) -> None:
    store = session.store
    pattern = f"{META_ROOT}{path}//error" if path else ERRORS_PATTERN
    found = store.match(pattern)
    for index, node in enumerate(found):
        if index > 0:
            print_line("", file=session.stdout)
        for line in _describe_error(store, node):
            print_line(line, file=session.stdout)


def _describe_error(store, node: str) -> list[str]:
    """Render one /augeas/.../error node."""
    filename = node
    if filename.startswith(META_ROOT):
        filename = filename[len(META_ROOT):]
    if filename.endswith(ERROR_SUFFIX):
        filename = filename[: -len(ERROR_SUFFIX)]

    kind = store.get(node) or "error"
    line = store.get(f"{node}/line")
    char = store.get(f"{node}/char")
    position = f":{line}.{char or 0}" if line is not None else ""

    out = [f"Error in {filename}{position} ({kind})"]
    message = store.get(f"{node}/message")
    if message:
        out.append(f"  {message}")
    lens = store.get(f"{node}/lens")
    if lens:
        out.append(f"  Lens: {lens}")
    last = store.get(f"{node}/last_matched")
    if last is not None:
        out.append(f"    Last matched: {last}")
    nxt = store.get(f"{node}/next_not_matched")
    if nxt is not None:
        out.append(f"    Next (no match): {nxt}")
    return out
