#!/usr/bin/env python3
# augshell/interface/parser.py
from __future__ import annotations

"""
Argument parsing helpers for native commands.

Responsibilities:
- Tokenize a command line, keeping path predicates like [label = 'a b'] intact.
- Bind tokens positionally to a command's callback signature.
- Render compact Usage strings from a callback signature.
"""

import inspect
from typing import Any

from augshell.commands import Command, CommandError

_QUOTES = "\"'"


def tokenize(command_line: str) -> list[str]:
    """
    Split a raw command line into tokens.

    Whitespace separates tokens except inside quotes or [...] predicates.
    Quotes at the top level are removed; quotes inside brackets are kept so
    the tree store sees its own string literals. A backslash outside brackets
    makes the next character literal.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    quote: str | None = None
    depth = 0
    i = 0
    length = len(command_line)

    while i < length:
        ch = command_line[i]

        if ch == "\\" and i + 1 < length:
            if depth > 0:
                current.append(ch)
            current.append(command_line[i + 1])
            in_token = True
            i += 2
            continue

        if quote is not None:
            if ch == quote:
                quote = None
                if depth > 0:
                    current.append(ch)
            else:
                current.append(ch)
        elif ch in _QUOTES:
            quote = ch
            in_token = True
            if depth > 0:
                current.append(ch)
        elif ch == "[":
            depth += 1
            current.append(ch)
            in_token = True
        elif ch == "]" and depth > 0:
            depth -= 1
            current.append(ch)
        elif ch.isspace() and depth == 0:
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(ch)
            in_token = True
        i += 1

    if quote is not None:
        raise CommandError(f"unmatched {quote} in: {command_line.strip()}")
    if depth > 0:
        raise CommandError(f"unmatched [ in: {command_line.strip()}")
    if in_token:
        tokens.append("".join(current))
    return tokens


def _arguments(func: Any) -> list[inspect.Parameter]:
    """Parameters after the leading session argument."""
    return list(inspect.signature(func).parameters.values())[1:]


def bind_args(command_obj: Command, tokens: list[str]) -> tuple[Any, ...]:
    """
    Bind a flat token list positionally to `command_obj`'s callback.

    Raises CommandError when too few or too many tokens are given.
    """
    parameters = _arguments(command_obj.callback)
    required = sum(1 for p in parameters if p.default is inspect.Parameter.empty)

    if len(tokens) < required:
        raise CommandError(f"Not enough arguments for {command_obj.name}")
    if len(tokens) > len(parameters):
        raise CommandError(
            f"Too many arguments. Command {command_obj.name} takes only "
            f"{len(parameters)} arguments")

    bound: list[Any] = list(tokens)
    for parameter in parameters[len(tokens):]:
        bound.append(parameter.default)
    return tuple(bound)


def build_usage(command_name: str, func: Any) -> str:
    """
    Render a compact usage string based on `func` signature.

    Examples:
        'match <path> [value]'
    """
    usage_parts: list[str] = []
    for parameter in _arguments(func):
        if parameter.default is inspect.Parameter.empty:
            usage_parts.append(f"<{parameter.name}>")
        else:
            usage_parts.append(f"[{parameter.name}]")
    return f"{command_name} " + " ".join(usage_parts) if usage_parts else command_name
