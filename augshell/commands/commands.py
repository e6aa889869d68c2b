#!/usr/bin/env python3
# augshell/commands/commands.py
from __future__ import annotations

"""
The native command table.

- CommandRegistry: commands in declaration order, reachable by name or alias.
- command: decorator adding a function to a registry.

Names are matched exactly; 'GET' is not 'get'.
"""

import inspect
from typing import Any, Callable, Optional

from augshell.commands.command_types import Command


class CommandRegistry:
    """Declaration-ordered command table with alias lookup."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        # every name and alias -> its command
        self._lookup: dict[str, Command] = {}
        self._category_text: dict[str, str] = {}

    def register(self, command_obj: Command) -> None:
        """Add `command_obj`; raises ValueError if any of its names is taken."""
        names = [command_obj.name, *command_obj.aliases]
        taken = [n for n in names if n in self._lookup]
        if taken:
            raise ValueError(
                f"Cannot register '{command_obj.name}': name '{taken[0]}' is already in use.")
        self._commands.append(command_obj)
        for n in names:
            self._lookup[n] = command_obj

    def get(self, name: str) -> Optional[Command]:
        """The command called `name` (or aliased to it), else None."""
        return self._lookup.get(name)

    def all(self) -> list[Command]:
        return list(self._commands)

    def names(self) -> list[str]:
        """Primary names and aliases."""
        return list(self._lookup)

    def categories(self) -> dict[str, list[Command]]:
        """Commands grouped by category, groups in first-seen order."""
        grouped: dict[str, list[Command]] = {}
        for command_obj in self._commands:
            grouped.setdefault(command_obj.category, []).append(command_obj)
        return grouped

    def describe_category(self, category: str, text: str) -> None:
        self._category_text[category] = text.strip()

    def category_description(self, category: str) -> str:
        return self._category_text.get(category, "")


REGISTRY = CommandRegistry()


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    example: str | None = None,
    category: str | None = None,
    aliases: list[str] | None = None,
    registry: CommandRegistry | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Register the decorated function as a native command.

    The function receives the Session first; its remaining parameters are the
    command's arguments, and parameters with a default are optional. Without
    `name`, the function name is used with '_' turned into '-'. Without
    `description`, the docstring is used.
    """

    def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
        parameters = list(inspect.signature(func).parameters.values())[1:]
        command_obj = Command(
            name=name or func.__name__.replace("_", "-"),
            description=(description or func.__doc__ or "").strip(),
            example=example or "",
            callback=func,
            module=func.__module__,
            category=category or "general",
            aliases=list(aliases or ()),
            param_names=[p.name for p in parameters],
        )
        (registry or REGISTRY).register(command_obj)
        return func

    return wrapper
