#!/usr/bin/env python3
# augshell/interface/loader.py
from __future__ import annotations

"""
Imports the native command modules so their @command decorators run.

Every public module of the package becomes one help category: commands left
in 'general' take the module's name, and the module's CATEGORY_DESCRIPTION
(or its docstring) becomes the category's heading.
"""

import importlib
import logging
import pkgutil
from types import ModuleType

from augshell.commands import REGISTRY, CommandRegistry

log = logging.getLogger("augshell.loader")

DEFAULT_COMMANDS_PACKAGE = "augshell.verbs"


def load_commands(
    commands_package: str = DEFAULT_COMMANDS_PACKAGE,
    registry: CommandRegistry | None = None,
) -> int:
    """Import the modules of `commands_package`; returns how many were imported."""
    registry = registry or REGISTRY
    package = importlib.import_module(commands_package)
    search_path = list(getattr(package, "__path__", []))
    if not search_path:
        raise RuntimeError(f"'{commands_package}' is not a package")

    modules: list[ModuleType] = []
    for info in pkgutil.iter_modules(search_path):
        if info.name.startswith("_"):
            continue
        modules.append(importlib.import_module(f"{commands_package}.{info.name}"))

    for module in modules:
        _adopt_category(registry, module)
    log.debug("loaded %d command modules from %s", len(modules), commands_package)
    return len(modules)


def _adopt_category(registry: CommandRegistry, module: ModuleType) -> None:
    category = module.__name__.rsplit(".", 1)[-1]
    for command_obj in registry.all():
        if command_obj.module == module.__name__ and command_obj.category == "general":
            command_obj.category = category

    text = getattr(module, "CATEGORY_DESCRIPTION", None)
    if not isinstance(text, str):
        text = module.__doc__ or ""
    for command_obj in registry.all():
        if command_obj.module == module.__name__:
            registry.describe_category(command_obj.category, text)
            break
