#!/usr/bin/env python3
# augshell/boot/__init__.py
from __future__ import annotations
"""
Boot sequence package.

Exports:
- boot_sequence: Startup pipeline (config, logging, store, history, evaluator).
- BootState: Dataclass holding the config, logger, session and command count.
- LaunchOptions: Command-line choices consumed by the pipeline.
"""


from .boot import (
    BootError,
    BootState,
    LaunchOptions,
    add_transforms,
    boot_sequence,
    open_store,
    print_version,
)

__all__ = [
    "BootError",
    "BootState",
    "LaunchOptions",
    "add_transforms",
    "boot_sequence",
    "open_store",
    "print_version",
]
