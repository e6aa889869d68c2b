#!/usr/bin/env python3
# augshell/store/config.py
from __future__ import annotations

"""
Layered shell configuration.

Sources, later ones winning:
  1) DEFAULTS below
  2) ~/.augeas/augshell.toml, then ./augshell.toml (tomllib)
  3) AUGEAS_ROOT / AUGEAS_LENS_LIB, then AUGSHELL_<KEY> variables
  4) command-line flags, applied by the caller through ShellConfig.with_overrides

Keys are case-insensitive; nested TOML tables are joined with '_', so
[history] size = 100 sets HISTORY_SIZE. Every value passes through the
coercer registered for its key; a bad value raises ValueError.
"""

import dataclasses
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

ENV_PREFIX = "AUGSHELL_"

DEFAULTS: dict[str, Any] = {
    "ROOT": None,
    "LOADPATH": "",
    "HISTORY_FILE": None,           # None: ~/.augeas/history
    "HISTORY_SIZE": 500,
    "PROMPT": "augshell> ",
    "LUA_PROMPT": "augshell|lua> ",
    "FRONTEND": "auto",
    "ENABLE_COMPLETION": True,
    "LOG_FILE_PATH": None,
    "LOG_LEVEL": None,              # None: WARNING
}

# libaugeas' own variables, read before the AUGSHELL_ ones
_AUGEAS_ENV = {"AUGEAS_ROOT": "ROOT", "AUGEAS_LENS_LIB": "LOADPATH"}

FRONTEND_CHOICES = ("auto", "prompt_toolkit", "readline", "plain")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ShellConfig:
    root: Path | None
    loadpath: tuple[str, ...]
    history_file: Path | None
    history_size: int
    prompt: str
    lua_prompt: str
    frontend: str
    enable_completion: bool
    log_file_path: Path | None
    log_level: str | None
    # keys nobody reads, kept for diagnostics
    extra: dict[str, Any] = field(default_factory=dict)

    def with_overrides(self, **changes: Any) -> "ShellConfig":
        """Copy with every non-None value in `changes` applied."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})


# ---------- coercers ----------

def _blank(value: Any) -> bool:
    return value is None or str(value).strip().lower() in ("", "none")


def _path(value: Any) -> Path | None:
    if _blank(value):
        return None
    return Path(os.path.expandvars(os.path.expanduser(str(value))))


def _text(value: Any) -> str:
    return str(value)


def _count(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f"expected a number, got {value!r}") from None
    if number < 0:
        raise ValueError(f"must be >= 0, got {number}")
    return number


def _switch(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in ("1", "true", "yes", "on"):
        return True
    if word in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _one_of(choices: tuple[str, ...], *, upper: bool = False, optional: bool = False) -> Callable[[Any], Any]:
    def coerce(value: Any) -> str | None:
        if optional and _blank(value):
            return None
        word = str(value).strip()
        word = word.upper() if upper else word.lower()
        if word not in choices:
            raise ValueError(f"must be one of {', '.join(choices)}; got {value!r}")
        return word
    return coerce


def _search_path(value: Any) -> tuple[str, ...]:
    if _blank(value):
        return ()
    parts = value if isinstance(value, (list, tuple)) else str(value).split(os.pathsep)
    return tuple(p for p in (str(part).strip() for part in parts) if p)


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "ROOT": _path,
    "LOADPATH": _search_path,
    "HISTORY_FILE": _path,
    "HISTORY_SIZE": _count,
    "PROMPT": _text,
    "LUA_PROMPT": _text,
    "FRONTEND": _one_of(FRONTEND_CHOICES),
    "ENABLE_COMPLETION": _switch,
    "LOG_FILE_PATH": _path,
    "LOG_LEVEL": _one_of(LOG_LEVELS, upper=True, optional=True),
}


# ---------- sources ----------

def config_files() -> list[Path]:
    return [Path.home() / ".augeas" / "augshell.toml", Path.cwd() / "augshell.toml"]


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (FileNotFoundError, IsADirectoryError, PermissionError):
        return {}


def _flatten(table: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in table.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        else:
            flat[name.upper()] = value
    return flat


def _from_environ(environ: Mapping[str, str]) -> dict[str, Any]:
    found = {key: environ[var] for var, key in _AUGEAS_ENV.items() if environ.get(var)}
    for var, value in environ.items():
        if var.startswith(ENV_PREFIX) and var.isupper():
            found[var[len(ENV_PREFIX):]] = value
    return found


def load_config(
    files: list[Path] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ShellConfig:
    """
    Merge all sources and validate. Reads files but never writes anything.
    Raises ValueError naming the offending key.
    """
    merged: dict[str, Any] = dict(DEFAULTS)
    for path in config_files() if files is None else files:
        merged.update(_flatten(_read_toml(path)))
    merged.update(_from_environ(os.environ if environ is None else environ))

    values: dict[str, Any] = {}
    for key, coerce in _COERCERS.items():
        try:
            values[key.lower()] = coerce(merged[key])
        except ValueError as exc:
            raise ValueError(f"{key}: {exc}") from None
    if not values["prompt"]:
        values["prompt"] = DEFAULTS["PROMPT"]
    if not values["lua_prompt"]:
        values["lua_prompt"] = DEFAULTS["LUA_PROMPT"]

    extra = {k: v for k, v in merged.items() if k not in _COERCERS}
    return ShellConfig(**values, extra=extra)
