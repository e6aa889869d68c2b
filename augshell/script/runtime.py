#!/usr/bin/env python3
# augshell/script/runtime.py
from __future__ import annotations

"""
Lua evaluator backed by lupa.

Tree operations come from ScriptBridge. Python callbacks return
(ok, results...) and a small Lua wrapper turns a failure into error(), so
scripts can catch it with pcall like any other Lua error.
"""

import logging
from typing import IO, TYPE_CHECKING, Optional

from lupa import LuaError, LuaRuntime

from augshell.commands import FAILED, OK, CommandResult
from augshell.script.bridge import ScriptBridge
from augshell.store.base import ErrorCode, ErrorReport
from augshell.ui import print_line

if TYPE_CHECKING:
    from augshell.session import Session

log = logging.getLogger("augshell.script")

_WRAPPER = """
return function(name, impl)
  return function(...)
    local res = table.pack(impl(...))
    if not res[1] then error(res[2], 0) end
    return table.unpack(res, 2, res.n)
  end
end
"""

_PRINT = """
return function(write)
  return function(...)
    local parts = {}
    for i = 1, select('#', ...) do
      parts[i] = tostring((select(i, ...)))
    end
    write(table.concat(parts, "\\t"))
  end
end
"""


class ScriptRuntime:
    """Runs lines and files in one Lua state for the whole session."""

    comment_prefix = "--"

    def __init__(self, session: "Session", bridge: Optional[ScriptBridge] = None) -> None:
        self.session = session
        self._lua: Optional[LuaRuntime] = LuaRuntime(unpack_returned_tuples=True)
        self.bridge = bridge if bridge is not None else ScriptBridge(
            session.store, out=session.stdout, table_factory=self._lua.table_from)

        lua_globals = self._lua.globals()
        wrap = self._lua.execute(_WRAPPER)
        bindings = self.bridge.bindings()
        for name, impl in bindings.items():
            lua_globals[name] = wrap(name, impl)
        make_print = self._lua.execute(_PRINT)
        lua_globals["print"] = make_print(lambda text: print_line(text, file=session.stdout))
        log.debug("lua runtime ready with %d bindings", len(bindings))

    @property
    def lua(self) -> LuaRuntime:
        if self._lua is None:
            raise RuntimeError("Lua runtime is closed")
        return self._lua

    @staticmethod
    def _failure(exc: LuaError) -> CommandResult:
        return CommandResult(FAILED, error=ErrorReport(str(exc), code=ErrorCode.ECMDRUN))

    def evaluate(self, line: str) -> CommandResult:
        try:
            self.lua.execute(line)
        except LuaError as exc:
            return self._failure(exc)
        return CommandResult(OK)

    def run_file(self, path: str) -> CommandResult:
        """Run a whole script file, like Lua's dofile()."""
        try:
            self.lua.globals().dofile(path)
        except LuaError as exc:
            return self._failure(exc)
        return CommandResult(OK)

    def report(self, result: CommandResult, stream: IO[str]) -> None:
        """Lua errors are shown as Lua words them, without the 'error:' prefix."""
        if result.error is not None and result.error.message:
            print_line(result.error.message, file=stream)

    def close(self) -> None:
        self._lua = None
