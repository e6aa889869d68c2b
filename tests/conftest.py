"""
Shared pytest fixtures for the augshell test suite.

Provides an in-memory FakeStore implementing the TreeStore protocol, so the
shell can be exercised without libaugeas.

Usage in tests:
    def test_something(session, fake_store):
        fake_store.set("/files/etc/hosts/1/ipaddr", "127.0.0.1")
        result = Dispatcher(session).execute("get /files/etc/hosts/1/ipaddr")
        assert result.ok
"""

from fnmatch import fnmatchcase
from io import StringIO
from typing import Optional

import pytest

from augshell.interface import HistoryStore, NativeEvaluator, load_commands
from augshell.session import Session
from augshell.store import (
    CONTEXT_PATH,
    NO_ERROR,
    SAVED_EVENTS_PATH,
    SEP,
    ErrorCode,
    ErrorReport,
    Span,
    TreeStoreError,
)


class FakeStore:
    """
    Dict-backed tree. Paths are plain '/a/b/c' strings; match() supports '*'
    globs per segment and a single '//' descendant step. Relative paths are
    resolved against /augeas/context.

    Failures are injected per operation name:
        store.failures["match"] = TreeStoreError("boom", code=ErrorCode.EPATHX)
    """

    def __init__(self, nodes: Optional[dict] = None, *, context: Optional[str] = None) -> None:
        self.nodes: dict[str, Optional[str]] = {}
        self.failures: dict[str, TreeStoreError] = {}
        self.calls: list[tuple] = []
        self.last_error: ErrorReport = NO_ERROR
        self.saved_files = 0
        self.loads = 0
        self.closed = 0
        self.transforms: list[tuple[str, str, bool]] = []
        self.variables: dict[str, Optional[str]] = {}
        self.spans: dict[str, Span] = {}
        for path, value in (nodes or {}).items():
            self._create(path, value)
        if context is not None:
            self._create(CONTEXT_PATH, context)

    # ---------------- helpers ----------------

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        failure = self.failures.get(op)
        if failure is not None:
            self.last_error = failure.report
            raise failure
        self.last_error = NO_ERROR

    def _resolve(self, path: str) -> str:
        if path.startswith(SEP):
            return path
        context = self.nodes.get(CONTEXT_PATH) or SEP
        return f"{context.rstrip(SEP)}{SEP}{path}"

    def _create(self, path: str, value: Optional[str]) -> None:
        parts = path.strip(SEP).split(SEP)
        for depth in range(1, len(parts)):
            parent = SEP + SEP.join(parts[:depth])
            self.nodes.setdefault(parent, None)
        self.nodes[SEP + SEP.join(parts)] = value

    def _matches(self, pattern: str) -> list[str]:
        pattern = self._resolve(pattern)
        if "//" in pattern:
            prefix, leaf = pattern.split("//", 1)
            return [p for p in self.nodes
                    if p.startswith(prefix + SEP) and fnmatchcase(p.rsplit(SEP, 1)[1], leaf)]
        wanted = pattern.strip(SEP).split(SEP)
        found = []
        for path in self.nodes:
            segments = path.strip(SEP).split(SEP)
            if len(segments) == len(wanted) and all(
                    fnmatchcase(s, w) for s, w in zip(segments, wanted)):
                found.append(path)
        return found

    def _single(self, path: str) -> Optional[str]:
        found = self._matches(path)
        if len(found) > 1:
            err = TreeStoreError("Too many matches for path expression", code=ErrorCode.EMMATCH)
            self.last_error = err.report
            raise err
        return found[0] if found else None

    def _subtree(self, path: str) -> list[str]:
        return [p for p in self.nodes if p == path or p.startswith(path + SEP)]

    # ---------------- TreeStore ----------------

    def get(self, path):
        self._record("get", path)
        node = self._single(path)
        return None if node is None else self.nodes[node]

    def label(self, path):
        self._record("label", path)
        node = self._single(path)
        return None if node is None else node.rsplit(SEP, 1)[1]

    def set(self, path, value):
        self._record("set", path, value)
        node = self._single(path)
        self._create(node or self._resolve(path), value)

    def setm(self, base, sub, value):
        self._record("setm", base, sub, value)
        targets = self._matches(base)
        for node in targets:
            self._create(f"{node}{SEP}{sub}" if sub else node, value)
        return len(targets)

    def insert(self, path, label, before):
        self._record("insert", path, label, before)
        node = self._single(path)
        if node is None:
            raise TreeStoreError("No match for path expression", code=ErrorCode.ENOMATCH)
        new = f"{node.rsplit(SEP, 1)[0]}{SEP}{label}"
        reordered: dict[str, Optional[str]] = {}
        for key, value in self.nodes.items():
            if key == node and before:
                reordered[new] = None
            reordered[key] = value
            if key == node and not before:
                reordered[new] = None
        self.nodes = reordered

    def remove(self, path):
        self._record("remove", path)
        doomed = {p for node in self._matches(path) for p in self._subtree(node)}
        for p in doomed:
            del self.nodes[p]
        return len(doomed)

    def move(self, src, dst):
        self._record("move", src, dst)
        self.copy(src, dst)
        node = self._single(src)
        for p in self._subtree(node):
            del self.nodes[p]

    def copy(self, src, dst):
        self._record("copy", src, dst)
        node = self._single(src)
        if node is None:
            raise TreeStoreError("No match for path expression", code=ErrorCode.ENOMATCH)
        target = self._resolve(dst)
        for p in self._subtree(node):
            self._create(target + p[len(node):], self.nodes[p])

    def rename(self, src, label):
        self._record("rename", src, label)
        targets = self._matches(src)
        for node in targets:
            renamed = f"{node.rsplit(SEP, 1)[0]}{SEP}{label}"
            self.nodes = {
                (renamed + k[len(node):] if k == node or k.startswith(node + SEP) else k): v
                for k, v in self.nodes.items()
            }
        return len(targets)

    def match(self, path):
        self._record("match", path)
        return self._matches(path)

    def count(self, path):
        self._record("count", path)
        return len(self._matches(path))

    def defvar(self, name, expr):
        self._record("defvar", name, expr)
        self.variables[name] = expr
        return 0 if expr is None else len(self._matches(expr))

    def defnode(self, name, expr, value):
        self._record("defnode", name, expr, value)
        created = not self._matches(expr)
        if created:
            self._create(self._resolve(expr), value)
        self.variables[name] = expr
        return created

    def save(self):
        self._record("save")
        self.nodes = {k: v for k, v in self.nodes.items() if not k.startswith(SAVED_EVENTS_PATH)}
        return self.saved_files

    def load(self):
        self._record("load")
        self.loads += 1

    def transform(self, lens, file, excl):
        self._record("transform", lens, file, excl)
        self.transforms.append((lens, file, excl))

    def text_store(self, lens, node, path):
        self._record("text_store", lens, node, path)

    def text_retrieve(self, lens, node_in, path, node_out):
        self._record("text_retrieve", lens, node_in, path, node_out)

    def span(self, path):
        self._record("span", path)
        if path not in self.spans:
            err = TreeStoreError("Node has no span info", code=ErrorCode.ENOSPAN)
            self.last_error = err.report
            raise err
        return self.spans[path]

    def error(self):
        return self.last_error

    def close(self):
        self.closed += 1


@pytest.fixture(scope="session", autouse=True)
def native_commands():
    """Register the native command set once for the whole run."""
    load_commands()


@pytest.fixture
def fake_store():
    """A small hosts-like tree."""
    return FakeStore({
        "/files/etc/hosts/1/ipaddr": "127.0.0.1",
        "/files/etc/hosts/1/canonical": "localhost",
        "/files/etc/hosts/2/ipaddr": "192.168.0.1",
        "/files/etc/hosts/2/canonical": "router",
        "/files/etc/fstab": None,
    })


@pytest.fixture
def store_factory():
    """Build a FakeStore from a {path: value} mapping."""
    return FakeStore


@pytest.fixture
def session(fake_store):
    """Native-mode session writing to StringIO streams."""
    sess = Session(
        fake_store,
        history=HistoryStore(None),
        stdout=StringIO(),
        stderr=StringIO(),
    )
    sess.evaluator = NativeEvaluator(sess)
    return sess
