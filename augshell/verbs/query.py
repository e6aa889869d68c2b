# augshell/verbs/query.py
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterator, Optional

from augshell.commands import command
from augshell.store.base import SEP, TreeStore
from augshell.ui import print_line

CATEGORY_DESCRIPTION = "Search, list and dump parts of the tree."

DEFAULT_DUMP_PATH = "/*"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t"}


# -------------------------- helpers --------------------------

def _children_pattern(path: str) -> str:
    return f"{path}*" if path.endswith(SEP) else f"{path}{SEP}*"


def _basename(path: str) -> str:
    return path[path.rfind(SEP) + 1:]


def _quote(value: str) -> str:
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in value) + '"'


def _walk(store: TreeStore, path: str) -> Iterator[tuple[str, Optional[str]]]:
    """Yield (path, value) for every node matching `path` and their descendants."""
    for node in store.match(path):
        yield node, store.get(node)
        yield from _walk(store, _children_pattern(node))


def _xml_node(store: TreeStore, parent: ET.Element, node: str) -> None:
    element = ET.SubElement(parent, "node", {"label": store.label(node) or "", "path": node})
    value = store.get(node)
    if value is not None:
        ET.SubElement(element, "value").text = value
    for child in store.match(_children_pattern(node)):
        _xml_node(store, element, child)


# ---------- match ----------
@command(
    name="match",
    description="Find all paths matching PATH; with VALUE, only those whose value equals it.",
    example="match /files/etc/hosts/*/ipaddr 127.0.0.1",
    category="query",
)
def match(session, path: str, value: Optional[str] = None) -> None:
    store = session.store
    found = store.match(path)
    if not found:
        print_line("  (no matches)", file=session.stdout)
        return
    for node in found:
        node_value = store.get(node)
        shown = "(none)" if node_value is None else node_value
        if value is None:
            print_line(f"{node} = {shown}", file=session.stdout)
        elif shown == value:
            print_line(node, file=session.stdout)


# ---------- ls ----------
@command(
    name="ls",
    description="List the direct children of PATH.",
    example="ls /files/etc/hosts/1",
    category="query",
)
def ls(session, path: str) -> None:
    store = session.store
    for child in store.match(_children_pattern(path)):
        value = store.get(child)
        shown = "(none)" if value is None else value
        internal = store.count(_children_pattern(child)) > 0
        name = f"{_basename(child)}/ " if internal else f"{_basename(child)} "
        print_line(f"{name}= {shown}", file=session.stdout)


# ---------- print ----------
@command(
    name="print",
    description="Print all values and labels under PATH (default: the whole tree).",
    example="print /files/etc/hosts",
    category="query",
)
def print_tree(session, path: str = DEFAULT_DUMP_PATH) -> None:
    for node, value in _walk(session.store, path):
        if value is None:
            print_line(node, file=session.stdout)
        else:
            print_line(f"{node} = {_quote(value)}", file=session.stdout)


# ---------- dump-xml ----------
@command(
    name="dump-xml",
    description="Print the subtree under PATH as XML.",
    example="dump-xml /files/etc/hosts",
    category="query",
)
def dump_xml(session, path: str = DEFAULT_DUMP_PATH) -> None:
    store = session.store
    root = ET.Element("augeas", {"match": path})
    for node in store.match(path):
        _xml_node(store, root, node)
    ET.indent(root, space="  ")
    print_line(ET.tostring(root, encoding="unicode"), file=session.stdout)


# ---------- span ----------
@command(
    name="span",
    description="Print the position of PATH in its file (needs --span).",
    example="span /files/etc/hosts/1",
    category="query",
)
def span(session, path: str) -> None:
    s = session.store.span(path)
    filename = s.filename if s.filename is not None else "(null)"
    print_line(
        f"{filename} label=({s.label_start}:{s.label_end}) "
        f"value=({s.value_start}:{s.value_end}) span=({s.span_start},{s.span_end})",
        file=session.stdout,
    )


# ---------- defvar ----------
@command(
    name="defvar",
    description="Define the variable NAME as the nodes matching EXPR; refer to it as $NAME.",
    example="defvar hosts /files/etc/hosts",
    category="query",
)
def defvar(session, name: str, expr: str) -> None:
    session.store.defvar(name, expr)


# ---------- defnode ----------
@command(
    name="defnode",
    description="Define NAME like defvar, creating the node EXPR (with VALUE) if it matches nothing.",
    example="defnode myvar /files/etc/hosts/01/alias[last()+1] myhost",
    category="query",
)
def defnode(session, name: str, expr: str, value: Optional[str] = None) -> None:
    session.store.defnode(name, expr, value)
