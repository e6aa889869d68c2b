# augshell/verbs/nodes.py
from __future__ import annotations

from typing import Optional

from augshell.commands import CommandError, command
from augshell.ui import print_line

CATEGORY_DESCRIPTION = "Read and change individual tree nodes."


def _describe(session, path: str, found: bool, text: Optional[str]) -> None:
    if not found:
        print_line(f"{path} (o)", file=session.stdout)
    elif text is None:
        print_line(f"{path} (none)", file=session.stdout)
    else:
        print_line(f"{path} = {text}", file=session.stdout)


# ---------- get ----------
@command(
    name="get",
    description="Get the value of the node PATH.",
    example="get /files/etc/hosts/1/ipaddr",
    category="nodes",
)
def get_value(session, path: str) -> None:
    store = session.store
    value = store.get(path)
    _describe(session, path, value is not None or store.count(path) > 0, value)


# ---------- label ----------
@command(
    name="label",
    description="Get the label of the node PATH.",
    example="label /files/etc/hosts/1",
    category="nodes",
)
def get_label(session, path: str) -> None:
    store = session.store
    label = store.label(path)
    _describe(session, path, label is not None or store.count(path) > 0, label)


# ---------- set ----------
@command(
    name="set",
    description="Set the value of PATH, creating it if needed. No VALUE sets it to null.",
    example="set /files/etc/hosts/1/ipaddr 192.168.0.1",
    category="nodes",
)
def set_value(session, path: str, value: Optional[str] = None) -> None:
    session.store.set(path, value)


# ---------- clear ----------
@command(
    name="clear",
    description="Set the value of PATH to null, creating it if needed.",
    example="clear /files/etc/hosts/1/comment",
    category="nodes",
)
def clear_value(session, path: str) -> None:
    session.store.set(path, None)


# ---------- touch ----------
@command(
    name="touch",
    description="Create PATH with a null value if it does not exist yet.",
    example="touch /files/etc/hosts/01/canonical",
    category="nodes",
)
def touch(session, path: str) -> None:
    if session.store.count(path) == 0:
        session.store.set(path, None)


# ---------- setm ----------
@command(
    name="setm",
    description="Set the value of SUB, relative to every node matching BASE.",
    example="setm /files/etc/hosts/*[canonical='localhost'] alias localhost",
    category="nodes",
)
def set_multiple(session, base: str, sub: str, value: Optional[str] = None) -> None:
    session.store.setm(base, sub, value)


# ---------- clearm ----------
@command(
    name="clearm",
    description="Set the value of SUB to null, relative to every node matching BASE.",
    example="clearm /files/etc/hosts/* comment",
    category="nodes",
)
def clear_multiple(session, base: str, sub: str) -> None:
    session.store.setm(base, sub, None)


# ---------- rm ----------
@command(
    name="rm",
    description="Delete PATH and all its children.",
    example="rm /files/etc/hosts/1",
    category="nodes",
)
def remove(session, path: str) -> None:
    count = session.store.remove(path)
    print_line(f"rm : {path} {count}", file=session.stdout)


# ---------- mv ----------
@command(
    name="mv",
    description="Move the node SRC to DST; SRC must match exactly one node.",
    example="mv /files/etc/hosts/1 /files/etc/hosts/2",
    category="nodes",
    aliases=["move"],
)
def move(session, src: str, dst: str) -> None:
    session.store.move(src, dst)


# ---------- cp ----------
@command(
    name="cp",
    description="Copy the node SRC to DST; SRC must match exactly one node.",
    example="cp /files/etc/hosts/1 /files/etc/hosts/3",
    category="nodes",
    aliases=["copy"],
)
def copy(session, src: str, dst: str) -> None:
    session.store.copy(src, dst)


# ---------- rename ----------
@command(
    name="rename",
    description="Rename the label of every node matching SRC to LBL.",
    example="rename /files/etc/hosts/1/ipaddr ip",
    category="nodes",
)
def rename(session, src: str, lbl: str) -> None:
    count = session.store.rename(src, lbl)
    print_line(f"rename : {src} to {lbl} {count}", file=session.stdout)


# ---------- ins ----------
@command(
    name="ins",
    description="Insert a new node LABEL before or after the node PATH.",
    example="ins alias after /files/etc/hosts/1/canonical",
    category="nodes",
    aliases=["insert"],
)
def insert(session, label: str, where: str, path: str) -> None:
    if where not in ("before", "after"):
        raise CommandError(
            "the <WHERE> argument for ins must be either 'before' or 'after'.")
    session.store.insert(path, label, where == "before")
