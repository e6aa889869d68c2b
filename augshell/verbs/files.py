# augshell/verbs/files.py
from __future__ import annotations

from augshell.commands import CommandError, command
from augshell.store.base import TreeStoreError
from augshell.ui import print_line

CATEGORY_DESCRIPTION = "Load, save and transform files."

SAVE_FAILED = "saving failed (run 'errors' for details)"


# ---------- save ----------
@command(
    name="save",
    description="Save all pending changes to disk.",
    example="save",
    category="files",
)
def save(session) -> None:
    try:
        count = session.store.save()
    except TreeStoreError as exc:
        raise CommandError(SAVE_FAILED) from exc
    if count > 0:
        print_line(f"Saved {count} file(s)", file=session.stdout)


# ---------- load ----------
@command(
    name="load",
    description="(Re)load files according to the transforms in /augeas/load.",
    example="load",
    category="files",
)
def load(session) -> None:
    session.store.load()


# ---------- transform ----------
@command(
    name="transform",
    description="Add a transform for FILE using LENS; FILTER is 'incl' or 'excl'.",
    example="transform Hosts.lns incl /etc/myhosts",
    category="files",
)
def transform(session, lens: str, filter: str, file: str) -> None:
    if filter not in ("incl", "excl"):
        raise CommandError("FILTER must be \"incl\" or \"excl\"")
    session.store.transform(lens, file, filter == "excl")


# ---------- store ----------
@command(
    name="store",
    description="Parse the text in the node NODE with LENS and store the tree at PATH.",
    example="store Hosts.lns /text/hosts /parsed/hosts",
    category="files",
)
def text_store(session, lens: str, node: str, path: str) -> None:
    session.store.text_store(lens, node, path)


# ---------- retrieve ----------
@command(
    name="retrieve",
    description="Render the tree at PATH with LENS, using NODE_IN as original text, into NODE_OUT.",
    example="retrieve Hosts.lns /text/hosts /parsed/hosts /out/hosts",
    category="files",
)
def text_retrieve(session, lens: str, node_in: str, path: str, node_out: str) -> None:
    session.store.text_retrieve(lens, node_in, path, node_out)
