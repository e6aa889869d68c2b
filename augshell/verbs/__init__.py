# augshell/verbs/__init__.py
from __future__ import annotations

"""
Native command grammar, one module per category:
- general: quit, help, errors
- nodes: get/set/rm and the other single-node edits
- query: match, ls, print, dump-xml, span, defvar/defnode
- files: save, load, transform, store/retrieve
"""
