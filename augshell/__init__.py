#!/usr/bin/env python3
# augshell/__init__.py
from __future__ import annotations
"""
augshell: interactive shell for the Augeas configuration tree.

Avoid eager imports here; subpackages expose their APIs through their own
__init__.py files.
"""

__version__ = "0.1.0"
