# Copyright Red Hat
#
# treediff/__init__.py - Directory tree differ package
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Directory tree comparison package.

Lists two directory trees, merges the sorted listings into a classified
diff and optionally compares the content of paths present in both trees.
The main entry points are ``TreeDiffer`` and ``DiffOptions``.
"""
from ._treediff import *  # noqa: F401, F403
from ._treediff import __all__ as _base_all

from .difftypes import ContentStatus, DiffType
from .engine import DiffEngine, DiffEntry, DiffResults
from .lister import DirListing, ListingError, TreeLister
from .options import DiffOptions
from .differ import TreeDiffer, check_root

__all__ = _base_all + [
    "ContentStatus",
    "DiffType",
    "DiffEngine",
    "DiffEntry",
    "DiffResults",
    "DirListing",
    "ListingError",
    "TreeLister",
    "DiffOptions",
    "TreeDiffer",
    "check_root",
]
