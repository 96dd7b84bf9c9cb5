# Copyright Red Hat
#
# treediff/differ.py - Directory tree differ top-level interface
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Top-level treediff interface.
"""
from typing import Optional, Tuple
from concurrent.futures import ThreadPoolExecutor
import logging
import os

from ._treediff import TreeDiffPathError
from .engine import DiffEngine, DiffResults
from .lister import DirListing, TreeLister
from .options import DiffOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def check_root(path: str):
    """
    Check that ``path`` exists and is a directory.

    :param path: The tree root to check.
    :type path: ``str``
    :raises: ``TreeDiffPathError`` if ``path`` is missing or is not a
             directory.
    """
    if not os.path.exists(path):
        raise TreeDiffPathError(f"{path} does not exist")
    if not os.path.isdir(path):
        raise TreeDiffPathError(f"{path} is not a directory")


class TreeDiffer:
    """
    Top-level interface for generating directory tree comparisons.
    """

    def __init__(self, options: Optional[DiffOptions] = None):
        """
        Initialise a new ``TreeDiffer`` to compute tree differences.

        :param options: Options to control this ``TreeDiffer`` instance.
        :type options: ``Optional[DiffOptions]``
        """
        self.options: DiffOptions = options or DiffOptions()
        self.tree_lister: TreeLister = TreeLister(self.options)
        self.diff_engine: DiffEngine = DiffEngine()

    def _list_roots(
        self, source_dir: str, target_dir: str
    ) -> Tuple[DirListing, DirListing]:
        """
        List both tree roots, concurrently if more than one job is allowed.

        :param source_dir: The source tree root.
        :type source_dir: ``str``
        :param target_dir: The target tree root.
        :type target_dir: ``str``
        :returns: A 2-tuple of (source listing, target listing).
        :rtype: ``Tuple[DirListing, DirListing]``
        """
        if self.options.jobs > 1:
            with ThreadPoolExecutor(max_workers=2) as executor:
                source_future = executor.submit(self.tree_lister.list_tree, source_dir)
                target_future = executor.submit(self.tree_lister.list_tree, target_dir)
                return source_future.result(), target_future.result()
        return (
            self.tree_lister.list_tree(source_dir),
            self.tree_lister.list_tree(target_dir),
        )

    def compare_roots(self, source_dir: str, target_dir: str) -> DiffResults:
        """
        Compare two directory trees and return diff results.

        :param source_dir: The source (left hand) tree root.
        :type source_dir: ``str``
        :param target_dir: The target (right hand) tree root.
        :type target_dir: ``str``
        :returns: The diff results for the comparison.
        :rtype: ``DiffResults``
        :raises: ``TreeDiffPathError`` if either root is not an existing
                 directory.
        """
        check_root(source_dir)
        check_root(target_dir)

        source, target = self._list_roots(source_dir, target_dir)
        _log_info(
            "Comparing %s (%d paths) to %s (%d paths)",
            source.root,
            len(source),
            target.root,
            len(target),
        )

        results = self.diff_engine.compute_diff(
            source.paths,
            target.paths,
            source_root=source.root,
            target_root=target.root,
            options=self.options,
        )
        errors = source.errors + target.errors
        if errors:
            _log_warn("%d entries could not be read", len(errors))
        return DiffResults(
            results,
            self.options,
            source_root=results.source_root,
            target_root=results.target_root,
            errors=errors,
        )
