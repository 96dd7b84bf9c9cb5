# Copyright Red Hat
#
# treediff/lister.py - Directory tree differ tree lister
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Directory listing support for treediff.
"""
from typing import List, NamedTuple, Optional
from fnmatch import fnmatch
from datetime import datetime
import logging
import os

from ._treediff import TREEDIFF_SUBSYSTEM_LISTER
from .options import DiffOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_lister(msg, *args, **kwargs):
    """A wrapper for lister subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": TREEDIFF_SUBSYSTEM_LISTER}, **kwargs)


class ListingError(NamedTuple):
    """
    An entry that could not be read while listing a tree.
    """

    #: The path relative to the listing root
    path: str
    #: Description of the error
    message: str

    def to_dict(self):
        """
        Convert this ``ListingError`` into a dictionary suitable for encoding
        as JSON.
        """
        return {"path": self.path, "message": self.message}


class DirListing:
    """
    The sorted relative paths found below one tree root.
    """

    def __init__(
        self,
        root: str,
        paths: List[str],
        errors: Optional[List[ListingError]] = None,
    ):
        """
        Initialise a new ``DirListing`` object.

        :param root: The canonical absolute path of the listed root.
        :type root: ``str``
        :param paths: Relative paths below ``root`` in ascending order.
        :type paths: ``List[str]``
        :param errors: Entries that could not be read during listing.
        :type errors: ``Optional[List[ListingError]]``
        """
        self.root = root
        self.paths = paths
        self.errors = errors or []

    def __repr__(self) -> str:
        return f"DirListing({self.root!r}, [...{len(self.paths)}], [...{len(self.errors)}])"

    def __len__(self):
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


def _error_message(err: OSError) -> str:
    """
    Format an ``OSError`` raised while listing for display.

    :param err: The error to format.
    :type err: ``OSError``
    :returns: A short description of the error.
    :rtype: ``str``
    """
    return err.strerror or str(err)


class TreeLister:
    """
    Directory tree lister producing sorted relative path listings.
    """

    def __init__(self, options: Optional[DiffOptions] = None):
        """
        Initialise a new ``TreeLister`` object.

        :param options: Options to control this ``TreeLister`` instance.
        :type options: ``Optional[DiffOptions]``
        """
        self.options: DiffOptions = options or DiffOptions()
        self.depth: Optional[int] = self.options.depth
        self.exclude_patterns = self.options.exclude_patterns

    def _excluded(self, rel_path: str, name: str) -> bool:
        """
        Return ``True`` if ``rel_path`` matches an exclude pattern.

        Patterns are matched against both the relative path and the entry's
        base name.
        """
        return any(
            fnmatch(rel_path, pat) or fnmatch(name, pat)
            for pat in self.exclude_patterns
        )

    # pylint: disable=too-many-locals
    def list_tree(self, root: str) -> DirListing:
        """
        List all entries below ``root``, returning relative paths in
        ascending order.

        Directories and files are both entries. Symbolic links are listed
        but never followed. Entries that cannot be read are logged, recorded
        in ``DirListing.errors`` and skipped.

        :param root: The directory to list.
        :type root: ``str``
        :returns: The sorted listing of ``root``.
        :rtype: ``DirListing``
        """
        root = os.path.realpath(root)
        paths: List[str] = []
        errors: List[ListingError] = []
        excluded = 0

        def _record_error(rel_path: str, err: OSError):
            """
            Log and record a per-entry error.
            """
            message = _error_message(err)
            _log_warn("Cannot read '%s' in %s: %s", rel_path, root, message)
            errors.append(ListingError(rel_path, message))

        def _on_walk_error(err: OSError):
            """
            Handle ``os.walk()`` failures to read a directory.
            """
            filename = err.filename or root
            _record_error(os.path.relpath(filename, root), err)

        _log_info(
            "Listing %s (depth=%s)", root, self.depth if self.depth else "unbounded"
        )
        start_time = datetime.now()

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
            rel_dir = os.path.relpath(dirpath, root)
            if rel_dir == os.curdir:
                rel_dir = ""
                level = 1
            else:
                level = rel_dir.count(os.sep) + 2

            if self.depth is not None and level > self.depth:
                dirnames[:] = []
                continue

            keep_dirs = []
            for name in sorted(dirnames) + sorted(filenames):
                rel_path = os.path.join(rel_dir, name) if rel_dir else name
                if self._excluded(rel_path, name):
                    _log_debug_lister("Excluding '%s'", rel_path)
                    excluded += 1
                    continue
                try:
                    os.lstat(os.path.join(dirpath, name))
                except OSError as err:
                    _record_error(rel_path, err)
                    continue
                paths.append(rel_path)
                if name in dirnames:
                    keep_dirs.append(name)

            if self.depth is not None and level >= self.depth:
                keep_dirs = []
            dirnames[:] = keep_dirs

        paths.sort()

        end_time = datetime.now()
        _log_debug_lister(
            "Listed %d paths from %s in %s (excluded %d, errors %d)",
            len(paths),
            root,
            end_time - start_time,
            excluded,
            len(errors),
        )
        return DirListing(root, paths, errors)
