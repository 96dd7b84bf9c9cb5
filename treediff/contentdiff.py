# Copyright Red Hat
#
# treediff/contentdiff.py - Directory tree differ content comparison
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Content comparison for paths present in both trees.
"""
from typing import NamedTuple, Optional
import logging
import stat
import os

from ._treediff import TREEDIFF_SUBSYSTEM_ENGINE
from .difftypes import ContentStatus

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Read size for content comparison
_CHUNK_SIZE = 65536


def _log_debug_engine(msg, *args, **kwargs):
    """A wrapper for engine subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": TREEDIFF_SUBSYSTEM_ENGINE}, **kwargs)


def type_desc(mode: int) -> str:
    """
    Return a string description of the file type encoded in ``mode``.

    :param mode: An ``st_mode`` value.
    :type mode: ``int``
    :returns: A string description of the entry type.
    :rtype: ``str``
    """
    desc = "other"
    if stat.S_ISREG(mode):
        desc = "file"
    elif stat.S_ISDIR(mode):
        desc = "directory"
    elif stat.S_ISLNK(mode):
        desc = "symbolic link"
    elif stat.S_ISBLK(mode):
        desc = "block device"
    elif stat.S_ISCHR(mode):
        desc = "char device"
    elif stat.S_ISSOCK(mode):
        desc = "socket"
    elif stat.S_ISFIFO(mode):
        desc = "FIFO"
    return desc


class ContentResult(NamedTuple):
    """
    The outcome of comparing one common path.
    """

    #: The content comparison verdict
    status: ContentStatus
    #: Failure or type change description, if any
    reason: Optional[str] = None


class ContentComparator:
    """
    Compare the content found at the same relative path below two roots.
    """

    def __init__(self, source_root: str, target_root: str):
        """
        Initialise a new ``ContentComparator``.

        :param source_root: The source tree root.
        :type source_root: ``str``
        :param target_root: The target tree root.
        :type target_root: ``str``
        """
        self.source_root = source_root
        self.target_root = target_root

    @staticmethod
    def _same_content(source_path: str, target_path: str) -> bool:
        """
        Compare two regular files byte for byte.

        :param source_path: The first file to compare.
        :type source_path: ``str``
        :param target_path: The second file to compare.
        :type target_path: ``str``
        :returns: ``True`` if the files have identical content.
        :rtype: ``bool``
        :raises: ``OSError`` if either file cannot be read.
        """
        with open(source_path, "rb") as src, open(target_path, "rb") as tgt:
            while True:
                src_chunk = src.read(_CHUNK_SIZE)
                tgt_chunk = tgt.read(_CHUNK_SIZE)
                if src_chunk != tgt_chunk:
                    return False
                if not src_chunk:
                    return True

    def compare(self, path: str) -> ContentResult:
        """
        Compare the content of ``path`` below both roots.

        A path that is a regular file on exactly one side is a type change
        and is always ``CHANGED``. Two regular files are compared byte for
        byte. Paths that are not regular files on either side are not
        compared. Errors produce ``COMPARE_FAILED`` with the error text as
        the reason.

        :param path: The relative path to compare.
        :type path: ``str``
        :returns: The comparison result.
        :rtype: ``ContentResult``
        """
        source_path = os.path.join(self.source_root, path)
        target_path = os.path.join(self.target_root, path)

        try:
            source_mode = os.lstat(source_path).st_mode
            target_mode = os.lstat(target_path).st_mode
        except OSError as err:
            _log_warn("Cannot compare '%s': %s", path, err)
            return ContentResult(ContentStatus.COMPARE_FAILED, str(err))

        source_is_file = stat.S_ISREG(source_mode)
        target_is_file = stat.S_ISREG(target_mode)

        if source_is_file != target_is_file:
            reason = f"{type_desc(source_mode)} -> {type_desc(target_mode)}"
            _log_debug_engine("Type change at '%s': %s", path, reason)
            return ContentResult(ContentStatus.CHANGED, reason)

        if not source_is_file:
            return ContentResult(ContentStatus.NOT_COMPARED)

        try:
            if os.path.getsize(source_path) != os.path.getsize(target_path):
                _log_debug_engine("Size differs for '%s'", path)
                return ContentResult(ContentStatus.CHANGED)
            same = self._same_content(source_path, target_path)
        except OSError as err:
            _log_warn("Cannot compare '%s': %s", path, err)
            return ContentResult(ContentStatus.COMPARE_FAILED, str(err))

        _log_debug_engine("Content %s for '%s'", "same" if same else "differs", path)
        return ContentResult(
            ContentStatus.UNCHANGED if same else ContentStatus.CHANGED
        )
