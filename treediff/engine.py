# Copyright Red Hat
#
# treediff/engine.py - Directory tree differ diff engine
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Directory tree diff engine
"""
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
import logging
import json
import os

from ._treediff import TREEDIFF_SUBSYSTEM_ENGINE
from .contentdiff import ContentComparator, ContentResult
from .difftypes import ContentStatus, DiffType
from .filetypes import FileTypeDetector, FileTypeInfo
from .lister import ListingError
from .options import DiffOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_engine(msg, *args, **kwargs):
    """A wrapper for engine subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": TREEDIFF_SUBSYSTEM_ENGINE}, **kwargs)


class DiffEntry:
    """
    A single classified path in a tree comparison.
    """

    __slots__ = (
        "path",
        "diff_type",
        "content_status",
        "reason",
        "source_type",
        "target_type",
    )

    def __init__(
        self,
        path: str,
        diff_type: DiffType,
        content_status: ContentStatus = ContentStatus.NOT_COMPARED,
        reason: Optional[str] = None,
        source_type: Optional[FileTypeInfo] = None,
        target_type: Optional[FileTypeInfo] = None,
    ):
        """
        Initialise a new ``DiffEntry`` object.

        :param path: The relative path for this entry.
        :type path: ``str``
        :param diff_type: The relation of ``path`` to the two listings.
        :type diff_type: ``DiffType``
        :param content_status: The content comparison verdict. Always
                               ``NOT_COMPARED`` for removed and added paths.
        :type content_status: ``ContentStatus``
        :param reason: Description of a comparison failure or type change.
        :type reason: ``Optional[str]``
        :param source_type: Optional file type of the source path.
        :type source_type: ``Optional[FileTypeInfo]``
        :param target_type: Optional file type of the target path.
        :type target_type: ``Optional[FileTypeInfo]``
        """
        if diff_type != DiffType.COMMON and content_status != ContentStatus.NOT_COMPARED:
            raise ValueError(
                f"Content status {content_status.value} is only valid for common paths"
            )
        self.path = path
        self.diff_type = diff_type
        self.content_status = content_status
        self.reason = reason
        self.source_type = source_type
        self.target_type = target_type

    def __repr__(self) -> str:
        return (
            f"DiffEntry({self.path!r}, {self.diff_type}, {self.content_status}, "
            f"{self.reason!r})"
        )

    def __str__(self) -> str:
        """
        Return a string representation of this ``DiffEntry`` object.

        :returns: A human readable representation of this ``DiffEntry``.
        :rtype: ``str``
        """
        reason = f"\n  reason: {self.reason}" if self.reason else ""
        return (
            f"Path: {self.path}\n"
            f"  diff_type: {self.diff_type.value}\n"
            f"  content_status: {self.content_status.value}"
            f"{reason}"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiffEntry):
            return NotImplemented
        return (
            self.path == other.path
            and self.diff_type == other.diff_type
            and self.content_status == other.content_status
            and self.reason == other.reason
        )

    def __hash__(self):
        return hash((self.path, self.diff_type, self.content_status, self.reason))

    @property
    def changed(self) -> bool:
        """
        ``True`` if this entry is a common path whose content differs.
        """
        return self.content_status == ContentStatus.CHANGED

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``DiffEntry`` object into a dictionary representation
        suitable for encoding as JSON.

        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        out = {
            "path": self.path,
            "diff_type": self.diff_type.value,
            "content_status": self.content_status.value,
        }
        if self.reason:
            out["reason"] = self.reason
        if self.source_type:
            out["source_type"] = self.source_type.to_dict()
        if self.target_type:
            out["target_type"] = self.target_type.to_dict()
        return out


class DiffResults:
    """Container for directory tree diff results."""

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        entries: Iterable[DiffEntry],
        options: Optional[DiffOptions] = None,
        source_root: Optional[str] = None,
        target_root: Optional[str] = None,
        errors: Optional[Sequence[ListingError]] = None,
    ):
        self._entries = tuple(entries)
        self.options = options or DiffOptions()
        self.source_root = source_root
        self.target_root = target_root
        self.errors = tuple(errors or ())

    def __repr__(self) -> str:
        """
        Return a machine-readable representation of this instance.

        :returns: ``DiffResults`` constructor style string.
        :rtype: ``str``
        """
        return (
            f"DiffResults([...], {self.options!r}, "
            f"{self.source_root!r}, {self.target_root!r})"
        )

    # List-like interface
    def __iter__(self) -> Iterator[DiffEntry]:
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __getitem__(self, index: int) -> DiffEntry:
        return self._entries[index]

    def _with_type(self, diff_type: DiffType) -> List[DiffEntry]:
        return [e for e in self._entries if e.diff_type == diff_type]

    def _with_status(self, status: ContentStatus) -> List[DiffEntry]:
        return [
            e
            for e in self._entries
            if e.diff_type == DiffType.COMMON and e.content_status == status
        ]

    @property
    def removed(self) -> List[DiffEntry]:
        """
        Return entries only present in the source tree.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_type(DiffType.REMOVED)

    @property
    def added(self) -> List[DiffEntry]:
        """
        Return entries only present in the target tree.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_type(DiffType.ADDED)

    @property
    def common(self) -> List[DiffEntry]:
        """
        Return entries present in both trees.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_type(DiffType.COMMON)

    @property
    def unchanged(self) -> List[DiffEntry]:
        """
        Return common entries with identical content.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_status(ContentStatus.UNCHANGED)

    @property
    def changed(self) -> List[DiffEntry]:
        """
        Return common entries with different content or type.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_status(ContentStatus.CHANGED)

    @property
    def failed(self) -> List[DiffEntry]:
        """
        Return common entries whose content could not be compared.

        :rtype: ``List[DiffEntry]``
        """
        return self._with_status(ContentStatus.COMPARE_FAILED)

    def counts(self) -> Dict[str, int]:
        """
        Return the aggregate counts for this ``DiffResults`` instance.

        :returns: A dictionary mapping count names to values.
        :rtype: ``Dict[str, int]``
        """
        counts = {
            "removed": 0,
            "added": 0,
            "common": 0,
            "unchanged": 0,
            "changed": 0,
            "failed": 0,
        }
        for entry in self._entries:
            counts[entry.diff_type.value] += 1
            if entry.content_status == ContentStatus.UNCHANGED:
                counts["unchanged"] += 1
            elif entry.content_status == ContentStatus.CHANGED:
                counts["changed"] += 1
            elif entry.content_status == ContentStatus.COMPARE_FAILED:
                counts["failed"] += 1
        return counts

    def paths(self) -> List[str]:
        """
        Return the list of paths in this ``DiffResults`` in merge order.

        :rtype: ``List[str]``
        """
        return [entry.path for entry in self._entries]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``DiffResults`` into a dictionary representation
        suitable for encoding as JSON.

        :rtype: ``Dict[str, Any]``
        """
        return {
            "source": self.source_root,
            "target": self.target_root,
            "entries": [entry.to_dict() for entry in self._entries],
            "summary": self.counts(),
            "errors": [error.to_dict() for error in self.errors],
        }

    def json(self, pretty: bool = False) -> str:
        """
        Return a JSON representation of this ``DiffResults``.

        :param pretty: Indent JSON to be human readable.
        :type pretty: ``bool``
        :returns: A JSON string.
        :rtype: ``str``
        """
        return json.dumps(self.to_dict(), indent=4 if pretty else None)


def _ensure_sorted(listing: Sequence[str], name: str) -> List[str]:
    """
    Return ``listing`` as a strictly ascending list of paths.

    Already sorted input is returned unchanged; anything else is sorted and
    de-duplicated.

    :param listing: The listing to check.
    :type listing: ``Sequence[str]``
    :param name: The listing name for log messages.
    :type name: ``str``
    :rtype: ``List[str]``
    """
    paths = list(listing)
    if all(a < b for a, b in zip(paths, paths[1:])):
        return paths
    _log_debug_engine("Sorting unordered %s listing (%d paths)", name, len(paths))
    return sorted(set(paths))


class DiffEngine:
    """
    Core class for generating directory tree comparisons.
    """

    def __init__(self):
        """
        Initialise a new ``DiffEngine`` instance.
        """
        self.file_type_detector = FileTypeDetector()

    def _compare_content(
        self, comparator: ContentComparator, path: str, options: DiffOptions
    ) -> DiffEntry:
        """
        Build a common ``DiffEntry`` for ``path`` with a content verdict.

        :param comparator: The comparator bound to both roots.
        :type comparator: ``ContentComparator``
        :param path: The common relative path.
        :type path: ``str``
        :param options: Effective diff options.
        :type options: ``DiffOptions``
        :rtype: ``DiffEntry``
        """
        result: ContentResult = comparator.compare(path)
        source_type = target_type = None
        if options.use_magic_file_type:
            source_type = self.file_type_detector.detect_file_type(
                Path(comparator.source_root, path)
            )
            target_type = self.file_type_detector.detect_file_type(
                Path(comparator.target_root, path)
            )
        return DiffEntry(
            path,
            DiffType.COMMON,
            result.status,
            result.reason,
            source_type=source_type,
            target_type=target_type,
        )

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    # pylint: disable=too-many-locals
    def compute_diff(
        self,
        source: Sequence[str],
        target: Sequence[str],
        source_root: Optional[str] = None,
        target_root: Optional[str] = None,
        options: Optional[DiffOptions] = None,
    ) -> DiffResults:
        """
        Merge two directory listings into a classified diff.

        Both listings are walked once with a cursor each: a source path that
        sorts first is removed, a target path that sorts first is added and
        equal paths are common. When one listing is exhausted the remainder
        of the other is drained in order.

        Content comparison of common paths is performed only when
        ``options.compare_content`` is set and both roots are given.

        :param source: The source listing of relative paths.
        :type source: ``Sequence[str]``
        :param target: The target listing of relative paths.
        :type target: ``Sequence[str]``
        :param source_root: The source tree root for content comparison.
        :type source_root: ``Optional[str]``
        :param target_root: The target tree root for content comparison.
        :type target_root: ``Optional[str]``
        :param options: Options to apply to the diff generation.
        :type options: ``Optional[DiffOptions]``
        :returns: A ``DiffResults`` instance containing ``DiffEntry``
                  objects in merge order.
        :rtype: ``DiffResults``
        """
        options = options or DiffOptions()
        source = _ensure_sorted(source, "source")
        target = _ensure_sorted(target, "target")

        _log_debug(
            "Starting compute_diff with %d source and %d target paths",
            len(source),
            len(target),
        )
        start_time = datetime.now()

        entries: List[DiffEntry] = []
        common_slots: List[int] = []
        src_idx = 0
        tgt_idx = 0
        while src_idx < len(source) and tgt_idx < len(target):
            src_path = source[src_idx]
            tgt_path = target[tgt_idx]
            if src_path < tgt_path:
                entries.append(DiffEntry(src_path, DiffType.REMOVED))
                src_idx += 1
            elif src_path > tgt_path:
                entries.append(DiffEntry(tgt_path, DiffType.ADDED))
                tgt_idx += 1
            else:
                common_slots.append(len(entries))
                entries.append(DiffEntry(src_path, DiffType.COMMON))
                src_idx += 1
                tgt_idx += 1

        entries.extend(DiffEntry(path, DiffType.REMOVED) for path in source[src_idx:])
        entries.extend(DiffEntry(path, DiffType.ADDED) for path in target[tgt_idx:])

        compare = options.compare_content and source_root and target_root
        if options.compare_content and not compare:
            _log_warn("Content comparison requested without tree roots: skipping")

        if compare and common_slots:
            comparator = ContentComparator(source_root, target_root)
            common_paths = [entries[slot].path for slot in common_slots]

            def _compare(path: str) -> DiffEntry:
                return self._compare_content(comparator, path, options)

            _log_debug_engine(
                "Comparing content of %d common paths (jobs=%d)",
                len(common_paths),
                options.jobs,
            )
            if options.jobs > 1:
                with ThreadPoolExecutor(max_workers=options.jobs) as executor:
                    compared = list(executor.map(_compare, common_paths))
            else:
                compared = [_compare(path) for path in common_paths]

            for slot, entry in zip(common_slots, compared):
                entries[slot] = entry

        end_time = datetime.now()
        _log_debug_engine(
            "Computed diff of %d entries in %s", len(entries), end_time - start_time
        )
        return DiffResults(
            entries,
            options,
            source_root=os.fspath(source_root) if source_root else None,
            target_root=os.fspath(target_root) if target_root else None,
        )
