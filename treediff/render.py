# Copyright Red Hat
#
# treediff/render.py - Directory tree differ output rendering
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Rendering of ``DiffResults`` for terminal output.
"""
from typing import List, Optional

from .difftypes import ContentStatus, DiffType
from .engine import DiffEntry, DiffResults
from .term import TermControl

#: Output formats understood by ``render()``
OUTPUT_FORMATS = ["diff", "json", "paths"]

_STATUS_PREFIXES = {
    ContentStatus.NOT_COMPARED: " ",
    ContentStatus.UNCHANGED: " ",
    ContentStatus.CHANGED: "~ ",
    ContentStatus.COMPARE_FAILED: "! ",
}


def render_entry(entry: DiffEntry, tc: Optional[TermControl] = None) -> str:
    """
    Render a single ``DiffEntry`` as one output line.

    :param entry: The entry to render.
    :type entry: ``DiffEntry``
    :param tc: An optional ``TermControl`` instance to use for rendering
               color output.
    :type tc: ``Optional[TermControl]``
    :returns: The rendered line without a trailing newline.
    :rtype: ``str``
    """
    color = ""
    if entry.diff_type == DiffType.REMOVED:
        prefix = "- "
        color = tc.RED if tc else ""
    elif entry.diff_type == DiffType.ADDED:
        prefix = "+ "
        color = tc.GREEN if tc else ""
    else:
        prefix = _STATUS_PREFIXES[entry.content_status]
        if tc and entry.content_status == ContentStatus.CHANGED:
            color = tc.YELLOW
        elif tc and entry.content_status == ContentStatus.COMPARE_FAILED:
            color = tc.MAGENTA

    if color:
        return f"{color}{prefix}{entry.path}{tc.NORMAL}"
    return f"{prefix}{entry.path}"


def render_diff(
    results: DiffResults,
    quiet: bool = False,
    term_control: Optional[TermControl] = None,
) -> List[str]:
    """
    Render the entries of ``results`` as a list of lines.

    :param results: The results to render.
    :type results: ``DiffResults``
    :param quiet: Omit entries common to both trees.
    :type quiet: ``bool``
    :param term_control: An optional ``TermControl`` instance to use for
                         rendering color output.
    :type term_control: ``Optional[TermControl]``
    :rtype: ``List[str]``
    """
    return [
        render_entry(entry, term_control)
        for entry in results
        if not (quiet and entry.diff_type == DiffType.COMMON)
    ]


def render_summary(
    results: DiffResults, quiet: bool = False, compare_content: bool = False
) -> str:
    """
    Render the one-line summary of ``results``.

    Removed and added counts are always present. The common count and
    content comparison counts are omitted when ``quiet`` is set. A count of
    failed comparisons is appended whenever one or more comparisons failed.

    :param results: The results to summarize.
    :type results: ``DiffResults``
    :param quiet: Omit counts of entries common to both trees.
    :type quiet: ``bool``
    :param compare_content: Include content comparison counts.
    :type compare_content: ``bool``
    :returns: The summary line.
    :rtype: ``str``
    """
    counts = results.counts()
    parts = [f"{counts['removed']} removed", f"{counts['added']} added"]
    if not quiet:
        parts.append(f"{counts['common']} similar")
        if compare_content:
            parts.append(f"{counts['unchanged']} files unchanged")
            parts.append(f"{counts['changed']} files changed")
    if compare_content and counts["failed"]:
        parts.append(f"{counts['failed']} files failed")
    return ", ".join(parts)


def render_paths(results: DiffResults) -> List[str]:
    """
    Return the paths that differ between the two trees.

    :param results: The results to render.
    :type results: ``DiffResults``
    :returns: Removed, added and changed paths in merge order.
    :rtype: ``List[str]``
    """
    return [
        entry.path
        for entry in results
        if entry.diff_type != DiffType.COMMON or entry.changed
    ]


def render(
    results: DiffResults,
    output_format: str = "diff",
    pretty: bool = False,
    term_control: Optional[TermControl] = None,
) -> str:
    """
    Render ``results`` in ``output_format``.

    :param results: The results to render.
    :type results: ``DiffResults``
    :param output_format: One of ``OUTPUT_FORMATS``.
    :type output_format: ``str``
    :param pretty: Indent JSON output.
    :type pretty: ``bool``
    :param term_control: An optional ``TermControl`` instance to use for
                         rendering color output.
    :type term_control: ``Optional[TermControl]``
    :returns: The rendered output.
    :rtype: ``str``
    """
    options = results.options
    if output_format == "json":
        return results.json(pretty=pretty)
    if output_format == "paths":
        return "\n".join(render_paths(results))
    if output_format != "diff":
        raise ValueError(f"Unknown output format: {output_format}")

    lines = render_diff(results, quiet=options.quiet, term_control=term_control)
    lines.append(
        render_summary(
            results, quiet=options.quiet, compare_content=options.compare_content
        )
    )
    return "\n".join(lines)
