# Copyright Red Hat
#
# tests/test_render.py - Output rendering tests.
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
from unittest.mock import patch
import curses
import json

from treediff.difftypes import ContentStatus, DiffType
from treediff.engine import DiffEntry, DiffResults
from treediff.options import DiffOptions
from treediff.render import (
    OUTPUT_FORMATS,
    render,
    render_diff,
    render_entry,
    render_paths,
    render_summary,
)
from treediff.term import TermControl

_ENTRIES = [
    DiffEntry("a.txt", DiffType.REMOVED),
    DiffEntry("b.txt", DiffType.COMMON, ContentStatus.UNCHANGED),
    DiffEntry("c.txt", DiffType.ADDED),
    DiffEntry("config", DiffType.COMMON, ContentStatus.CHANGED, "directory -> file"),
    DiffEntry("d", DiffType.COMMON),
    DiffEntry("e", DiffType.COMMON, ContentStatus.COMPARE_FAILED, "Permission denied"),
]


def _color_term():
    with patch("treediff.term.curses.setupterm", side_effect=curses.error("x")):
        return TermControl(color="always")


class TestRenderEntry(unittest.TestCase):
    def test_prefixes(self):
        self.assertEqual(
            [render_entry(e) for e in _ENTRIES],
            ["- a.txt", " b.txt", "+ c.txt", "~ config", " d", "! e"],
        )

    def test_color(self):
        tc = _color_term()
        self.assertEqual(render_entry(_ENTRIES[0], tc), f"{tc.RED}- a.txt{tc.NORMAL}")
        self.assertEqual(render_entry(_ENTRIES[2], tc), f"{tc.GREEN}+ c.txt{tc.NORMAL}")
        self.assertEqual(
            render_entry(_ENTRIES[3], tc), f"{tc.YELLOW}~ config{tc.NORMAL}"
        )
        self.assertEqual(render_entry(_ENTRIES[5], tc), f"{tc.MAGENTA}! e{tc.NORMAL}")
        self.assertEqual(render_entry(_ENTRIES[1], tc), " b.txt")

    def test_color_disabled(self):
        tc = TermControl(color="never")
        self.assertEqual(render_entry(_ENTRIES[0], tc), "- a.txt")


class TestRenderResults(unittest.TestCase):
    def setUp(self):
        self.results = DiffResults(_ENTRIES, DiffOptions(compare_content=True))

    def test_render_diff_quiet(self):
        self.assertEqual(
            render_diff(self.results, quiet=True), ["- a.txt", "+ c.txt"]
        )

    def test_render_summary(self):
        self.assertEqual(render_summary(self.results), "1 removed, 1 added, 4 similar")

    def test_render_summary_content(self):
        self.assertEqual(
            render_summary(self.results, compare_content=True),
            "1 removed, 1 added, 4 similar, 1 files unchanged, "
            "1 files changed, 1 files failed",
        )

    def test_render_summary_quiet(self):
        self.assertEqual(
            render_summary(self.results, quiet=True, compare_content=True),
            "1 removed, 1 added, 1 files failed",
        )

    def test_render_summary_no_failures(self):
        results = DiffResults(_ENTRIES[:5])
        self.assertEqual(
            render_summary(results, compare_content=True),
            "1 removed, 1 added, 3 similar, 1 files unchanged, 1 files changed",
        )

    def test_render_paths(self):
        self.assertEqual(render_paths(self.results), ["a.txt", "c.txt", "config"])

    def test_render_diff_format(self):
        out = render(self.results)
        self.assertEqual(
            out.splitlines(),
            [
                "- a.txt",
                " b.txt",
                "+ c.txt",
                "~ config",
                " d",
                "! e",
                "1 removed, 1 added, 4 similar, 1 files unchanged, "
                "1 files changed, 1 files failed",
            ],
        )

    def test_render_diff_format_quiet_options(self):
        results = DiffResults(_ENTRIES[:3], DiffOptions(quiet=True))
        self.assertEqual(render(results), "- a.txt\n+ c.txt\n1 removed, 1 added")

    def test_render_json(self):
        data = json.loads(render(self.results, output_format="json"))
        self.assertEqual([e["path"] for e in data["entries"]], [e.path for e in _ENTRIES])
        self.assertNotIn("\n", render(self.results, output_format="json"))
        self.assertIn("\n", render(self.results, output_format="json", pretty=True))

    def test_render_paths_format(self):
        self.assertEqual(
            render(self.results, output_format="paths"), "a.txt\nc.txt\nconfig"
        )

    def test_render_unknown_format(self):
        with self.assertRaises(ValueError):
            render(self.results, output_format="yaml")

    def test_output_formats(self):
        self.assertEqual(OUTPUT_FORMATS[0], "diff")

    def test_render_empty(self):
        self.assertEqual(render(DiffResults([])), "0 removed, 0 added, 0 similar")
