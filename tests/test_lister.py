# Copyright Red Hat
#
# tests/test_lister.py - Tree lister tests.
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
from unittest.mock import patch
import tempfile
import os

from treediff.lister import DirListing, ListingError, TreeLister, _error_message
from treediff.options import DiffOptions

from ._util import make_tree

_ENTRIES = {
    "b.txt": "b",
    "a": None,
    "a/x.txt": "x",
    "a/deep": None,
    "a/deep/y.txt": "y",
    "c": None,
}

_ALL_PATHS = [
    "a",
    os.path.join("a", "deep"),
    os.path.join("a", "deep", "y.txt"),
    os.path.join("a", "x.txt"),
    "b.txt",
    "c",
]


class TestTreeLister(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.root = make_tree(self.tmp_dir.name, _ENTRIES)

    def test_list_tree_unbounded(self):
        listing = TreeLister().list_tree(self.root)
        self.assertEqual(listing.paths, _ALL_PATHS)
        self.assertEqual(listing.errors, [])
        self.assertEqual(len(listing), len(_ALL_PATHS))

    def test_list_tree_sorted(self):
        listing = TreeLister().list_tree(self.root)
        self.assertEqual(listing.paths, sorted(listing.paths))

    def test_list_tree_depth_one(self):
        listing = TreeLister(DiffOptions(depth=1)).list_tree(self.root)
        self.assertEqual(listing.paths, ["a", "b.txt", "c"])

    def test_list_tree_depth_two(self):
        listing = TreeLister(DiffOptions(depth=2)).list_tree(self.root)
        self.assertEqual(
            listing.paths,
            ["a", os.path.join("a", "deep"), os.path.join("a", "x.txt"), "b.txt", "c"],
        )

    def test_list_tree_depth_larger_than_tree(self):
        listing = TreeLister(DiffOptions(depth=10)).list_tree(self.root)
        self.assertEqual(listing.paths, _ALL_PATHS)

    def test_list_tree_empty_dir(self):
        with tempfile.TemporaryDirectory() as empty:
            listing = TreeLister().list_tree(empty)
            self.assertEqual(listing.paths, [])
            self.assertEqual(listing.errors, [])

    def test_list_tree_canonical_root(self):
        """Relative and dotted roots produce the same listing."""
        dotted = os.path.join(self.root, "a", "..")
        listing = TreeLister().list_tree(dotted)
        self.assertEqual(listing.root, os.path.realpath(self.root))
        self.assertEqual(listing.paths, _ALL_PATHS)

        cwd = os.getcwd()
        self.addCleanup(os.chdir, cwd)
        os.chdir(self.root)
        listing = TreeLister().list_tree(".")
        self.assertEqual(listing.paths, _ALL_PATHS)

    def test_list_tree_symlinked_root(self):
        with tempfile.TemporaryDirectory() as link_dir:
            link = os.path.join(link_dir, "link")
            os.symlink(self.root, link)
            listing = TreeLister().list_tree(link)
            self.assertEqual(listing.root, os.path.realpath(self.root))
            self.assertEqual(listing.paths, _ALL_PATHS)

    def test_list_tree_symlink_not_followed(self):
        os.symlink(os.path.join(self.root, "a"), os.path.join(self.root, "link"))
        listing = TreeLister().list_tree(self.root)
        self.assertIn("link", listing.paths)
        self.assertFalse(
            any(p.startswith("link" + os.sep) for p in listing.paths)
        )

    def test_list_tree_hidden_files(self):
        make_tree(self.root, {".hidden": "h"})
        listing = TreeLister().list_tree(self.root)
        self.assertIn(".hidden", listing.paths)

    def test_list_tree_exclude_patterns(self):
        opts = DiffOptions(exclude_patterns=("*.txt",))
        listing = TreeLister(opts).list_tree(self.root)
        self.assertEqual(listing.paths, ["a", os.path.join("a", "deep"), "c"])

    def test_list_tree_exclude_directory_not_descended(self):
        opts = DiffOptions(exclude_patterns=("deep",))
        listing = TreeLister(opts).list_tree(self.root)
        self.assertNotIn(os.path.join("a", "deep"), listing.paths)
        self.assertNotIn(os.path.join("a", "deep", "y.txt"), listing.paths)
        self.assertIn(os.path.join("a", "x.txt"), listing.paths)

    def test_list_tree_vanished_entry(self):
        """Entries that disappear before they are examined are skipped."""
        real_lstat = os.lstat
        vanished = os.path.join(os.path.realpath(self.root), "b.txt")

        def _lstat(path, *args, **kwargs):
            if path == vanished:
                raise FileNotFoundError(2, "No such file or directory", path)
            return real_lstat(path, *args, **kwargs)

        with patch("treediff.lister.os.lstat", side_effect=_lstat):
            listing = TreeLister().list_tree(self.root)

        self.assertNotIn("b.txt", listing.paths)
        self.assertIn("c", listing.paths)
        self.assertEqual(
            listing.errors, [ListingError("b.txt", "No such file or directory")]
        )

    def test_list_tree_unreadable_directory(self):
        """A directory that cannot be read is listed but not expanded."""
        real_scandir = os.scandir
        unreadable = os.path.join(os.path.realpath(self.root), "a")

        def _scandir(path=".", *args, **kwargs):
            if os.fspath(path) == unreadable:
                raise PermissionError(13, "Permission denied", unreadable)
            return real_scandir(path, *args, **kwargs)

        with patch("os.scandir", side_effect=_scandir):
            with self.assertLogs("treediff.lister", level="WARNING") as logs:
                listing = TreeLister().list_tree(self.root)

        self.assertEqual(listing.paths, ["a", "b.txt", "c"])
        self.assertEqual(listing.errors, [ListingError("a", "Permission denied")])
        self.assertIn("Permission denied", logs.output[0])

    def test_list_tree_idempotent(self):
        lister = TreeLister()
        self.assertEqual(
            lister.list_tree(self.root).paths, lister.list_tree(self.root).paths
        )


class TestDirListing(unittest.TestCase):
    def test_DirListing(self):
        listing = DirListing("/root", ["a", "b"])
        self.assertEqual(list(listing), ["a", "b"])
        self.assertEqual(listing.errors, [])
        self.assertIn("DirListing('/root'", repr(listing))

    def test_ListingError_to_dict(self):
        err = ListingError("a/b", "Permission denied")
        self.assertEqual(err.to_dict(), {"path": "a/b", "message": "Permission denied"})

    def test_error_message(self):
        self.assertEqual(
            _error_message(PermissionError(13, "Permission denied", "/x")),
            "Permission denied",
        )
        self.assertEqual(_error_message(OSError("boom")), "boom")
