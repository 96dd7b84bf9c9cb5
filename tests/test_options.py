# Copyright Red Hat
#
# tests/test_options.py - Diff options tests.
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
import dataclasses
import unittest

from treediff import TreeDiffArgumentError, TreeDiffError
from treediff.options import DiffOptions

from tests import MockArgs


class TestDiffOptions(unittest.TestCase):
    def test_defaults(self):
        opts = DiffOptions()
        self.assertIsNone(opts.depth)
        self.assertFalse(opts.compare_content)
        self.assertFalse(opts.quiet)
        self.assertFalse(opts.use_magic_file_type)
        self.assertEqual(opts.jobs, 1)
        self.assertEqual(opts.exclude_patterns, ())

    def test_frozen(self):
        opts = DiffOptions()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            opts.depth = 2

    def test_depth_zero(self):
        with self.assertRaises(TreeDiffArgumentError):
            DiffOptions(depth=0)

    def test_depth_negative(self):
        with self.assertRaises(TreeDiffError):
            DiffOptions(depth=-3)

    def test_depth_one(self):
        self.assertEqual(DiffOptions(depth=1).depth, 1)

    def test_jobs_zero(self):
        with self.assertRaises(TreeDiffArgumentError):
            DiffOptions(jobs=0)

    def test__str__(self):
        opts = DiffOptions(depth=2, exclude_patterns=("*.o", "*.pyc"))
        s = str(opts)
        self.assertIn("depth=2", s)
        self.assertIn("exclude_patterns=*.o *.pyc", s)
        self.assertIn("jobs=1", s)

    def test_from_cmd_args_defaults(self):
        opts = DiffOptions.from_cmd_args(MockArgs())
        self.assertEqual(opts, DiffOptions())

    def test_from_cmd_args(self):
        args = MockArgs()
        args.depth = 3
        args.quiet = True
        args.compare_content = True
        args.exclude_patterns = ["*.o", "build"]
        args.use_magic_file_type = True
        args.jobs = 4
        opts = DiffOptions.from_cmd_args(args)
        self.assertEqual(
            opts,
            DiffOptions(
                depth=3,
                compare_content=True,
                quiet=True,
                use_magic_file_type=True,
                jobs=4,
                exclude_patterns=("*.o", "build"),
            ),
        )

    def test_from_cmd_args_invalid_depth(self):
        args = MockArgs()
        args.depth = 0
        with self.assertRaises(TreeDiffArgumentError):
            DiffOptions.from_cmd_args(args)
