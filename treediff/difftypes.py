# Copyright Red Hat
#
# treediff/difftypes.py - Directory tree differ diff types
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Directory tree diff types
"""
from enum import Enum


class DiffType(Enum):
    """
    Enum for the relation of a path to the two listings.
    """

    REMOVED = "removed"  # only in source
    ADDED = "added"  # only in target
    COMMON = "common"  # in both


class ContentStatus(Enum):
    """
    Enum for the content comparison verdict of a common path.
    """

    NOT_COMPARED = "not_compared"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    COMPARE_FAILED = "compare_failed"
