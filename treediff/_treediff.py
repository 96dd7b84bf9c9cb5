# Copyright Red Hat
#
# treediff/_treediff.py - Directory tree differ global definitions
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Global definitions for the top-level treediff package.
"""
from typing import Optional, TextIO
import logging
import sys

__version__ = "0.1.0"

_log = logging.getLogger("treediff")

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Treediff debugging subsystem mask
TREEDIFF_DEBUG_LISTER = 1
TREEDIFF_DEBUG_ENGINE = 2
TREEDIFF_DEBUG_COMMAND = 4
TREEDIFF_DEBUG_ALL = TREEDIFF_DEBUG_LISTER | TREEDIFF_DEBUG_ENGINE | TREEDIFF_DEBUG_COMMAND

# Treediff debugging subsystem names
TREEDIFF_SUBSYSTEM_LISTER = "treediff.lister"
TREEDIFF_SUBSYSTEM_ENGINE = "treediff.engine"
TREEDIFF_SUBSYSTEM_COMMAND = "treediff.command"

_DEBUG_MASK_TO_SUBSYSTEM = {
    TREEDIFF_DEBUG_LISTER: TREEDIFF_SUBSYSTEM_LISTER,
    TREEDIFF_DEBUG_ENGINE: TREEDIFF_SUBSYSTEM_ENGINE,
    TREEDIFF_DEBUG_COMMAND: TREEDIFF_SUBSYSTEM_COMMAND,
}

_debug_subsystems = set()


class SubsystemFilter(logging.Filter):
    """
    Filters DEBUG records based on a set of enabled subsystem names.
    Non-DEBUG records or DEBUG records without a 'subsystem' attribute
    are always passed through.
    """

    def __init__(self, name=""):
        super().__init__(name)
        self.enabled_subsystems = set(_debug_subsystems)

    def filter(self, record):
        if record.levelno != logging.DEBUG:
            return True

        if not hasattr(record, "subsystem"):
            return True

        return record.subsystem in self.enabled_subsystems

    def set_debug_subsystems(self, subsystems):
        """Sets the collection of subsystems to allow."""
        self.enabled_subsystems = set(subsystems)


def get_debug_mask():
    """
    Return the current debug mask for the ``treediff`` package.

    :returns: The current debug mask value
    :rtype: int
    """
    enabled_subsystems = set(_debug_subsystems)
    treediff_log = logging.getLogger("treediff")

    for handler in treediff_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                enabled_subsystems.update(f.enabled_subsystems)

    mask_map = {v: k for k, v in _DEBUG_MASK_TO_SUBSYSTEM.items()}
    mask = 0
    for subsystem_name in enabled_subsystems:
        mask |= mask_map.get(subsystem_name, 0)
    return mask


def set_debug_mask(mask):
    """
    Set the debug mask for the ``treediff`` package.

    :param mask: the logical OR of the ``TREEDIFF_DEBUG_*``
                 values to log.
    :rtype: None
    """
    # pylint: disable=global-statement
    global _debug_subsystems

    if mask < 0 or mask > TREEDIFF_DEBUG_ALL:
        raise ValueError(f"Invalid treediff debug mask: {mask}")

    enabled_subsystems = [
        subsystem_name
        for flag, subsystem_name in _DEBUG_MASK_TO_SUBSYSTEM.items()
        if mask & flag
    ]

    treediff_log = logging.getLogger("treediff")
    for handler in treediff_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                f.set_debug_subsystems(enabled_subsystems)

    _debug_subsystems = set(enabled_subsystems)


class StderrHandler(logging.StreamHandler):
    """
    A logging handler bound to ``sys.stderr`` at emit time.

    Looking the stream up on each record keeps diagnostics on the current
    ``sys.stderr`` even if it is replaced after logging is configured.
    """

    def __init__(self, stream: Optional[TextIO] = None, **kwargs):
        super().__init__(stream=stream, **kwargs)
        self._fixed_stream = stream is not None

    def emit(self, record):
        if not self._fixed_stream:
            self.stream = sys.stderr
        super().emit(record)


#
# Treediff exception types
#


class TreeDiffError(Exception):
    """
    Base class for directory tree differ errors.
    """


class TreeDiffPathError(TreeDiffError):
    """
    An invalid path was supplied, for example a tree root that does not
    exist or is not a directory.
    """


class TreeDiffArgumentError(TreeDiffError):
    """
    An invalid argument was passed to a treediff API call.
    """


__all__ = [
    "__version__",
    # Debug logging - subsystem name interface
    "SubsystemFilter",
    "TREEDIFF_SUBSYSTEM_LISTER",
    "TREEDIFF_SUBSYSTEM_ENGINE",
    "TREEDIFF_SUBSYSTEM_COMMAND",
    # Debug logging - mask interface
    "TREEDIFF_DEBUG_LISTER",
    "TREEDIFF_DEBUG_ENGINE",
    "TREEDIFF_DEBUG_COMMAND",
    "TREEDIFF_DEBUG_ALL",
    "set_debug_mask",
    "get_debug_mask",
    "StderrHandler",
    "TreeDiffError",
    "TreeDiffPathError",
    "TreeDiffArgumentError",
]
