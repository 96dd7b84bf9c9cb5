# Copyright Red Hat
#
# treediff/options.py - Directory tree differ options
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Directory tree comparison options.
"""
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple, Union
from argparse import Namespace
import logging

from ._treediff import TreeDiffArgumentError

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


@dataclass(frozen=True)
class DiffOptions:
    """
    Directory tree comparison options.
    """

    #: Maximum listing depth below each root (``None`` for unbounded)
    depth: Optional[int] = None
    #: Compare the content of paths present in both trees
    compare_content: bool = False
    #: Hide entries common to both trees from rendered output
    quiet: bool = False
    #: Annotate common entries with file type information using magic
    use_magic_file_type: bool = False
    #: Worker threads used for listing and content comparison
    jobs: int = 1
    #: File patterns to exclude (glob notation)
    exclude_patterns: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """
        Validate option values.

        :raises: ``TreeDiffArgumentError`` if a value is out of range.
        """
        if self.depth is not None and self.depth < 1:
            raise TreeDiffArgumentError(
                f"Invalid depth: {self.depth} (depth must be at least 1)"
            )
        if self.jobs < 1:
            raise TreeDiffArgumentError(
                f"Invalid jobs: {self.jobs} (jobs must be at least 1)"
            )

    def __str__(self):
        """
        Return a human readable string representation of this
        ``DiffOptions`` instance.

        :returns: A human readable string.
        :rtype: ``str``
        """
        items = [
            (key, val) if not isinstance(val, tuple) else (key, " ".join(val))
            for key, val in self.__dict__.items()
        ]
        return "\n".join(f"{key}={val}" for key, val in items)

    @classmethod
    def from_cmd_args(cls, cmd_args: Namespace) -> "DiffOptions":
        """
        Initialise DiffOptions from command line arguments.

        Construct a new ``DiffOptions`` object from the command line
        arguments in ``cmd_args``.

        :param cmd_args: The command line arguments.
        :type cmd_args: ``Namespace``
        :returns: A new ``DiffOptions`` instance
        :rtype: ``DiffOptions``
        """

        def get_value(name: str) -> Union[bool, int, None, Tuple[str, ...]]:
            """
            Get a value from ``cmd_args``, converting lists to tuples.

            :param name: The name of the argument.
            :type name: ``str``
            :returns: The argument converted to a tuple if appropriate.
            :rtype: ``Union[bool, int, None, Tuple[str, ...]]``
            """
            attr = getattr(cmd_args, name)
            if isinstance(attr, list):
                return tuple(attr)
            if attr is None and name == "exclude_patterns":
                return ()
            return attr

        field_names = {f.name for f in fields(cls)}
        kwargs = {
            name: get_value(name) for name in field_names if hasattr(cmd_args, name)
        }
        if kwargs.get("jobs") is None:
            kwargs.pop("jobs", None)
        options = cls(**kwargs)
        _log_debug("Initialised DiffOptions from arguments: %s", repr(options))
        return options
