# Copyright Red Hat
#
# treediff/command.py - Directory tree differ command interface
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""The ``treediff.command`` module provides both the treediff command line
interface infrastructure, and a simple procedural interface to the
``treediff`` library modules.

The procedural interface is used by the ``treediff`` command line tool,
and may be used by application programs, or interactively in the
Python shell by users who do not require all the features present
in the treediff object API.
"""
from argparse import ArgumentParser
from os.path import basename
from typing import Optional
import logging
import sys

from ._treediff import (
    TREEDIFF_DEBUG_LISTER,
    TREEDIFF_DEBUG_ENGINE,
    TREEDIFF_DEBUG_COMMAND,
    TREEDIFF_DEBUG_ALL,
    TREEDIFF_SUBSYSTEM_COMMAND,
    SubsystemFilter,
    StderrHandler,
    TreeDiffError,
    TreeDiffArgumentError,
    set_debug_mask,
    __version__,
)
from .differ import TreeDiffer
from .engine import DiffResults
from .options import DiffOptions
from .render import OUTPUT_FORMATS, render
from .term import COLOR_MODES, TermControl

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_command(msg, *args, **kwargs):
    """A wrapper for command subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": TREEDIFF_SUBSYSTEM_COMMAND}, **kwargs)


_DEFAULT_LOG_LEVEL = logging.WARNING
_CONSOLE_HANDLER = None


def diff_trees(
    source_dir: str,
    target_dir: str,
    options: Optional[DiffOptions] = None,
) -> DiffResults:
    """
    Compare the directory trees at ``source_dir`` and ``target_dir``.

    :param source_dir: The source tree root.
    :type source_dir: ``str``
    :param target_dir: The target tree root.
    :type target_dir: ``str``
    :param options: Options for the comparison.
    :type options: ``Optional[DiffOptions]``
    :returns: The comparison results.
    :rtype: ``DiffResults``
    """
    differ = TreeDiffer(options)
    return differ.compare_roots(source_dir, target_dir)


def _diff_cmd(cmd_args):
    """
    Diff command handler.

    Compare two directory trees and print the result.

    :param cmd_args: Command line arguments for the command
    :returns: integer status code returned from ``main()``
    """
    output_format = cmd_args.output_format
    color = "never" if cmd_args.no_color else cmd_args.color

    if cmd_args.pretty and output_format != "json":
        _log_error("Option --pretty only supported with --output-format=json")
        return 1

    try:
        options = DiffOptions.from_cmd_args(cmd_args)
    except TreeDiffArgumentError as err:
        _log_error("%s", err)
        return 1

    try:
        results = diff_trees(cmd_args.source_dir, cmd_args.target_dir, options)
    except TreeDiffError as err:
        _log_error("%s", err)
        return 1

    _log_debug_command("Rendering %d entries as %s", len(results), output_format)
    print(
        render(
            results,
            output_format=output_format,
            pretty=cmd_args.pretty,
            term_control=TermControl(color=color),
        )
    )
    return 0


def setup_logging(cmd_args):
    """
    Set up treediff logging.
    """
    # pylint: disable=global-statement
    global _CONSOLE_HANDLER
    level = _DEFAULT_LOG_LEVEL
    if cmd_args.verbose and cmd_args.verbose > 1:
        level = logging.DEBUG
    elif cmd_args.verbose and cmd_args.verbose > 0:
        level = logging.INFO

    treediff_log = logging.getLogger("treediff")
    formatter = logging.Formatter("%(levelname)s - %(message)s")
    treediff_log.setLevel(level)
    if treediff_log.hasHandlers():
        treediff_log.handlers.clear()

    _treediff_subsystem_filter = SubsystemFilter("treediff")

    _CONSOLE_HANDLER = StderrHandler()
    _CONSOLE_HANDLER.setLevel(level)
    _CONSOLE_HANDLER.setFormatter(formatter)
    _CONSOLE_HANDLER.addFilter(_treediff_subsystem_filter)

    treediff_log.addHandler(_CONSOLE_HANDLER)


def shutdown_logging():
    """
    Shut down treediff logging.
    """
    logging.shutdown()


def set_debug(debug_arg):
    """
    Set debugging mask from command line argument.
    """
    if not debug_arg:
        return

    mask_map = {
        "lister": TREEDIFF_DEBUG_LISTER,
        "engine": TREEDIFF_DEBUG_ENGINE,
        "command": TREEDIFF_DEBUG_COMMAND,
        "all": TREEDIFF_DEBUG_ALL,
    }

    mask = 0
    for name in debug_arg.split(","):
        if name not in mask_map:
            raise ValueError(f"Unknown debug option: {name}")
        mask |= mask_map[name]
    set_debug_mask(mask)


def _add_diff_args(parser):
    parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        metavar="N",
        help="Only list entries up to N levels below each root (N >= 1)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not show paths common to both trees",
    )
    parser.add_argument(
        "-c",
        "--compare-content",
        action="store_true",
        help="Compare the content of files common to both trees",
    )
    parser.add_argument(
        "-x",
        "--exclude-pattern",
        type=str,
        action="append",
        metavar="PATTERN",
        dest="exclude_patterns",
        default=None,
        help="File patterns to exclude (glob notation)",
    )
    parser.add_argument(
        "-f",
        "--file-types",
        dest="use_magic_file_type",
        action="store_true",
        help="Generate file type information using libmagic",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        metavar="N",
        help="Number of worker threads for listing and comparison",
    )
    parser.add_argument(
        "-o",
        "--output-format",
        type=str,
        choices=OUTPUT_FORMATS,
        default=OUTPUT_FORMATS[0],
        help=f"Output format ({', '.join(OUTPUT_FORMATS)})",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Format JSON output for readability",
    )
    parser.add_argument(
        "--color",
        type=str,
        choices=COLOR_MODES,
        default=COLOR_MODES[0],
        help=f"Enable colored output ({', '.join(COLOR_MODES)})",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "source_dir",
        type=str,
        metavar="SOURCE_DIR",
        help="The source directory tree",
    )
    parser.add_argument(
        "target_dir",
        type=str,
        metavar="TARGET_DIR",
        help="The target directory tree",
    )


def main(args):
    """
    Main entry point for treediff.
    """
    parser = ArgumentParser(
        description="Compare two directory trees", prog=basename(args[0])
    )

    # Global arguments
    parser.add_argument(
        "--debug",
        metavar="DEBUGOPTS",
        type=str,
        help="A list of debug options to enable (lister,engine,command,all)",
    )
    parser.add_argument("-v", "--verbose", help="Enable verbose output", action="count")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        help="Report the version number of treediff",
        version=__version__,
    )
    _add_diff_args(parser)

    cmd_args = parser.parse_args(args[1:])

    status = 1

    try:
        set_debug(cmd_args.debug)
    except ValueError as err:
        print(err, file=sys.stderr)
        parser.print_help(file=sys.stderr)
        return status

    setup_logging(cmd_args)

    _log_debug_command("Parsed %s", " ".join(args[1:]))

    if cmd_args.debug:
        status = _diff_cmd(cmd_args)
    else:
        try:
            status = _diff_cmd(cmd_args)
        # pylint: disable=broad-except
        except KeyboardInterrupt:  # pragma: no cover
            _log_info("Exiting on user cancel")
        except Exception as err:
            _log_error("Command failed: %s", err)

    shutdown_logging()
    return status


def console_main():
    """
    Console script entry point for treediff.
    """
    return main(sys.argv)


# vim: set et ts=4 sw=4 :
