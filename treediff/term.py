# Copyright Red Hat
#
# treediff/term.py - Directory tree differ terminal control
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Terminal color control
"""
from typing import List, Optional, TextIO
import curses
import sys

#: Valid values for the ``color`` argument to ``TermControl``
COLOR_MODES = ["auto", "never", "always"]


class TermControl:
    """
    A class for portable terminal color output.

    Uses the curses package to look up the control sequences for the
    current terminal. Each color attribute holds the sequence needed to
    switch to that color, or the empty string if the terminal (or the
    ``color`` setting) does not support it:

        >>> term = TermControl()
        >>> print("This is " + term.GREEN + "green" + term.NORMAL)

    Inspired by and adapted from:

      https://code.activestate.com/recipes/475116-using-terminfo-for-portable-color-output-cursor-co/

      Copyright Edward Loper and released under the PSF license.
    """

    NORMAL: str = ""  #: Turn off all modes

    # Foreground colors:
    BLACK: str = ""  #: Black foreground color
    BLUE: str = ""  #: Blue foreground color
    GREEN: str = ""  #: Green foreground color
    CYAN: str = ""  #: Cyan foreground color
    RED: str = ""  #: Red foreground color
    MAGENTA: str = ""  #: Magenta foreground color
    YELLOW: str = ""  #: Yellow foreground color
    WHITE: str = ""  #: White foreground color

    _ANSI_COLORS: List[str] = "BLACK RED GREEN YELLOW BLUE MAGENTA CYAN WHITE".split()

    def _force_ansi(self):
        for i, color in enumerate(self._ANSI_COLORS):
            setattr(self, color, f"\033[0;3{i}m")
        self.NORMAL = "\033[0m"

    def _init_colors(self):
        """
        Initialize terminal color codes.
        """
        set_fg_ansi = self._tigetstr("setaf")
        if not set_fg_ansi:
            return
        set_fg_ansi = set_fg_ansi.encode("utf8")
        for i, color in enumerate(self._ANSI_COLORS):
            setattr(self, color, curses.tparm(set_fg_ansi, i).decode("utf8") or "")
        self.NORMAL = self._tigetstr("sgr0")

    def __init__(self, term_stream: Optional[TextIO] = None, color: str = "auto"):
        """
        Initialize terminal color capabilities.

        With ``color="auto"`` colors are enabled only if the output stream
        is a tty with a usable terminal type. ``"always"`` falls back to
        plain ANSI sequences if the terminal type cannot be set up, and
        ``"never"`` disables color entirely.

        :param term_stream: Output stream to probe for capabilities.
        :type term_stream: ``Optional[TextIO]``
        :param color: A string to control color rendering: "auto", "always", or
                      "never".
        :type color: ``str``
        """
        if color not in COLOR_MODES:
            raise ValueError(f"Invalid color mode: {color}")

        if term_stream is None:
            term_stream = sys.stdout

        self.term_stream = term_stream

        if color == "never":
            return

        if color != "always":
            if not hasattr(term_stream, "isatty") or not term_stream.isatty():
                return

        try:
            curses.setupterm()
        # curses.error cannot be caught directly when curses is not
        # initialised: catch broadly and re-raise interruptions.
        except BaseException as err:  # pylint: disable=broad-exception-caught
            if isinstance(err, (KeyboardInterrupt, SystemExit)):  # pragma: no cover
                raise
            if color == "always":
                self._force_ansi()
            return

        self._init_colors()
        if color == "always" and not self.RED:
            self._force_ansi()

    @staticmethod
    def _tigetstr(cap_name):
        # String capabilities can include "delays" of the form "$<2>".
        # For any modern terminal, we should be able to just ignore
        # these, so strip them out.
        cap = curses.tigetstr(cap_name)
        cap = cap.decode(encoding="utf8") if cap else ""
        return cap.split("$", maxsplit=1)[0]

    @property
    def enabled(self) -> bool:
        """
        ``True`` if this ``TermControl`` produces colored output.
        """
        return bool(self.RED)
