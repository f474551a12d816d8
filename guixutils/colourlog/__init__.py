# -*- coding: utf-8 -*-
"""
ANSI colourise the logging stream (works on LINUX/UNIX based systems).

*Constants for colours*:

:attr const BLACK: Black
:attr const RED: Red
:attr const GREEN: Green
:attr const YELLOW: Yellow
:attr const BLUE: Blue
:attr const CYAN: Cyan
:attr const WHITE: White
"""

import logging
import re

BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)

RESET = "\x1b[0m"

#: Default colour schemes, per scheme name and log level a tuple of
#: foreground colour, background colour, bold face.
DEFAULT_COLOURS = {
    'lvl': {
        logging.DEBUG: (WHITE, BLUE, False),
        logging.INFO: (BLACK, GREEN, False),
        logging.WARNING: (BLACK, YELLOW, False),
        logging.ERROR: (WHITE, RED, False),
        logging.CRITICAL: (YELLOW, RED, True),
    },
    'msg': {
        logging.DEBUG: (BLUE, None, False),
        logging.INFO: (GREEN, None, False),
        logging.WARNING: (YELLOW, None, False),
        logging.ERROR: (RED, None, False),
        logging.CRITICAL: (RED, None, True),
    }
}


def ansi_colour(foreground=None, background=None, bold=False):
    """
    Return the ANSI escape sequence for a colour combination.

    :param int|NoneType foreground: Foreground colour.
    :param int|NoneType background: Background colour.
    :param bool bold: Bold face.
    :return str: Escape sequence, empty if nothing is set.
    """
    props = []
    if background is not None:
        props.append(str(background + 40))
    if foreground is not None:
        props.append(str(foreground + 30))
    if bold:
        props.append('1')
    if not props:
        return ""
    return "\x1b[%sm" % ';'.join(props)


class ColourFormatter(logging.Formatter):
    """
    ANSI colourise the logging stream.

    The format string may contain ``{name}`` placeholders, where ``name`` is
    one of the colour schemes or ``reset``:

    .. code-block:: python

        handler.setFormatter(
            ColourFormatter(
                "{lvl}[%(levelname)s]{reset} {msg}%(name)s %(message)s"
            )
        )

    A ``{reset}`` is added to the end of the format string if it isn't there
    yet, so the terminal doesn't keep printing in colour after the log line.

    With ``use_colour=False`` the colour placeholders are removed, which is
    what you want when the output is not a terminal.
    """

    #: Matches ``{scheme}`` placeholders.
    PAT_PLACEHOLDER = re.compile(r"\{([_a-z][_a-z0-9]*)\}")

    def __init__(self, fmt=None, datefmt=None, colours=None, use_colour=True):
        """
        Initialise the formatter.

        :param str fmt: Format string with ``{scheme}`` placeholders.
        :param str datefmt: Passed on to :class:`logging.Formatter`.
        :param dict colours: Colour schemes, see :attr:`DEFAULT_COLOURS`.
        :param bool use_colour: Insert escape sequences or strip the
            placeholders.
        """
        fmt = fmt or "%(message)s"
        if not fmt.endswith("{reset}"):
            fmt += "{reset}"
        super(ColourFormatter, self).__init__(fmt, datefmt)
        self.colours = colours or DEFAULT_COLOURS
        self.use_colour = use_colour

    def colour(self, scheme, level):
        """
        Return the escape sequence of ``scheme`` for a log level.

        :param str scheme: Name of a colour scheme or ``reset``.
        :param int level: Log level of the record.
        :return str|NoneType: Escape sequence, empty when colours are off,
            ``None`` for unknown schemes.
        """
        if scheme != 'reset' and scheme not in self.colours:
            return None
        if not self.use_colour:
            return ""
        if scheme == 'reset':
            return RESET
        scheme = self.colours[scheme]
        return ansi_colour(*scheme.get(level, (None, None, False)))

    def format(self, record):
        """
        Format the record, then replace the placeholders with the colours of
        the record's level.

        :param logging.LogRecord record: The log record.
        """
        formatted = super(ColourFormatter, self).format(record)

        def _substitute(match):
            colour = self.colour(match.group(1), record.levelno)
            # Unknown names are left alone, they may be part of the message.
            return match.group(0) if colour is None else colour

        return self.PAT_PLACEHOLDER.sub(_substitute, formatted)
