# -*- coding: utf-8 -*-
"""
This module holds the application specific exceptions.
"""
from logging import CRITICAL, ERROR


class GuixError(Exception):
    """Base class of all errors raised while talking to guix."""

    pass


class GuixNotFoundError(GuixError):
    """Raised when the guix program can't be found or executed."""

    def __init__(self, msg, *args, **kwargs):
        """
        Add a log level to init.

        :param str msg: Exception message.
        :kwarg log_level: Python logging log level, default: logging.CRITICAL
        """
        self.log_level = kwargs.pop('log_level', CRITICAL)
        super(GuixNotFoundError, self).__init__(msg, *args, **kwargs)


class GuixCommandError(GuixError):
    """
    Raised when a guix command exits with a non-zero return code or takes
    longer than the timeout.
    """

    def __init__(self, command, returncode=None, stderr=""):
        """
        Keep the details of the failed command.

        :param str command: Quoted command string.
        :param int|NoneType returncode: Exit code, ``None`` on a timeout.
        :param str stderr: Whatever the command wrote to stderr.
        """
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.log_level = ERROR
        if returncode is None:
            msg = "Command \"{}\" timed out".format(command)
        else:
            msg = "Command \"{}\" failed with exit code {}".format(
                command, returncode
            )
        if stderr:
            msg = "{}: {}".format(msg, stderr.strip())
        super(GuixCommandError, self).__init__(msg)


class SexpSyntaxError(Exception):
    """Raised when S-expression text can't be read."""

    def __init__(self, msg, line, column):
        """
        Add the position of the error to init.

        :param str msg: What went wrong.
        :param int line: Line number (1-based).
        :param int column: Column number (1-based).
        """
        self.line = line
        self.column = column
        super(SexpSyntaxError, self).__init__(
            "{} at line {}, column {}".format(msg, line, column)
        )


class ArgumentError(Exception):
    """
    Raised when a command line argument has an invalid value.
    """
    pass
