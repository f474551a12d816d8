# -*- coding: utf-8 -*-
"""
This module defines a context in which the command line actions run. Most of
them talk to guix or read files, which fails for all kinds of reasons that
are not bugs: guix isn't installed, a package doesn't exist, a file has
unbalanced parentheses. Those errors are logged in a readable way and the
action is dropped, the exit code is derived from the logged errors by
:class:`guixutils.util.exitcode.ExitCodeTracker`.

If an exception is not caught specifically, it probably is a bug. The handler
catches it too, saves a stack trace in :attr:`LOG_DIR` and logs where it can
be found, so it can be reported to the developers.
"""

from contextlib import contextmanager
import datetime
import logging
import os
import traceback
from guixutils import LOG_DIR as DEFAULT_LOG_DIR
from guixutils.core.exceptions import ArgumentError
from guixutils.core.exceptions import GuixCommandError
from guixutils.core.exceptions import GuixError
from guixutils.core.exceptions import GuixNotFoundError
from guixutils.core.exceptions import SexpSyntaxError

LOG = logging.getLogger(__name__)

#: This is a global variable that is overridden by guixutils.__main__ with
#: the command line argument: ``--logdir``
LOG_DIR = DEFAULT_LOG_DIR

STACK_TRACE_FILENAME = "guixutils_exception{:%Y%m%d-%H%M%S%f}.trace"


@contextmanager
def guix_except_handle(action=None):
    """
    Log the errors raised by the ``with`` block instead of passing them on.

    :param str action: Description of what is being done, used in log
        messages.
    """
    try:
        yield  # do the "with guix_except_handle(action):" code block
    except GuixNotFoundError as exc:
        LOG.log(exc.log_level, "%s. Is guix installed and in your PATH?", exc)
    except GuixCommandError as exc:
        LOG.log(exc.log_level, exc)
        if exc.returncode is None:
            LOG.info("Try a larger --timeout.")
    except GuixError as exc:
        LOG.error(exc)
    except SexpSyntaxError as exc:
        if action is None:
            LOG.error("Can't read S-expression: %s", exc)
        else:
            LOG.error("Can't read S-expression for %s: %s", action, exc)
    except ArgumentError as exc:
        LOG.error(exc)
    except (IOError, OSError) as exc:
        LOG.error("%s: %s", exc.filename or action, exc.strerror or exc)
    # the show must go on..
    except Exception as exc:  # pylint: disable=broad-except
        dump_stack_trace(action, exc)


def dump_stack_trace(action, exc):
    """
    Dump a stack trace of the last exception to a file, if that fails due to
    an IOError or OSError, log that it failed so the user may make the
    directory writeable or pick another one with ``--logdir``.

    :param str action: What was being done when the exception was raised.
    :param Exception exc: The exception.
    :return str|NoneType: Path of the trace file, ``None`` if it couldn't be
        written.
    """
    trace_file = STACK_TRACE_FILENAME.format(datetime.datetime.now())
    trace_file = os.path.join(LOG_DIR, trace_file)
    try:
        with open(trace_file, "w") as file_handle:
            traceback.print_exc(file=file_handle)
        LOG.critical(
            "Unexpected exception while running %s: %s\n"
            "A stack trace has been saved in %s\n"
            "Please report this error to the developers so the exception can "
            "be handled in a future release, thank you!",
            action,
            exc,
            trace_file
        )
        return trace_file
    except (IOError, OSError) as trace_exc:
        LOG.critical(
            "Unexpected exception while running %s: %s\n"
            "Couldn't dump stack trace to: %s reason: %s\n"
            "Please report this error to the developers so the exception can "
            "be handled in a future release, thank you!",
            action,
            exc,
            trace_file,
            trace_exc
        )
        return None
