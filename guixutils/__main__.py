#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
This is the module that parses your command line arguments and then runs one
of the guixutils actions:

 - ``command``: Print a ``guix`` command line with all arguments quoted, so
   it can be pasted into a shell.
 - ``run``: Run guix and print its output, optionally pretty printing the
   S-expressions in it.
 - ``pprint``: Pretty print files containing S-expressions, e.g. manifests
   and system configurations.
 - ``list``: List the lint checkers, graph backends or graph node types that
   guix knows about.
 - ``guix-version``: Print the version of guix.
 - ``name``: Compose a display name from its parts.

Options can also be set in a config file, see ``-c``. Errors are logged, the
exit code is 1 if any error was logged and 0 otherwise.

Type ``guixutils -h`` for all command line arguments.
"""
import argparse
import logging
import logging.handlers
import os
import sys
import configargparse
import guixutils
import guixutils.core.excepthandler
from guixutils.colourlog import ColourFormatter
from guixutils.core.excepthandler import guix_except_handle
from guixutils.core.exceptions import ArgumentError
from guixutils.core.guix import GuixCLI
from guixutils.core.sexp import pretty_print
from guixutils.core.sexp import pretty_print_file
from guixutils.util.exitcode import ExitCodeTracker
from guixutils.util.functions import compose_name
from guixutils.util.functions import concat_strings
from guixutils.util.functions import symbol_title
from guixutils.util.functions import value_to_string
from guixutils.version import __version__, __app_name__

#: :attr:`logging.format` format string for log files and syslog
LOGFORMAT = "%(asctime)s [%(levelname)s] %(name)-16.20s %(message)s"

#: :attr:`logging.format` format string for stderr
COLOUR_LOGFORMAT = (
    "{lvl}[%(levelname)s]{reset} {msg}%(name)-16.20s %(message)s{reset}"
)

TIMESTAMP_FORMAT = "%b %d %H:%M:%S"

#: What the ``list`` action can list and the method of
#: :class:`guixutils.core.guix.GuixCLI` that lists it.
LISTABLE = {
    'lint-checkers': 'lint_checkers',
    'graph-backends': 'graph_backends',
    'graph-types': 'graph_node_types',
}

logger = logging.getLogger('guixutils')


def get_cli_arg_parser():
    """
    Make a CLI argument parser and return it.

    It does not parse the arguments because a plain parser object is used for
    documentation purposes.

    :return: Argument parser with all of guixutils' options configured
    :rtype: argparse.ArgumentParser
    """
    parser = configargparse.ArgParser(
        default_config_files=guixutils.DEFAULT_CONFIG_FILE_LOCATIONS,
        description=(
            "Build guix command lines, run guix and pretty print the "
            "S-expressions it outputs."
        ),
        conflict_handler='resolve',
        prog=__app_name__
    )
    parser.add(
        '-c',
        '--config',
        required=False,
        is_config_file=True,
        help=(
            "Override the default config file locations "
            "(default={})".format(
                ", ".join(guixutils.DEFAULT_CONFIG_FILE_LOCATIONS)
            )
        )
    )
    parser.add(
        '--guix-program',
        type=str,
        default=guixutils.GUIX_PROGRAM,
        env_var='GUIX_PROGRAM',
        help="Name or path of the guix program (default: guix)."
    )
    parser.add(
        '--timeout',
        type=float,
        default=None,
        help="Give up on guix commands after this many seconds."
    )
    parser.add(
        '--width',
        type=int,
        default=guixutils.DEFAULT_WIDTH,
        help=(
            "Maximum line length of pretty printed S-expressions "
            "(default: {}).".format(guixutils.DEFAULT_WIDTH)
        )
    )
    parser.add(
        '--verbosity',
        type=int,
        default=0,
        help=(
            "Verbose output argument should be an integer between 0 and 4, "
            "can be overridden by the ``-v`` argument."
        )
    )
    parser.add(
        '-v',
        action='count',
        dest="verbose",
        help=(
            "Verbose output, repeat to increase verbosity, overrides the "
            "``verbosity`` argument if provided."
        )
    )
    parser.add(
        '-l',
        '--logdir',
        type=str,
        default=None,
        help=(
            "Also log to a file in this directory, e.g. '{}'. Traces of "
            "unexpected exceptions are placed here as well.".format(
                guixutils.LOG_DIR
            )
        )
    )
    parser.add(
        '--syslog',
        action='store_true',
        default=False,
        help="Output to syslog."
    )
    parser.add(
        '-q',
        '--quiet',
        action='store_true',
        help="Don't print log messages to stderr."
    )
    parser.add(
        '-V', '--version',
        action='version',
        version="%(app_name)s v%(version)s" % {
            'app_name': __app_name__, 'version': __version__
        },
        help="Show the version number and exit."
    )

    actions = parser.add_subparsers(dest='action', metavar='ACTION')
    command = actions.add_parser(
        'command', help="Print a quoted guix command line."
    )
    command.add_argument(
        'arguments', nargs=argparse.REMAINDER,
        help="Arguments for guix."
    )
    run = actions.add_parser('run', help="Run guix and print its output.")
    run.add_argument(
        '-p',
        '--pretty',
        action='store_true',
        default=False,
        help="Pretty print the output as S-expressions."
    )
    run.add_argument(
        'arguments', nargs=argparse.REMAINDER,
        help="Arguments for guix."
    )
    pprint = actions.add_parser(
        'pprint', help="Pretty print files with S-expressions."
    )
    pprint.add_argument(
        '-i',
        '--in-place',
        action='store_true',
        default=False,
        help="Write the result back to the files instead of printing it."
    )
    pprint.add_argument('files', nargs='+', help="Files to pretty print.")
    listing = actions.add_parser(
        'list', help="List things guix knows about."
    )
    listing.add_argument('what', choices=sorted(LISTABLE))
    actions.add_parser('guix-version', help="Print the version of guix.")
    name = actions.add_parser(
        'name', help="Compose a name like ``*Guix Package info*``."
    )
    name.add_argument('parts', nargs='*', help="Parts of the name.")
    return parser


def init(argv=None):
    """
    Parse the arguments, configure logging and run the requested action.

    :param list argv: Command line arguments, ``sys.argv[1:]`` when ``None``.
    :return int: Exit code.
    """
    parser = get_cli_arg_parser()
    args = parser.parse_args(argv)
    tracker = __init_logging(args)

    if args.action is None:
        parser.print_usage(sys.stderr)
        logger.error("No action given.")
        return tracker.exit_code

    guix = GuixCLI(program=args.guix_program, timeout=args.timeout)
    action = ACTIONS[args.action]
    with guix_except_handle(args.action):
        action(guix, args)
    logger.debug(str(tracker))
    return tracker.exit_code


def main():
    """Console script entry point."""
    sys.exit(init())


def __action_command(guix, args):
    """Print the quoted command string."""
    sys.stdout.write(guix.command_string(args.arguments) + "\n")


def __action_run(guix, args):
    """Run guix, print the output, pretty print it if requested."""
    if not args.arguments:
        raise ArgumentError("The run action needs arguments for guix.")
    output = guix.run(args.arguments)
    if args.pretty:
        output = pretty_print(output, args.width)
    sys.stdout.write(output)


def __action_pprint(guix, args):
    """Pretty print each file, a failing file doesn't stop the others."""
    # pylint: disable=unused-argument
    for path in args.files:
        with guix_except_handle(path):
            text = pretty_print_file(path, args.width, args.in_place)
            if not args.in_place:
                sys.stdout.write(text)


def __action_list(guix, args):
    """Print ``name: description`` lines."""
    for name, description in getattr(guix, LISTABLE[args.what])():
        sys.stdout.write(
            concat_strings([name, value_to_string(description or None)], ": ")
            + "\n"
        )


def __action_guix_version(guix, args):
    """Print the version of guix."""
    # pylint: disable=unused-argument
    sys.stdout.write(guix.version() + "\n")


def __action_name(guix, args):
    """Print a composed name."""
    # pylint: disable=unused-argument
    sys.stdout.write(
        compose_name(*[symbol_title(part) for part in args.parts]) + "\n"
    )


ACTIONS = {
    'command': __action_command,
    'run': __action_run,
    'pprint': __action_pprint,
    'list': __action_list,
    'guix-version': __action_guix_version,
    'name': __action_name,
}


def __init_logging(args):
    """
    Initialise the logging module.

    :param Namespace args: Argparser argument list.
    :return ExitCodeTracker: Handler that counts the logged errors.
    """
    verbose = args.verbose or args.verbosity
    log_level = max(min(40 - verbose * 10, 50), 10)
    logger.propagate = False
    logger.setLevel(level=log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    tracker = ExitCodeTracker()
    logger.addHandler(tracker)

    if not args.quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            ColourFormatter(
                COLOUR_LOGFORMAT,
                TIMESTAMP_FORMAT,
                use_colour=sys.stderr.isatty()
            )
        )
        logger.addHandler(console_handler)
    if args.logdir:
        file_handler = logging.FileHandler(
            os.path.join(args.logdir, 'guixutils.log'))
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter(LOGFORMAT, TIMESTAMP_FORMAT)
        )
        logger.addHandler(file_handler)
        guixutils.core.excepthandler.LOG_DIR = args.logdir
    if args.syslog:
        syslog_handler = logging.handlers.SysLogHandler(address='/dev/log')
        syslog_handler.setLevel(log_level)
        syslog_handler.setFormatter(
            logging.Formatter(LOGFORMAT, TIMESTAMP_FORMAT)
        )
        logger.addHandler(syslog_handler)
    return tracker


if __name__ == '__main__':
    main()
