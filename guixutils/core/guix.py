# -*- coding: utf-8 -*-
"""
Run the ``guix`` program and read the answers of the commands that we ask
it over and over.

Lists of lint checkers, graph backends and graph node types, and the version
of guix, don't change while we are running. Asking guix for them takes a
while though, so the results are memoized per :class:`GuixCLI` instance.
Make a new instance if you want to ask again, e.g. after guix was upgraded.
"""
import io
import logging
import re
import subprocess
from guixutils import GUIX_PROGRAM
from guixutils.core.exceptions import GuixCommandError
from guixutils.core.exceptions import GuixError
from guixutils.core.exceptions import GuixNotFoundError
from guixutils.core import tempstore
from guixutils.util.cache import memoize
from guixutils.util.functions import command_string
from guixutils.util.functions import unique

LOG = logging.getLogger(__name__)

#: Matches the ``- name: description`` lines of the ``--list-*`` options.
PAT_NAME_LINE = re.compile(r'^\s*-\s+(?P<name>[^\s:]+)\s*:?\s*(?P<desc>.*)$')


class GuixCLI(object):
    """
    Runs guix commands and memoizes the lookups that never change.

    The memoized lookups are wrapped per instance in :meth:`__init__`, so
    two instances never share a cache.
    """

    def __init__(self, program=GUIX_PROGRAM, timeout=None):
        """
        Set up the memoized lookups.

        :param str program: Name or path of the guix program.
        :param int|float|NoneType timeout: Seconds to wait for a command to
            finish, ``None`` waits forever.
        """
        self.program = program
        self.timeout = timeout
        self.version = memoize(self._version)
        self.names = memoize(self._names)

    def command_string(self, args=None):
        """Return the quoted command string for running guix with ``args``."""
        return command_string(args, program=self.program)

    def run(self, args):
        """
        Run guix with ``args`` and return what it wrote to stdout.

        :param list args: Command line arguments for guix.
        :raises GuixNotFoundError: The program can't be executed.
        :raises GuixCommandError: The program failed or timed out.
        :return str: Standard output of the command.
        """
        args = [str(arg) for arg in args]
        command = self.command_string(args)
        LOG.debug("Running: %s", command)
        try:
            proc = subprocess.run(
                [self.program] + args,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise GuixNotFoundError(
                "Can't run \"{}\": {}".format(self.program, exc.strerror)
            )
        except subprocess.TimeoutExpired as exc:
            stderr = exc.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode('utf-8', 'replace')
            raise GuixCommandError(command, None, stderr)
        if proc.returncode != 0:
            raise GuixCommandError(command, proc.returncode, proc.stderr)
        return proc.stdout

    def run_to_file(self, args, name=None, suffix=''):
        """
        Run guix with ``args`` and save its output in a temporary file.

        The file lives in the shared temporary directory of
        :mod:`guixutils.core.tempstore` and is removed when the process
        exits.

        :param list args: Command line arguments for guix.
        :param str|NoneType name: File name, see
            :meth:`guixutils.core.tempstore.TemporaryStore.file_name`.
        :param str suffix: File name suffix, e.g. ``.dot``.
        :return str: Path of the file.
        """
        output = self.run(args)
        path = tempstore.temporary_file_name(name, suffix)
        with io.open(path, 'w', encoding='utf-8') as file_handle:
            file_handle.write(output)
        LOG.debug("Saved output of %s in %s", self.command_string(args), path)
        return path

    def _version(self):
        """
        Return the version of guix, e.g. ``1.4.0``.

        The first line of ``guix --version`` looks like
        ``guix (GNU Guix) 1.4.0``, the version is the last word of it.
        """
        output = self.run(['--version'])
        lines = output.strip().splitlines()
        if not lines or not lines[0].split():
            raise GuixError(
                "No version in output of \"{}\"".format(
                    self.command_string(['--version'])
                )
            )
        version = lines[0].split()[-1]
        LOG.debug("Guix version is %s", version)
        return version

    def _names(self, *args):
        """
        Run ``guix ARGS`` and parse ``- name: description`` lines.

        :param str args: Arguments of a guix command listing things.
        :return list: ``(name, description)`` tuples in order of output.
        """
        names = []
        for line in self.run(list(args)).splitlines():
            match = PAT_NAME_LINE.match(line)
            if match is not None:
                names.append(
                    (match.group('name'), match.group('desc').strip())
                )
        LOG.debug("Found %d names for: %s", len(names),
                  self.command_string(args))
        return unique(names)

    def lint_checkers(self):
        """Return names and descriptions of the checkers of ``guix lint``."""
        return self.names('lint', '--list-checkers')

    def graph_backends(self):
        """Return names and descriptions of the backends of ``guix graph``."""
        return self.names('graph', '--list-backends')

    def graph_node_types(self):
        """Return names and descriptions of ``guix graph`` node types."""
        return self.names('graph', '--list-types')
