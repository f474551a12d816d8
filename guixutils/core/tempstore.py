# -*- coding: utf-8 -*-
"""
Keep scratch files (generated manifests, graphs, pretty printed output) in
one temporary directory that is removed when the process exits.

The directory is only made when something asks for it.
"""
import atexit
import logging
import os
import shutil
import tempfile
from guixutils.util.functions import unique_name

LOG = logging.getLogger(__name__)


class TemporaryStore(object):
    """A lazily created temporary directory and the files in it."""

    def __init__(self, prefix='guix-', parent=None):
        """
        Initialise the store, nothing is created on disk yet.

        :param str prefix: Prefix of the directory name.
        :param str|NoneType parent: Directory to make the temporary directory
            in, the system default is used when ``None``.
        """
        self.prefix = prefix
        self.parent = parent
        self._directory = None
        self._registered = False

    @property
    def directory(self):
        """
        Path of the temporary directory, created if it doesn't exist (any
        more).
        """
        if self._directory is None or not os.path.isdir(self._directory):
            self._directory = tempfile.mkdtemp(
                prefix=self.prefix, dir=self.parent
            )
            LOG.debug("Created temporary directory %s", self._directory)
            if not self._registered:
                atexit.register(self.cleanup)
                self._registered = True
        return self._directory

    def file_name(self, name=None, suffix=''):
        """
        Return the path of a file in the temporary directory.

        The file is created empty, so asking for the same name twice gives
        two different files.

        :param str|NoneType name: Name of the file. If a file with this name
            already exists ``name<2>``, ``name<3>`` etc. is used. When
            ``None``, a random unique name is used.
        :param str suffix: Appended to the file name.
        :return str: Absolute path of the file.
        """
        directory = self.directory
        if name is None:
            handle, path = tempfile.mkstemp(suffix=suffix, dir=directory)
            os.close(handle)
            return path
        while True:
            taken = os.listdir(directory)
            if suffix:
                taken = [
                    entry[:-len(suffix)] for entry in taken
                    if entry.endswith(suffix)
                ]
            path = os.path.join(directory, unique_name(name, taken) + suffix)
            try:
                handle = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL)
            except FileExistsError:
                # Taken by someone else in the meantime, look again.
                continue
            os.close(handle)
            return path

    def cleanup(self):
        """Remove the temporary directory and everything in it."""
        directory = self._directory
        self._directory = None
        if directory is None or not os.path.isdir(directory):
            return
        try:
            shutil.rmtree(directory)
            LOG.debug("Removed temporary directory %s", directory)
        except OSError as exc:
            LOG.warning(
                "Can't remove temporary directory %s: %s", directory, exc
            )


#: Store shared by :func:`temporary_directory` and
#: :func:`temporary_file_name`.
DEFAULT_STORE = TemporaryStore()


def temporary_directory():
    """Return the path of the shared temporary directory."""
    return DEFAULT_STORE.directory


def temporary_file_name(name=None, suffix=''):
    """
    Return a path in the shared temporary directory.

    See :meth:`TemporaryStore.file_name`.
    """
    return DEFAULT_STORE.file_name(name, suffix)
