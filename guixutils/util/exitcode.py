"""
Count log records per level and turn the counts into an exit code.

The command line tool logs errors instead of raising them, this handler is
added to the ``guixutils`` logger so at the end we know whether anything went
wrong:

> Critical errors: 0, errors: 2, warnings: 1
"""
import logging

#: Exit code when no error or critical record was logged.
EXIT_OK = 0

#: Exit code when at least one error or critical record was logged.
EXIT_ERROR = 1


class ExitCodeTracker(logging.Handler):
    """Keep statistics on emitted records per level."""

    def __init__(self, level=logging.WARNING):
        """
        Initialise the counters.

        :param int level: Minimum log level that is counted.
        """
        super(ExitCodeTracker, self).__init__(level)
        self.logged = {'WARNING': 0, 'ERROR': 0, 'CRITICAL': 0}

    def emit(self, record):
        """
        Count the record.

        :param logging.LogRecord record: The log record.
        """
        level = record.levelname
        self.logged[level] = self.logged.get(level, 0) + 1

    @property
    def errors_occurred(self):
        """Count of error and critical records."""
        return self.logged['ERROR'] + self.logged['CRITICAL']

    @property
    def criticals_occurred(self):
        """Count of critical records."""
        return self.logged['CRITICAL']

    @property
    def warnings_occurred(self):
        """Count of warning records."""
        return self.logged['WARNING']

    @property
    def exit_code(self):
        """:attr:`EXIT_ERROR` if errors were logged, else :attr:`EXIT_OK`."""
        return EXIT_ERROR if self.errors_occurred else EXIT_OK

    def __str__(self):
        return (
            "Critical errors: {CRITICAL}, errors: {ERROR}, warnings: "
            "{WARNING}"
        ).format(**self.logged)
