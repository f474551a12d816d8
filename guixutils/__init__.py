# -*- coding: utf-8 -*-
"""
Initialise the guixutils module.

This file only contains some variables we need in the ``guixutils`` name
space.
"""

import os
from guixutils.version import __version__, __app_name__

#: The program that is run for every guix command.
GUIX_PROGRAM = 'guix'

#: Default width of pretty printed S-expressions.
DEFAULT_WIDTH = 79

#: Directory where logs and traces will be saved.
LOG_DIR = "/var/log/guixutils/"

#: Default locations to look for config files in order of importance.
DEFAULT_CONFIG_FILE_LOCATIONS = [
    os.path.join(os.path.realpath(''), 'guixutils.conf'),
    '~/.guixutils.conf',
    '/etc/guixutils/guixutils.conf'
]
