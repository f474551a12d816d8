#!/usr/bin/env python3
"""
Python setuptools script for ``guixutils`` application.
"""
from setuptools import setup
from setuptools import find_packages
from guixutils.version import __version__

setup(
    name='guixutils',
    version=__version__,
    description='Helpers for building, running and reading guix commands',
    long_description=(
        "Build quoted guix command lines, run guix with memoized lookups, "
        "keep scratch files in a temporary directory and pretty print the "
        "S-expressions guix outputs."
    ),
    author='guixutils contributors',
    packages=find_packages(exclude=['guixutils.tests', 'guixutils.tests.*']),
    python_requires='>=3.7, <4',
    install_requires=[
        'configargparse>=0.10.0',
    ],
    extras_require={
        'docs': [
            'Sphinx>=1.0',
            'sphinx-argparse>=0.1.15',
            'sphinx_rtd_theme',
        ],
        'test': [
            'pytest>=3.0',
        ]
    },
    license='Apache Version 2.0',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Software Distribution',
        'Topic :: Utilities',
    ],
    keywords='guix package-manager s-expression memoize',
    entry_points={
        'console_scripts': [
            'guixutils = guixutils.__main__:main'
        ]
    },
)
