"""P4Runner module.

This module provides a client for the Perforce command line which interprets its tagged output.

The exported modules fall into several categories:

Modules that provide Pythonic interfaces to external systems:
    * perforce - Perforce operations through the command line client
    * sysutil - running Perforce commands
    * ztag - parsing the Perforce tagged output format

Modules that provide simplified interfaces to standard modules:
    * commander - argparse
    * logger - logging

Modules that provide utilities for accomplishing specific programming tasks:
    * automation - building automation
    * bumper - incrementing the build version file
    * config - managing configurations
    * fileutil - working with files
    * lang - Python language utilities
"""

__all__ = ('__title__', '__summary__', '__uri__',
           '__version__',
           '__author__', '__email__',
           '__license__', '__copyright__')

__title__ = 'P4Runner'
__summary__ = 'Perforce command line client with tagged output parsing'
__uri__ = 'https://github.com/tardis4500/p4runner/'

__version__ = '1.0.0'

__author__ = 'Jeffery G. Smith'
__email__ = 'web@pobox.com'

__license__ = 'MIT'
__copyright__ = 'Copyright (c) 2023 Jeffery G. Smith'

# cSpell:ignore ztag sysutil fileutil
