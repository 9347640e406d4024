"""This module provides Python language utilities.

Attributes:
    DEFAULT_ENCODING: The default encoding used for text file operations.
    WIN32 (bool): Is this module running on a Windows system. Quick version of (sys.platform == 'win32')
"""

# Import standard modules
from dataclasses import dataclass
from os import getenv
from pathlib import Path, PurePath
from string import Template
from sys import platform
from typing import Optional, TypeAlias

# Import third-party modules
from dotmap import DotMap
from yaml import safe_load as yaml_load

# Useful constants
DEFAULT_ENCODING = 'UTF-8'
WIN32 = platform == 'win32'

MessageString: TypeAlias = str | Template
PathName: TypeAlias = str | Path | PurePath


class MsgStr:
    """Class to create a universal abstract interface for message strings."""

    def __init__(self, instr: MessageString = '', **variables):
        """
        Args:
            instr (optional, default=''): The input message string.
            variables (optional): A dictionary of variables to pass to the string.Template.substitute method.

        Attributes:
            _str: The value of the instr argument.
            _vars: The value of the variables argument.
        """
        self._str = instr
        self._vars = variables

    def __str__(self):
        return self._str.substitute(self._vars) if isinstance(self._str, Template) else self._str


class P4RunnerException(Exception, MsgStr):
    """A base class to provide easier Exception management."""
    def __init__(self, err_obj: 'P4RunnerError', /, **variables):
        """
        Args:
            err_obj: The input message string.
            variables (optional): A dictionary of variables to pass to the string.Template.substitute method.

        Attributes:
            vars: The value of the variables argument.
            _err_obj: The value of the err_obj argument.
        """
        Exception.__init__(self, err_obj, variables)
        MsgStr.__init__(self, err_obj.msg, **variables)
        self._err_obj = err_obj
        self.vars = variables

    def __str__(self):
        return MsgStr.__str__(self)

    code = property(lambda s: s._err_obj.code, doc='A read-only property which returns the error code from the error object.')


@dataclass(frozen=True)
class P4RunnerError:
    """A class to provide an interface for inspecting exceptions.

        Attributes:
            code: A unique error code for this error.
            msg: A user-facing message for this error.
    """
    code: int
    msg: MessageString


def is_debug(test_value: Optional[str] = None, /) -> bool:
    """Determine if the P4RUNNER_DEBUG environment variable is set.

    Args:
        test_value (optional, default=False): If set, only return true if the value of test_value is in P4RUNNER_DEBUG.

    Return:
        True if the OS environment variable P4RUNNER_DEBUG is set, False otherwise.
    """
    return bool(debug_value := getenv('P4RUNNER_DEBUG', '')) and ((not test_value) or (test_value in debug_value))


def yaml_to_dotmap(yaml_info: str | PathName, /) -> DotMap:
    """Converts a YAML file to a DotMap.

    Args:
        yaml_info: The YAML to which to read into a DotMap. If this is a string it is presumed to be raw YAML
                    otherwise it is expected to be a Path object which can be open and read.

    Returns:
        A DotMap representing the YAML content.
    """
    if isinstance(yaml_info, str):
        return DotMap(yaml_load(yaml_info))
    with open(yaml_info, encoding=DEFAULT_ENCODING) as yaml_stream:
        return DotMap(yaml_load(yaml_stream))

# cSpell:ignore dotmap
