"""This module provides a simplified interface to the standard argparse module."""

# Import standard modules
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter, HelpFormatter, Namespace
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Type

# Import internal modules
from . import __title__, __version__


class Argument:  # pylint: disable=too-few-public-methods
    """This is a simple container class to encapsulate an argument definition passed to ArgumentParser.add_argument()."""

    def __init__(self, *names, **options):
        """
        Args:
            *names: A list of the argument names.
            **options (optional): A dictionary of the argument options.

        Attributes:
            names: The value of the names argument.
            options: The value of the options argument.
        """
        self.names: Sequence[str] = names
        self.options: Dict = options


class Commander:
    """This class provides a simplified interface to the argparse.ArgumentParser class."""

    def __init__(self, description: str, command_runner: Callable[[Namespace], Any], /, arguments: Iterable[Argument] = tuple(), *,
                 add_version: bool = True, formatter_class: Type[HelpFormatter] = ArgumentDefaultsHelpFormatter):
        """
        Args:
            description: The description of the command.
            command_runner: The function called with the parsed arguments.
            arguments (optional, default=()): A list of arguments for the command.
            add_version (optional, default=True): If True then add a version argument to the parser.
            formatter_class (optional, default=ArgumentDefaultsHelpFormatter): The formatter class to pass to the parser.

        Attributes:
            parser: The command parser instance.
            _command_runner: The value of the command_runner argument.
        """
        self._command_runner = command_runner
        self.parser = ArgumentParser(description=description, formatter_class=formatter_class)
        for arg in arguments:
            self.parser.add_argument(*arg.names, **arg.options)
        if add_version:
            self.parser.add_argument('--version', action='version', version=f'{__title__} {__version__}')

    def execute(self, argv: Optional[Sequence[str]] = None) -> Any:
        """Parse the command line and call the command_runner.

        Args:
            argv (optional, default=None): The arguments to pass to the parser, otherwise sys.argv will be used.

        Returns:
            The result of the called command_runner.
        """
        return self._command_runner(self.parser.parse_args(argv))
