"""This module provides utilities for building automation."""

# Import standard modules
import sys
from abc import abstractmethod
from typing import Any


class Action:
    """The common base class for all actions.

    This is a virtual class and the inheriting class must at least include a _execute() method.

    The action is invoked by calling the execute() method which will run the following methods::

        pre()
        _execute()
        post()

    These are run in a try to catch any exceptions with the always_post() method run in the finally block.

    Attributes:
        message_guard: This string is printed by logger if the value of guard passed to logger is true.
    """
    message_guard = f"{'*'*70}"

    def __init__(self, **_unused_kwargs: Any):
        """
        Args:
            **_unused_kwargs: All arguments passed are ignored by the time they reach this initializer.
        """

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    @abstractmethod
    def _execute(self) -> None:
        pass

    def pre(self) -> None:
        """Executed before _execute().

        Returns:
            Nothing.
        """

    def post(self) -> None:
        """Executed after _execute().

        Returns:
            Nothing.
        """

    def always_post(self) -> None:
        """Always executed after _execute() as in finally in try/catch/finally.

        Returns:
            Nothing.
        """

    def execute(self) -> None:
        """Run the _execute() method from the child class.

        Returns:
            Nothing.
        """
        try:
            self.pre()
            self._execute()
            self.post()
        finally:
            self.always_post()

    def log_message(self, message: str, /, guard: bool = False, leader: str = 'INFO') -> None:
        """Log a message to stdout and flushes the stream.

        Args:
            message: The message to be printed.
            guard (optional, default=False): If True, message_guard will be printed on a line before the message.
            leader (optional, default='INFO'): If it does not evaluate to False, it will be prepended to every printed
                line, including the guard.

        Returns:
            Nothing.
        """
        the_leader: str = f'{leader} ' if leader else ''
        if the_guard := (self.message_guard if (guard is True) else ''):
            print(f'{the_leader}{the_guard}')
        print(f'{the_leader}{message}')
        sys.stdout.flush()
