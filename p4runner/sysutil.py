"""This module provides a Pythonic interface to run the Perforce command line client.

Attributes:
    P4_EXE: The name of the Perforce command line client for the current platform.
    STREAM_LIMIT: The buffer limit for the output streams of a command. Some queries return very large listings.
"""

# Import standard modules
import asyncio
from asyncio.subprocess import DEVNULL, PIPE, Process
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from re import compile as re_compile
from string import Template
from typing import Optional, Sequence, Set, Tuple

# Import internal modules
from .lang import is_debug, DEFAULT_ENCODING, P4RunnerError, P4RunnerException, WIN32
from .logger import Logger

P4_EXE = 'p4.exe' if WIN32 else 'p4'
STREAM_LIMIT = 100 * 1024 * 1024

_NEWLINE_REX = re_compile(r'\r\n|\n|\r')


class CMDError(P4RunnerException):
    """System Command Exceptions.

    Attributes:
        CMD_ERROR: The command exited with an error or wrote to stderr.
        CMD_NOT_FOUND: The command was not found.
        WORKSPACE_DIR_NOT_FOUND: The directory in which to run the command was not found.
    """
    CMD_ERROR = P4RunnerError(1, '')
    CMD_NOT_FOUND = P4RunnerError(2, Template('Command not found when running: $cmd'))
    WORKSPACE_DIR_NOT_FOUND = P4RunnerError(3, Template('Workspace directory $cwd not found when running: $cmd'))

    def __str__(self):
        if self.code == CMDError.CMD_ERROR.code:
            message = f"P4 Error: {self.vars['cmd']}\n"
            if self.vars['returncode']:
                message += f"Exit status: {self.vars['returncode']}\n"
            if self.vars['stderr']:
                message += f"STDERR:\n{self.vars['stderr']}\n"
            message += f"STDOUT:\n{self.vars['stdout']}\n"
            if self.vars['stdin']:
                message += f"STDIN:\n{self.vars['stdin']}\n"
            return message
        return P4RunnerException.__str__(self)

    @property
    def output(self) -> str:
        """A read-only property which returns the text used to classify the failure.

        This is the error output if there was any, otherwise the standard output.
        """
        return self.vars.get('stderr') or self.vars.get('stdout', '')


@dataclass(eq=False)
class CommandRecord:
    """This class identifies a command while it is running.

        Attributes:
            cmd: The command line as it is logged.
            args: The arguments passed to the executable.
            start: When the command was started.
    """
    cmd: str
    args: Tuple[str, ...]
    start: datetime = field(default_factory=datetime.now)


def normalize_newlines(text: str, /) -> str:
    """Convert all line endings to a single newline character.

    Args:
        text: The text to convert.

    Returns:
        The converted text.
    """
    return _NEWLINE_REX.sub('\n', text)


class CommandInvoker:
    """This class runs Perforce commands and keeps track of the ones still running."""

    def __init__(self, executable: str = P4_EXE, /, *, logger: Optional[Logger] = None, verbose: bool = False, workspace_root: str = ''):
        """
        Args:
            executable (optional, default=P4_EXE): The Perforce command line client to run.
            logger (optional, default=None): The Logger to use, otherwise one is created.
            verbose (optional, default=False): If True, every command and its completion is logged.
            workspace_root (optional, default=''): If not empty, a template where $workspace is replaced by the workspace name
                to give the directory in which commands for that workspace are run.

        Attributes:
            executable: The value of the executable argument.
            running: The records of the commands currently running.
            verbose: The value of the verbose argument.
            _logger: The value of the logger argument.
            _workspace_root: The value of the workspace_root argument as a Template.
        """
        self.executable = executable
        self.verbose = verbose
        self.running: Set[CommandRecord] = set()
        self._logger = logger if logger else Logger(logref_suffix='sysutil')
        self._workspace_root = Template(workspace_root) if workspace_root else None

    async def run(self, workspace: Optional[str], args: Sequence[str], /, stdin: Optional[str] = None, *, quiet: bool = False) -> str:
        """Run a Perforce command.

        Args:
            workspace: If not empty, the workspace (client) used to run the command.
            args: The arguments for the command.
            stdin (optional, default=None): Text to send to the command on its standard input.
            quiet (optional, default=False): If True, the command line is not logged unless the invoker is verbose.

        Returns:
            The standard output of the command with normalized line endings.

        Raises:
            CMDError.CMD_ERROR: If the command returns a non-zero exit status or writes anything to stderr.
            CMDError.CMD_NOT_FOUND: If the Perforce command line client was not found.
            CMDError.WORKSPACE_DIR_NOT_FOUND: If a workspace root is configured and the workspace directory does not exist.
        """
        cmd_args = (['-c', workspace] if workspace else []) + [str(a) for a in args]
        cmd_rec = CommandRecord(' '.join(['p4'] + cmd_args), tuple(cmd_args))
        if not quiet or self.verbose:
            self._logger.loginfo(f'Executing: {cmd_rec.cmd}')

        self.running.add(cmd_rec)
        try:
            (returncode, stdout, stderr) = await self._execute(cmd_rec, self._get_cwd(workspace), stdin)
        finally:
            self.running.discard(cmd_rec)
            if self.verbose:
                self._logger.loginfo(f'Command Completed: {cmd_rec.cmd}')

        if stderr or returncode:
            raise CMDError(CMDError.CMD_ERROR, cmd=cmd_rec.cmd, returncode=returncode, stdout=stdout, stderr=stderr, stdin=stdin if stdin else '')
        return stdout

    def _get_cwd(self, workspace: Optional[str], /) -> Optional[str]:
        """Return the directory in which to run commands for the workspace, or None to use the current directory."""
        if self._workspace_root and workspace:
            return self._workspace_root.substitute(workspace=workspace)
        return None

    async def _execute(self, cmd_rec: CommandRecord, cwd: Optional[str], stdin: Optional[str], /) -> Tuple[int, str, str]:
        """Start the process, feed its input and collect its output.

        Returns:
            A tuple of the return code, the standard output and the standard error.

        Raises:
            CMDError.CMD_NOT_FOUND: If the Perforce command line client was not found.
            CMDError.WORKSPACE_DIR_NOT_FOUND: If the workspace directory does not exist.
        """
        if cwd and not Path(cwd).is_dir():
            raise CMDError(CMDError.WORKSPACE_DIR_NOT_FOUND, cmd=cmd_rec.cmd, cwd=cwd)
        try:
            proc = await asyncio.create_subprocess_exec(self.executable, *cmd_rec.args, cwd=cwd, limit=STREAM_LIMIT,
                                                        stdin=PIPE if stdin else DEVNULL, stdout=PIPE, stderr=PIPE)
        except FileNotFoundError as err:
            raise CMDError(CMDError.CMD_NOT_FOUND, cmd=cmd_rec.cmd) from err

        (_, stdout, stderr) = await asyncio.gather(self._feed_stdin(proc, cmd_rec, stdin), proc.stdout.read(), proc.stderr.read())  # type: ignore[union-attr]
        returncode = await proc.wait()
        if is_debug('SYSCMD'):
            self._logger.loginfo(f'Received return code {returncode} from: {cmd_rec.cmd}')
        return (returncode, normalize_newlines(stdout.decode(DEFAULT_ENCODING, errors='replace')), normalize_newlines(stderr.decode(DEFAULT_ENCODING, errors='replace')))

    async def _feed_stdin(self, proc: Process, cmd_rec: CommandRecord, stdin: Optional[str], /) -> None:
        """Write the input text to the process and close its input stream.

        A failure to write usually means the process exited immediately. The exit status is reported by run().
        """
        if not stdin:
            return
        if is_debug('SYSCMD'):
            self._logger.loginfo(f'Sending input to {cmd_rec.cmd}:\n{stdin}')
        try:
            proc.stdin.write(stdin.encode(DEFAULT_ENCODING))  # type: ignore[union-attr]
            await proc.stdin.drain()  # type: ignore[union-attr]
        except (BrokenPipeError, ConnectionResetError) as err:
            self._logger.logwarn(f'Unable to write input to {cmd_rec.cmd}: {err}')
        finally:
            proc.stdin.close()  # type: ignore[union-attr]

# cSpell:ignore syscmd
