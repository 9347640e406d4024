"""This module provides a client for the Perforce command line which interprets its tagged output.

Perforce reports several ordinary conditions (nothing to sync, nothing to submit, a merge still pending)
as command failures. Each operation recognizes the conditions it expects and raises everything else.

Attributes:
    SUBMIT_RETRY_PREFIXES: The submit failures which mean the changelist needs more resolution before it can be submitted.
    SUBMIT_EMPTY_PREFIX: The submit failure which means the changelist has no files.
    SYNC_UP_TO_DATE_SUFFIX: The sync failure which means there was nothing to sync.
    REVERT_NOT_OPENED_REX: The revert failure which means the changelist had nothing to revert.
"""

# Import standard modules
from dataclasses import dataclass
from re import compile as re_compile
from string import Template
from typing import List, Optional, Sequence

# Import internal modules
from .lang import is_debug, P4RunnerError, P4RunnerException
from .logger import Logger
from .sysutil import CMDError, CommandInvoker, P4_EXE
from .ztag import parse_ztag, records, Record

SUBMIT_RETRY_PREFIXES = ('Merges still pending --', 'Out of date files must be resolved or reverted')
SUBMIT_EMPTY_PREFIX = 'No files to submit.'
SYNC_UP_TO_DATE_SUFFIX = 'up-to-date.'
REVERT_NOT_OPENED_REX = re_compile(r'file\(s\) not opened on this client.')

_CHANGE_CREATED_REX = re_compile(r'Change (\d+) created.')
_DESCRIPTION_MARKER_REX = re_compile(r'\n\n\.\.\.\s')


class PerforceError(P4RunnerException):
    """Perforce Client Exceptions.

    Attributes:
        SUBMITTED_CHANGE_MISSING: A submit succeeded but the submitted changelist was not reported.
        UNPARSEABLE_OUTPUT: The output of a command did not contain the expected result.
    """
    SUBMITTED_CHANGE_MISSING = P4RunnerError(1, Template('Unable to find submittedChange in P4 results:\n$output'))
    UNPARSEABLE_OUTPUT = P4RunnerError(2, Template('Unable to parse $command output:\n$output'))


@dataclass(frozen=True)
class Change:
    """This class describes a submitted changelist as reported by the changes command.

        Attributes:
            change: The changelist number.
            user: The user who submitted the changelist.
            client: The workspace from which the changelist was submitted.
            status: The changelist status.
            time: The submission time in seconds since the epoch.
            desc: The changelist description.
    """
    change: int
    user: str = ''
    client: str = ''
    status: str = ''
    time: int = 0
    desc: str = ''

    @classmethod
    def from_record(cls, record: Record, /) -> 'Change':
        """Create a Change from a tagged record of the changes command.

        Raises:
            PerforceError.UNPARSEABLE_OUTPUT: If the change or time field is a flag instead of a number.
        """
        for key in ('change', 'time'):
            if isinstance(record.get(key), bool):
                raise PerforceError(PerforceError.UNPARSEABLE_OUTPUT, command='changes', output=record)
        return cls(change=int(record['change']),
                   user=str(record.get('user', '')),
                   client=str(record.get('client', '')),
                   status=str(record.get('status', '')),
                   time=int(record.get('time', 0)),
                   desc=str(record.get('desc', '')))


class PerforceClient:
    """Class to run Perforce operations through the command line client.

    The client holds no state between calls other than the commands still running and the user name
    found by check_login(). Callers must sequence dependent operations themselves.
    """

    def __init__(self, executable: str = P4_EXE, /, *, logger: Optional[Logger] = None, verbose: bool = False, workspace_root: str = ''):
        """
        Args:
            executable (optional, default=P4_EXE): The Perforce command line client to run.
            logger (optional, default=None): The Logger to use, otherwise one is created.
            verbose (optional, default=False): If True, every command and its completion is logged.
            workspace_root (optional, default=''): Passed to the CommandInvoker.

        Attributes:
            username: The Perforce user name found by check_login(), None if not logged in or not checked.
            _invoker: The CommandInvoker used to run the commands.
            _logger: The value of the logger argument.
        """
        self._logger = logger if logger else Logger(logref_suffix='perforce')
        self._invoker = CommandInvoker(executable, logger=self._logger, verbose=verbose, workspace_root=workspace_root)
        self.username: Optional[str] = None

    running = property(lambda s: s._invoker.running, doc='A read-only property which returns the records of the commands currently running.')

    @property
    def verbose(self) -> bool:
        """A read-write property which returns and sets the verbose logging of commands."""
        return self._invoker.verbose

    @verbose.setter
    def verbose(self, verbose: bool) -> None:
        self._invoker.verbose = verbose

    async def check_login(self) -> Optional[str]:
        """Check that the user is logged in and Perforce is set up correctly.

        Returns:
            The name of the logged in user, None if the login status does not report one.

        Raises:
            CMDError.CMD_ERROR: If the login status command fails.
        """
        output = await self._invoker.run(None, ['-ztag', 'login', '-s'])
        found = records(parse_ztag(output))
        user = found[0].get('User') if found else None
        self.username = str(user) if user else None
        if is_debug('P4'):
            self._logger.loginfo(f'Login status for {self.username}: {found}')
        return self.username

    async def latest_change(self, path: str, /) -> Optional[Change]:
        """Get the most recent submitted changelist under a path.

        Args:
            path: The depot path to search.

        Returns:
            The latest change, None if there are none.
        """
        result = await self.changes(path, 0, 1)
        return result[0] if result else None

    async def changes(self, path: str, since: int = 0, limit: int = 0, /) -> List[Change]:
        """Get the submitted changelists under a path.

        Args:
            path: The depot path to search.
            since (optional, default=0): If greater than zero, only changelists after this one are returned.
            limit (optional, default=0): If greater than zero, the maximum number of changelists returned.

        Returns:
            The list of changes, newest first.
        """
        args = ['-ztag', 'changes', '-ssubmitted']
        if limit:
            args.append(f'-m{limit}')
        args.append(f'{path}@>{since}' if (since > 0) else path)
        output = await self._invoker.run(None, args, quiet=True)
        return [Change.from_record(r) for r in records(parse_ztag(output, multi_line=True)) if 'change' in r]

    async def sync(self, workspace: str, depot_path: str, /, force: bool = False) -> None:
        """Sync the files in a depot path to the workspace.

        Args:
            workspace: The workspace to sync.
            depot_path: The depot path to sync.
            force (optional, default=False): If True, files which are already up to date are synced again.

        Returns:
            Nothing.

        Raises:
            CMDError.CMD_ERROR: If the sync fails for any reason other than the files already being up to date.
        """
        args = ['sync']
        if force:
            args.append('-f')
        args.append(depot_path)
        try:
            await self._invoker.run(workspace, args)
        except CMDError as err:
            if not err.output.strip().endswith(SYNC_UP_TO_DATE_SUFFIX):
                raise

    async def new_changelist(self, workspace: str, description: str, /, files: Optional[Sequence[str]] = None) -> int:
        """Create a new pending changelist.

        Args:
            workspace: The workspace which will own the changelist.
            description: The changelist description.
            files (optional, default=None): The files opened in the workspace to move to the changelist.

        Returns:
            The new changelist number.

        Raises:
            PerforceError.UNPARSEABLE_OUTPUT: If the new changelist number is not found in the output.
        """
        form = 'Change:\tnew\nStatus:\tnew\nType:\tpublic\n'
        if workspace:
            form += f'Client:\t{workspace}\n'
        if files:
            form += 'Files:\n' + ''.join(f'\t{f}\n' for f in files)
        form += 'Description:\n\t' + sanitize_description(description)

        self._logger.loginfo("Executing: 'p4 change -i' to create a new CL")
        output = await self._invoker.run(workspace, ['change', '-i'], form, quiet=True)
        if not (match := _CHANGE_CREATED_REX.search(output)):
            raise PerforceError(PerforceError.UNPARSEABLE_OUTPUT, command='change', output=output)
        return int(match.group(1))

    async def submit(self, workspace: str, changelist: int, /) -> int:
        """Submit a pending changelist.

        Args:
            workspace: The workspace which owns the changelist.
            changelist: The changelist to submit.

        Returns:
            The submitted changelist number, or 0 if the changelist could not be submitted yet and should be tried again.
            A changelist with no files is deleted and 0 is returned.

        Raises:
            CMDError.CMD_ERROR: If the submit fails for any other reason.
            PerforceError.SUBMITTED_CHANGE_MISSING: If the submit succeeded but did not report the submitted changelist.
        """
        try:
            output = await self._invoker.run(workspace, ['-ztag', 'submit', '-f', 'submitunchanged', '-c', str(changelist)])
        except CMDError as err:
            failure = err.output.strip()
            if failure.startswith(SUBMIT_RETRY_PREFIXES):
                self._logger.logwarn(f'Changelist {changelist} needs resolution before it can be submitted')
                return 0
            if failure.startswith(SUBMIT_EMPTY_PREFIX):
                self._logger.logwarn(f'Changelist {changelist} has no files to submit, deleting it')
                await self.delete_changelist(workspace, changelist)
                return 0
            raise

        found = records(parse_ztag(output))
        if found and (submitted := found[-1].get('submittedChange')):
            return int(submitted)
        raise PerforceError(PerforceError.SUBMITTED_CHANGE_MISSING, output=output)

    async def delete_changelist(self, workspace: str, changelist: int, /) -> str:
        """Delete an empty pending changelist.

        Args:
            workspace: The workspace which owns the changelist.
            changelist: The changelist to delete.

        Returns:
            The output of the command.
        """
        return await self._invoker.run(workspace, ['change', '-d', str(changelist)])

    async def revert(self, workspace: str, changelist: int, /) -> None:
        """Revert all the files in a changelist, deleting any files opened for add.

        Args:
            workspace: The workspace which owns the changelist.
            changelist: The changelist to revert.

        Returns:
            Nothing.

        Raises:
            CMDError.CMD_ERROR: If the revert fails for any reason other than the changelist being empty.
        """
        try:
            await self._invoker.run(workspace, ['revert', '-w', '-c', str(changelist), '//...'])
        except CMDError as err:
            if not REVERT_NOT_OPENED_REX.search(err.output):
                raise

    async def edit(self, workspace: str, changelist: int, file_path: str, /) -> str:
        """Open a file for edit in a changelist.

        Args:
            workspace: The workspace which owns the changelist.
            changelist: The changelist in which to open the file.
            file_path: The file to open.

        Returns:
            The output of the command.
        """
        return await self._invoker.run(workspace, ['edit', '-c', str(changelist), file_path])


def sanitize_description(description: str, /) -> str:
    """Prepare a description for a changelist form.

    Args:
        description: The description to prepare.

    Returns:
        The description with field markers escaped and continuation lines indented.
    """
    return _DESCRIPTION_MARKER_REX.sub('\n\n ... ', description.strip()).replace('\n', '\n\t')

# cSpell:ignore ztag ssubmitted submitunchanged
