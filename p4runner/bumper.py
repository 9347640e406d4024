"""This module provides the action which increments the build version file in Perforce.

The version file is a JSON document with a build counter and the latest changelist in the depot.
"""

# Import standard modules
import asyncio
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from string import Template
from typing import Optional

# Import internal modules
from .automation import Action
from .commander import Argument, Commander
from .config import P4Config
from .fileutil import read_json, write_json
from .lang import P4RunnerError, P4RunnerException, PathName
from .logger import Logger
from .perforce import PerforceClient

DESCRIPTION_TEMPLATE = Template('ROBO_DEPLOY: Updated version file for build $build')


class BumpError(P4RunnerException):
    """Version Bump Exceptions.

    Attributes:
        BAD_VERSION_FILE: The version file does not contain a build and changelist.
        NO_CHANGES: There are no submitted changes in the depot path.
        NOT_LOGGED_IN: The Perforce login status did not report a user.
    """
    BAD_VERSION_FILE = P4RunnerError(1, Template('Invalid version file: $file'))
    NO_CHANGES = P4RunnerError(2, Template('No submitted changes found in $path'))
    NOT_LOGGED_IN = P4RunnerError(3, 'Not logged in to Perforce')


@dataclass
class VersionInfo:
    """This class holds the content of the version file.

        Attributes:
            build: The build counter.
            cl: The latest changelist included in the build.
    """
    build: int
    cl: int

    @classmethod
    def read(cls, filename: PathName, /) -> 'VersionInfo':
        """Read the version information from a file.

        Raises:
            BumpError.BAD_VERSION_FILE: If the file is not JSON with integer build and cl values.
        """
        try:
            content = read_json(filename)
            return cls(build=int(content['build']), cl=int(content['cl']))
        except (KeyError, TypeError, ValueError) as err:
            raise BumpError(BumpError.BAD_VERSION_FILE, file=filename) from err

    def write(self, filename: PathName, /) -> None:
        """Write the version information to a file."""
        write_json(filename, asdict(self))


class VersionBump(Action):
    """Action to increment the build number and record the latest changelist in the version file."""

    def __init__(self, client: PerforceClient, workspace: str, depot: str, version_file: PathName, /, *, sync: bool = False, **kwargs):
        """
        Args:
            client: The Perforce client used to run the commands.
            workspace: The workspace in which the version file is edited.
            depot: The depot path of the project, the version file is at the top of this path.
            version_file: The local path of the version file in the workspace.
            sync (optional, default=False): If True, force sync the workspace to the latest changelist before the update.
            **kwargs (optional): Passed to Action.

        Attributes:
            version: The version written by the last run, None if the action has not run.
            _client: The value of the client argument.
            _depot: The value of the depot argument without a trailing separator.
            _sync: The value of the sync argument.
            _version_file: The value of the version_file argument.
            _workspace: The value of the workspace argument.
        """
        super().__init__(**kwargs)
        self._client = client
        self._workspace = workspace
        self._depot = depot.rstrip('/')
        self._version_file = Path(version_file)
        self._sync = sync
        self.version: Optional[VersionInfo] = None

    depot_version_file = property(lambda s: f'{s._depot}/{s._version_file.name}', doc='A read-only property which returns the depot path of the version file.')

    def _execute(self) -> None:
        self.version = asyncio.run(self.bump())

    async def bump(self) -> VersionInfo:
        """Update the version file.

        Returns:
            The new version information.

        Raises:
            BumpError.NOT_LOGGED_IN: If there is no logged in Perforce user.
            BumpError.NO_CHANGES: If there are no submitted changes in the depot path.
        """
        if not await self._client.check_login():
            raise BumpError(BumpError.NOT_LOGGED_IN)

        depot_recursive = f'{self._depot}/...'
        if not (latest := await self._client.latest_change(depot_recursive)):
            raise BumpError(BumpError.NO_CHANGES, path=depot_recursive)
        if self._sync:
            await self._client.sync(self._workspace, f'{depot_recursive}@{latest.change}', force=True)
        self.log_message(f'Latest change in {depot_recursive} is {latest.change}')

        version = VersionInfo.read(self._version_file)
        version.build += 1
        version.cl = latest.change

        changelist = await self._client.new_changelist(self._workspace, DESCRIPTION_TEMPLATE.substitute(build=version.build))
        await self._client.edit(self._workspace, changelist, self.depot_version_file)
        version.write(self._version_file)
        self.log_message(f'Updated {self._version_file} to build {version.build} at change {version.cl} in changelist {changelist}', True)
        return version


def main(argv: Optional[list] = None) -> None:
    """The main entry point."""
    Commander('Increment the build version file in Perforce', bump_version,
              [Argument('-c', '--config', help='The YAML configuration file.'),
               Argument('-w', '--workspace', help='The workspace in which to edit the version file.'),
               Argument('-d', '--depot', help='The depot path of the project.'),
               Argument('-f', '--version-file', help='The local path of the version file.'),
               Argument('-s', '--sync', action='store_true', default=None, help='Sync to the latest change first.'),
               Argument('-v', '--verbose', action='store_true', default=None, help='Log every Perforce command.')]).execute(argv)


def bump_version(args: Namespace) -> VersionInfo:
    """Run the version bump from the parsed command line arguments."""
    config = P4Config(args.config,
                      p4={'verbose': args.verbose},
                      bump={'workspace': args.workspace, 'depot': args.depot, 'version_file': args.version_file, 'sync': args.sync})
    config.require('bump', ('workspace', 'depot', 'version_file'))
    logger = Logger(stream=sys.stderr)
    client = PerforceClient(config.p4.executable, logger=logger, verbose=config.p4.verbose, workspace_root=config.p4.workspace_root)
    action = VersionBump(client, config.bump.workspace, config.bump.depot, config.bump.version_file, sync=config.bump.sync)
    try:
        action.execute()
    except P4RunnerException as err:
        logger.logerror(f'Version bump failed: {err}')
        raise
    return action.version  # type: ignore[return-value]


if __name__ == '__main__':
    main()

# cSpell:ignore fileutil
