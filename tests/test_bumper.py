"""Unit tests for the bumper module."""

# pylint: disable=missing-class-docstring,missing-function-docstring,invalid-name,protected-access
# flake8: noqa

from json import loads as json_parse
from pathlib import Path
from shutil import rmtree
from tempfile import mkdtemp
from unittest import main, TestCase
from unittest.mock import AsyncMock, MagicMock, patch

from p4runner.bumper import main as bumper_main, BumpError, VersionBump, VersionInfo
from p4runner.config import ConfigurationError
from p4runner.perforce import Change


def mock_client(username='bob', latest=Change(1234)):
    client = MagicMock()
    client.check_login = AsyncMock(return_value=username)
    client.latest_change = AsyncMock(return_value=latest)
    client.sync = AsyncMock()
    client.new_changelist = AsyncMock(return_value=2000)
    client.edit = AsyncMock(return_value='')
    return client


class BumperTestCase(TestCase):
    def setUp(self):
        self._tempdir = Path(mkdtemp())
        self._version_file = self._tempdir / 'version.json'
        self._version_file.write_text('{"build": 41, "cl": 1000}', encoding='UTF-8')

    def tearDown(self):
        rmtree(self._tempdir)


class TestVersionInfo(BumperTestCase):
    def test_read_write(self):
        version = VersionInfo.read(self._version_file)
        self.assertEqual(version, VersionInfo(41, 1000))
        version.build += 1
        version.write(self._version_file)
        self.assertEqual(self._version_file.read_text(encoding='UTF-8'), '{\n  "build": 42,\n  "cl": 1000\n}')

    def test_bad_file(self):
        self._version_file.write_text('{"build": "latest"}', encoding='UTF-8')
        with self.assertRaises(BumpError) as context:
            VersionInfo.read(self._version_file)
        self.assertEqual(context.exception.code, BumpError.BAD_VERSION_FILE.code)

    def test_not_json(self):
        self._version_file.write_text('build=41', encoding='UTF-8')
        with self.assertRaises(BumpError):
            VersionInfo.read(self._version_file)


class TestVersionBump(BumperTestCase):
    def test_bump(self):
        client = mock_client()
        action = VersionBump(client, 'robo_ws', '//depot/main/', self._version_file)
        action.execute()
        self.assertEqual(action.version, VersionInfo(42, 1234))
        self.assertEqual(json_parse(self._version_file.read_text(encoding='UTF-8')), {'build': 42, 'cl': 1234})
        client.latest_change.assert_awaited_once_with('//depot/main/...')
        client.sync.assert_not_awaited()
        client.new_changelist.assert_awaited_once_with('robo_ws', 'ROBO_DEPLOY: Updated version file for build 42')
        client.edit.assert_awaited_once_with('robo_ws', 2000, '//depot/main/version.json')

    def test_bump_with_sync(self):
        client = mock_client()
        VersionBump(client, 'robo_ws', '//depot/main', self._version_file, sync=True).execute()
        client.sync.assert_awaited_once_with('robo_ws', '//depot/main/...@1234', force=True)

    def test_not_logged_in(self):
        client = mock_client(username=None)
        with self.assertRaises(BumpError) as context:
            VersionBump(client, 'robo_ws', '//depot/main', self._version_file).execute()
        self.assertEqual(context.exception.code, BumpError.NOT_LOGGED_IN.code)
        client.latest_change.assert_not_awaited()

    def test_no_changes(self):
        client = mock_client(latest=None)
        with self.assertRaises(BumpError) as context:
            VersionBump(client, 'robo_ws', '//depot/main', self._version_file).execute()
        self.assertEqual(context.exception.code, BumpError.NO_CHANGES.code)
        client.new_changelist.assert_not_awaited()
        self.assertEqual(VersionInfo.read(self._version_file), VersionInfo(41, 1000))


class TestMain(BumperTestCase):
    def test_main(self):
        client = mock_client()
        config_file = self._tempdir / 'p4runner.yml'
        config_file.write_text(f'p4:\n  executable: /opt/p4\nbump:\n  workspace: robo_ws\n  version_file: {self._version_file}\n', encoding='UTF-8')
        with patch('p4runner.bumper.PerforceClient', return_value=client) as client_class:
            bumper_main(['-c', str(config_file), '-d', '//depot/main', '--sync'])
        self.assertEqual(client_class.call_args.args, ('/opt/p4',))
        self.assertFalse(client_class.call_args.kwargs['verbose'])
        client.sync.assert_awaited_once()
        self.assertEqual(VersionInfo.read(self._version_file), VersionInfo(42, 1234))

    def test_failure_logged(self):
        client = mock_client(username=None)
        with patch('p4runner.bumper.PerforceClient', return_value=client), self.assertLogs('p4runner', level='ERROR') as logs:
            with self.assertRaises(BumpError):
                bumper_main(['-w', 'robo_ws', '-d', '//depot/main', '-f', str(self._version_file)])
        self.assertIn('Version bump failed: Not logged in to Perforce', logs.output[0])

    def test_missing_depot(self):
        with self.assertRaises(ConfigurationError):
            bumper_main(['-w', 'robo_ws', '-f', str(self._version_file)])


if __name__ == '__main__':
    main()

# cSpell:ignore bumper
