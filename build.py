#!/usr/bin/env python
"""This programs drives the P4Runner developer build automation."""

# Import standard modules
from argparse import Namespace
from pathlib import Path
from shutil import rmtree
from unittest import defaultTestLoader

# Import third-party-modules
from xmlrunner import XMLTestRunner

# Import P4Runner modules
from p4runner.automation import Action
from p4runner.commander import Argument, Commander

PROJECT_ROOT = Path(__file__).resolve().parent
BUILD_DIR = PROJECT_ROOT / 'Build'
UNIT_TEST_DIR = BUILD_DIR / 'unit_test_results'


class ActionLogger(Action):
    """Stub class to get Action logger."""
    def _execute(self) -> None:
        pass


MESSAGE_LOGGER = ActionLogger().log_message


def main() -> None:
    """The main entry point."""
    Commander('P4Runner builder', unit_tests,
              [Argument('-o', '--output', default=str(UNIT_TEST_DIR), help='The directory for the XML test reports.')]).execute()


def unit_tests(args: Namespace) -> None:
    """Run unit tests."""
    MESSAGE_LOGGER('Running unit tests', True)
    remake_dir(output_dir := Path(args.output), 'unit test')
    result = XMLTestRunner(output=str(output_dir)).run(defaultTestLoader.discover(str(PROJECT_ROOT / 'tests')))
    if not result.wasSuccessful():
        raise SystemExit(1)


def remake_dir(dir_path: Path, info_str: str) -> None:
    """Remove and recreate directory."""
    if dir_path.exists():
        MESSAGE_LOGGER(f'Removing old {info_str} directory')
        rmtree(dir_path)
    MESSAGE_LOGGER(f'Creating {info_str} directory')
    dir_path.mkdir(parents=True)


if __name__ == '__main__':
    main()

# cSpell:ignore xmlrunner
