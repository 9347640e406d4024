'Unit tests for the package language extensions module'
# pylint: disable=C0103,C0111

import os
from string import Template
from unittest import main, TestCase

from p4runner.lang import is_debug, yaml_to_dotmap, P4RunnerError, P4RunnerException


class SampleError(P4RunnerException):
    PLAIN = P4RunnerError(1, 'A plain message')
    TEMPLATED = P4RunnerError(2, Template('A message about $thing'))


class TestIsDebug(TestCase):
    def setUp(self):
        self._keeper = None
        if 'P4RUNNER_DEBUG' in os.environ:
            self._keeper = os.environ['P4RUNNER_DEBUG']
            del os.environ['P4RUNNER_DEBUG']

    def tearDown(self):
        if self._keeper:
            os.environ['P4RUNNER_DEBUG'] = self._keeper
        elif 'P4RUNNER_DEBUG' in os.environ:
            del os.environ['P4RUNNER_DEBUG']

    def test_is_debug_False(self):
        self.assertFalse(is_debug())

    def test_is_debug_True(self):
        os.environ['P4RUNNER_DEBUG'] = '1'
        self.assertTrue(is_debug())

    def test_is_debug_SingleValue(self):
        os.environ['P4RUNNER_DEBUG'] = 'SYSCMD'
        self.assertTrue(is_debug('SYSCMD'))
        self.assertFalse(is_debug('P4'))

    def test_is_debug_MultiValue(self):
        os.environ['P4RUNNER_DEBUG'] = 'SYSCMD:P4'
        self.assertTrue(is_debug('SYSCMD'))
        self.assertTrue(is_debug('P4'))
        self.assertFalse(is_debug('TestBadValue'))


class TestExceptions(TestCase):
    def test_plain(self):
        err = SampleError(SampleError.PLAIN)
        self.assertEqual(err.code, 1)
        self.assertEqual(str(err), 'A plain message')

    def test_templated(self):
        err = SampleError(SampleError.TEMPLATED, thing='changelists')
        self.assertEqual(err.code, 2)
        self.assertEqual(str(err), 'A message about changelists')
        self.assertEqual(err.vars, {'thing': 'changelists'})


class TestYaml(TestCase):
    def test_yaml_string(self):
        config = yaml_to_dotmap('p4:\n  executable: p4\n  verbose: true\n')
        self.assertEqual(config.p4.executable, 'p4')
        self.assertTrue(config.p4.verbose)


if __name__ == '__main__':
    main()
