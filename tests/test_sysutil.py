"""Unit tests for the sysutil module."""

# pylint: disable=missing-class-docstring,missing-function-docstring,invalid-name,protected-access
# flake8: noqa

import asyncio
import sys
from pathlib import Path
from tempfile import mkdtemp
from unittest import main, IsolatedAsyncioTestCase, TestCase
from unittest.mock import patch

from p4runner.sysutil import normalize_newlines, CMDError, CommandInvoker


def python_args(code):
    return ['-c', code]


class TestExceptions(TestCase):
    def test_CommandError(self):
        err = CMDError(CMDError.CMD_ERROR, cmd='p4 sync //...', returncode=1, stdout='out', stderr='err', stdin='in')
        self.assertEqual(CMDError.CMD_ERROR.code, err.code)
        self.assertEqual(err.output, 'err')
        message = str(err)
        self.assertTrue(message.startswith('P4 Error: p4 sync //...\n'))
        for part in ('Exit status: 1', 'STDERR:\nerr', 'STDOUT:\nout', 'STDIN:\nin'):
            self.assertIn(part, message)

    def test_CommandError_without_stderr(self):
        err = CMDError(CMDError.CMD_ERROR, cmd='p4 info', returncode=2, stdout='out', stderr='', stdin='')
        self.assertEqual(err.output, 'out')
        self.assertNotIn('STDERR:', str(err))
        self.assertNotIn('STDIN:', str(err))

    def test_CommandNotFound(self):
        err = CMDError(CMDError.CMD_NOT_FOUND, cmd='p4 info')
        self.assertEqual(str(err), 'Command not found when running: p4 info')
        self.assertEqual(err.output, '')


class TestNormalizeNewlines(TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_newlines('a\r\nb\rc\nd'), 'a\nb\nc\nd')


class TestCommandInvoker(IsolatedAsyncioTestCase):
    def setUp(self):
        self._invoker = CommandInvoker(sys.executable)

    async def test_output(self):
        result = await self._invoker.run(None, python_args('import sys; sys.stdout.write("a\\r\\nb\\rc\\n")'))
        self.assertEqual(result, 'a\nb\nc\n')
        self.assertFalse(self._invoker.running)

    async def test_stdin(self):
        result = await self._invoker.run(None, python_args('import sys; sys.stdout.write(sys.stdin.read().upper())'), 'change\tnew\n')
        self.assertEqual(result, 'CHANGE\tNEW\n')

    async def test_stderr_is_failure(self):
        with self.assertRaises(CMDError) as context:
            await self._invoker.run(None, python_args('import sys; print("partial"); sys.stderr.write("file(s) up-to-date.\\r\\n")'))
        err = context.exception
        self.assertEqual(err.code, CMDError.CMD_ERROR.code)
        self.assertEqual(err.vars['returncode'], 0)
        self.assertEqual(err.output, 'file(s) up-to-date.\n')
        self.assertIn('STDOUT:\npartial', str(err))
        self.assertFalse(self._invoker.running)

    async def test_exit_status_is_failure(self):
        with self.assertRaises(CMDError) as context:
            await self._invoker.run(None, python_args('import sys; print("Merges still pending --"); sys.exit(3)'), 'form')
        err = context.exception
        self.assertEqual(err.vars['returncode'], 3)
        self.assertEqual(err.output, 'Merges still pending --\n')
        self.assertIn('STDIN:\nform', str(err))
        self.assertFalse(self._invoker.running)

    async def test_command_not_found(self):
        invoker = CommandInvoker(str(Path(mkdtemp()) / 'no_such_p4'))
        with self.assertRaises(CMDError) as context:
            await invoker.run('ws', ['info'])
        self.assertEqual(context.exception.code, CMDError.CMD_NOT_FOUND.code)
        self.assertFalse(invoker.running)

    async def test_stdin_not_read(self):
        with self.assertLogs('p4runner.sysutil', level='WARNING') as logs:
            result = await self._invoker.run(None, python_args('pass'), 'x' * (4 * 1024 * 1024))
        self.assertEqual(result, '')
        self.assertIn('Unable to write input to p4 -c pass', logs.output[0])
        self.assertFalse(self._invoker.running)

    async def test_running_while_in_flight(self):
        task = asyncio.ensure_future(self._invoker.run(None, python_args('import time; time.sleep(0.5)')))
        await asyncio.sleep(0)
        self.assertEqual(len(self._invoker.running), 1)
        cmd_rec = next(iter(self._invoker.running))
        self.assertEqual(cmd_rec.args, ('-c', 'import time; time.sleep(0.5)'))
        self.assertTrue(cmd_rec.cmd.startswith('p4 -c '))
        await task
        self.assertFalse(self._invoker.running)

    async def test_concurrent_commands(self):
        results = await asyncio.gather(*[self._invoker.run(None, python_args(f'print({n})')) for n in range(5)])
        self.assertEqual(results, [f'{n}\n' for n in range(5)])
        self.assertFalse(self._invoker.running)

    async def test_separate_invokers(self):
        other = CommandInvoker(sys.executable)
        task = asyncio.ensure_future(self._invoker.run(None, python_args('import time; time.sleep(0.2)')))
        await asyncio.sleep(0)
        self.assertEqual(len(self._invoker.running), 1)
        self.assertFalse(other.running)
        await task


class TestWorkspace(IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self._calls = []
        self._real_exec = asyncio.create_subprocess_exec

        async def fake_exec(executable, *args, **kwargs):
            self._calls.append((executable, args, kwargs))
            return await self._real_exec(sys.executable, '-c', 'print("ok")', **kwargs)

        self._patcher = patch('p4runner.sysutil.asyncio.create_subprocess_exec', new=fake_exec)
        self._patcher.start()

    async def asyncTearDown(self):
        self._patcher.stop()

    async def test_workspace_flag(self):
        invoker = CommandInvoker('p4')
        self.assertEqual(await invoker.run('my_ws', ['sync', '//depot/...']), 'ok\n')
        (executable, args, kwargs) = self._calls[0]
        self.assertEqual(executable, 'p4')
        self.assertEqual(args, ('-c', 'my_ws', 'sync', '//depot/...'))
        self.assertIsNone(kwargs['cwd'])

    async def test_no_workspace(self):
        await CommandInvoker('p4').run(None, ['info'])
        self.assertEqual(self._calls[0][1], ('info',))

    async def test_workspace_root(self):
        root = Path(mkdtemp())
        (root / 'my_ws').mkdir()
        invoker = CommandInvoker('p4', workspace_root=f'{root}/$workspace')
        await invoker.run('my_ws', ['info'])
        self.assertEqual(self._calls[0][2]['cwd'], f'{root}/my_ws')

    async def test_workspace_root_missing(self):
        root = Path(mkdtemp())
        invoker = CommandInvoker('p4', workspace_root=f'{root}/$workspace')
        with self.assertRaises(CMDError) as context:
            await invoker.run('no_such_ws', ['info'])
        self.assertEqual(context.exception.code, CMDError.WORKSPACE_DIR_NOT_FOUND.code)
        self.assertIn(f'{root}/no_such_ws', str(context.exception))
        self.assertFalse(self._calls)
        self.assertFalse(invoker.running)


if __name__ == '__main__':
    main()

# cSpell:ignore sysutil
