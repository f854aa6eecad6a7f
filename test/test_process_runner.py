"""
Tests for process_runner.py module.

A Python script run by sys.executable stands in for git.
"""

import asyncio
import os
import tempfile
import unittest
from pathlib import Path

from setup_test_env import PYTHON_EXECUTABLE, TestEnvironmentMixin, cleanup_temp_dir, write_script
from src.scmgate.domains.scm.command_builder import quote_path
from src.scmgate.domains.scm.process_runner import Invocation, ProcessRunner, split_arguments


class TestInvocation(unittest.TestCase):

    def test_arguments_order(self):
        invocation = Invocation(
            working_directory="/tmp",
            command="fetch",
            options="--tags origin",
            additional_command_line="-c http.extraheader=x",
        )
        self.assertEqual(invocation.arguments, "-c http.extraheader=x fetch --tags origin")

    def test_argv_keeps_quoted_arguments_together(self):
        invocation = Invocation("/tmp", "submodule", 'foreach --recursive "git clean -ffdx"')
        self.assertEqual(invocation.argv(), ["submodule", "foreach", "--recursive", "git clean -ffdx"])

    def test_empty_parts_are_skipped(self):
        self.assertEqual(Invocation("/tmp", "version", None, "  ").arguments, "version")

    def test_apostrophes_are_ordinary_characters(self):
        invocation = Invocation("/tmp", "checkout", "--progress --force refs/heads/it's-fixed")
        self.assertEqual(invocation.argv(), ["checkout", "--progress", "--force", "refs/heads/it's-fixed"])

    def test_apostrophe_config_value(self):
        invocation = Invocation("/tmp", "config", "user.name O'Brien")
        self.assertEqual(invocation.argv(), ["config", "user.name", "O'Brien"])


class TestSplitArguments(unittest.TestCase):

    def test_whitespace_separates(self):
        self.assertEqual(split_arguments("  fetch\t--tags   origin "), ["fetch", "--tags", "origin"])

    def test_double_quotes_group(self):
        self.assertEqual(split_arguments('-c "user.name=Jane Doe" commit'),
                         ["-c", "user.name=Jane Doe", "commit"])

    def test_empty_quoted_argument_is_kept(self):
        self.assertEqual(split_arguments('config core.editor ""'), ["config", "core.editor", ""])

    def test_backslashes_are_literal_unless_before_a_quote(self):
        self.assertEqual(split_arguments(r"init C:\repo\sub"), ["init", r"C:\repo\sub"])
        self.assertEqual(split_arguments(r'"a\"b"'), ['a"b'])
        self.assertEqual(split_arguments(r'"a\\" b'), ["a\\", "b"])

    def test_unbalanced_quote_runs_to_the_end(self):
        self.assertEqual(split_arguments('checkout "it\'s fixed'), ["checkout", "it's fixed"])

    def test_empty(self):
        self.assertEqual(split_arguments(""), [])
        self.assertEqual(split_arguments(None), [])


class TestProcessRunner(unittest.TestCase, TestEnvironmentMixin):

    def setUp(self):
        self.setup_standard_test_env()
        self.temp_dir = Path(tempfile.mkdtemp())
        self.runner = ProcessRunner(PYTHON_EXECUTABLE, encoding="utf-8")

    def tearDown(self):
        cleanup_temp_dir(self.temp_dir)
        self.cleanup_standard_test_env()

    def _invocation(self, source, options=None, **kwargs):
        script = write_script(self.temp_dir, "fake_git.py", source)
        return Invocation(str(self.temp_dir), quote_path(script), options, **kwargs)

    def test_buffered_output_and_exit_code(self):
        invocation = self._invocation(
            "import sys\n"
            "print('git version 2.30.1')\n"
            "sys.exit(3)\n"
        )
        output = []
        result = asyncio.run(self.runner.run(invocation, output=output))

        self.assertEqual(result.exit_code, 3)
        self.assertEqual(output, ["git version 2.30.1"])
        self.assertIs(result.output, output)

    def test_streamed_output_goes_to_sink(self):
        invocation = self._invocation(
            "import sys\n"
            "print('one')\n"
            "print('two')\n"
            "sys.stderr.write('progress\\n')\n"
        )
        lines = []
        result = asyncio.run(self.runner.run(invocation, sink=lines.append))

        self.assertEqual(result.exit_code, 0)
        self.assertIsNone(result.output)
        self.assertEqual(sorted(lines), ["one", "progress", "two"])
        # stdout order is preserved
        self.assertLess(lines.index("one"), lines.index("two"))

    def test_carriage_returns_split_lines(self):
        invocation = self._invocation(
            "import sys\n"
            "sys.stdout.write('Receiving 10%\\rReceiving 100%\\r\\ndone')\n"
        )
        output = []
        asyncio.run(self.runner.run(invocation, output=output))
        self.assertEqual(output, ["Receiving 10%", "Receiving 100%", "done"])

    def test_arguments_environment_and_working_directory(self):
        invocation = self._invocation(
            "import os, sys\n"
            "print('|'.join(sys.argv[1:]))\n"
            "print(os.environ['GIT_TERMINAL_PROMPT'])\n"
            "print(os.getcwd())\n",
            options='foreach --recursive "git reset --hard HEAD"',
            environment={"GIT_TERMINAL_PROMPT": "0"},
        )
        output = []
        asyncio.run(self.runner.run(invocation, output=output))

        self.assertEqual(output[0], "foreach|--recursive|git reset --hard HEAD")
        self.assertEqual(output[1], "0")
        self.assertEqual(os.path.realpath(output[2]), os.path.realpath(str(self.temp_dir)))

    def test_apostrophes_reach_the_child_unchanged(self):
        invocation = self._invocation(
            "import sys\n"
            "print('|'.join(sys.argv[1:]))\n",
            options="user.name O'Brien refs/heads/it's-fixed",
        )
        output = []
        result = asyncio.run(self.runner.run(invocation, output=output))

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(output, ["user.name|O'Brien|refs/heads/it's-fixed"])

    def test_cancellation_event_kills_process(self):
        invocation = self._invocation(
            "import sys, time\n"
            "print('first', flush=True)\n"
            "time.sleep(30)\n"
            "print('second', flush=True)\n"
        )
        lines = []

        async def run_and_cancel():
            event = asyncio.Event()
            invocation.cancellation_event = event

            def sink(line):
                lines.append(line)
                event.set()

            await self.runner.run(invocation, sink=sink)

        with self.assertRaises(asyncio.CancelledError):
            asyncio.run(asyncio.wait_for(run_and_cancel(), timeout=10))
        self.assertEqual(lines, ["first"])

    def test_already_cancelled_never_starts(self):
        invocation = self._invocation("print('never')\n")

        async def run_cancelled():
            event = asyncio.Event()
            event.set()
            invocation.cancellation_event = event
            await self.runner.run(invocation, sink=self.fail)

        with self.assertRaises(asyncio.CancelledError):
            asyncio.run(run_cancelled())

    def test_task_cancellation_kills_process(self):
        invocation = self._invocation(
            "import time\n"
            "print('started', flush=True)\n"
            "time.sleep(30)\n"
        )
        lines = []

        async def run_then_cancel():
            started = asyncio.Event()

            def sink(line):
                lines.append(line)
                started.set()

            task = asyncio.ensure_future(self.runner.run(invocation, sink=sink))
            await asyncio.wait_for(started.wait(), timeout=10)
            task.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await task

        asyncio.run(run_then_cancel())
        self.assertEqual(lines, ["started"])


if __name__ == '__main__':
    unittest.main()
