# -
# #%L
# Contrast AI SmartFix
# %%
# Copyright (C) 2025 Contrast Security, Inc.
# %%
# Contact: support@contrastsecurity.com
# License: Commercial
# NOTICE: This Software and the patented inventions embodied within may only be
# used as part of Contrast Security's commercial offerings. Even though it is
# made available through public repositories, use of this Software is subject to
# the applicable End User Licensing Agreement found at
# https://www.contrastsecurity.com/enduser-terms-0317a or as otherwise agreed
# between Contrast Security and the End User. The Software may not be reverse
# engineered, modified, repackaged, sold, redistributed or otherwise used in a
# way not consistent with the End User License Agreement.
# #L%
#

"""
Process Runner Module

Runs one git child process and delivers its output line by line, either
streamed to a sink or buffered into a list for parsing.
"""

import asyncio
import codecs
import locale
import os
import platform
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from src.utils import debug_log, log

OutputSink = Callable[[str], None]

READ_CHUNK_SIZE = 4096
# git reports progress with bare carriage returns
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def get_output_encoding() -> str:
    """UTF-8 on Windows, the locale's preferred encoding elsewhere."""
    if platform.system() == 'Windows':
        return 'utf-8'
    return locale.getpreferredencoding(False) or 'utf-8'


def split_arguments(command_line: str) -> List[str]:
    """
    Split a command line the way the Windows C runtime does.

    Whitespace separates arguments and only double quotes group them, so
    apostrophes are ordinary characters. Backslashes are literal unless they
    precede a double quote: 2n backslashes + `"` give n backslashes and toggle
    quoting, 2n+1 backslashes + `"` give n backslashes and a literal `"`.
    """
    arguments = []
    current = []
    in_argument = False
    in_quotes = False
    backslashes = 0

    for char in command_line or "":
        if char == "\\":
            backslashes += 1
            in_argument = True
            continue

        if char == '"':
            current.append("\\" * (backslashes // 2))
            if backslashes % 2:
                current.append('"')
            else:
                in_quotes = not in_quotes
            backslashes = 0
            in_argument = True
            continue

        current.append("\\" * backslashes)
        backslashes = 0

        if char.isspace() and not in_quotes:
            if in_argument:
                arguments.append("".join(current))
                current = []
                in_argument = False
            continue

        current.append(char)
        in_argument = True

    current.append("\\" * backslashes)
    if in_argument:
        arguments.append("".join(current))
    return arguments


@dataclass
class Invocation:
    """One git command line. Built fresh for every call."""

    working_directory: str
    command: str
    options: Optional[str] = None
    additional_command_line: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=dict)
    cancellation_event: Optional[asyncio.Event] = None

    @property
    def arguments(self) -> str:
        parts = (self.additional_command_line, self.command, self.options)
        return " ".join(part.strip() for part in parts if part and part.strip())

    def argv(self) -> List[str]:
        return split_arguments(self.arguments)


@dataclass
class ExecutionResult:
    exit_code: int
    output: Optional[List[str]] = None


class ProcessRunner:
    """
    Executes a single child process.

    stdout and stderr are drained by two concurrent reader tasks. Each
    invocation has one lock guarding the destination (sink or buffer), so
    lines keep their order within a stream but not across streams.
    """

    def __init__(self, executable: str, encoding: Optional[str] = None):
        self.executable = executable
        self.encoding = encoding or get_output_encoding()

    async def run(self, invocation: Invocation, sink: Optional[OutputSink] = None,
                  output: Optional[List[str]] = None) -> ExecutionResult:
        """
        Run the invocation to completion.

        Args:
            invocation: What to run and where
            sink: Receives each line as it arrives (defaults to log); ignored when buffering
            output: When given, lines are appended here instead of being sent to the sink

        Returns:
            ExecutionResult: The raw exit code, plus the buffer when buffering

        Raises:
            asyncio.CancelledError: The cancellation event fired or the awaiting task was cancelled
        """
        cancellation_event = invocation.cancellation_event
        if cancellation_event is not None and cancellation_event.is_set():
            raise asyncio.CancelledError()

        if output is None and sink is None:
            sink = log

        env = os.environ.copy()
        env.update(invocation.environment)

        debug_log(f"Running '{self.executable} {invocation.arguments}' in {invocation.working_directory}")
        process = await asyncio.create_subprocess_exec(
            self.executable,
            *invocation.argv(),
            cwd=invocation.working_directory,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        output_lock = asyncio.Lock()
        delivering = True

        async def deliver(line: str):
            async with output_lock:
                if not delivering:
                    return
                if output is not None:
                    output.append(line)
                else:
                    sink(line)

        readers = [
            asyncio.ensure_future(self._drain(process.stdout, deliver)),
            asyncio.ensure_future(self._drain(process.stderr, deliver)),
        ]

        try:
            exit_code = await self._wait_for_exit(process, cancellation_event)
            await asyncio.gather(*readers)
        except asyncio.CancelledError:
            delivering = False
            debug_log(f"Cancelling '{invocation.command}', killing process {process.pid}")
            await self._terminate(process, readers)
            raise

        debug_log(f"Exit code {exit_code} from '{invocation.command}'")
        return ExecutionResult(exit_code=exit_code, output=output)

    async def _drain(self, stream: asyncio.StreamReader, deliver) -> None:
        decoder = codecs.getincrementaldecoder(self.encoding)(errors='replace')
        pending = ""
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            pending += decoder.decode(chunk)
            # a trailing \r may be the first half of \r\n
            held_cr = pending.endswith("\r")
            if held_cr:
                pending = pending[:-1]
            *lines, pending = _LINE_BREAK.split(pending)
            if held_cr:
                pending += "\r"
            for line in lines:
                await deliver(line)

        pending += decoder.decode(b"", final=True)
        pending = pending.rstrip("\r")
        if pending:
            await deliver(pending)

    @staticmethod
    async def _wait_for_exit(process, cancellation_event: Optional[asyncio.Event]) -> int:
        if cancellation_event is None:
            return await process.wait()

        exit_waiter = asyncio.ensure_future(process.wait())
        cancel_waiter = asyncio.ensure_future(cancellation_event.wait())
        try:
            done, _ = await asyncio.wait({exit_waiter, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (exit_waiter, cancel_waiter):
                if not waiter.done():
                    waiter.cancel()

        if exit_waiter in done:
            return exit_waiter.result()
        raise asyncio.CancelledError()

    @staticmethod
    async def _terminate(process, readers) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

        # Pipes may stay open in grandchildren, so the readers are cancelled rather than drained
        for reader in readers:
            reader.cancel()
        await asyncio.gather(*readers, return_exceptions=True)

        try:
            await process.wait()
        except asyncio.CancelledError:
            # The caller is already unwinding a cancellation
            pass
