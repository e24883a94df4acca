"""
Child process launcher with live output relay.

Starts the target executable, relays its stdout and stderr line by line
to our own streams while an indicator runs, and maps the exit status
to success or CommandFailedError.
"""

import asyncio
import logging
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from llm_cli.exceptions import CommandFailedError, LaunchError
from llm_cli.runner.indicator import DEFAULT_INTERVAL, Indicator, OutputLatch
from llm_cli.runner.relay import relay_lines

logger = logging.getLogger(__name__)

# Per-line buffer limit for the child's pipes; longer lines are relayed in pieces.
STREAM_LIMIT = 1024 * 1024


@dataclass(frozen=True)
class LaunchSpec:
    """
    What to run and where.

    Attributes:
        executable: Program name or path, looked up on PATH
        arguments: Arguments after the program name
        working_directory: Directory the child runs in
    """

    executable: str
    arguments: tuple[str, ...] = ()
    working_directory: Optional[Path] = None

    @property
    def command(self) -> list[str]:
        return [self.executable, *self.arguments]

    def __str__(self) -> str:
        return shlex.join(self.command)


@dataclass
class LaunchResult:
    """
    Outcome of a successful launch.

    Attributes:
        executable: The program that ran
        returncode: Child exit status (always 0 here)
        stdout_lines: Lines relayed from the child's stdout
        stderr_lines: Lines relayed from the child's stderr
    """

    executable: str
    returncode: int = 0
    stdout_lines: int = 0
    stderr_lines: int = 0


class ProcessLauncher:
    """
    Runs one child process per call and streams its output.

    Usage:
        launcher = ProcessLauncher(animate=sys.stderr.isatty())
        spec = LaunchSpec("claude", ("--model", "claude-haiku-4-5-20251001", "-p", "hi"))
        result = await launcher.launch(spec)
    """

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        indicator_stream: Optional[TextIO] = None,
        interval: float = DEFAULT_INTERVAL,
        animate: bool = True,
    ):
        """
        Initialize the launcher.

        Args:
            stdout: Destination for the child's stdout (default: sys.stdout)
            stderr: Destination for the child's stderr (default: sys.stderr)
            indicator_stream: Where the indicator draws (default: stderr)
            interval: Seconds between indicator frames
            animate: Draw the indicator at all (disable when not on a terminal)
        """
        self._stdout = stdout
        self._stderr = stderr
        self._indicator_stream = indicator_stream
        self.interval = interval
        self.animate = animate

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    @property
    def indicator_stream(self) -> TextIO:
        if self._indicator_stream is not None:
            return self._indicator_stream
        return self.stderr

    async def launch(self, spec: LaunchSpec) -> LaunchResult:
        """
        Run ``spec`` to completion.

        Args:
            spec: Executable, arguments and working directory

        Returns:
            LaunchResult for a zero exit status

        Raises:
            LaunchError: If the process cannot be started
            CommandFailedError: If the process exits with a non-zero status
        """
        proc = await self._spawn(spec)

        latch = OutputLatch()
        indicator = self._make_indicator(spec.executable, latch)
        indicator_task = asyncio.create_task(indicator.run())
        stdout_task = asyncio.create_task(
            relay_lines(proc.stdout, self.stdout, on_output=indicator.stop)
        )
        stderr_task = asyncio.create_task(
            relay_lines(proc.stderr, self.stderr, on_output=indicator.stop)
        )

        try:
            stdout_lines, stderr_lines = await asyncio.gather(stdout_task, stderr_task)
        except BaseException:
            # Cancelled or a relay failed: nothing will drain the pipes any more.
            stdout_task.cancel()
            stderr_task.cancel()
            await asyncio.gather(stdout_task, stderr_task, return_exceptions=True)
            await self._kill(proc)
            raise
        finally:
            indicator.stop()
            await indicator_task

        returncode = await proc.wait()
        logger.debug(f"{spec.executable} exited with status {returncode}")

        if returncode != 0:
            raise CommandFailedError(spec.executable, returncode)

        return LaunchResult(
            executable=spec.executable,
            returncode=returncode,
            stdout_lines=stdout_lines,
            stderr_lines=stderr_lines,
        )

    async def _spawn(self, spec: LaunchSpec) -> asyncio.subprocess.Process:
        cwd = str(spec.working_directory) if spec.working_directory else None
        logger.debug(f"Running: {spec} (cwd={cwd or '.'})")

        try:
            return await asyncio.create_subprocess_exec(
                *spec.command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise LaunchError(spec.executable, e.strerror or str(e))
        except ValueError as e:
            # e.g. an argument containing a NUL byte
            raise LaunchError(spec.executable, str(e))

    def _make_indicator(self, executable: str, latch: OutputLatch) -> Indicator:
        return Indicator(
            executable,
            latch,
            stream=self.indicator_stream,
            interval=self.interval,
            enabled=self.animate,
        )

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()


async def launch(
    spec: LaunchSpec,
    *,
    animate: Optional[bool] = None,
) -> LaunchResult:
    """
    Run ``spec`` with our own stdout/stderr.

    The indicator animates only when stderr is a terminal unless
    ``animate`` says otherwise.
    """
    if animate is None:
        animate = sys.stderr.isatty()
    return await ProcessLauncher(animate=animate).launch(spec)
