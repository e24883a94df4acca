"""
Progress indicator shown until the child produces output.
"""

import asyncio
import logging
from typing import TextIO

logger = logging.getLogger(__name__)

CLEAR_LINE = "\r\x1b[K"

DEFAULT_INTERVAL = 0.5


class OutputLatch:
    """
    One-way flag recording that output has started.

    ``trip()`` returns True for exactly one caller per latch. All relays
    and the indicator share the event loop, so the check and the set in
    ``trip()`` cannot be interleaved with another task.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def is_set(self) -> bool:
        return self._event.is_set()

    def trip(self) -> bool:
        """Set the latch. Returns True only for the call that set it."""
        if self._event.is_set():
            return False
        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()


class Indicator:
    """
    Rotating "running <cli>..." line.

    The line is redrawn every ``interval`` seconds until the latch is
    tripped, either by a relay seeing the first line of output or by
    ``stop()``. Whoever trips the latch clears the line, so it is cleared
    at most once.

    Usage:
        latch = OutputLatch()
        indicator = Indicator("claude", latch, stream=sys.stderr)
        task = asyncio.create_task(indicator.run())
        ...
        indicator.stop()
        await task
    """

    def __init__(
        self,
        executable: str,
        latch: OutputLatch,
        stream: TextIO,
        interval: float = DEFAULT_INTERVAL,
        enabled: bool = True,
    ):
        self.executable = executable
        self.latch = latch
        self.stream = stream
        self.interval = interval
        self.enabled = enabled
        self._drawn = False

    @property
    def frames(self) -> list[str]:
        base = f"running {self.executable}"
        return [f"{base}.", f"{base}..", f"{base}..."]

    async def run(self) -> None:
        """Draw frames until the latch is tripped."""
        frames = self.frames
        i = 0
        while not self.latch.is_set():
            try:
                await asyncio.wait_for(self.latch.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                if self.enabled and not self.latch.is_set():
                    self._write(CLEAR_LINE + frames[i])
                    self._drawn = True
                    i = (i + 1) % len(frames)

    def stop(self) -> bool:
        """
        Stop the indicator and clear its line.

        Safe to call any number of times from any task.

        Returns:
            True if this call performed the transition
        """
        if not self.latch.trip():
            return False
        self.clear()
        return True

    def clear(self) -> None:
        """Erase the indicator line if anything was drawn on it."""
        if self._drawn:
            self._write(CLEAR_LINE)
            self._drawn = False

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()
