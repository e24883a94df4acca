"""
Line relay from a child output stream to one of our own streams.
"""

import asyncio
import codecs
from typing import Callable, Optional, TextIO


def _strip_line_ending(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


async def relay_lines(
    reader: asyncio.StreamReader,
    writer: TextIO,
    on_output: Optional[Callable[[], object]] = None,
) -> int:
    """
    Copy ``reader`` to ``writer`` line by line until end of stream.

    ``on_output`` is called before anything is written for each chunk of
    data read; the indicator uses it to clear its line before the first
    real line appears. Lines longer than the reader's limit are passed
    through in pieces.

    Args:
        reader: Child output stream
        writer: Destination text stream (flushed after every write)
        on_output: Optional callback run before each write

    Returns:
        Number of complete or trailing lines written
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    lines = 0
    in_line = False
    # A "\r" ending a partial chunk may be the first half of "\r\n".
    held = b""

    while True:
        partial = False
        try:
            raw = held + await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            # EOF; whatever is left is an unterminated last line
            raw = held + e.partial
            if not raw:
                break
        except asyncio.LimitOverrunError as e:
            raw = held + await reader.readexactly(e.consumed)
            partial = True
        held = b""

        if partial and raw.endswith(b"\r"):
            held, raw = b"\r", raw[:-1]
            if not raw:
                continue

        if on_output is not None:
            on_output()

        if partial:
            writer.write(decoder.decode(raw))
            in_line = True
        else:
            writer.write(decoder.decode(_strip_line_ending(raw), final=True) + "\n")
            in_line = False
            lines += 1
        writer.flush()

    if in_line:
        writer.write(decoder.decode(b"", final=True) + "\n")
        writer.flush()
        lines += 1
    return lines
