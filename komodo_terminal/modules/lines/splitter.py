"""
Line splitting over chunked text streams.

Chunks can end anywhere, including between the \\r and \\n of a CRLF pair,
so the unterminated end of each chunk is carried into the next one.
"""

import re
from typing import AsyncIterable, AsyncIterator, List

_LINE_BREAK = re.compile(r"\r?\n")


class LineSplitter:
    """Stateful splitter turning text chunks into complete lines."""

    def __init__(self):
        self.tail = ""

    def feed(self, chunk: str) -> List[str]:
        """
        Consume one chunk and return the lines it completes.

        The last piece after splitting is kept as the new tail, even when
        empty, because the next chunk may continue it.
        """
        parts = _LINE_BREAK.split(self.tail + chunk)
        self.tail = parts.pop()
        return parts

    def flush(self) -> List[str]:
        """Return the final unterminated line, if any, and reset the tail."""
        tail, self.tail = self.tail, ""
        return [tail] if tail else []


async def split_lines(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """
    Lazily yield lines from an async stream of text chunks.

    The next chunk is only pulled once every line of the current chunk has
    been consumed.
    """
    splitter = LineSplitter()
    async for chunk in chunks:
        for line in splitter.feed(chunk):
            yield line
    for line in splitter.flush():
        yield line
