"""
Location: python/flowchat_runtime/line_buffer.py

Summary:
    Incremental line splitter for streamed response bodies. Decodes bytes
    with a stream-aware UTF-8 decoder and yields complete lines, carrying
    any partial trailing line over to the next chunk.

Example:
    buffer = LineBuffer()
    buffer.feed(b'data: {"te')        # []
    buffer.feed(b'xt":"hi"}\\ndata')   # ['data: {"text":"hi"}']
    buffer.flush()                    # 'data'
"""

import codecs
from typing import Optional, Union


class LineBuffer:
    """
    Accumulates stream chunks and returns newline-terminated lines.

    Multi-byte characters split across chunk boundaries are held by the
    incremental decoder until complete, so no byte is dropped or
    mangled at a boundary.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, chunk: Union[bytes, str]) -> list[str]:
        """
        Append a chunk and return every line it completes.

        Args:
            chunk: Raw bytes from the wire, or already-decoded text

        Returns:
            Complete lines without their trailing "\\n", in order
        """
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        self._pending += chunk
        *lines, self._pending = self._pending.split("\n")
        return lines

    def flush(self) -> Optional[str]:
        """
        Return the carried-over partial line, if any, and reset.

        Called once the stream has ended; the connection may close
        without a trailing newline.
        """
        self._pending += self._decoder.decode(b"", final=True)
        remainder, self._pending = self._pending, ""
        return remainder or None

    @property
    def pending(self) -> str:
        """The partial line currently held back."""
        return self._pending
