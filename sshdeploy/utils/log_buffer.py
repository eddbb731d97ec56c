"""Write sink that records output and streams it line by line to a log."""

from sshdeploy.protocols import LogSink


class LogCapturingBuffer:
    """Accumulates every byte written and logs each completed line.

    Lines are trimmed of surrounding whitespace and blank lines are skipped.
    A trailing segment without a newline is held back until a later write
    completes it or until flush() is called, so a line split across two
    writes is logged once.
    """

    def __init__(self, sink: LogSink | None = None) -> None:
        self.sink = sink
        self._buffer = bytearray()
        self._pending = b""

    def write(self, data: bytes | str) -> int:
        """Append data to the buffer and forward completed lines.

        Returns:
            Number of bytes written
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._buffer.extend(data)

        if self.sink is not None:
            *lines, self._pending = (self._pending + data).split(b"\n")
            for line in lines:
                self._emit(line)
        return len(data)

    def flush(self) -> None:
        """Forward any trailing segment that never saw a newline."""
        pending, self._pending = self._pending, b""
        if pending and self.sink is not None:
            self._emit(pending)

    def _emit(self, line: bytes) -> None:
        trimmed = line.decode("utf-8", errors="replace").strip()
        if trimmed:
            self.sink(trimmed)  # type: ignore[misc]

    def getvalue(self) -> bytes:
        """Return all bytes written so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def __str__(self) -> str:
        return self._buffer.decode("utf-8", errors="replace")
