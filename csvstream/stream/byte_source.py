"""
Byte sources: the input side of the streaming decoder.

A ByteSource fills a caller-provided buffer and reports how many bytes it
wrote and whether the input has ended. Failures are raised as ordinary
exceptions; the decoder wraps them in SourceIOError.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, NamedTuple


class ReadResult(NamedTuple):
    """Outcome of one read: bytes written into the buffer and whether the input ended."""
    count: int
    at_end: bool


class ByteSource(ABC):
    """Anything the decoder can pull bytes from."""

    @abstractmethod
    def read_into(self, buffer: memoryview) -> ReadResult:
        """
        Write up to len(buffer) bytes into buffer.

        Returns:
            A ReadResult. A source may report at_end together with a final
            non-zero count, or with a count of zero on a later call.
        """


class ReaderSource(ByteSource):
    """Reads from a binary file-like object (file, pipe, BytesIO, socket makefile)."""

    def __init__(self, stream: Any):
        self._stream = stream
        self._readinto = getattr(stream, "readinto", None)

    def read_into(self, buffer: memoryview) -> ReadResult:
        if self._readinto is not None:
            count = self._readinto(buffer)
            if count is None:
                # non-blocking stream with nothing available yet
                return ReadResult(0, False)
            return ReadResult(count, count == 0)

        data = self._stream.read(len(buffer))
        if isinstance(data, str):
            raise TypeError("expected a binary stream, got a text stream")
        if data is None:
            return ReadResult(0, False)
        count = len(data)
        buffer[:count] = data
        return ReadResult(count, count == 0)


class SocketSource(ByteSource):
    """Reads from a connected stream socket; socket timeouts propagate to the caller."""

    def __init__(self, sock: Any):
        self._sock = sock

    def read_into(self, buffer: memoryview) -> ReadResult:
        count = self._sock.recv_into(buffer)
        return ReadResult(count, count == 0)


class IterableSource(ByteSource):
    """
    Reads from an iterable of bytes chunks (generators, lists, response bodies).

    Chunks larger than the destination buffer are handed out over several
    reads; empty chunks are skipped.
    """

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks = iter(chunks)
        self._pending = memoryview(b"")

    def read_into(self, buffer: memoryview) -> ReadResult:
        while not self._pending:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return ReadResult(0, True)
            if isinstance(chunk, str):
                raise TypeError("expected bytes chunks, got str")
            self._pending = memoryview(bytes(chunk))

        count = min(len(buffer), len(self._pending))
        buffer[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return ReadResult(count, False)
