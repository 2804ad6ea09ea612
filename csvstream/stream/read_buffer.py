"""
ReadBuffer: growable byte buffer with a cursor over unconsumed data.

The decoder scans forward from the cursor; refilling first slides the
unconsumed bytes down to the start of the buffer so consumed data never
accumulates, then grows the buffer if little room is left, then performs a
single read into the free tail.
"""
import logging

from .byte_source import ByteSource, ReadResult

logger = logging.getLogger(__name__)


class ReadBuffer:
    """
    Holds bytes read from a source that have not been consumed yet.

    Attributes:
        data: Backing storage; only data[:end] holds read bytes.
        end: Number of valid bytes in data.
        cursor: Index of the first unconsumed byte.
    """

    # Minimum free space offered to each read.
    MIN_READ = 512

    def __init__(self, capacity: int = 4096):
        self.data = bytearray(capacity)
        self.end = 0
        self.cursor = 0

    @property
    def capacity(self) -> int:
        return len(self.data)

    @property
    def unread(self) -> int:
        """Number of bytes between the cursor and the end of valid data."""
        return self.end - self.cursor

    def compact(self) -> None:
        """Discard consumed bytes by sliding unconsumed data to the start."""
        if self.cursor == 0:
            return
        remaining = self.end - self.cursor
        self.data[:remaining] = self.data[self.cursor:self.end]
        self.end = remaining
        self.cursor = 0

    def ensure_headroom(self) -> None:
        """Grow to twice the capacity plus MIN_READ when free space drops below MIN_READ."""
        capacity = self.capacity
        if capacity - self.end >= self.MIN_READ:
            return
        new_capacity = 2 * capacity + self.MIN_READ
        self.data.extend(bytes(new_capacity - capacity))
        logger.debug("ReadBuffer grown from %d to %d bytes.", capacity, new_capacity)

    def fill_from(self, source: ByteSource) -> ReadResult:
        """
        Compact, grow if needed, then perform exactly one read from the source.

        Returns:
            The source's ReadResult.

        Raises:
            ValueError: If the source reports more bytes than it was offered.
        """
        self.compact()
        self.ensure_headroom()

        with memoryview(self.data) as view, view[self.end:] as tail:
            room = len(tail)
            result = source.read_into(tail)

        if not 0 <= result.count <= room:
            raise ValueError(f"byte source reported {result.count} bytes for a {room}-byte buffer")
        self.end += result.count
        return result

    def __repr__(self) -> str:
        return f"ReadBuffer(capacity={self.capacity}, cursor={self.cursor}, end={self.end})"
